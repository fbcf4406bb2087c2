from .base import Base, utcnow
from .exceptions import (
    AuthenticationError,
    BackendError,
    EntityNotFoundError,
    InvalidPasswordError,
    SaveFailedError,
    ValidationError,
)

__all__ = [
    "Base",
    "utcnow",
    "AuthenticationError",
    "BackendError",
    "EntityNotFoundError",
    "InvalidPasswordError",
    "SaveFailedError",
    "ValidationError",
]
