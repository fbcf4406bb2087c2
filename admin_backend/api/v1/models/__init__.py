from .roles import Role
from .users import User
from .backend_token import BackendToken
from .failed_job import FailedJob


__all__ = [
    "Role",
    "User",
    "BackendToken",
    "FailedJob",
]
