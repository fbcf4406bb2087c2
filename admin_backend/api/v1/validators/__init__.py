from .role_validator import RoleValidator
from .user_validator import UserValidator

__all__ = ["RoleValidator", "UserValidator"]
