from .auth import LoginRequest
from .failed_jobs import FailedJob
from .roles import Role, RoleCreate, RoleUpdate
from .users import ManagerUser, UserBase, UserRead

__all__ = [
    "FailedJob",
    "LoginRequest",
    "ManagerUser",
    "Role",
    "RoleCreate",
    "RoleUpdate",
    "UserBase",
    "UserRead",
]
