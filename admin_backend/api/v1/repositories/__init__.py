from .failed_job_repository import FailedJobRepository, get_failed_job_repository
from .role_repository import RoleRepository, get_role_repository
from .user_repository import UserRepository, get_user_repository

__all__ = [
    "FailedJobRepository",
    "RoleRepository",
    "UserRepository",
    "get_failed_job_repository",
    "get_role_repository",
    "get_user_repository",
]
