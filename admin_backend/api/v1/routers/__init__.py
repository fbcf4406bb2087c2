from . import (
    auth,
    failed_jobs,
    roles,
    users,
)

__all__ = [
    "auth",
    "failed_jobs",
    "roles",
    "users",
]
