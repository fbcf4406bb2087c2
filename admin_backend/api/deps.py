from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.api.v1.models import User
from admin_backend.api.v1.services import AuthService
from admin_backend.db import get_session


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_current_backend_user(
        request: Request,
        db: Annotated[AsyncSession, Depends(get_session)],
        auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    user = await auth_service.user(db, request)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def require_role(*slugs: str):
    """Dependency factory: the current backend user must have one of the given roles."""

    async def dependency(current_user: Annotated[User, Depends(get_current_backend_user)]) -> User:
        if current_user.user_role not in slugs:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have sufficient privileges to perform this action."
            )
        return current_user

    return dependency
