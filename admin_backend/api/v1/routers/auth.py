"""
Backend authentication endpoints.

Login form, e-mail/password login (optionally remembered through a signed
cookie), login of users pushed by the external manager tool, and logout.
These routes live outside the protected prefix so the auth gate can send
unauthenticated clients here.
"""

import logging
from typing import Annotated, Optional
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.api.deps import get_auth_service
from admin_backend.api.v1.repositories import UserRepository, get_user_repository
from admin_backend.api.v1.schemas import LoginRequest, ManagerUser, UserRead
from admin_backend.api.v1.services import AuthService
from admin_backend.core.config import settings
from admin_backend.core.helpers import flash, pop_flashed_messages
from admin_backend.core.middlewares import limiter
from admin_backend.core.models import EntityNotFoundError, InvalidPasswordError
from admin_backend.core.schemas import ApiResponse
from admin_backend.core.security import verify_api_key
from admin_backend.db import get_session

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        401: {"description": "Unauthorized - Invalid credentials"},
        429: {"description": "Too Many Requests - Rate limit exceeded"},
    },
)


def safe_redirect_url(url: Optional[str]) -> Optional[str]:
    """Keep only same-site relative paths (no scheme, host or protocol-relative URL)."""
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return None
    parsed = urlsplit(url)
    if parsed.scheme or parsed.netloc:
        return None
    return url


@router.get("/login", response_model=ApiResponse, name="backend.login.form")
async def login_form(
        request: Request,
        redirect_url: Annotated[Optional[str], Query()] = None,
) -> ApiResponse:
    """
    Login form data.

    Returns the URL to go back to after login and consumes the pending
    flash messages (e.g. the warning left by the auth gate).
    """
    return ApiResponse(
        status_code=status.HTTP_200_OK,
        data={
            "redirect_url": safe_redirect_url(redirect_url),
            "messages": pop_flashed_messages(request),
        },
    )


@router.post("/login", response_model=ApiResponse, name="backend.login.authenticate")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
        request: Request,
        response: Response,
        credentials: LoginRequest,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)],
        auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse:
    """
    Log a backend user in with e-mail and password.

    Unknown e-mails answer 404 and wrong passwords 401 so the form can tell
    the two apart.
    """
    try:
        user = await user_repository.get_by_email_and_password(db, credentials.email, credentials.password)
    except EntityNotFoundError:
        logger.warning(f"Login attempt for unknown e-mail: {credentials.email}")
        response.status_code = status.HTTP_404_NOT_FOUND
        return ApiResponse(status_code=status.HTTP_404_NOT_FOUND, error="User not found.")
    except InvalidPasswordError as e:
        logger.warning(f"Invalid password for {credentials.email}")
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return ApiResponse(status_code=status.HTTP_401_UNAUTHORIZED, error=e.message)

    await auth_service.login(db, request, response, user, remember=credentials.remember)
    flash(request, "success", f"Welcome back, {user.name}!")

    return ApiResponse(
        status_code=status.HTTP_200_OK,
        detail="Logged in",
        data={
            "user": UserRead.model_validate(user),
            "redirect_url": safe_redirect_url(credentials.redirect_url) or f"{settings.BACKEND_PREFIX}/users",
        },
    )


@router.post("/login/manager", response_model=ApiResponse, name="backend.login.manager")
async def login_from_manager(
        request: Request,
        response: Response,
        manager_user: ManagerUser,
        api_key: Annotated[str, Depends(verify_api_key)],
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)],
        auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse:
    """Log in a user synced from the external manager tool."""
    try:
        user = await user_repository.login_user_from_manager(db, manager_user.model_dump())
    except EntityNotFoundError as e:
        logger.error(f"Manager login failed for {manager_user.email}: {e.message}")
        response.status_code = status.HTTP_404_NOT_FOUND
        return ApiResponse(status_code=status.HTTP_404_NOT_FOUND, error="Manager user not found.")

    await auth_service.login(db, request, response, user)

    return ApiResponse(
        status_code=status.HTTP_200_OK,
        detail="Logged in",
        data={"user": UserRead.model_validate(user)},
    )


@router.post("/logout", response_model=ApiResponse, name="backend.logout")
async def logout(
        request: Request,
        response: Response,
        db: Annotated[AsyncSession, Depends(get_session)],
        auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse:
    await auth_service.logout(db, request, response)
    flash(request, "success", "You have been logged out.")

    return ApiResponse(status_code=status.HTTP_200_OK, detail="Logged out")
