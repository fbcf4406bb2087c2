import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.api.deps import get_current_backend_user
from admin_backend.api.v1.models import User as UserModel
from admin_backend.api.v1.repositories import UserRepository, get_user_repository
from admin_backend.api.v1.schemas import UserRead as User
from admin_backend.api.v1.validators import UserValidator
from admin_backend.core.config import settings
from admin_backend.core.schemas import ApiResponse, BaseFilter, get_base_filter
from admin_backend.core.security import generate_random_password
from admin_backend.core.services import send_welcome_email
from admin_backend.db import get_session

logger = logging.getLogger(__name__)

prefix = f"{settings.BACKEND_PREFIX}/users"
router = APIRouter(prefix=prefix)

user_validator = UserValidator()


async def _get_user_or_404(db: AsyncSession, user_repository: UserRepository, user_id: UUID) -> UserModel:
    user = await user_repository.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=ApiResponse)
async def list_users(
        filters: Annotated[BaseFilter, Depends(get_base_filter)],
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Paginated list of users sorted by name, searchable by name or e-mail."""
    paginated = await user_repository.get_paginated(db, limit=filters.limit, search=filters.search, page=filters.page)

    return ApiResponse(
        status_code=status.HTTP_200_OK,
        data={
            "total": paginated["total"],
            "page": paginated["page"],
            "page_size": paginated["page_size"],
            "search": filters.search,
            "results": [User.model_validate(u) for u in paginated["items"]],
        },
    )


@router.get("/me", response_model=ApiResponse)
async def read_current_user(
        current_user: Annotated[UserModel, Depends(get_current_backend_user)],
):
    return ApiResponse(status_code=status.HTTP_200_OK, data=User.model_validate(current_user))


@router.get("/{user_id}", response_model=ApiResponse)
async def read_user(
        user_id: UUID,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    user = await _get_user_or_404(db, user_repository, user_id)
    return ApiResponse(status_code=status.HTTP_200_OK, data=User.model_validate(user))


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
        request: Request,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)],
        name: Annotated[Optional[str], Form()] = None,
        email: Annotated[Optional[str], Form()] = None,
        user_role: Annotated[Optional[str], Form()] = None,
        password: Annotated[Optional[str], Form()] = None,
        password_repeat: Annotated[Optional[str], Form()] = None,
        send_mail: Annotated[bool, Form()] = True,
        image: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Create a backend user.

    Without a password one is generated and the user has to change it at
    first login. The welcome e-mail is best effort: a delivery failure is
    reported in the response, the user is created anyway.
    """
    data = {
        "name": name,
        "email": email,
        "user_role": user_role,
        "password": password,
        "password_repeat": password_repeat,
        "image": image,
    }
    await user_validator.validate(db, data, "create")

    if not password:
        password = generate_random_password()
        data["password"] = password
        data["change_password"] = True

    user = await user_repository.create_user(db, data)

    mail_sent = None
    if send_mail:
        mail_sent = await send_welcome_email(user, str(request.url_for(settings.WELCOME_ROUTE)), password)

    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        detail="User created" if mail_sent is not False else "User created, but the welcome e-mail could not be sent",
        data={"user": User.model_validate(user), "mail_sent": mail_sent},
    )


@router.put("/{user_id}", response_model=ApiResponse)
async def update_user(
        user_id: UUID,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)],
        name: Annotated[Optional[str], Form()] = None,
        email: Annotated[Optional[str], Form()] = None,
        user_role: Annotated[Optional[str], Form()] = None,
        password: Annotated[Optional[str], Form()] = None,
        password_repeat: Annotated[Optional[str], Form()] = None,
        file_picker_file_name: Annotated[Optional[str], Form()] = None,
        image: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Update a backend user.

    An empty password keeps the current one. Send the current image name as
    `file_picker_file_name` to keep the profile image, otherwise it is removed.
    """
    user = await _get_user_or_404(db, user_repository, user_id)

    data = {
        "name": name,
        "email": email,
        "user_role": user_role,
        "password": password,
        "password_repeat": password_repeat,
        "file_picker_file_name": file_picker_file_name,
        "image": image,
    }
    await user_validator.validate(db, data, "update", exclude_id=user.id)

    if password:
        data["change_password"] = False

    updated = await user_repository.update_user(db, user, data)
    return ApiResponse(status_code=status.HTTP_200_OK, detail="User updated", data=User.model_validate(updated))


@router.post("/{user_id}/welcome-mail", response_model=ApiResponse)
async def resend_welcome_mail(
        request: Request,
        response: Response,
        user_id: UUID,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Send the invitation again, without credentials (the password is masked)."""
    user = await _get_user_or_404(db, user_repository, user_id)

    if not await send_welcome_email(user, str(request.url_for(settings.WELCOME_ROUTE))):
        response.status_code = status.HTTP_502_BAD_GATEWAY
        return ApiResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            error="The welcome e-mail could not be sent",
        )

    return ApiResponse(status_code=status.HTTP_200_OK, detail="Welcome e-mail sent")
