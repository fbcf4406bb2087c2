from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.api.deps import require_role
from admin_backend.api.v1.models import User as UserModel
from admin_backend.api.v1.repositories import RoleRepository, get_role_repository
from admin_backend.api.v1.schemas import Role, RoleCreate, RoleUpdate
from admin_backend.api.v1.validators import RoleValidator
from admin_backend.core.config import settings
from admin_backend.core.schemas import ApiResponse, BaseFilter, get_base_filter
from admin_backend.db import get_session

prefix = f"{settings.BACKEND_PREFIX}/roles"
router = APIRouter(prefix=prefix)

role_validator = RoleValidator()
role_manager = require_role(*settings.ROLE_MANAGER_ROLES)


async def _get_role_or_404(db: AsyncSession, role_repository: RoleRepository, role_id: UUID):
    role = await role_repository.get_by_id(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


@router.get("", response_model=ApiResponse)
async def list_roles(
        filters: Annotated[BaseFilter, Depends(get_base_filter)],
        manager: Annotated[UserModel, Depends(role_manager)],
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    """Get a paginated list of roles sorted by title."""
    paginated = await role_repository.get_paginated(db, limit=filters.limit, search=filters.search, page=filters.page)
    paginated["items"] = [Role.model_validate(r) for r in paginated["items"]]
    return ApiResponse(status_code=status.HTTP_200_OK, data=paginated)


@router.get("/{role_id}", response_model=ApiResponse)
async def read_role(
        role_id: UUID,
        manager: Annotated[UserModel, Depends(role_manager)],
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    role = await _get_role_or_404(db, role_repository, role_id)
    return ApiResponse(status_code=status.HTTP_200_OK, data=Role.model_validate(role))


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
        role: RoleCreate,
        manager: Annotated[UserModel, Depends(role_manager)],
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    """Create a new role and return it."""
    data = await role_validator.validate(db, role.model_dump(), "create")
    created = await role_repository.create_role(db, data)
    return ApiResponse(status_code=status.HTTP_201_CREATED, data=Role.model_validate(created))


@router.put("/{role_id}", response_model=ApiResponse)
async def update_role(
        role_id: UUID,
        role: RoleUpdate,
        manager: Annotated[UserModel, Depends(role_manager)],
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    """Update a role. Its own slug does not count as taken."""
    existing = await _get_role_or_404(db, role_repository, role_id)
    data = await role_validator.validate(db, role.model_dump(), "update", exclude_id=existing.id)
    updated = await role_repository.update_role(db, existing, data)
    return ApiResponse(status_code=status.HTTP_200_OK, data=Role.model_validate(updated))


@router.delete("/{role_id}", response_model=ApiResponse)
async def delete_role(
        role_id: UUID,
        manager: Annotated[UserModel, Depends(role_manager)],
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    """Delete a role by ID."""
    role = await _get_role_or_404(db, role_repository, role_id)
    await role_repository.delete(db, role)
    return ApiResponse(status_code=status.HTTP_200_OK, detail="Role deleted successfully.")
