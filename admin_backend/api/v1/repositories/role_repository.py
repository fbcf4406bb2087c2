from functools import lru_cache
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from admin_backend.api.v1.models import Role as RoleModel
from admin_backend.core.helpers import apply_filters_and_sorting
from admin_backend.core.repositories import BaseRepository


class RoleRepository(BaseRepository):
    """
    Repository for backend roles. Data is validated upstream by RoleValidator.
    """
    def __init__(self):
        super().__init__(RoleModel)

    async def create_role(self, db: AsyncSession, data: Dict[str, Any]) -> RoleModel:
        return await self.create(db, data)

    async def update_role(self, db: AsyncSession, role: RoleModel, data: Dict[str, Any]) -> RoleModel:
        return await self.update(db, role, data)

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Optional[RoleModel]:
        return await self.get_by(db, "slug", slug)

    async def get_paginated(self, db: AsyncSession, limit: int = 25, search: Optional[str] = None, page: int = 1):
        filters = {}
        if search and search.strip():
            filters = {"slug__icontains": search.strip(), "title__icontains": search.strip()}

        query = apply_filters_and_sorting(select(self.model), self.model, filters=filters, sort=["title+"], logic_operator="or")
        return await self.paginate_query(db, query, page=page, limit=limit)


@lru_cache()
def get_role_repository() -> RoleRepository:
    """Dependency injector for RoleRepository."""
    return RoleRepository()
