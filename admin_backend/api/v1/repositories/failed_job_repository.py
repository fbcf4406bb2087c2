from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from admin_backend.api.v1.models import FailedJob as FailedJobModel
from admin_backend.core.helpers import apply_filters_and_sorting
from admin_backend.core.repositories import BaseRepository


class FailedJobRepository(BaseRepository):
    """Read-only access to the failed job log."""
    def __init__(self):
        super().__init__(FailedJobModel)

    async def get_paginated(self, db: AsyncSession, limit: int = 25, queue: str = None, page: int = 1):
        filters = {"queue": queue} if queue else {}
        query = apply_filters_and_sorting(select(self.model), self.model, filters=filters, sort=["failed_at-"])
        return await self.paginate_query(db, query, page=page, limit=limit)


@lru_cache()
def get_failed_job_repository() -> FailedJobRepository:
    return FailedJobRepository()
