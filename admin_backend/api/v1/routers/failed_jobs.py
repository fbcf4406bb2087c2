from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.api.v1.repositories import FailedJobRepository, get_failed_job_repository
from admin_backend.api.v1.schemas import FailedJob
from admin_backend.core.config import settings
from admin_backend.core.schemas import ApiResponse, BaseFilter, get_base_filter
from admin_backend.db import get_session

prefix = f"{settings.BACKEND_PREFIX}/failed-jobs"
router = APIRouter(prefix=prefix)


@router.get("", response_model=ApiResponse)
async def list_failed_jobs(
        filters: Annotated[BaseFilter, Depends(get_base_filter)],
        db: Annotated[AsyncSession, Depends(get_session)],
        failed_job_repository: Annotated[FailedJobRepository, Depends(get_failed_job_repository)],
        queue: Annotated[Optional[str], Query()] = None,
):
    """Failed jobs, most recent first."""
    paginated = await failed_job_repository.get_paginated(db, limit=filters.limit, queue=queue, page=filters.page)
    paginated["items"] = [FailedJob.model_validate(j) for j in paginated["items"]]
    return ApiResponse(status_code=status.HTTP_200_OK, data=paginated)


@router.get("/{job_id}", response_model=ApiResponse)
async def read_failed_job(
        job_id: UUID,
        db: Annotated[AsyncSession, Depends(get_session)],
        failed_job_repository: Annotated[FailedJobRepository, Depends(get_failed_job_repository)]
):
    job = await failed_job_repository.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Failed job not found")
    return ApiResponse(status_code=status.HTTP_200_OK, data=FailedJob.model_validate(job))
