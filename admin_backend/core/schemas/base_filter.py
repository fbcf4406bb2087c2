from typing import Optional

from fastapi import Query
from pydantic import BaseModel, Field


class BaseFilter(BaseModel):
    page: int = Field(default=1, ge=1, description="Page number (starts from 1)")
    limit: int = Field(default=25, ge=1, le=1000, description="Items per page")
    search: Optional[str] = Field(default=None, description="Case-insensitive search term")


def get_base_filter(
        page: int = Query(1, ge=1),
        limit: int = Query(25, ge=1, le=1000),
        search: Optional[str] = Query(None, description="Case-insensitive search term"),
) -> BaseFilter:
    return BaseFilter(page=page, limit=limit, search=search)
