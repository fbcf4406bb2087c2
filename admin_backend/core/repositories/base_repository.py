from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.core.helpers.filter_helper import paginate
from admin_backend.core.models import Base, EntityNotFoundError, SaveFailedError

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    def _fillable(self, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = self.model.column_names() - {"id", "created_at"}
        return {key: value for key, value in data.items() if key in columns}

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> T:
        item = self.model(**self._fillable(data))
        db.add(item)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise SaveFailedError(f"Could not create {self.model.__name__}. Reason {e.orig}") from e
        await db.refresh(item)
        return item

    async def get_by_id(self, db: AsyncSession, item_id) -> Optional[T]:
        return await db.get(self.model, item_id)

    async def get_by(self, db: AsyncSession, column: str, value) -> Optional[T]:
        if column not in self.model.column_names():
            raise ValueError(f"Unknown column '{column}' on {self.model.__name__}")
        result = await db.execute(select(self.model).where(getattr(self.model, column) == value))
        return result.scalars().first()

    async def get_by_or_fail(self, db: AsyncSession, column: str, value) -> T:
        item = await self.get_by(db, column, value)
        if item is None:
            raise EntityNotFoundError(f"{self.model.__name__} with {column} '{value}' was not found")
        return item

    async def update(self, db: AsyncSession, item: T, data: Dict[str, Any]) -> T:
        for key, value in self._fillable(data).items():
            setattr(item, key, value)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise SaveFailedError(f"Could not update {self.model.__name__}. Reason {e.orig}") from e
        await db.refresh(item)
        return item

    async def delete(self, db: AsyncSession, item: T) -> bool:
        try:
            await db.delete(item)
            await db.commit()
            return True
        except IntegrityError as e:
            await db.rollback()
            raise SaveFailedError(f"Could not delete {self.model.__name__}. Reason {e.orig}") from e

    async def paginate_query(self, db: AsyncSession, query, page: int = 1, limit: int = 25) -> Dict[str, Any]:
        return await paginate(db, query, page=page, page_size=limit)
