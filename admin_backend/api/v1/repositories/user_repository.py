import logging
import uuid
from datetime import timedelta
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import load_only

from admin_backend.api.v1.models import BackendToken, User as UserModel
from admin_backend.core.config import settings
from admin_backend.core.helpers.filter_helper import apply_filters_and_sorting
from admin_backend.core.models import InvalidPasswordError, SaveFailedError, utcnow
from admin_backend.core.repositories import BaseRepository
from admin_backend.core.security import (
    generate_api_token,
    generate_random_password,
    generate_remember_token,
    get_password_hash,
    verify_password,
)
from admin_backend.core.services.asset_service import add_uploaded_file, is_uploaded_file

logger = logging.getLogger(__name__)

USER_IMAGE_FOLDER = "backend_user_images"


class UserRepository(BaseRepository):
    def __init__(self):
        super().__init__(UserModel)

    async def create_user(self, db: AsyncSession, data: Dict[str, Any]) -> UserModel:
        """
        Create a user from validated data.

        The insert, the optional profile image and the user's API token are
        written in one transaction: either all of them persist or none does.
        Storing the image is best effort and never aborts the creation.

        Raises:
            SaveFailedError: the transaction was rolled back.
        """
        payload = dict(data)
        image = payload.pop("image", None)
        if payload.get("password"):
            payload["password"] = get_password_hash(payload["password"])

        try:
            user = self.model(**self._fillable(payload))
            db.add(user)
            await db.flush()

            if is_uploaded_file(image):
                self._attach_image(user, image)
                await db.flush()

            await self.create_token(db, user)
            await db.commit()
        except Exception as e:
            await db.rollback()
            raise SaveFailedError(f"Could not create new user. Reason {e}") from e

        await db.refresh(user)
        logger.info(f"Backend user created: {user.id}")
        return user

    async def update_user(self, db: AsyncSession, user: UserModel, data: Dict[str, Any]) -> UserModel:
        """
        Update a user with validated data.

        An empty password leaves the stored hash untouched. Without a new
        upload and without a `file_picker_file_name` the current image is removed.
        """
        payload = dict(data)

        # Don't override the stored hash with an empty value
        if not payload.get("password"):
            payload.pop("password", None)
            payload.pop("password_repeat", None)
        else:
            payload["password"] = get_password_hash(payload["password"])

        image = payload.pop("image", None)
        file_picker_file_name = payload.pop("file_picker_file_name", None)

        for key, value in self._fillable(payload).items():
            setattr(user, key, value)

        if is_uploaded_file(image):
            self._attach_image(user, image)
        elif not file_picker_file_name and user.image:
            # Remove profile image
            user.image = None

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise SaveFailedError(f"Could not update user. Reason {e.orig}") from e

        await db.refresh(user)
        return user

    def _attach_image(self, user: UserModel, image) -> None:
        try:
            user.image = add_uploaded_file(image, USER_IMAGE_FOLDER)
        except Exception as e:
            logger.warning(f"Could not store image for user {user.email}: {e}")

    async def create_token(self, db: AsyncSession, user: UserModel) -> BackendToken:
        """Generate a persistent API token for the user (flushed, not committed)."""
        expire = None
        if settings.TOKEN_EXPIRE_DAYS:
            expire = utcnow() + timedelta(days=settings.TOKEN_EXPIRE_DAYS)

        token = BackendToken(user_id=user.id, token=generate_api_token(), expire=expire)
        db.add(token)
        await db.flush()
        return token

    async def get_by_token(self, db: AsyncSession, token: str) -> Optional[UserModel]:
        query = (
            select(self.model)
            .join(BackendToken, BackendToken.user_id == self.model.id)
            .where(BackendToken.token == token)
            .where(or_(BackendToken.expire.is_(None), BackendToken.expire > utcnow()))
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_email_and_password(self, db: AsyncSession, email: str, password: str) -> UserModel:
        """
        Raises:
            EntityNotFoundError: no user with that e-mail.
            InvalidPasswordError: the password doesn't match.
        """
        user = await self.get_by_or_fail(db, "email", email)

        if not verify_password(password, user.password):
            raise InvalidPasswordError("Password was incorrect. Try again.")

        return user

    async def get_by_id_and_remember_token(self, db: AsyncSession, user_id, token: str) -> Optional[UserModel]:
        try:
            user_id = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
        except ValueError:
            return None

        query = select(self.model).where(self.model.id == user_id, self.model.remember_token == token)
        result = await db.execute(query)
        return result.scalars().first()

    async def set_remember_token(self, db: AsyncSession, user: UserModel) -> str:
        user.remember_token = generate_remember_token()
        await db.commit()
        await db.refresh(user)
        return user.remember_token

    async def get_paginated(
            self,
            db: AsyncSession,
            limit: int = 25,
            fields: Optional[Iterable[str]] = None,
            search: Optional[str] = None,
            page: int = 1,
    ) -> Dict[str, Any]:
        """
        Users sorted by name, optionally narrowed to those whose name or
        e-mail contains `search` (case-insensitive).
        """
        query = select(self.model)

        if fields:
            columns = set(fields) | {"id"}
            unknown = columns - self.model.column_names()
            if unknown:
                raise ValueError(f"Unknown columns: {', '.join(sorted(unknown))}")
            query = query.options(load_only(*[getattr(self.model, c) for c in sorted(columns)]))

        filters = {}
        if search and search.strip():
            term = search.strip()
            filters = {"name__icontains": term, "email__icontains": term}

        query = apply_filters_and_sorting(query, self.model, filters=filters, sort=["name+"], logic_operator="or")

        return await self.paginate_query(db, query, page=page, limit=limit)

    async def get_by_columns(self, db: AsyncSession, columns: Dict[str, Any]) -> Optional[UserModel]:
        """First user equal on every column, ignoring sensitive (hidden) columns."""
        query = select(self.model)
        for column, value in columns.items():
            if column in self.model.hidden_columns:
                continue
            if column not in self.model.column_names():
                raise ValueError(f"Unknown column '{column}' on {self.model.__name__}")
            query = query.where(getattr(self.model, column) == value)

        result = await db.execute(query.limit(1))
        return result.scalars().first()

    async def get_manager_user(self, db: AsyncSession) -> UserModel:
        return await self.get_by_or_fail(db, "email", settings.MANAGER_EMAIL)

    async def login_user_from_manager(self, db: AsyncSession, data: Dict[str, Any]) -> UserModel:
        """
        Retrieve the user synced from the manager, or create one.

        Raises:
            EntityNotFoundError: falling back to the shared manager account, which doesn't exist.
        """
        user = await self.get_by(db, "email", data["email"])
        if user is not None:
            if not user.image and data.get("image"):
                user.image = data["image"]
                await db.commit()
                await db.refresh(user)
            return user

        # Only create separate users if configured
        if settings.MANAGER_SEPARATE_USERS:
            try:
                return await self.create_user(db, {
                    "name": data["name"],
                    "email": data["email"],
                    "user_role": settings.MANAGER_ROLE,
                    "password": generate_random_password(16),
                })
            except SaveFailedError as e:
                logger.warning(f"Could not create manager user {data['email']}: {e}")

        return await self.get_manager_user(db)


@lru_cache()
def get_user_repository() -> UserRepository:
    return UserRepository()
