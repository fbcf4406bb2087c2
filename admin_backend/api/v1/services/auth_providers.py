from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from admin_backend.api.v1.models import User
from admin_backend.api.v1.repositories import UserRepository
from admin_backend.core.config import settings
from admin_backend.core.security import decode_remember_cookie

TOKEN_HEADER = "X-Backend-Token"


class AuthProvider(ABC):
    """Identifies the backend user of a request from a persisted credential."""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    @abstractmethod
    async def authenticate(self, request: Request, db: AsyncSession) -> Optional[User]:
        """Return the authenticated user, or None when the credential is missing or invalid."""


class RememberCookieProvider(AuthProvider):
    """Signed "remember me" cookie holding the user id and its remember token."""

    async def authenticate(self, request: Request, db: AsyncSession) -> Optional[User]:
        cookie = request.cookies.get(settings.REMEMBER_COOKIE_NAME)
        if not cookie:
            return None

        decoded = decode_remember_cookie(cookie)
        if decoded is None:
            return None

        user_id, remember_token = decoded
        return await self.user_repository.get_by_id_and_remember_token(db, user_id, remember_token)


class TokenProvider(AuthProvider):
    """Persistent API token sent in the X-Backend-Token header."""

    async def authenticate(self, request: Request, db: AsyncSession) -> Optional[User]:
        token = request.headers.get(TOKEN_HEADER)
        if not token:
            return None

        return await self.user_repository.get_by_token(db, token)
