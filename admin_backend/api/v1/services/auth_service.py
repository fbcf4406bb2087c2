import logging
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.requests import Request

from admin_backend.api.v1.models import User
from admin_backend.api.v1.repositories import UserRepository, get_user_repository
from admin_backend.api.v1.services.auth_providers import AuthProvider, RememberCookieProvider, TokenProvider
from admin_backend.core.helpers import set_remember_cookie, clear_remember_cookie
from admin_backend.core.models import AuthenticationError
from admin_backend.core.security import encode_remember_cookie

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "backend_user_id"


class AuthService:
    """
    Authentication state of the backend user of a request.

    The session marks a request as authenticated. When it doesn't, the
    providers are tried in order to recover the user from a persisted
    credential (remember cookie, API token).
    """

    def __init__(
            self,
            session_factory: async_sessionmaker[AsyncSession],
            user_repository: Optional[UserRepository] = None,
            providers: Optional[List[AuthProvider]] = None,
    ):
        self.session_factory = session_factory
        self.user_repository = user_repository or get_user_repository()
        self.providers = providers if providers is not None else [
            RememberCookieProvider(self.user_repository),
            TokenProvider(self.user_repository),
        ]

    async def check(self, request: Request) -> bool:
        """True when the session points at a backend user that still exists."""
        if not request.session.get(SESSION_USER_KEY):
            return False

        async with self.session_factory() as db:
            user = await self.user(db, request)

        if user is None:
            # Stale session, e.g. the user row was removed
            request.session.pop(SESSION_USER_KEY, None)
            return False
        return True

    async def authenticate(self, request: Request) -> User:
        """
        Raises:
            AuthenticationError: no provider could identify the user.
        """
        async with self.session_factory() as db:
            for provider in self.providers:
                user = await provider.authenticate(request, db)
                if user is not None:
                    request.session[SESSION_USER_KEY] = str(user.id)
                    logger.info(f"Backend user {user.id} authenticated by {provider.__class__.__name__}")
                    return user

        raise AuthenticationError()

    async def login(self, db: AsyncSession, request: Request, response, user: User, remember: bool = False):
        request.session[SESSION_USER_KEY] = str(user.id)

        if remember:
            remember_token = await self.user_repository.set_remember_token(db, user)
            set_remember_cookie(response, encode_remember_cookie(str(user.id), remember_token))

        logger.info(f"Backend user {user.id} logged in (remember={remember})")

    async def user(self, db: AsyncSession, request: Request) -> Optional[User]:
        user_id = request.session.get(SESSION_USER_KEY)
        if not user_id:
            return None
        try:
            return await self.user_repository.get_by_id(db, uuid.UUID(user_id))
        except ValueError:
            return None

    async def logout(self, db: AsyncSession, request: Request, response):
        user = await self.user(db, request)
        if user is not None:
            # Invalidates remember cookies issued to other browsers as well
            await self.user_repository.set_remember_token(db, user)

        request.session.pop(SESSION_USER_KEY, None)
        clear_remember_cookie(response)
        logger.info(f"Backend user {user.id if user else None} logged out")
