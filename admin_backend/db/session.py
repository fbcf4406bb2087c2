from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine,
)

from admin_backend.core.config import settings


# ----------------------------------------------------------------------
# 1. Database Manager Class
# ----------------------------------------------------------------------

class DatabaseManager:
    """
    Owns the async engine of one database URL and the session factory bound to it.

    The application uses the module-level `db_manager`; tests build their own
    manager against a throwaway SQLite file.
    """

    def __init__(self, db_url: str, **engine_options):
        """
        Args:
            db_url (str): SQLAlchemy async URL (postgresql+asyncpg, sqlite+aiosqlite).
            **engine_options: Passed to create_async_engine (e.g. poolclass).
        """
        engine_options.setdefault("echo", bool(settings.DEBUG))
        if not db_url.startswith("sqlite"):
            engine_options.setdefault("pool_pre_ping", True)

        self._engine: AsyncEngine = create_async_engine(db_url, **engine_options)

        self._async_session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            class_=AsyncSession,
            expire_on_commit=False,  # Objects stay readable after commit (serialized by routers).
            autoflush=False,
            bind=self._engine,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def async_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Session factory, also handed to the auth gate which opens its own sessions."""
        return self._async_session_factory

    async def create_tables(self):
        """Create every table registered on the declarative Base."""
        from admin_backend.core.models import Base
        import admin_backend.api.v1.models  # noqa: F401  (registers the tables)

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        """Close every pooled connection."""
        await self._engine.dispose()


db_manager = DatabaseManager(settings.ASYNC_DATABASE_URL)


# ----------------------------------------------------------------------
# 2. FastAPI Dependency
# ----------------------------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request, closed when the request ends.
    Whatever was not committed by then is rolled back.
    """
    async with db_manager.async_session_factory() as session:
        yield session
