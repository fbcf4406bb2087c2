"""
Shared fixtures.

Every test gets its own SQLite file (aiosqlite, NullPool so connections are
never shared between the event loops of pytest-asyncio and TestClient).
"""
import asyncio
import os

# Must be set before admin_backend.core.config is imported
os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///./admin_backend_test.db")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["API_KEY"] = "test-api-key"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from admin_backend.api.v1.models import Role
from admin_backend.api.v1.repositories import get_user_repository
from admin_backend.db import DatabaseManager, get_session
from admin_backend.main import create_app

DEFAULT_ROLES = {
    "admin": "Administrator",
    "developer": "Developer",
    "super-admin": "Super administrator",
}


async def _prepare(manager: DatabaseManager):
    await manager.create_tables()
    async with manager.async_session_factory() as session:
        session.add_all([Role(slug=slug, title=title) for slug, title in DEFAULT_ROLES.items()])
        await session.commit()


def _build_manager(tmp_path) -> DatabaseManager:
    return DatabaseManager(f"sqlite+aiosqlite:///{tmp_path}/test.db", poolclass=NullPool, echo=False)


@pytest_asyncio.fixture
async def db_manager(tmp_path):
    manager = _build_manager(tmp_path)
    await _prepare(manager)
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def db(db_manager):
    async with db_manager.async_session_factory() as session:
        yield session


@pytest.fixture
def user_repository():
    return get_user_repository()


@pytest.fixture
def sync_db_manager(tmp_path):
    """Database manager for TestClient tests, which run their own event loop."""
    manager = _build_manager(tmp_path)
    asyncio.run(_prepare(manager))
    yield manager
    asyncio.run(manager.dispose())


@pytest.fixture
def app(sync_db_manager):
    app = create_app(session_factory=sync_db_manager.async_session_factory)

    async def override_get_session():
        async with sync_db_manager.async_session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def create_user(sync_db_manager, user_repository):
    """Create a user through the repository, outside of any request."""

    def _create_user(email="jane@example.com", password="secret123", name="Jane", user_role="admin", **extra):
        async def _run():
            async with sync_db_manager.async_session_factory() as session:
                return await user_repository.create_user(session, {
                    "name": name,
                    "email": email,
                    "password": password,
                    "user_role": user_role,
                    **extra,
                })

        return asyncio.run(_run())

    return _create_user


@pytest.fixture
def logged_in_client(client, create_user):
    """TestClient holding the session of a freshly created developer."""
    create_user(email="dev@example.com", password="secret123", name="Dev", user_role="developer")
    response = client.post("/login", json={"email": "dev@example.com", "password": "secret123"})
    assert response.status_code == 200
    return client
