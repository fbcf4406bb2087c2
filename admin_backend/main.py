import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.middleware.sessions import SessionMiddleware

from admin_backend.api.v1.services import AuthService
from admin_backend.core.bootstrap import bootstrap_app
from admin_backend.core.config import settings
from admin_backend.core.helpers.cookie_helper import COOKIE_SECURE
from admin_backend.core.middlewares import (
    AuthMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    request_logging_middleware,
    security_headers_middleware,
)
from admin_backend.core.models import BackendError, ValidationError
from admin_backend.core.schemas import ApiResponse
from admin_backend.db import db_manager

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events. Creates the tables when
    AUTO_CREATE_TABLES is set and releases the connection pool on shutdown.
    """
    logger.info("Starting application...")

    if settings.AUTO_CREATE_TABLES:
        logger.info("Creating database tables...")
        await db_manager.create_tables()

    yield

    logger.info("Shutting down application...")
    logger.info("Disposing database pool...")
    await db_manager.dispose()


async def backend_error_handler(request: Request, exc: BackendError):
    """Render domain errors in the ApiResponse envelope."""
    data = {"errors": exc.errors} if isinstance(exc, ValidationError) else None
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse(status_code=exc.status_code, error=exc.message, data=data).model_dump(mode="json"),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler with security considerations.
    """
    tb = traceback.format_exc()

    # Log the full error server-side
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    response_content = {
        "status": "error",
        "error_type": exc.__class__.__name__,
        "message": str(exc),
    }

    # Only include traceback outside production
    if settings.ENVIRONMENT.upper() not in ("PRODUCTION", "PROD"):
        response_content["traceback"] = tb

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response_content,
    )


def create_app(session_factory: Optional[async_sessionmaker[AsyncSession]] = None) -> FastAPI:
    """
    Build the backend application.

    `session_factory` is the factory the auth gate opens its own sessions
    with; it defaults to the application database manager.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        version=settings.VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
    )

    app.state.auth_service = AuthService(session_factory or db_manager.async_session_factory)

    # Add rate limiter state to app
    app.state.limiter = limiter

    # Innermost first: the auth gate needs the session, so SessionMiddleware wraps it
    app.add_middleware(
        AuthMiddleware,
        auth_service=app.state.auth_service,
        login_route=settings.LOGIN_ROUTE,
        protected_prefixes=[settings.BACKEND_PREFIX],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE_NAME,
        same_site="lax",
        https_only=COOKIE_SECURE,
    )

    # Security headers middleware
    app.middleware("http")(security_headers_middleware)

    # Request logging middleware
    app.middleware("http")(request_logging_middleware)

    # Exception handlers
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    bootstrap_app(app)

    # Health check endpoint (useful for monitoring)
    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0",
                port=8000,
                log_level="info"
        )
