import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from admin_backend.core.config import settings
from admin_backend.core.schemas import ApiResponse

logger = logging.getLogger(__name__)

# Only the login endpoint is limited, keyed on the client address
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Answer throttled login attempts in the ApiResponse envelope."""
    logger.warning(f"Rate limit hit on {request.url.path} by {get_remote_address(request)}: {exc.detail}")

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=ApiResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="Too many login attempts. Please try again later.",
        ).model_dump(mode="json"),
    )
