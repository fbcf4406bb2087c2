from typing import Callable

from fastapi import Request

from admin_backend.core.config import settings


async def security_headers_middleware(request: Request, call_next: Callable):
    """Add security headers to all responses; backend pages are never cached."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    if request.url.path.startswith(settings.BACKEND_PREFIX):
        response.headers["Cache-Control"] = "no-store"

    return response
