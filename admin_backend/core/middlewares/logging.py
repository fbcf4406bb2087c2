import logging
import time
from typing import Callable

from fastapi import Request

logger = logging.getLogger(__name__)


async def request_logging_middleware(request: Request, call_next: Callable):
    """Log every request with the backend user that made it, if any."""
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time

    # Filled in by SessionMiddleware further down the stack
    session = request.scope.get("session") or {}
    user_id = session.get("backend_user_id", "-")

    logger.info(f"[{request.method}] {request.url.path} - {response.status_code} - {duration:.3f}s - user {user_id}")

    return response
