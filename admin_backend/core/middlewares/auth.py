import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from admin_backend.core.helpers import flash
from admin_backend.core.models import AuthenticationError

logger = logging.getLogger(__name__)

NOT_LOGGED_IN_MESSAGE = "Oops! You're not logged in."


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Gate for the backend area.

    Requests below one of the protected prefixes pass through only when the
    session holds a backend user or the user can be recovered silently from a
    persisted credential. Otherwise the client is redirected to the login form
    with the requested URL as `redirect_url` and a warning flash message.
    Must run inside SessionMiddleware.
    """

    def __init__(self, app, auth_service, login_route: str, protected_prefixes: Iterable[str]):
        super().__init__(app)
        self.auth_service = auth_service
        self.login_route = login_route
        self.protected_prefixes = tuple(p.rstrip("/") for p in protected_prefixes)

    def is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(f"{prefix}/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next):
        if not self.is_protected(request.url.path):
            return await call_next(request)

        if not await self.auth_service.check(request):
            try:
                await self.auth_service.authenticate(request)
            except AuthenticationError:
                logger.info(f"Unauthenticated request to {request.url.path}, redirecting to login")
                return self.redirect_to_login(request)

        return await call_next(request)

    def redirect_to_login(self, request: Request) -> RedirectResponse:
        requested_url = request.url.path
        if request.url.query:
            requested_url = f"{requested_url}?{request.url.query}"

        # Earlier flash messages stay in the session next to this one
        flash(request, "warning", NOT_LOGGED_IN_MESSAGE)

        login_url = request.url_for(self.login_route).include_query_params(redirect_url=requested_url)
        return RedirectResponse(str(login_url), status_code=302)
