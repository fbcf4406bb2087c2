from .auth_providers import AuthProvider, RememberCookieProvider, TokenProvider, TOKEN_HEADER
from .auth_service import AuthService, SESSION_USER_KEY

__all__ = [
    "AuthProvider",
    "AuthService",
    "RememberCookieProvider",
    "SESSION_USER_KEY",
    "TOKEN_HEADER",
    "TokenProvider",
]
