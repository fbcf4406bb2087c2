# --- Cookie Management ---
from datetime import timedelta

from admin_backend.core.config import settings

COOKIE_SECURE = settings.ENVIRONMENT.lower() == "production"


def set_remember_cookie(response, value: str, expires_in_days: int = settings.REMEMBER_COOKIE_DAYS):
    """
        Set the long-lived "remember me" cookie.
        - HttpOnly: True (not accessible to JavaScript)
        - Secure: only in production (HTTPS)
        - SameSite: 'lax'
    """
    response.set_cookie(
        key=settings.REMEMBER_COOKIE_NAME,
        value=value,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=expires_in_days * 24 * 60 * 60,  # Convert days to seconds
        expires=int(timedelta(days=expires_in_days).total_seconds()),
        path="/",
    )


def clear_remember_cookie(response):
    response.delete_cookie(
        key=settings.REMEMBER_COOKIE_NAME,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
