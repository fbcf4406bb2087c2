"""
Flash messages kept in the session store.

A flash message is written during one request and read (then discarded) by a
later one. Because they live in the session rather than on a response object,
every message flashed earlier in a request survives any redirect issued later
in the same request.
"""
from typing import Dict

from starlette.requests import Request

FLASH_SESSION_KEY = "_flash"


def flash(request: Request, key: str, message: str) -> None:
    """Store `message` under `key` until the next read."""
    messages = dict(request.session.get(FLASH_SESSION_KEY) or {})
    messages[key] = message
    request.session[FLASH_SESSION_KEY] = messages


def pop_flashed_messages(request: Request) -> Dict[str, str]:
    """Return and forget every pending flash message."""
    return dict(request.session.pop(FLASH_SESSION_KEY, None) or {})
