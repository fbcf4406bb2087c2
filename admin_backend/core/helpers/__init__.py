from .filter_helper import apply_filters_and_sorting, paginate
from .flash_helper import flash, pop_flashed_messages
from .cookie_helper import set_remember_cookie, clear_remember_cookie

__all__ = [
    "apply_filters_and_sorting",
    "paginate",
    "flash",
    "pop_flashed_messages",
    "set_remember_cookie",
    "clear_remember_cookie",
]
