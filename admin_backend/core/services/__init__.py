from .asset_service import add_uploaded_file, is_uploaded_file
from .email_service import send_email, send_welcome_email, render_email_template

__all__ = [
    "add_uploaded_file",
    "is_uploaded_file",
    "send_email",
    "send_welcome_email",
    "render_email_template",
]
