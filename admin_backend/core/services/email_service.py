import html
import logging
from email.message import EmailMessage
from pathlib import Path

import aiosmtplib

from admin_backend.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

PASSWORD_GENERATED_NOTICE = (
    "Note: Password was randomly generated. "
    "You will be asked to change your password at your first login."
)


async def send_email(email_to: str, subject: str, text_content: str, html_content: str = None,
                     from_email: str = None, from_name: str = None):
    msg = EmailMessage()
    msg["From"] = f"{from_name or settings.WELCOME_FROM_NAME} <{from_email or settings.WELCOME_FROM_EMAIL}>"
    msg["To"] = email_to
    msg["Subject"] = subject
    msg.set_content(text_content)
    if html_content:
        msg.add_alternative(html_content, subtype="html")

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        start_tls=False
    )


async def send_welcome_email(user, url: str, password: str = "******") -> bool:
    """
    Send the invitation e-mail of a backend user.

    Pass the masked default password when credentials are not being (re)sent.
    Returns False instead of raising when the message could not be delivered.
    """
    project = settings.PROJECT_NAME[:1].upper() + settings.PROJECT_NAME[1:]
    context = {
        "PROJECT": project,
        "NAME": user.name,
        "EMAIL": user.email,
        "PASSWORD": password,
        "URL": url,
    }

    try:
        html_content = render_email_template(
            settings.WELCOME_VIEW_HTML,
            {key: html.escape(str(value)) for key, value in context.items()},
            notice=f"<p><em>{PASSWORD_GENERATED_NOTICE}</em></p>" if user.change_password else "",
        )
        text_content = render_email_template(
            settings.WELCOME_VIEW_TEXT,
            context,
            notice=f"\n{PASSWORD_GENERATED_NOTICE}\n" if user.change_password else "",
        )

        await send_email(
            user.email,
            settings.WELCOME_SUBJECT,
            text_content,
            html_content,
            from_email=settings.WELCOME_FROM_EMAIL,
            from_name=settings.WELCOME_FROM_NAME,
        )
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error(f"Welcome e-mail to {user.email} failed: {e}")
        return False

    logger.info(f"Welcome e-mail sent to {user.email}")
    return True


def render_email_template(template_name: str, context: dict, notice: str = "") -> str:
    with open(TEMPLATES_DIR / template_name, "r", encoding="utf-8") as file:
        content = file.read()

    content = content.replace("{{PASSWORD_NOTICE}}", notice)
    for key, value in context.items():
        content = content.replace("{{" + key + "}}", str(value))
    return content
