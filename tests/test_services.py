import io
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest
from starlette.datastructures import UploadFile

from admin_backend.core.config import settings
from admin_backend.core.services import add_uploaded_file, is_uploaded_file, send_welcome_email
from admin_backend.core.services.email_service import PASSWORD_GENERATED_NOTICE


def make_user(change_password=False, name="Jane <Admin>"):
    return SimpleNamespace(name=name, email="jane@example.com", change_password=change_password)


def parts(message):
    text = message.get_body(preferencelist=("plain",)).get_content()
    html = message.get_body(preferencelist=("html",)).get_content()
    return text, html


@pytest.mark.asyncio
async def test_welcome_email_content():
    with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
        assert await send_welcome_email(make_user(), "https://backend.example.com/login", "s3cret") is True

    message = send.await_args.args[0]
    assert message["Subject"] == settings.WELCOME_SUBJECT
    assert message["From"] == f"{settings.WELCOME_FROM_NAME} <{settings.WELCOME_FROM_EMAIL}>"

    text, html = parts(message)
    assert "Hello Jane <Admin>," in text
    assert "Password: s3cret" in text
    assert "https://backend.example.com/login" in text
    assert "join Backend backend" in text
    assert PASSWORD_GENERATED_NOTICE not in text

    assert "Jane &lt;Admin&gt;" in html
    assert "Jane <Admin>" not in html


@pytest.mark.asyncio
async def test_welcome_email_mentions_generated_password():
    with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
        await send_welcome_email(make_user(change_password=True), "https://backend.example.com/login")

    text, html = parts(send.await_args.args[0])
    assert PASSWORD_GENERATED_NOTICE in text
    assert PASSWORD_GENERATED_NOTICE in html
    assert "Password: ******" in text


@pytest.mark.asyncio
async def test_welcome_email_failure_is_reported():
    error = aiosmtplib.SMTPConnectError("no server")
    with patch("aiosmtplib.send", new_callable=AsyncMock, side_effect=error):
        assert await send_welcome_email(make_user(), "https://backend.example.com/login") is False


def test_is_uploaded_file():
    assert is_uploaded_file(UploadFile(io.BytesIO(b"x"), filename="a.png"))
    assert not is_uploaded_file(UploadFile(io.BytesIO(b""), filename=""))
    assert not is_uploaded_file(None)
    assert not is_uploaded_file("a.png")


def test_add_uploaded_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))

    stored = add_uploaded_file(UploadFile(io.BytesIO(b"image-bytes"), filename="Photo.JPG"), "avatars")

    assert stored.startswith("avatars/")
    assert stored.endswith(".jpg")
    assert (tmp_path / stored).read_bytes() == b"image-bytes"


def test_add_uploaded_file_rejects_bad_input(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))

    with pytest.raises(ValueError):
        add_uploaded_file(UploadFile(io.BytesIO(b"#!"), filename="run.sh"), "avatars")

    with pytest.raises(ValueError):
        add_uploaded_file(UploadFile(io.BytesIO(b"x"), filename="a.png"), "../outside")
