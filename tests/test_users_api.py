import io
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from admin_backend.core.config import settings


@pytest.fixture
def smtp_send():
    with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
        yield send


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    return target


def form(**overrides):
    data = {
        "name": "Jane",
        "email": "jane@example.com",
        "user_role": "admin",
        "password": "secret123",
        "password_repeat": "secret123",
        "send_mail": "false",
    }
    data.update(overrides)
    return data


def test_create_user(logged_in_client, smtp_send):
    response = logged_in_client.post("/admin/users", data=form())

    assert response.status_code == 201
    body = response.json()
    assert body["data"]["user"]["email"] == "jane@example.com"
    assert body["data"]["user"]["change_password"] is False
    assert "password" not in body["data"]["user"]
    assert body["data"]["mail_sent"] is None
    smtp_send.assert_not_awaited()


def test_create_user_validation_errors(logged_in_client):
    response = logged_in_client.post("/admin/users", data=form(email="broken", user_role="astronaut"))

    assert response.status_code == 422
    errors = response.json()["data"]["errors"]
    assert errors["email"] == ["The email must be a valid email address."]
    assert errors["user_role"] == ["The selected user_role is invalid."]


def test_create_user_without_password_sends_generated_one(logged_in_client, smtp_send):
    response = logged_in_client.post("/admin/users", data=form(password="", password_repeat="", send_mail="true"))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["change_password"] is True
    assert data["mail_sent"] is True

    message = smtp_send.await_args.args[0]
    assert message["To"] == "jane@example.com"
    text = message.get_body(preferencelist=("plain",)).get_content()
    assert "Password was randomly generated" in text
    assert "http://testserver/login" in text


def test_create_user_reports_mail_failure(logged_in_client, smtp_send):
    smtp_send.side_effect = OSError("connection refused")

    response = logged_in_client.post("/admin/users", data=form(send_mail="true"))

    assert response.status_code == 201
    assert response.json()["data"]["mail_sent"] is False


def test_create_user_with_image(logged_in_client, upload_dir):
    files = {"image": ("avatar.png", io.BytesIO(b"\x89PNG fake"), "image/png")}

    response = logged_in_client.post("/admin/users", data=form(), files=files)

    assert response.status_code == 201
    image = response.json()["data"]["user"]["image"]
    assert image.startswith("backend_user_images/")
    assert (upload_dir / image).read_bytes() == b"\x89PNG fake"


def test_create_user_with_rejected_image_still_creates_user(logged_in_client, upload_dir):
    files = {"image": ("script.exe", io.BytesIO(b"MZ"), "application/octet-stream")}

    response = logged_in_client.post("/admin/users", data=form(), files=files)

    assert response.status_code == 201
    assert response.json()["data"]["user"]["image"] is None


def test_list_and_show_users(logged_in_client):
    logged_in_client.post("/admin/users", data=form(name="Alice", email="alice@example.com"))
    logged_in_client.post("/admin/users", data=form(name="Bob", email="bob@example.com"))

    response = logged_in_client.get("/admin/users", params={"search": "ali"})
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["results"][0]["name"] == "Alice"

    response = logged_in_client.get("/admin/users", params={"limit": 2})
    names = [u["name"] for u in response.json()["data"]["results"]]
    assert names == ["Alice", "Bob"]

    user_id = data["results"][0]["id"]
    response = logged_in_client.get(f"/admin/users/{user_id}")
    assert response.json()["data"]["email"] == "alice@example.com"


def test_show_unknown_user(logged_in_client):
    response = logged_in_client.get("/admin/users/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


def test_current_user(logged_in_client):
    response = logged_in_client.get("/admin/users/me")
    assert response.json()["data"]["email"] == "dev@example.com"


def test_update_user(logged_in_client):
    created = logged_in_client.post("/admin/users", data=form()).json()["data"]["user"]

    response = logged_in_client.put(f"/admin/users/{created['id']}", data=form(name="Jane Doe", password="", password_repeat=""))

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Jane Doe"

    # Unchanged password still logs in
    response = logged_in_client.post("/login", json={"email": "jane@example.com", "password": "secret123"})
    assert response.status_code == 200


def test_update_user_email_taken(logged_in_client):
    created = logged_in_client.post("/admin/users", data=form()).json()["data"]["user"]

    response = logged_in_client.put(f"/admin/users/{created['id']}", data=form(email="dev@example.com"))

    assert response.status_code == 422
    assert response.json()["data"]["errors"]["email"] == ["The email has already been taken."]


def test_resend_welcome_mail_masks_password(logged_in_client, smtp_send):
    created = logged_in_client.post("/admin/users", data=form()).json()["data"]["user"]

    response = logged_in_client.post(f"/admin/users/{created['id']}/welcome-mail")

    assert response.status_code == 200
    text = smtp_send.await_args.args[0].get_body(preferencelist=("plain",)).get_content()
    assert "Password: ******" in text
    assert "secret123" not in text


def test_resend_welcome_mail_failure_sets_bad_gateway(logged_in_client, smtp_send):
    created = logged_in_client.post("/admin/users", data=form()).json()["data"]["user"]
    smtp_send.side_effect = aiosmtplib.SMTPException("mail server down")

    response = logged_in_client.post(f"/admin/users/{created['id']}/welcome-mail")

    assert response.status_code == 502
    assert response.json()["error"] == "The welcome e-mail could not be sent"
