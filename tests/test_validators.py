import pytest

from admin_backend.api.v1.models import Role
from admin_backend.api.v1.validators import RoleValidator, UserValidator
from admin_backend.core.models import ValidationError
from admin_backend.core.validation import AbstractValidator


def valid_user(**overrides):
    data = {
        "name": "Jane",
        "email": "jane@example.com",
        "password": "secret123",
        "password_repeat": "secret123",
        "user_role": "admin",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_valid_user_passes(db):
    data = valid_user()
    assert await UserValidator().validate(db, data, "create") is data


@pytest.mark.asyncio
async def test_user_errors_are_collected_per_field(db):
    with pytest.raises(ValidationError) as exc_info:
        await UserValidator().validate(db, valid_user(
            name="",
            email="not-an-email",
            password="abc",
            user_role="astronaut",
        ), "create")

    errors = exc_info.value.errors
    assert exc_info.value.status_code == 422
    assert errors["name"] == ["The name field is required."]
    assert errors["email"] == ["The email must be a valid email address."]
    assert errors["password"] == ["The password must be at least 6 characters."]
    assert errors["user_role"] == ["The selected user_role is invalid."]


@pytest.mark.asyncio
async def test_password_must_match_repeat(db):
    with pytest.raises(ValidationError) as exc_info:
        await UserValidator().validate(db, valid_user(password_repeat="secret124"), "create")

    assert exc_info.value.errors == {"password": ["The password and password_repeat must match."]}


@pytest.mark.asyncio
async def test_empty_password_is_allowed(db):
    await UserValidator().validate(db, valid_user(password="", password_repeat=""), "create")


@pytest.mark.asyncio
async def test_unique_email_excludes_the_updated_user(db, user_repository):
    user = await user_repository.create_user(db, valid_user())

    with pytest.raises(ValidationError) as exc_info:
        await UserValidator().validate(db, valid_user(), "create")
    assert exc_info.value.errors["email"] == ["The email has already been taken."]

    await UserValidator().validate(db, valid_user(), "update", exclude_id=user.id)


@pytest.mark.asyncio
async def test_role_slug_must_be_unique(db):
    with pytest.raises(ValidationError) as exc_info:
        await RoleValidator().validate(db, {"slug": "admin", "title": "Admin again"}, "create")
    assert exc_info.value.errors == {"slug": ["The slug has already been taken."]}

    role = Role(slug="editor", title="Editor")
    db.add(role)
    await db.commit()

    await RoleValidator().validate(db, {"slug": "editor", "title": "Editors"}, "update", exclude_id=role.id)


@pytest.mark.asyncio
async def test_unknown_operation(db):
    with pytest.raises(ValueError):
        await RoleValidator().validate(db, {}, "archive")


@pytest.mark.asyncio
async def test_in_and_max_rules(db):
    class StatusValidator(AbstractValidator):
        rules = {"create": {"status": ["in:draft,published"], "code": ["max:3"]}}

    with pytest.raises(ValidationError) as exc_info:
        await StatusValidator().validate(db, {"status": "archived", "code": "ABCD"})

    assert exc_info.value.errors == {
        "status": ["The selected status is invalid."],
        "code": ["The code may not be greater than 3 characters."],
    }
    await StatusValidator().validate(db, {"status": "draft", "code": "ABC"})
