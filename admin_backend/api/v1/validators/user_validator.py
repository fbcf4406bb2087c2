from admin_backend.core.validation import AbstractValidator


class UserValidator(AbstractValidator):
    """Validation rules for backend users."""

    rules = {
        "create": {
            "name": ["required", "max:255"],
            "email": ["required", "email", "unique:backend_users,email"],
            "password": ["min:6", "same:password_repeat"],
            "user_role": ["required", "exists:backend_roles,slug"],
        },
        "update": {
            "name": ["required", "max:255"],
            "email": ["required", "email", "unique:backend_users,email"],
            "password": ["min:6", "same:password_repeat"],
            "user_role": ["required", "exists:backend_roles,slug"],
        },
    }
