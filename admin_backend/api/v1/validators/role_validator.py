from admin_backend.core.validation import AbstractValidator


class RoleValidator(AbstractValidator):
    """Validation rules for backend roles."""

    rules = {
        "create": {
            "slug": ["required", "unique:backend_roles,slug"],
            "title": ["required"],
        },
        "update": {
            "slug": ["required", "unique:backend_roles,slug"],
            "title": ["required"],
        },
    }
