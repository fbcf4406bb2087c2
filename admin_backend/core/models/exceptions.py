from typing import Dict, List, Optional


class BackendError(Exception):
    """Base exception for backend domain errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class EntityNotFoundError(BackendError):
    """Raised when a lookup did not match any row."""

    def __init__(self, message: str = "Entity not found"):
        super().__init__(message, status_code=404)


class InvalidPasswordError(BackendError):
    """Raised when the given password does not match the stored hash."""

    def __init__(self, message: str = "Password was incorrect. Try again."):
        super().__init__(message, status_code=401)


class SaveFailedError(BackendError):
    """Raised when a transactional write failed and was rolled back."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class AuthenticationError(BackendError):
    """Raised when no authentication provider could identify the user."""

    def __init__(self, message: str = "Unable to authenticate backend user"):
        super().__init__(message, status_code=401)


class ValidationError(BackendError):
    """Raised when a validator rule table rejects the given data."""

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message or "The given data was invalid.", status_code=422)
