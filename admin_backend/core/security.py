import secrets
import string
from typing import Optional, Tuple

from fastapi import HTTPException, Header, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from admin_backend.core.config import settings

# Password hashing setup
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

RANDOM_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def verify_api_key(x_api_key: str = Header(...)):
    if not secrets.compare_digest(x_api_key, settings.API_KEY):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Not a hash passlib recognizes
        return False


def generate_random_password(length: int = 16) -> str:
    return "".join(secrets.choice(RANDOM_PASSWORD_ALPHABET) for _ in range(length))


def generate_remember_token() -> str:
    return secrets.token_urlsafe(45)[:60]


def generate_api_token() -> str:
    """64 hex characters, matching the backend_tokens.token column."""
    return secrets.token_hex(32)


def encode_remember_cookie(user_id: str, remember_token: str) -> str:
    """Sign the user id and remember token into the value of the remember cookie."""
    payload = {"sub": str(user_id), "rmb": remember_token}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_remember_cookie(value: str) -> Optional[Tuple[str, str]]:
    """
    Return `(user_id, remember_token)` from a remember cookie value,
    or None when the value was tampered with or is malformed.
    """
    try:
        payload = jwt.decode(value, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("sub")
    remember_token = payload.get("rmb")
    if not user_id or not remember_token:
        return None

    return user_id, remember_token
