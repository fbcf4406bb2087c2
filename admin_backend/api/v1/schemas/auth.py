from typing import Optional

from admin_backend.core.schemas import BaseSchema


class LoginRequest(BaseSchema):
    email: str
    password: str
    remember: bool = False
    redirect_url: Optional[str] = None
