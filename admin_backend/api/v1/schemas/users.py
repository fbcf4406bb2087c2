from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from admin_backend.core.schemas import BaseSchema


class UserBase(BaseSchema):
    """Shared fields between create/update/read schemas."""
    name: str = Field(..., max_length=255)
    email: str
    user_role: str


class UserRead(UserBase):
    """Output/response model returned to clients. Never carries secrets."""
    id: UUID
    image: Optional[str] = None
    change_password: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ManagerUser(BaseSchema):
    """Identity pushed by the external manager tool."""
    name: str = Field(..., max_length=255)
    email: EmailStr
    image: Optional[str] = None
