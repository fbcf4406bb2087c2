from typing import Optional
from uuid import UUID

from admin_backend.core.schemas import BaseSchema


class RoleBase(BaseSchema):
    slug: Optional[str] = None
    title: Optional[str] = None


class RoleCreate(RoleBase):
    pass


class RoleUpdate(RoleBase):
    pass


class Role(BaseSchema):
    id: UUID
    slug: str
    title: str
