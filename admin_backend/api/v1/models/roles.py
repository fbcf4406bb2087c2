from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from admin_backend.core.models import Base


class Role(Base):
    """Backend role, referenced by users through its slug."""
    __tablename__ = "backend_roles"

    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self):
        return f"<Role(slug='{self.slug}')>"
