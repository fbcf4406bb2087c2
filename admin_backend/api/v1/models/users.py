from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from admin_backend.core.models import Base, utcnow


class User(Base):
    """Backend user able to log into the administration area."""
    __tablename__ = "backend_users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    user_role: Mapped[str] = mapped_column(String(100), nullable=False, default="admin")
    remember_token: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    change_password: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    tokens: Mapped[List["BackendToken"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    # Never filtered on nor exposed
    hidden_columns = ("password", "remember_token")

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"
