import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from admin_backend.core.models import Base


class BackendToken(Base):
    """
    Persistent API token of a backend user.
    - Generated once per user at creation time.
    - A null `expire` means the token never expires.
    """
    __tablename__ = "backend_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("backend_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    expire: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship(back_populates="tokens")

    def __repr__(self) -> str:
        return f"<BackendToken user_id={self.user_id} expire={self.expire}>"
