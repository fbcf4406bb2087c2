from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from admin_backend.core.models import Base, utcnow


class FailedJob(Base):
    """Append-only record of an asynchronous job that failed."""
    __tablename__ = "failed_jobs"

    connection: Mapped[str] = mapped_column(String(255), nullable=False)
    queue: Mapped[str] = mapped_column(String(255), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    exception: Mapped[str] = mapped_column(Text, nullable=False)
    failed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    def __repr__(self):
        return f"<FailedJob(id='{self.id}', queue='{self.queue}')>"
