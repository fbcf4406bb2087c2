from datetime import datetime
from uuid import UUID

from admin_backend.core.schemas import BaseSchema


class FailedJob(BaseSchema):
    id: UUID
    connection: str
    queue: str
    payload: str
    exception: str
    failed_at: datetime
