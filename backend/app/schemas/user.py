"""User Schemas — normalized profile returned by the sync endpoint."""

from datetime import datetime
from uuid import UUID

from app.schemas.common import ApiModel


class UserProfile(ApiModel):
    id: UUID
    external_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    created_at: datetime
