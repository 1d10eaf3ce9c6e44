from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

from app.models.profile import ProfileBase

__all__ = [
    "ProfilePublic",
    "ProfileSummary",
]


class ProfilePublic(ProfileBase):
    id: UUID
    created_at: datetime


class ProfileSummary(SQLModel):
    id: UUID
    username: str
    specialty: str
    avatar_url: str | None
