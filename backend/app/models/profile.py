import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from app.utils import naive_timestamp_column, now_utc_naive

__all__ = [
    "ProfileBase",
    "ProfileCreate",
    "Profile",
]


# Shared properties
class ProfileBase(SQLModel):
    username: str = Field(unique=True, index=True, min_length=1, max_length=255)
    specialty: str = Field(default="", max_length=255)
    bio: str | None = Field(default=None)
    avatar_url: str | None = Field(default=None, max_length=2048)


# Properties to receive via API on creation
class ProfileCreate(ProfileBase):
    pass


# Database model, database table inferred from class name
class Profile(ProfileBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=now_utc_naive,
        sa_column=naive_timestamp_column(),
    )
