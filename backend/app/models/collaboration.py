import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum as SAEnum
from sqlmodel import Column, Field, Relationship, SQLModel

from app.core.enums import AgreementStatus, Currency, RequestStatus
from app.utils import naive_timestamp_column, now_utc_naive

if TYPE_CHECKING:
    from .profile import Profile

__all__ = [
    "CollaborationRequest",
    "CollaborationAgreement",
    "REQUEST_TABLE",
    "AGREEMENT_TABLE",
]

REQUEST_TABLE = "collaborationrequest"
AGREEMENT_TABLE = "collaborationagreement"


def _enum_column(enum_cls: type[Enum]) -> Column:
    # Store the enum values ("pending"), not the member names ("PENDING").
    return Column(
        SAEnum(
            enum_cls,
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )


class CollaborationRequest(SQLModel, table=True):
    __tablename__ = REQUEST_TABLE

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    sender_id: uuid.UUID = Field(foreign_key="profile.id", index=True)
    receiver_id: uuid.UUID = Field(foreign_key="profile.id", index=True)
    message: str | None = Field(default=None)
    status: RequestStatus = Field(
        default=RequestStatus.PENDING,
        sa_column=_enum_column(RequestStatus),
    )
    created_at: datetime = Field(
        default_factory=now_utc_naive,
        sa_column=naive_timestamp_column(index=True),
    )
    responded_at: datetime | None = Field(
        default=None,
        sa_column=naive_timestamp_column(nullable=True),
    )

    sender: "Profile" = Relationship(
        sa_relationship_kwargs={
            "lazy": "joined",
            "foreign_keys": "[CollaborationRequest.sender_id]",
        }
    )
    receiver: "Profile" = Relationship(
        sa_relationship_kwargs={
            "lazy": "joined",
            "foreign_keys": "[CollaborationRequest.receiver_id]",
        }
    )
    agreement: "CollaborationAgreement" = Relationship(
        back_populates="request",
        sa_relationship_kwargs={
            "lazy": "joined",
            "uselist": False,
            "cascade": "all, delete-orphan",
        },
    )


class CollaborationAgreement(SQLModel, table=True):
    __tablename__ = AGREEMENT_TABLE

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # One agreement per request.
    request_id: uuid.UUID = Field(
        foreign_key=f"{REQUEST_TABLE}.id",
        unique=True,
        ondelete="CASCADE",
    )
    payment_amount: int
    currency: Currency = Field(sa_column=_enum_column(Currency))
    status: AgreementStatus = Field(
        default=AgreementStatus.PENDING,
        sa_column=_enum_column(AgreementStatus),
    )
    created_at: datetime = Field(
        default_factory=now_utc_naive,
        sa_column=naive_timestamp_column(),
    )
    responded_at: datetime | None = Field(
        default=None,
        sa_column=naive_timestamp_column(nullable=True),
    )

    request: CollaborationRequest = Relationship(back_populates="agreement")
