from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

from app.core.enums import AgreementStatus, Currency, RequestStatus
from app.schemas.profile import ProfileSummary

__all__ = [
    "AgreementCreate",
    "AgreementPublic",
    "CollaborationRequestCreate",
    "CollaborationRequestPublic",
    "EnrichedRequest",
    "InboxPage",
]

DEFAULT_PAYMENT_AMOUNT = 50
DEFAULT_CURRENCY = Currency.USD


# Range and step of payment_amount are checked by the agreement service so the
# same errors surface whether the call comes from the API or from code.
class AgreementCreate(SQLModel):
    payment_amount: int = DEFAULT_PAYMENT_AMOUNT
    currency: str = DEFAULT_CURRENCY.value


class CollaborationRequestCreate(AgreementCreate):
    receiver_id: UUID
    message: str | None = None


class AgreementPublic(SQLModel):
    id: UUID
    request_id: UUID
    payment_amount: int
    currency: Currency
    status: AgreementStatus
    created_at: datetime
    responded_at: datetime | None


class CollaborationRequestPublic(SQLModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    message: str | None
    status: RequestStatus
    created_at: datetime
    responded_at: datetime | None


class EnrichedRequest(CollaborationRequestPublic):
    sender: ProfileSummary
    receiver: ProfileSummary
    counterpart: ProfileSummary
    agreement: AgreementPublic | None


class InboxPage(SQLModel):
    items: list[EnrichedRequest]
    next_cursor: str | None = None
