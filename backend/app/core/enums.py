from enum import Enum, unique


@unique
class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


@unique
class AgreementStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


@unique
class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"


@unique
class Decision(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


@unique
class InboxDirection(str, Enum):
    RECEIVED = "received"
    SENT = "sent"


@unique
class ChangeKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
