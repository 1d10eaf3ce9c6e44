from collections.abc import Iterable
from uuid import UUID

from app.core.enums import AgreementStatus, RequestStatus

from .base import AuthorizationError, InvalidStateError, NotFoundError, ValidationError


class SelfCollaborationError(ValidationError):
    def __init__(self, profile_id: UUID):
        detail = f"User with id {profile_id} cannot send a collaboration request to themselves."
        super().__init__(detail)


class UnknownProfileError(ValidationError):
    def __init__(self, profile_id: UUID):
        detail = f"Profile with id {profile_id} does not exist."
        super().__init__(detail)


class InvalidPaymentAmountError(ValidationError):
    def __init__(self, amount: object, minimum: int, maximum: int, step: int):
        detail = (
            f"Payment amount {amount!r} is invalid. It must be a whole number "
            f"between {minimum} and {maximum} in steps of {step}."
        )
        super().__init__(detail)


class UnsupportedCurrencyError(ValidationError):
    def __init__(self, currency: object, supported: Iterable[str]):
        detail = (
            f"Currency {currency!r} is not supported. "
            f"Supported currencies: {', '.join(supported)}."
        )
        super().__init__(detail)


class CollaborationRequestNotFoundError(NotFoundError):
    def __init__(self, request_id: UUID):
        detail = f"Collaboration request with id {request_id} not found."
        super().__init__(detail)


class CollaborationAgreementNotFoundError(NotFoundError):
    def __init__(self, request_id: UUID):
        detail = f"No agreement exists for collaboration request with id {request_id}."
        super().__init__(detail)


class NotRequestReceiverError(AuthorizationError):
    def __init__(self, actor_id: UUID, request_id: UUID):
        detail = f"User with id {actor_id} is not the receiver of collaboration request {request_id}."
        super().__init__(detail)


class NotRequestSenderError(AuthorizationError):
    def __init__(self, actor_id: UUID, request_id: UUID):
        detail = f"User with id {actor_id} is not the sender of collaboration request {request_id}."
        super().__init__(detail)


class RequestAlreadyResolvedError(InvalidStateError):
    def __init__(self, request_id: UUID, status: RequestStatus):
        detail = f"Collaboration request {request_id} has already been {status.value}."
        super().__init__(detail)


class RequestNotAcceptedError(InvalidStateError):
    def __init__(self, request_id: UUID, status: RequestStatus):
        detail = (
            f"Collaboration request {request_id} is {status.value}; "
            "its terms can only be answered once the request is accepted."
        )
        super().__init__(detail)


class AgreementAlreadyResolvedError(InvalidStateError):
    def __init__(self, request_id: UUID, status: AgreementStatus):
        detail = f"The agreement for collaboration request {request_id} has already been {status.value}."
        super().__init__(detail)


class AgreementAlreadyExistsError(InvalidStateError):
    def __init__(self, request_id: UUID):
        detail = f"Collaboration request {request_id} already has an agreement."
        super().__init__(detail)


class InvalidDecisionError(ValidationError):
    def __init__(self, decision: object):
        detail = f"Decision {decision!r} is invalid. Use 'accept' or 'decline'."
        super().__init__(detail)


class InvalidCursorError(ValidationError):
    def __init__(self, cursor: str):
        detail = f"Cursor {cursor!r} is invalid or has been tampered with."
        super().__init__(detail)


class InvalidPageSizeError(ValidationError):
    def __init__(self, limit: int):
        detail = f"Page size {limit} is invalid. It must be at least 1."
        super().__init__(detail)


class NotRequestParticipantError(AuthorizationError):
    def __init__(self, actor_id: UUID, request_id: UUID):
        detail = f"User with id {actor_id} is not a participant of collaboration request {request_id}."
        super().__init__(detail)
