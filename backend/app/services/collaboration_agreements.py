from logging import getLogger
from uuid import UUID

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel import Session

from app.converters import collaboration as collaboration_converters
from app.core.enums import AgreementStatus, ChangeKind, Currency, Decision, RequestStatus
from app.crud import collaboration as collaboration_crud
from app.exceptions.base import AppError, TransportError
from app.exceptions.collaboration_exceptions import (
    AgreementAlreadyExistsError,
    AgreementAlreadyResolvedError,
    CollaborationAgreementNotFoundError,
    CollaborationRequestNotFoundError,
    InvalidDecisionError,
    InvalidPaymentAmountError,
    NotRequestReceiverError,
    NotRequestSenderError,
    RequestNotAcceptedError,
    UnsupportedCurrencyError,
)
from app.models.collaboration import AGREEMENT_TABLE, CollaborationAgreement
from app.realtime.feed import ChangeFeed, change_feed
from app.schemas.collaboration import AgreementPublic

MIN_PAYMENT_AMOUNT = 50
MAX_PAYMENT_AMOUNT = 10000
PAYMENT_AMOUNT_STEP = 50

logger = getLogger(__name__)


def validate_terms(payment_amount: object, currency: object) -> Currency:
    """
    Check proposed payment terms.

    Returns:
        Currency: The currency as an enum member.
    Raises:
        InvalidPaymentAmountError: If the amount is not an integer in
            [MIN_PAYMENT_AMOUNT, MAX_PAYMENT_AMOUNT] on a PAYMENT_AMOUNT_STEP grid.
        UnsupportedCurrencyError: If the currency is not one of Currency.
    """
    if (
        isinstance(payment_amount, bool)
        or not isinstance(payment_amount, int)
        or not MIN_PAYMENT_AMOUNT <= payment_amount <= MAX_PAYMENT_AMOUNT
        or payment_amount % PAYMENT_AMOUNT_STEP != 0
    ):
        raise InvalidPaymentAmountError(
            payment_amount, MIN_PAYMENT_AMOUNT, MAX_PAYMENT_AMOUNT, PAYMENT_AMOUNT_STEP
        )
    try:
        return Currency(currency)
    except ValueError as e:
        raise UnsupportedCurrencyError(currency, [c.value for c in Currency]) from e


def to_decision(decision: object) -> Decision:
    try:
        return Decision(decision)
    except ValueError as e:
        raise InvalidDecisionError(decision) from e


def feed_row(agreement: CollaborationAgreement, *, sender_id: UUID, receiver_id: UUID) -> dict:
    # Agreements carry no participants; the feed filters on the owning request's.
    return {
        "id": agreement.id,
        "request_id": agreement.request_id,
        "sender_id": sender_id,
        "receiver_id": receiver_id,
    }


def create_agreement(
    *,
    session: Session,
    request_id: UUID,
    payment_amount: int,
    currency: Currency | str,
    actor_id: UUID | None = None,
    feed: ChangeFeed = change_feed,
) -> AgreementPublic:
    """
    Attach payment terms to an existing request.

    When actor_id is given it must be the sender of the request, who is the
    one proposing terms.
    Raises:
        InvalidPaymentAmountError, UnsupportedCurrencyError: If the terms are invalid.
        CollaborationRequestNotFoundError: If the request does not exist.
        NotRequestSenderError: If actor_id is given and is not the sender.
        AgreementAlreadyExistsError: If the request already has terms.
        TransportError: If the data store fails.
        AppError: For any other (unexpected) errors.
    """
    terms_currency = validate_terms(payment_amount, currency)

    request = collaboration_crud.get_request_by_id(session=session, request_id=request_id)
    if request is None:
        raise CollaborationRequestNotFoundError(request_id)
    if actor_id is not None and actor_id != request.sender_id:
        raise NotRequestSenderError(actor_id, request_id)
    if collaboration_crud.get_agreement_for_request(session=session, request_id=request_id):
        raise AgreementAlreadyExistsError(request_id)

    try:
        agreement = collaboration_crud.create_agreement(
            session=session,
            request_id=request_id,
            payment_amount=payment_amount,
            currency=terms_currency,
        )
        row = feed_row(
            agreement, sender_id=request.sender_id, receiver_id=request.receiver_id
        )
        session.commit()
    except IntegrityError as e:
        session.rollback()
        # Lost a race with a concurrent insert or a cancellation.
        if collaboration_crud.get_request_by_id(session=session, request_id=request_id):
            raise AgreementAlreadyExistsError(request_id) from e
        raise CollaborationRequestNotFoundError(request_id) from e
    except DBAPIError as e:
        session.rollback()
        raise TransportError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info(
        "Agreement %s created for request %s: %s %s",
        agreement.id,
        request_id,
        payment_amount,
        terms_currency.value,
    )
    feed.publish(AGREEMENT_TABLE, row, ChangeKind.INSERT)
    return collaboration_converters.to_agreement_public(agreement)


def respond_to_agreement(
    *,
    session: Session,
    request_id: UUID,
    actor_id: UUID,
    decision: Decision | str,
    feed: ChangeFeed = change_feed,
) -> AgreementPublic:
    """
    Accept or decline the payment terms of a request.

    Only the receiver of the request may answer its terms, and only after
    accepting the request itself.
    Raises:
        CollaborationRequestNotFoundError: If the request does not exist.
        CollaborationAgreementNotFoundError: If the request has no terms.
        NotRequestReceiverError: If actor_id is not the request's receiver.
        RequestNotAcceptedError: If the request is not accepted.
        AgreementAlreadyResolvedError: If the terms were already answered.
        TransportError: If the data store fails.
        AppError: For any other (unexpected) errors.
    """
    decision = to_decision(decision)

    request = collaboration_crud.get_request_by_id(session=session, request_id=request_id)
    if request is None:
        raise CollaborationRequestNotFoundError(request_id)
    agreement = collaboration_crud.get_agreement_for_request(
        session=session, request_id=request_id
    )
    if agreement is None:
        raise CollaborationAgreementNotFoundError(request_id)
    if actor_id != request.receiver_id:
        logger.warning(
            "User %s tried to %s the terms of request %s", actor_id, decision.value, request_id
        )
        raise NotRequestReceiverError(actor_id, request_id)
    if request.status != RequestStatus.ACCEPTED:
        raise RequestNotAcceptedError(request_id, request.status)
    if agreement.status != AgreementStatus.PENDING:
        raise AgreementAlreadyResolvedError(request_id, agreement.status)

    new_status = (
        AgreementStatus.ACCEPTED if decision == Decision.ACCEPT else AgreementStatus.DECLINED
    )
    try:
        collaboration_crud.update_agreement_status(
            session=session, agreement=agreement, status=new_status
        )
        row = feed_row(
            agreement, sender_id=request.sender_id, receiver_id=request.receiver_id
        )
        session.commit()
    except DBAPIError as e:
        session.rollback()
        raise TransportError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("Agreement for request %s %s by %s", request_id, new_status.value, actor_id)
    feed.publish(AGREEMENT_TABLE, row, ChangeKind.UPDATE)
    return collaboration_converters.to_agreement_public(agreement)
