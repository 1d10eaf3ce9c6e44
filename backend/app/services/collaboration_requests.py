from logging import getLogger
from uuid import UUID

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel import Session

from app.converters import collaboration as collaboration_converters
from app.core.enums import ChangeKind, Currency, Decision, RequestStatus
from app.crud import collaboration as collaboration_crud
from app.crud import profile as profile_crud
from app.exceptions.base import AppError, TransportError
from app.exceptions.collaboration_exceptions import (
    CollaborationRequestNotFoundError,
    NotRequestReceiverError,
    NotRequestSenderError,
    RequestAlreadyResolvedError,
    SelfCollaborationError,
    UnknownProfileError,
)
from app.models.collaboration import AGREEMENT_TABLE, REQUEST_TABLE, CollaborationRequest
from app.models.message import Message
from app.realtime.feed import ChangeFeed, change_feed
from app.schemas.collaboration import (
    DEFAULT_CURRENCY,
    DEFAULT_PAYMENT_AMOUNT,
    CollaborationRequestPublic,
)
from app.services import collaboration_agreements as agreement_services

logger = getLogger(__name__)


def feed_row(request: CollaborationRequest) -> dict:
    return {
        "id": request.id,
        "sender_id": request.sender_id,
        "receiver_id": request.receiver_id,
    }


def _normalize_message(message: str | None) -> str | None:
    if message is None:
        return None
    message = message.strip()
    return message or None


def create_request(
    *,
    session: Session,
    sender_id: UUID,
    receiver_id: UUID,
    message: str | None = None,
    payment_amount: int = DEFAULT_PAYMENT_AMOUNT,
    currency: Currency | str = DEFAULT_CURRENCY,
    feed: ChangeFeed = change_feed,
) -> CollaborationRequestPublic:
    """
    Send a collaboration request together with its proposed payment terms.

    The request and its agreement are written in one transaction; if either
    is invalid nothing is stored.
    Raises:
        SelfCollaborationError: If sender and receiver are the same profile.
        InvalidPaymentAmountError, UnsupportedCurrencyError: If the terms are invalid.
        UnknownProfileError: If the sender or receiver does not exist.
        TransportError: If the data store fails.
        AppError: For any other (unexpected) errors.
    """
    if sender_id == receiver_id:
        raise SelfCollaborationError(sender_id)
    terms_currency = agreement_services.validate_terms(payment_amount, currency)
    for profile_id in (sender_id, receiver_id):
        if profile_crud.get_profile_by_id(session=session, profile_id=profile_id) is None:
            raise UnknownProfileError(profile_id)

    try:
        request = collaboration_crud.create_request(
            session=session,
            sender_id=sender_id,
            receiver_id=receiver_id,
            message=_normalize_message(message),
        )
        agreement = collaboration_crud.create_agreement(
            session=session,
            request_id=request.id,
            payment_amount=payment_amount,
            currency=terms_currency,
        )
        request_row = feed_row(request)
        agreement_row = agreement_services.feed_row(
            agreement, sender_id=sender_id, receiver_id=receiver_id
        )
        session.commit()
    except IntegrityError as e:
        session.rollback()
        # A profile was removed between the existence check and the insert.
        for profile_id in (sender_id, receiver_id):
            if profile_crud.get_profile_by_id(session=session, profile_id=profile_id) is None:
                raise UnknownProfileError(profile_id) from e
        raise AppError from e
    except DBAPIError as e:
        session.rollback()
        raise TransportError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("Collaboration request %s sent from %s to %s", request.id, sender_id, receiver_id)
    feed.publish(REQUEST_TABLE, request_row, ChangeKind.INSERT)
    feed.publish(AGREEMENT_TABLE, agreement_row, ChangeKind.INSERT)
    return collaboration_converters.to_public(request)


def list_requests(
    *,
    session: Session,
    viewer_id: UUID,
) -> list[CollaborationRequestPublic]:
    """
    All requests the viewer sent or received, most recent first.

    A snapshot; call again to see later changes.
    """
    return [
        collaboration_converters.to_public(request)
        for request in collaboration_crud.get_requests_for_viewer(
            session=session,
            viewer_id=viewer_id,
        )
    ]


def respond_to_request(
    *,
    session: Session,
    request_id: UUID,
    actor_id: UUID,
    decision: Decision | str,
    feed: ChangeFeed = change_feed,
) -> CollaborationRequestPublic:
    """
    Accept or decline a request as its receiver. Either answer is final.
    Raises:
        CollaborationRequestNotFoundError: If the request does not exist.
        NotRequestReceiverError: If actor_id is not the receiver.
        RequestAlreadyResolvedError: If the request is no longer pending.
        TransportError: If the data store fails.
        AppError: For any other (unexpected) errors.
    """
    decision = agreement_services.to_decision(decision)

    request = collaboration_crud.get_request_by_id(session=session, request_id=request_id)
    if request is None:
        raise CollaborationRequestNotFoundError(request_id)
    if actor_id != request.receiver_id:
        logger.warning("User %s tried to %s request %s", actor_id, decision.value, request_id)
        raise NotRequestReceiverError(actor_id, request_id)
    if request.status != RequestStatus.PENDING:
        raise RequestAlreadyResolvedError(request_id, request.status)

    new_status = RequestStatus.ACCEPTED if decision == Decision.ACCEPT else RequestStatus.DECLINED
    try:
        collaboration_crud.update_request_status(
            session=session, request=request, status=new_status
        )
        row = feed_row(request)
        session.commit()
    except DBAPIError as e:
        session.rollback()
        raise TransportError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("Collaboration request %s %s by %s", request_id, new_status.value, actor_id)
    feed.publish(REQUEST_TABLE, row, ChangeKind.UPDATE)
    return collaboration_converters.to_public(request)


def cancel_request(
    *,
    session: Session,
    request_id: UUID,
    actor_id: UUID,
    feed: ChangeFeed = change_feed,
) -> Message:
    """
    Withdraw a pending request as its sender. Its agreement is removed with it.
    Raises:
        CollaborationRequestNotFoundError: If the request does not exist.
        NotRequestSenderError: If actor_id is not the sender.
        RequestAlreadyResolvedError: If the receiver already answered.
        TransportError: If the data store fails.
        AppError: For any other (unexpected) errors.
    """
    request = collaboration_crud.get_request_by_id(session=session, request_id=request_id)
    if request is None:
        raise CollaborationRequestNotFoundError(request_id)
    if actor_id != request.sender_id:
        logger.warning("User %s tried to cancel request %s", actor_id, request_id)
        raise NotRequestSenderError(actor_id, request_id)
    if request.status != RequestStatus.PENDING:
        raise RequestAlreadyResolvedError(request_id, request.status)

    request_row = feed_row(request)
    agreement_row = (
        agreement_services.feed_row(
            request.agreement,
            sender_id=request.sender_id,
            receiver_id=request.receiver_id,
        )
        if request.agreement
        else None
    )
    try:
        collaboration_crud.delete_request(session=session, request=request)
        session.commit()
    except DBAPIError as e:
        session.rollback()
        raise TransportError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("Collaboration request %s cancelled by %s", request_id, actor_id)
    feed.publish(REQUEST_TABLE, request_row, ChangeKind.DELETE)
    if agreement_row is not None:
        feed.publish(AGREEMENT_TABLE, agreement_row, ChangeKind.DELETE)
    return Message(message="Collaboration request cancelled successfully.")
