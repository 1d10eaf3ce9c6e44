from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_
from sqlmodel import Session, col, select

from app.core.db import retry_read
from app.core.enums import AgreementStatus, Currency, InboxDirection, RequestStatus
from app.models.collaboration import CollaborationAgreement, CollaborationRequest
from app.utils import now_utc_naive


def create_request(
    *,
    session: Session,
    sender_id: UUID,
    receiver_id: UUID,
    message: str | None,
) -> CollaborationRequest:
    """
    Insert a pending collaboration request. The caller commits.

    Parameters:
        session (Session): The database session.
        sender_id (UUID): The ID of the profile sending the request.
        receiver_id (UUID): The ID of the profile receiving the request.
        message (str | None): Optional free text from the sender.
    Returns:
        CollaborationRequest: The created request.
    Raises:
        IntegrityError: If either profile does not exist.
    """
    request = CollaborationRequest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        message=message,
        status=RequestStatus.PENDING,
    )
    session.add(request)
    session.flush()
    return request


def create_agreement(
    *,
    session: Session,
    request_id: UUID,
    payment_amount: int,
    currency: Currency,
) -> CollaborationAgreement:
    """
    Insert pending payment terms for a request. The caller commits.

    Raises:
        IntegrityError: If the request does not exist or already has an agreement.
    """
    agreement = CollaborationAgreement(
        request_id=request_id,
        payment_amount=payment_amount,
        currency=currency,
        status=AgreementStatus.PENDING,
    )
    session.add(agreement)
    session.flush()
    return agreement


@retry_read
def get_request_by_id(
    *,
    session: Session,
    request_id: UUID,
) -> CollaborationRequest | None:
    return session.get(CollaborationRequest, request_id)


@retry_read
def get_agreement_for_request(
    *,
    session: Session,
    request_id: UUID,
) -> CollaborationAgreement | None:
    return session.exec(
        select(CollaborationAgreement).where(
            CollaborationAgreement.request_id == request_id
        )
    ).one_or_none()


@retry_read
def get_requests_for_viewer(
    *,
    session: Session,
    viewer_id: UUID,
    direction: InboxDirection | None = None,
    limit: int | None = None,
    before: tuple[datetime, UUID] | None = None,
) -> list[CollaborationRequest]:
    """
    Get the requests a viewer takes part in, most recent first.

    Parameters:
        session (Session): The database session.
        viewer_id (UUID): The profile whose requests are listed.
        direction (InboxDirection | None): Restrict to requests received by or
            sent by the viewer. Both when None.
        limit (int | None): Maximum number of rows, all when None.
        before (tuple[datetime, UUID] | None): Keyset position; only rows
            strictly after it in (created_at desc, id desc) order are returned.
    Returns:
        list[CollaborationRequest]: The matching requests with profiles and
            agreement loaded.
    """
    if direction == InboxDirection.RECEIVED:
        involvement = CollaborationRequest.receiver_id == viewer_id
    elif direction == InboxDirection.SENT:
        involvement = CollaborationRequest.sender_id == viewer_id
    else:
        involvement = or_(
            CollaborationRequest.sender_id == viewer_id,
            CollaborationRequest.receiver_id == viewer_id,
        )

    stmt = select(CollaborationRequest).where(involvement)

    if before is not None:
        created_at, request_id = before
        stmt = stmt.where(
            or_(
                col(CollaborationRequest.created_at) < created_at,
                and_(
                    col(CollaborationRequest.created_at) == created_at,
                    col(CollaborationRequest.id) < request_id,
                ),
            )
        )

    stmt = stmt.order_by(
        col(CollaborationRequest.created_at).desc(),
        col(CollaborationRequest.id).desc(),
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    return list(session.exec(stmt).unique().all())


def update_request_status(
    *,
    session: Session,
    request: CollaborationRequest,
    status: RequestStatus,
) -> CollaborationRequest:
    request.status = status
    request.responded_at = now_utc_naive()
    session.add(request)
    session.flush()
    return request


def update_agreement_status(
    *,
    session: Session,
    agreement: CollaborationAgreement,
    status: AgreementStatus,
) -> CollaborationAgreement:
    agreement.status = status
    agreement.responded_at = now_utc_naive()
    session.add(agreement)
    session.flush()
    return agreement


def delete_request(
    *,
    session: Session,
    request: CollaborationRequest,
) -> CollaborationRequest:
    """
    Delete a request together with its agreement.

    Returns:
        CollaborationRequest: The deleted request.
    """
    agreement = get_agreement_for_request(session=session, request_id=request.id)
    if agreement is not None:
        session.delete(agreement)
    session.delete(request)
    session.flush()
    return request
