import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from app.api.deps import CurrentProfile, SessionDep
from app.core.enums import Decision, InboxDirection
from app.models.message import Message
from app.schemas.collaboration import (
    AgreementCreate,
    AgreementPublic,
    CollaborationRequestCreate,
    CollaborationRequestPublic,
    EnrichedRequest,
    InboxPage,
)
from app.services import collaboration_agreements as agreements_service
from app.services import collaboration_inbox as inbox_service
from app.services import collaboration_requests as requests_service

router = APIRouter(prefix="/collaborations", tags=["collaborations"])


@router.post("/requests", status_code=status.HTTP_201_CREATED)
def send_collaboration_request(
    *,
    session: SessionDep,
    current_profile: CurrentProfile,
    request_in: CollaborationRequestCreate,
) -> CollaborationRequestPublic:
    return requests_service.create_request(
        session=session,
        sender_id=current_profile.id,
        receiver_id=request_in.receiver_id,
        message=request_in.message,
        payment_amount=request_in.payment_amount,
        currency=request_in.currency,
    )


@router.get("/requests")
def read_collaboration_requests(
    *,
    session: SessionDep,
    current_profile: CurrentProfile,
    direction: InboxDirection = InboxDirection.RECEIVED,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
    cursor: str | None = None,
) -> InboxPage:
    return inbox_service.project_inbox(
        session=session,
        viewer_id=current_profile.id,
        direction=direction,
        limit=limit,
        cursor=cursor,
    )


@router.get("/requests/{request_id}")
def read_collaboration_request(
    *, session: SessionDep, current_profile: CurrentProfile, request_id: uuid.UUID
) -> EnrichedRequest:
    return inbox_service.get_enriched_request(
        session=session,
        request_id=request_id,
        viewer_id=current_profile.id,
    )


@router.post("/requests/{request_id}/accept")
def accept_collaboration_request(
    *, session: SessionDep, current_profile: CurrentProfile, request_id: uuid.UUID
) -> CollaborationRequestPublic:
    return requests_service.respond_to_request(
        session=session,
        request_id=request_id,
        actor_id=current_profile.id,
        decision=Decision.ACCEPT,
    )


@router.post("/requests/{request_id}/decline")
def decline_collaboration_request(
    *, session: SessionDep, current_profile: CurrentProfile, request_id: uuid.UUID
) -> CollaborationRequestPublic:
    return requests_service.respond_to_request(
        session=session,
        request_id=request_id,
        actor_id=current_profile.id,
        decision=Decision.DECLINE,
    )


@router.delete("/requests/{request_id}")
def cancel_collaboration_request(
    *, session: SessionDep, current_profile: CurrentProfile, request_id: uuid.UUID
) -> Message:
    return requests_service.cancel_request(
        session=session,
        request_id=request_id,
        actor_id=current_profile.id,
    )


@router.post("/requests/{request_id}/agreement", status_code=status.HTTP_201_CREATED)
def propose_agreement(
    *,
    session: SessionDep,
    current_profile: CurrentProfile,
    request_id: uuid.UUID,
    agreement_in: AgreementCreate,
) -> AgreementPublic:
    return agreements_service.create_agreement(
        session=session,
        request_id=request_id,
        actor_id=current_profile.id,
        payment_amount=agreement_in.payment_amount,
        currency=agreement_in.currency,
    )


@router.post("/requests/{request_id}/agreement/accept")
def accept_agreement(
    *, session: SessionDep, current_profile: CurrentProfile, request_id: uuid.UUID
) -> AgreementPublic:
    return agreements_service.respond_to_agreement(
        session=session,
        request_id=request_id,
        actor_id=current_profile.id,
        decision=Decision.ACCEPT,
    )


@router.post("/requests/{request_id}/agreement/decline")
def decline_agreement(
    *, session: SessionDep, current_profile: CurrentProfile, request_id: uuid.UUID
) -> AgreementPublic:
    return agreements_service.respond_to_agreement(
        session=session,
        request_id=request_id,
        actor_id=current_profile.id,
        decision=Decision.DECLINE,
    )
