from uuid import UUID

from app.converters import profile as profile_converters
from app.models.collaboration import CollaborationAgreement, CollaborationRequest
from app.schemas.collaboration import (
    AgreementPublic,
    CollaborationRequestPublic,
    EnrichedRequest,
)


def to_public(request: CollaborationRequest) -> CollaborationRequestPublic:
    return CollaborationRequestPublic(
        id=request.id,
        sender_id=request.sender_id,
        receiver_id=request.receiver_id,
        message=request.message,
        status=request.status,
        created_at=request.created_at,
        responded_at=request.responded_at,
    )


def to_agreement_public(agreement: CollaborationAgreement) -> AgreementPublic:
    return AgreementPublic(
        id=agreement.id,
        request_id=agreement.request_id,
        payment_amount=agreement.payment_amount,
        currency=agreement.currency,
        status=agreement.status,
        created_at=agreement.created_at,
        responded_at=agreement.responded_at,
    )


def to_enriched(
    request: CollaborationRequest,
    *,
    viewer_id: UUID,
) -> EnrichedRequest:
    """
    Converts a CollaborationRequest into the form shown in a viewer's inbox.

    Parameters:
        request (CollaborationRequest): The request, with sender, receiver and
            agreement relationships available.
        viewer_id (UUID): The profile the inbox is projected for. The other
            party becomes the counterpart.
    Returns:
        EnrichedRequest: The request with both profile summaries and its
            agreement, if any.
    """
    sender = profile_converters.to_summary(request.sender)
    receiver = profile_converters.to_summary(request.receiver)
    counterpart = receiver if request.sender_id == viewer_id else sender
    agreement = (
        to_agreement_public(request.agreement) if request.agreement else None
    )

    return EnrichedRequest(
        **to_public(request).model_dump(),
        sender=sender,
        receiver=receiver,
        counterpart=counterpart,
        agreement=agreement,
    )
