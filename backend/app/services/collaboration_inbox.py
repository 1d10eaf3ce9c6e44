import base64
import binascii
import json
from collections.abc import Callable
from datetime import datetime
from logging import getLogger
from uuid import UUID

from sqlmodel import Session

from app.converters import collaboration as collaboration_converters
from app.core.enums import InboxDirection
from app.crud import collaboration as collaboration_crud
from app.exceptions.base import ValidationError
from app.exceptions.collaboration_exceptions import (
    CollaborationRequestNotFoundError,
    InvalidCursorError,
    InvalidPageSizeError,
    NotRequestParticipantError,
)
from app.models.collaboration import AGREEMENT_TABLE, REQUEST_TABLE, CollaborationRequest
from app.realtime.feed import ChangeEvent, ChangeFeed, Subscription, change_feed
from app.schemas.collaboration import EnrichedRequest, InboxPage

logger = getLogger(__name__)


def encode_cursor(request: CollaborationRequest) -> str:
    payload = json.dumps([request.created_at.isoformat(), request.id.hex])
    return base64.urlsafe_b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidCursorError(cursor) from e

    if (
        not isinstance(payload, list)
        or len(payload) != 2
        or not all(isinstance(part, str) for part in payload)
    ):
        raise InvalidCursorError(cursor)

    created_at, request_id = payload
    try:
        return datetime.fromisoformat(created_at), UUID(request_id)
    except ValueError as e:
        raise InvalidCursorError(cursor) from e


def project_inbox(
    *,
    session: Session,
    viewer_id: UUID,
    direction: InboxDirection | str,
    limit: int | None = None,
    cursor: str | None = None,
) -> InboxPage:
    """
    Build the "received" or "sent" list shown to a viewer.

    Parameters:
        session (Session): The database session.
        viewer_id (UUID): The profile the list is built for.
        direction (InboxDirection): RECEIVED keeps requests addressed to the
            viewer, SENT keeps requests the viewer sent.
        limit (int | None): Page size. Every matching request when None.
        cursor (str | None): The next_cursor of the previous page.
    Returns:
        InboxPage: Enriched requests, most recent first, and the cursor of the
            following page when there is one.
    Raises:
        InvalidCursorError: If the cursor cannot be decoded.
        InvalidPageSizeError: If limit is smaller than 1.
        TransportError: If the data store keeps failing.
    """
    try:
        direction = InboxDirection(direction)
    except ValueError as e:
        raise ValidationError(f"Direction {direction!r} is invalid. Use 'received' or 'sent'.") from e
    if limit is not None and limit < 1:
        raise InvalidPageSizeError(limit)
    before = decode_cursor(cursor) if cursor else None

    requests = collaboration_crud.get_requests_for_viewer(
        session=session,
        viewer_id=viewer_id,
        direction=direction,
        # One extra row tells whether another page exists.
        limit=limit + 1 if limit is not None else None,
        before=before,
    )

    next_cursor = None
    if limit is not None and len(requests) > limit:
        requests = requests[:limit]
        next_cursor = encode_cursor(requests[-1])

    return InboxPage(
        items=[
            collaboration_converters.to_enriched(request, viewer_id=viewer_id)
            for request in requests
        ],
        next_cursor=next_cursor,
    )


def get_enriched_request(
    *,
    session: Session,
    request_id: UUID,
    viewer_id: UUID,
) -> EnrichedRequest:
    """
    A single request as one of its participants sees it.
    Raises:
        CollaborationRequestNotFoundError: If the request does not exist.
        NotRequestParticipantError: If the viewer is neither sender nor receiver.
    """
    request = collaboration_crud.get_request_by_id(session=session, request_id=request_id)
    if request is None:
        raise CollaborationRequestNotFoundError(request_id)
    if viewer_id not in (request.sender_id, request.receiver_id):
        raise NotRequestParticipantError(viewer_id, request_id)
    return collaboration_converters.to_enriched(request, viewer_id=viewer_id)


def watch_inbox(
    *,
    viewer_id: UUID,
    on_change: Callable[[], None],
    feed: ChangeFeed = change_feed,
) -> Subscription:
    """
    Call on_change whenever a request or agreement involving the viewer changes.

    The callback gets no details; it is expected to call project_inbox again.
    Unsubscribe the returned Subscription when the view goes away.
    """

    def involves_viewer(row: dict) -> bool:
        return viewer_id in (row.get("sender_id"), row.get("receiver_id"))

    def refetch(event: ChangeEvent) -> None:
        logger.debug("Inbox of %s invalidated by %s %s", viewer_id, event.kind.value, event.table)
        on_change()

    return feed.subscribe_many(
        [(REQUEST_TABLE, involves_viewer), (AGREEMENT_TABLE, involves_viewer)],
        refetch,
    )
