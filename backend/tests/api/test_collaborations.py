import base64
import json
from uuid import uuid4

from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.enums import RequestStatus

REQUESTS_URL = f"{settings.API_V1_STR}/collaborations/requests"


def _headers(profile) -> dict[str, str]:
    return {"X-User-Id": str(profile.id)}


def test_send_request(*, client: TestClient, profile_factory):
    sender = profile_factory()
    receiver = profile_factory()

    response = client.post(
        REQUESTS_URL,
        headers=_headers(sender),
        json={
            "receiver_id": str(receiver.id),
            "message": "Let's work together",
            "payment_amount": 200,
            "currency": "USD",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["sender_id"] == str(sender.id)
    assert data["receiver_id"] == str(receiver.id)
    assert data["message"] == "Let's work together"


def test_send_request_requires_identity(*, client: TestClient, profile_factory):
    receiver = profile_factory()

    response = client.post(REQUESTS_URL, json={"receiver_id": str(receiver.id)})

    assert response.status_code == 401


def test_send_request_unknown_identity(*, client: TestClient, profile_factory):
    receiver = profile_factory()

    response = client.post(
        REQUESTS_URL,
        headers={"X-User-Id": str(uuid4())},
        json={"receiver_id": str(receiver.id)},
    )

    assert response.status_code == 401


def test_send_request_to_self(*, client: TestClient, profile_factory):
    profile = profile_factory()

    response = client.post(
        REQUESTS_URL,
        headers=_headers(profile),
        json={"receiver_id": str(profile.id)},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_send_request_invalid_amount(*, client: TestClient, profile_factory):
    sender = profile_factory()
    receiver = profile_factory()

    response = client.post(
        REQUESTS_URL,
        headers=_headers(sender),
        json={"receiver_id": str(receiver.id), "payment_amount": 10050},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"

    inbox = client.get(REQUESTS_URL, headers=_headers(sender), params={"direction": "sent"})
    assert inbox.json()["items"] == []


def test_inbox_and_detail(
    *,
    client: TestClient,
    profile_factory,
    collaboration_request_factory,
    collaboration_agreement_factory,
):
    sender = profile_factory()
    receiver = profile_factory()
    request = collaboration_request_factory(sender_id=sender.id, receiver_id=receiver.id)
    collaboration_agreement_factory(request_id=request.id)

    response = client.get(REQUESTS_URL, headers=_headers(receiver))

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["id"] == str(request.id)
    assert items[0]["counterpart"]["username"] == sender.username
    assert items[0]["agreement"]["currency"] == "USD"

    detail = client.get(f"{REQUESTS_URL}/{request.id}", headers=_headers(sender))
    assert detail.status_code == 200
    assert detail.json()["counterpart"]["id"] == str(receiver.id)


def test_inbox_pagination(*, client: TestClient, profile_factory, collaboration_request_factory):
    viewer = profile_factory()
    for sender in profile_factory.create_batch(3):
        collaboration_request_factory(sender_id=sender.id, receiver_id=viewer.id)

    first = client.get(REQUESTS_URL, headers=_headers(viewer), params={"limit": 2}).json()
    second = client.get(
        REQUESTS_URL,
        headers=_headers(viewer),
        params={"limit": 2, "cursor": first["next_cursor"]},
    ).json()

    assert len(first["items"]) == 2
    assert len(second["items"]) == 1
    assert second["next_cursor"] is None


def test_inbox_invalid_cursor(*, client: TestClient, profile_factory):
    viewer = profile_factory()

    response = client.get(
        REQUESTS_URL, headers=_headers(viewer), params={"limit": 2, "cursor": "bm90IGpzb24="}
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_inbox_cursor_with_wrong_shape(*, client: TestClient, profile_factory):
    viewer = profile_factory()
    cursor = base64.urlsafe_b64encode(
        json.dumps(["2024-01-01T00:00:00", 5]).encode()
    ).decode()

    response = client.get(
        REQUESTS_URL, headers=_headers(viewer), params={"limit": 2, "cursor": cursor}
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_detail_by_outsider(*, client: TestClient, profile_factory, collaboration_request_factory):
    sender = profile_factory()
    receiver = profile_factory()
    outsider = profile_factory()
    request = collaboration_request_factory(sender_id=sender.id, receiver_id=receiver.id)

    response = client.get(f"{REQUESTS_URL}/{request.id}", headers=_headers(outsider))

    assert response.status_code == 403
    assert response.json()["code"] == "authorization_error"


def test_accept_then_accept_again(
    *, client: TestClient, profile_factory, collaboration_request_factory
):
    sender = profile_factory()
    receiver = profile_factory()
    request = collaboration_request_factory(sender_id=sender.id, receiver_id=receiver.id)

    first = client.post(f"{REQUESTS_URL}/{request.id}/accept", headers=_headers(receiver))
    second = client.post(f"{REQUESTS_URL}/{request.id}/decline", headers=_headers(receiver))

    assert first.status_code == 200
    assert first.json()["status"] == RequestStatus.ACCEPTED.value
    assert second.status_code == 409
    assert second.json()["code"] == "invalid_state"


def test_accept_by_sender(*, client: TestClient, profile_factory, collaboration_request_factory):
    sender = profile_factory()
    receiver = profile_factory()
    request = collaboration_request_factory(sender_id=sender.id, receiver_id=receiver.id)

    response = client.post(f"{REQUESTS_URL}/{request.id}/accept", headers=_headers(sender))

    assert response.status_code == 403


def test_accept_missing_request(*, client: TestClient, profile_factory):
    receiver = profile_factory()

    response = client.post(f"{REQUESTS_URL}/{uuid4()}/accept", headers=_headers(receiver))

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_cancel_request(*, client: TestClient, profile_factory, collaboration_request_factory):
    sender = profile_factory()
    receiver = profile_factory()
    request = collaboration_request_factory(sender_id=sender.id, receiver_id=receiver.id)

    response = client.delete(f"{REQUESTS_URL}/{request.id}", headers=_headers(sender))

    assert response.status_code == 200
    assert response.json()["message"] == "Collaboration request cancelled successfully."
    inbox = client.get(REQUESTS_URL, headers=_headers(receiver)).json()
    assert inbox["items"] == []


def test_agreement_flow(*, client: TestClient, profile_factory):
    sender = profile_factory()
    receiver = profile_factory()
    request_id = client.post(
        REQUESTS_URL,
        headers=_headers(sender),
        json={"receiver_id": str(receiver.id), "payment_amount": 200, "currency": "EUR"},
    ).json()["id"]

    too_early = client.post(
        f"{REQUESTS_URL}/{request_id}/agreement/accept", headers=_headers(receiver)
    )
    assert too_early.status_code == 409

    duplicate = client.post(
        f"{REQUESTS_URL}/{request_id}/agreement",
        headers=_headers(sender),
        json={"payment_amount": 100},
    )
    assert duplicate.status_code == 409

    client.post(f"{REQUESTS_URL}/{request_id}/accept", headers=_headers(receiver))
    response = client.post(
        f"{REQUESTS_URL}/{request_id}/agreement/accept", headers=_headers(receiver)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "accepted"
    assert data["payment_amount"] == 200
    assert data["currency"] == "EUR"
