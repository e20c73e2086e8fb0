# mypy: ignore-errors
# tests/api/test_messages.py
"""Tests for direct message requests."""

from fastapi import status


def _send(client, headers, to_user_id: int, content: str = "Hi there") -> dict:
    response = client.post("/api/messages", json={"to_user_id": to_user_id, "content": content}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_new_message_is_pending(client, auth_token, other_user) -> None:
    message = _send(client, auth_token, other_user.id)
    assert message["status"] == "PENDING"
    assert message["thread_id"] is None


def test_pending_message_stays_out_of_inbox(client, auth_token, other_auth_token, other_user) -> None:
    """Until accepted, a message shows up as pending, not in the inbox."""
    message = _send(client, auth_token, other_user.id)

    inbox = client.get("/api/messages", params={"type": "inbox"}, headers=other_auth_token).json()
    pending = client.get("/api/messages", params={"type": "pending"}, headers=other_auth_token).json()
    sent = client.get("/api/messages", params={"type": "sent"}, headers=auth_token).json()

    assert inbox["messages"] == []
    assert [m["id"] for m in pending["messages"]] == [message["id"]]
    assert [m["id"] for m in sent["messages"]] == [message["id"]]


def test_accept_assigns_thread(client, auth_token, other_auth_token, test_user, other_user) -> None:
    message = _send(client, auth_token, other_user.id)

    response = client.post(
        f"/api/messages/{message['id']}/respond",
        json={"action": "accept"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    low, high = sorted((test_user.id, other_user.id))
    assert data["status"] == "ACCEPTED"
    assert data["thread_id"] == f"thread_{low}_{high}"
    assert data["responded_at"] is not None

    inbox = client.get("/api/messages", params={"type": "inbox"}, headers=other_auth_token).json()
    assert [m["id"] for m in inbox["messages"]] == [message["id"]]


def test_second_response_is_rejected(client, auth_token, other_auth_token, other_user) -> None:
    message = _send(client, auth_token, other_user.id)
    client.post(f"/api/messages/{message['id']}/respond", json={"action": "decline"}, headers=other_auth_token)

    again = client.post(
        f"/api/messages/{message['id']}/respond",
        json={"action": "accept"},
        headers=other_auth_token,
    )
    assert again.status_code == status.HTTP_400_BAD_REQUEST
    assert again.json() == {"error": "Message has already been responded to"}


def test_only_recipient_can_respond(client, auth_token, other_user) -> None:
    message = _send(client, auth_token, other_user.id)
    response = client.post(
        f"/api/messages/{message['id']}/respond",
        json={"action": "accept"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_cannot_message_self_or_missing_user(client, auth_token, test_user) -> None:
    own = client.post("/api/messages", json={"to_user_id": test_user.id, "content": "me"}, headers=auth_token)
    assert own.status_code == status.HTTP_400_BAD_REQUEST

    missing = client.post("/api/messages", json={"to_user_id": 987654, "content": "hello"}, headers=auth_token)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json() == {"error": "Recipient not found"}


def test_mark_read_after_accept(client, auth_token, other_auth_token, other_user) -> None:
    message = _send(client, auth_token, other_user.id)

    early = client.put(f"/api/messages/{message['id']}/read", headers=other_auth_token)
    assert early.status_code == status.HTTP_400_BAD_REQUEST

    client.post(f"/api/messages/{message['id']}/respond", json={"action": "accept"}, headers=other_auth_token)
    response = client.put(f"/api/messages/{message['id']}/read", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "READ"


def test_invalid_box_is_400(client, auth_token) -> None:
    response = client.get("/api/messages", params={"type": "spam"}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
