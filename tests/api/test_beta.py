# mypy: ignore-errors
# tests/api/test_beta.py
"""Tests for beta applications, review and the waitlist."""

from fastapi import status

from contentlynk.core.security import verify_password
from contentlynk.models import BetaApplication, User


def _apply(client, name: str = "Jane Creator", email: str = "jane@example.com") -> int:
    response = client.post(
        "/api/beta/applications",
        json={"name": name, "email": email, "reason": "I write", "content_niche": "tech"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["application_id"]


def _review(client, headers, application_id: int, action: str):
    return client.post(
        f"/api/admin/beta-applications/{application_id}/review",
        json={"action": action, "review_notes": "thanks"},
        headers=headers,
    )


def test_apply_sends_confirmation(client, email_outbox, db_session) -> None:
    application_id = _apply(client, email="  Jane@Example.com ")

    application = db_session.get(BetaApplication, application_id)
    assert application.email == "jane@example.com"
    assert application.status == "PENDING"
    assert [m.to for m in email_outbox.sent] == ["jane@example.com"]


def test_duplicate_pending_application(client) -> None:
    _apply(client)
    response = client.post("/api/beta/applications", json={"name": "Jane", "email": "jane@example.com"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "An application with this email is already pending review"}


def test_admin_lists_applications(client, admin_token) -> None:
    first = _apply(client, email="a@example.com")
    second = _apply(client, email="b@example.com")

    response = client.get("/api/admin/beta-applications", headers=admin_token)
    assert response.status_code == status.HTTP_200_OK
    assert [a["id"] for a in response.json()["applications"]] == [second, first]

    pending = client.get("/api/admin/beta-applications", params={"status": "pending"}, headers=admin_token)
    assert len(pending.json()["applications"]) == 2

    single = client.get(f"/api/admin/beta-applications/{first}", headers=admin_token)
    assert single.json()["email"] == "a@example.com"


def test_approve_creates_account(client, admin_token, admin_user, email_outbox, db_session) -> None:
    """Approval creates a user with a temporary password and a tester number."""
    application_id = _apply(client)
    email_outbox.sent.clear()

    response = _review(client, admin_token, application_id, "approve")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["user_created"] is True
    assert data["username"] == "janecreator"
    assert data["beta_tester_number"] == 1

    user = db_session.get(User, data["user_id"])
    assert user.email == "jane@example.com"
    assert user.email_verified is False
    assert user.welcome_email_sent is True
    assert user.password_hash

    application = db_session.get(BetaApplication, application_id)
    assert application.status == "APPROVED"
    assert application.created_user_id == user.id
    assert application.reviewed_by_id == admin_user.id

    (approval,) = email_outbox.sent
    assert "/auth/signin" in approval.html


def test_approval_email_password_matches_hash(client, admin_token, email_outbox, db_session, mocker) -> None:
    mocker.patch("contentlynk.services.beta.generate_temp_password", return_value="0123456789abcdef")
    application_id = _apply(client)

    data = _review(client, admin_token, application_id, "approve").json()["data"]
    user = db_session.get(User, data["user_id"])
    assert verify_password("0123456789abcdef", user.password_hash)
    assert "0123456789abcdef" in email_outbox.sent[-1].html


def test_approve_existing_user_reuses_account(client, admin_token, user_factory, email_outbox) -> None:
    existing = user_factory(email="jane@example.com", username="jane")
    application_id = _apply(client)

    data = _review(client, admin_token, application_id, "approve").json()["data"]
    assert data["user_created"] is False
    assert data["user_id"] == existing.id
    assert data["beta_tester_number"] == 1


def test_username_collisions_get_suffix(client, admin_token, user_factory) -> None:
    user_factory(username="janecreator")
    application_id = _apply(client)

    data = _review(client, admin_token, application_id, "approve").json()["data"]
    assert data["username"] == "janecreator1"


def test_reviewing_twice_is_rejected(client, admin_token) -> None:
    application_id = _apply(client)
    _review(client, admin_token, application_id, "reject")

    again = _review(client, admin_token, application_id, "approve")
    assert again.status_code == status.HTTP_400_BAD_REQUEST
    assert again.json() == {"error": "This application has already been rejected"}


def test_invalid_review_action(client, admin_token) -> None:
    application_id = _apply(client)
    response = _review(client, admin_token, application_id, "maybe")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": 'Invalid action. Must be "approve" or "reject"'}


def test_reject_then_join_waitlist(client, admin_token, email_outbox, db_session) -> None:
    """The rejection e-mail links to a waitlist page that can be opened repeatedly."""
    application_id = _apply(client)
    response = _review(client, admin_token, application_id, "reject")
    assert response.json()["data"] == {"application_id": application_id, "status": "REJECTED"}

    token = db_session.get(BetaApplication, application_id).waitlist_token
    assert token
    assert f"/api/beta/waitlist?token={token}" in email_outbox.sent[-1].html

    joined = client.get("/api/beta/waitlist", params={"token": token})
    assert joined.status_code == status.HTTP_200_OK
    assert joined.headers["content-type"].startswith("text/html")
    assert "You&#x27;re on the Waitlist" in joined.text
    assert "Jane Creator" in joined.text

    application = db_session.get(BetaApplication, application_id)
    db_session.refresh(application)
    assert application.status == "WAITLIST"
    assert application.waitlisted_at is not None

    sent_before = len(email_outbox.sent)
    repeat = client.get("/api/beta/waitlist", params={"token": token})
    assert "Already on the Waitlist" in repeat.text
    assert len(email_outbox.sent) == sent_before


def test_waitlist_bad_tokens(client) -> None:
    missing = client.get("/api/beta/waitlist")
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert missing.json() == {"error": "Missing waitlist token"}

    unknown = client.get("/api/beta/waitlist", params={"token": "nope"})
    assert unknown.status_code == status.HTTP_404_NOT_FOUND
    assert unknown.json() == {"error": "Invalid or expired waitlist link"}


def test_review_requires_admin(client, auth_token) -> None:
    application_id = _apply(client)
    response = _review(client, auth_token, application_id, "approve")
    assert response.status_code == status.HTTP_403_FORBIDDEN
