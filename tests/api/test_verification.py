# mypy: ignore-errors
# tests/api/test_verification.py
"""Tests for e-mail verification and the welcome e-mail."""

from datetime import timedelta

from fastapi import status

from contentlynk.db.time import utcnow
from contentlynk.models import EmailVerificationToken, User
from contentlynk.services.verification import issue_verification_token


def test_verify_marks_user_and_sends_welcome(client, user_factory, db_session, email_outbox) -> None:
    user = user_factory(email_verified=False)
    token = issue_verification_token(db_session, user).token
    db_session.commit()

    response = client.get("/api/verify-email", params={"token": token})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "success": True,
        "message": "Email verified successfully",
        "welcome_email_sent": True,
    }

    db_session.refresh(user)
    assert user.email_verified is True
    assert user.welcome_email_sent is True
    assert [m.to for m in email_outbox.sent] == [user.email]
    assert db_session.query(EmailVerificationToken).count() == 0


def test_token_is_single_use(client, user_factory, db_session) -> None:
    user = user_factory(email_verified=False)
    token = issue_verification_token(db_session, user).token
    db_session.commit()

    client.get("/api/verify-email", params={"token": token})
    again = client.get("/api/verify-email", params={"token": token})
    assert again.status_code == status.HTTP_400_BAD_REQUEST
    assert again.json() == {"error": "Invalid verification token"}


def test_expired_token_is_rejected(client, user_factory, db_session) -> None:
    user = user_factory(email_verified=False)
    record = issue_verification_token(db_session, user)
    record.expires_at = utcnow() - timedelta(minutes=1)
    db_session.commit()

    response = client.get("/api/verify-email", params={"token": record.token})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Verification token has expired"}
    assert db_session.get(User, user.id).email_verified is False


def test_missing_token(client) -> None:
    response = client.get("/api/verify-email")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Verification token is required"}


def test_welcome_not_sent_twice(client, user_factory, db_session, email_outbox) -> None:
    user = user_factory(email_verified=False, welcome_email_sent=True)
    token = issue_verification_token(db_session, user).token
    db_session.commit()

    response = client.get("/api/verify-email", params={"token": token})
    assert response.json()["welcome_email_sent"] is False
    assert email_outbox.sent == []


def test_resend_replaces_previous_token(client, user_factory, token_for, db_session, email_outbox) -> None:
    user = user_factory(email_verified=False)
    old = issue_verification_token(db_session, user).token
    db_session.commit()

    response = client.post("/api/resend-verification", headers=token_for(user))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Verification email sent"}

    tokens = db_session.query(EmailVerificationToken).filter(EmailVerificationToken.user_id == user.id).all()
    assert len(tokens) == 1
    assert tokens[0].token != old
    assert f"/verify-email?token={tokens[0].token}" in email_outbox.sent[0].html


def test_resend_for_verified_user(client, auth_token) -> None:
    response = client.post("/api/resend-verification", headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Email is already verified"}


def test_resend_reports_delivery_failure(client, user_factory, token_for, email_outbox) -> None:
    user = user_factory(email_verified=False)
    email_outbox.fail = True

    response = client.post("/api/resend-verification", headers=token_for(user))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Email service not configured"}
