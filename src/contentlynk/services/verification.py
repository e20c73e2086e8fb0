"""E-mail verification tokens and the welcome e-mail that follows them."""
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from contentlynk.core.errors import InvalidRequestError
from contentlynk.core.security import generate_token
from contentlynk.core.settings import settings
from contentlynk.db.time import as_utc, utcnow
from contentlynk.models import EmailVerificationToken, User
from contentlynk.services.email import EmailResult, EmailService
from contentlynk.services.email_templates import verification_email, welcome_email

logger = logging.getLogger(__name__)

__all__ = [
    "issue_verification_token",
    "send_verification_email",
    "resend_verification",
    "verify_email_token",
    "send_welcome_email",
]


def issue_verification_token(db: Session, user: User) -> EmailVerificationToken:
    """Replace any outstanding tokens of ``user`` with a fresh one."""
    db.execute(
        delete(EmailVerificationToken)
        .where(EmailVerificationToken.user_id == user.id)
        .execution_options(synchronize_session=False)
    )
    token = EmailVerificationToken(
        user_id=user.id,
        token=generate_token(),
        expires_at=utcnow() + timedelta(hours=settings.email_verification_ttl_hours),
    )
    db.add(token)
    db.flush()
    return token


async def send_verification_email(
    db: Session,
    user: User,
    email_service: EmailService,
) -> EmailResult:
    if not user.email:
        raise InvalidRequestError("No email address on file")
    token = issue_verification_token(db, user)
    url = f"{settings.app_url}/verify-email?token={token.token}"
    return await email_service.send(
        verification_email(user.email, user.username, url, settings.email_verification_ttl_hours)
    )


async def resend_verification(db: Session, user: User, email_service: EmailService) -> None:
    """Send a new verification link; raises when it cannot be delivered."""
    if user.email_verified:
        raise InvalidRequestError("Email is already verified")
    result = await send_verification_email(db, user, email_service)
    if not result.success:
        raise InvalidRequestError(result.error or "Failed to send verification email")


def verify_email_token(db: Session, token: str) -> User:
    """Consume ``token`` and mark its owner verified."""
    record = db.query(EmailVerificationToken).filter(EmailVerificationToken.token == token).first()
    if record is None:
        raise InvalidRequestError("Invalid verification token")

    if as_utc(record.expires_at) < utcnow():
        db.delete(record)
        db.flush()
        raise InvalidRequestError("Verification token has expired")

    user = db.get(User, record.user_id)
    if user is None:
        raise InvalidRequestError("Invalid verification token")

    user.email_verified = True
    db.delete(record)
    db.flush()
    logger.info("Verified email for user %s", user.id)
    return user


async def send_welcome_email(db: Session, user: User, email_service: EmailService) -> bool:
    """Send the welcome e-mail once per account; returns whether it went out."""
    if not user.email or user.welcome_email_sent:
        return False
    result = await email_service.send(
        welcome_email(
            user.email,
            user.username,
            user.display_name,
            f"{settings.app_url}/dashboard",
        )
    )
    if not result.success:
        logger.warning("Welcome e-mail to user %s not sent: %s", user.id, result.error)
        return False
    user.welcome_email_sent = True
    user.welcome_email_sent_at = utcnow()
    db.flush()
    return True
