"""Beta programme: applications, admin review and the waitlist."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import func
from sqlalchemy.orm import Session

from contentlynk.core.errors import InvalidRequestError, NotFoundError
from contentlynk.core.security import generate_temp_password, generate_token, hash_password
from contentlynk.core.settings import settings
from contentlynk.db.time import utcnow
from contentlynk.models import BetaApplication, User
from contentlynk.services.email import EmailService
from contentlynk.services.email_templates import (
    beta_approved_email,
    beta_confirmation_email,
    beta_rejected_email,
    waitlist_confirmation_email,
)
from contentlynk.services.subscriptions import normalize_email

logger = logging.getLogger(__name__)

MAX_USERNAME_BASE = 15
_USERNAME_STRIP = re.compile(r"[^a-z0-9_-]")


@dataclass(frozen=True)
class ApprovalResult:
    application: BetaApplication
    user: User
    user_created: bool


class WaitlistOutcome(Enum):
    JOINED = "joined"
    ALREADY_WAITLISTED = "already_waitlisted"
    ALREADY_APPROVED = "already_approved"
    UNDER_REVIEW = "under_review"


async def submit_application(
    db: Session,
    email_service: EmailService,
    *,
    name: str,
    email: str,
    reason: str | None = None,
    content_niche: str | None = None,
) -> BetaApplication:
    """Store a new application and send the applicant a confirmation."""
    clean_name = name.strip()
    if not clean_name:
        raise InvalidRequestError("Name is required")
    address = normalize_email(email)

    pending = (
        db.query(BetaApplication)
        .filter(BetaApplication.email == address, BetaApplication.status == "PENDING")
        .first()
    )
    if pending is not None:
        raise InvalidRequestError("An application with this email is already pending review")

    application = BetaApplication(
        name=clean_name,
        email=address,
        reason=reason,
        content_niche=content_niche,
        status="PENDING",
    )
    db.add(application)
    db.flush()

    result = await email_service.send(beta_confirmation_email(address, clean_name))
    if not result.success:
        logger.warning("Beta confirmation to application %s not sent: %s", application.id, result.error)
    return application


def list_applications(db: Session, status: str | None = None) -> list[BetaApplication]:
    query = db.query(BetaApplication)
    if status:
        query = query.filter(BetaApplication.status == status.upper())
    return query.order_by(BetaApplication.created_at.desc(), BetaApplication.id.desc()).all()


def get_application(db: Session, application_id: int) -> BetaApplication:
    application = db.get(BetaApplication, application_id)
    if application is None:
        raise NotFoundError("Application not found")
    return application


def username_base(name: str) -> str:
    base = _USERNAME_STRIP.sub("", name.lower())[:MAX_USERNAME_BASE]
    return base or "creator"


def unique_username(db: Session, name: str) -> str:
    """Derive a username from ``name``, appending 1, 2, ... until it is free."""
    base = username_base(name)
    candidate = base
    suffix = 1
    while db.query(User.id).filter(User.username == candidate).first() is not None:
        candidate = f"{base}{suffix}"
        suffix += 1
    return candidate


def next_beta_tester_number(db: Session) -> int:
    current = db.query(func.max(User.beta_tester_number)).scalar()
    return (current or 0) + 1


async def review_application(
    db: Session,
    email_service: EmailService,
    application_id: int,
    reviewer_id: int,
    action: str,
    review_notes: str | None = None,
) -> ApprovalResult | BetaApplication:
    """Approve or reject a pending application.

    Approval returns an :class:`ApprovalResult`; rejection returns the
    updated application carrying its waitlist token.
    """
    if action not in ("approve", "reject"):
        raise InvalidRequestError('Invalid action. Must be "approve" or "reject"')

    application = get_application(db, application_id)
    if application.status != "PENDING":
        raise InvalidRequestError(f"This application has already been {application.status.lower()}")

    application.reviewed_at = utcnow()
    application.reviewed_by_id = reviewer_id
    application.review_notes = review_notes or None

    if action == "approve":
        return await _approve(db, email_service, application)
    return await _reject(db, email_service, application)


async def _approve(db: Session, email_service: EmailService, application: BetaApplication) -> ApprovalResult:
    user = db.query(User).filter(User.email == application.email).first()
    temp_password: str | None = None
    created = user is None

    if user is None:
        temp_password = generate_temp_password()
        user = User(
            email=application.email,
            username=unique_username(db, application.name),
            display_name=application.name,
            password_hash=hash_password(temp_password),
            email_verified=False,
            beta_tester_number=next_beta_tester_number(db),
        )
        db.add(user)
        db.flush()
    elif user.beta_tester_number is None:
        user.beta_tester_number = next_beta_tester_number(db)

    application.status = "APPROVED"
    application.created_user_id = user.id
    db.flush()

    result = await email_service.send(
        beta_approved_email(
            application.email,
            application.name,
            user.username,
            temp_password,
            f"{settings.app_url}/auth/signin",
            user.beta_tester_number or 1,
        )
    )
    if result.success and created:
        user.welcome_email_sent = True
        user.welcome_email_sent_at = utcnow()
        db.flush()
    elif not result.success:
        logger.warning("Approval e-mail for application %s not sent: %s", application.id, result.error)

    logger.info("Approved beta application %s as user %s", application.id, user.id)
    return ApprovalResult(application=application, user=user, user_created=created)


async def _reject(db: Session, email_service: EmailService, application: BetaApplication) -> BetaApplication:
    application.status = "REJECTED"
    application.waitlist_token = generate_token()
    db.flush()

    waitlist_url = f"{settings.app_url}/api/beta/waitlist?token={application.waitlist_token}"
    result = await email_service.send(beta_rejected_email(application.email, application.name, waitlist_url))
    if not result.success:
        logger.warning("Rejection e-mail for application %s not sent: %s", application.id, result.error)

    logger.info("Rejected beta application %s", application.id)
    return application


async def join_waitlist(
    db: Session,
    email_service: EmailService,
    token: str | None,
) -> tuple[WaitlistOutcome, BetaApplication]:
    """Move a rejected application onto the waitlist.

    Repeating the request is harmless; later calls report the current state.
    """
    if not token:
        raise InvalidRequestError("Missing waitlist token")

    application = db.query(BetaApplication).filter(BetaApplication.waitlist_token == token).first()
    if application is None:
        raise NotFoundError("Invalid or expired waitlist link")

    if application.status == "APPROVED":
        return WaitlistOutcome.ALREADY_APPROVED, application
    if application.status == "WAITLIST":
        return WaitlistOutcome.ALREADY_WAITLISTED, application
    if application.status == "PENDING":
        return WaitlistOutcome.UNDER_REVIEW, application
    if application.status != "REJECTED":
        raise InvalidRequestError("Unable to process waitlist request")

    application.status = "WAITLIST"
    application.waitlisted_at = utcnow()
    db.flush()

    result = await email_service.send(waitlist_confirmation_email(application.email, application.name))
    if not result.success:
        logger.warning("Waitlist confirmation for application %s not sent: %s", application.id, result.error)
    return WaitlistOutcome.JOINED, application
