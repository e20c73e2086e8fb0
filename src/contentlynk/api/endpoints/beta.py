"""Public beta programme endpoints."""

from html import escape

from fastapi import APIRouter, Query, status
from fastapi.responses import HTMLResponse

from contentlynk.api.dependencies import EmailServiceDep, SessionDep
from contentlynk.schemas.beta import BetaApplicationCreate
from contentlynk.services.beta import WaitlistOutcome, join_waitlist, submit_application

router = APIRouter(prefix="/beta", tags=["beta"])

_WAITLIST_PAGES = {
    WaitlistOutcome.JOINED: (
        "You're on the Waitlist",
        "{name}, you've been added to our beta waitlist.",
        "We'll notify you when spots become available.",
    ),
    WaitlistOutcome.ALREADY_WAITLISTED: (
        "You're Already on the Waitlist",
        "{name}, you're already on our beta waitlist!",
        "We'll notify you when spots become available. No further action needed from you.",
    ),
    WaitlistOutcome.ALREADY_APPROVED: (
        "You're Already Approved!",
        "Great news {name}! Your application has been approved.",
        "You should have received an approval email with your account details.",
    ),
    WaitlistOutcome.UNDER_REVIEW: (
        "Application Under Review",
        "{name}, your application is currently under review.",
        "You'll receive an email once we make a decision.",
    ),
}


def _page(title: str, heading: str, message: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)} - ContentLynk</title></head>"
        f"<body><h1>{escape(title)}</h1><h2>{escape(heading)}</h2><p>{escape(message)}</p>"
        "</body></html>"
    )


@router.post("/applications", status_code=status.HTTP_201_CREATED)
async def apply_for_beta(
    payload: BetaApplicationCreate,
    db: SessionDep,
    email_service: EmailServiceDep,
) -> dict[str, object]:
    """Submit an application; the applicant receives a confirmation e-mail."""
    application = await submit_application(
        db,
        email_service,
        name=payload.name,
        email=payload.email,
        reason=payload.reason,
        content_niche=payload.content_niche,
    )
    db.commit()
    return {
        "success": True,
        "message": "Application submitted successfully",
        "application_id": application.id,
    }


@router.get("/waitlist", response_class=HTMLResponse)
async def join_beta_waitlist(
    db: SessionDep,
    email_service: EmailServiceDep,
    token: str | None = Query(None, description="Token from the rejection e-mail"),
) -> HTMLResponse:
    """Landing page for the waitlist link in the rejection e-mail."""
    outcome, application = await join_waitlist(db, email_service, token)
    db.commit()
    title, heading, message = _WAITLIST_PAGES[outcome]
    return HTMLResponse(_page(title, heading.format(name=application.name), message))
