"""Newsletter subscriptions and e-mail verification."""

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from contentlynk.api.dependencies import CurrentUserDep, EmailServiceDep, SessionDep
from contentlynk.core.errors import InvalidRequestError
from contentlynk.schemas.user import SubscribeRequest, SubscriptionResponse, UnsubscribeRequest
from contentlynk.services.subscriptions import SubscribeOutcome, subscribe, unsubscribe
from contentlynk.services.verification import (
    resend_verification,
    send_welcome_email,
    verify_email_token,
)

router = APIRouter(tags=["subscriptions"])


@router.post("/subscribe", response_model=SubscriptionResponse)
async def subscribe_email(payload: SubscribeRequest, db: SessionDep) -> JSONResponse:
    """Subscribe an address; 201 for a new subscriber, 200 otherwise."""
    result = subscribe(db, payload.email, payload.name, payload.source)
    db.commit()
    code = status.HTTP_201_CREATED if result.outcome is SubscribeOutcome.CREATED else status.HTTP_200_OK
    return JSONResponse(
        status_code=code,
        content={"success": True, "message": result.message, "status": result.outcome.value},
    )


@router.post("/unsubscribe", response_model=SubscriptionResponse)
async def unsubscribe_email(payload: UnsubscribeRequest, db: SessionDep) -> SubscriptionResponse:
    unsubscribe(db, payload.email)
    db.commit()
    return SubscriptionResponse(message="You have been unsubscribed.")


@router.get("/verify-email")
async def verify_email(
    db: SessionDep,
    email_service: EmailServiceDep,
    token: str | None = Query(None, description="Token from the verification e-mail"),
) -> dict[str, object]:
    """Consume a verification token and send the welcome e-mail."""
    if not token:
        raise InvalidRequestError("Verification token is required")
    user = verify_email_token(db, token)
    db.commit()

    welcome_sent = await send_welcome_email(db, user, email_service)
    db.commit()
    return {"success": True, "message": "Email verified successfully", "welcome_email_sent": welcome_sent}


@router.post("/resend-verification")
async def resend_verification_email(
    current_user: CurrentUserDep,
    db: SessionDep,
    email_service: EmailServiceDep,
) -> dict[str, object]:
    await resend_verification(db, current_user, email_service)
    db.commit()
    return {"success": True, "message": "Verification email sent"}
