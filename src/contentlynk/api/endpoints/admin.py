"""Administration endpoints: users, beta applications and counter repair."""

from typing import Annotated

from fastapi import APIRouter, Body, Query

from contentlynk.api.dependencies import AdminUserDep, EmailServiceDep, SessionDep
from contentlynk.models import BetaApplication, Post
from contentlynk.schemas.beta import (
    BetaApplicationListResponse,
    BetaApplicationResponse,
    ReviewRequest,
)
from contentlynk.schemas.post import PostResponse
from contentlynk.schemas.user import (
    AdminUserListResponse,
    AdminUserResponse,
    BotAnalysisResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    DeleteUserRequest,
    MakeAdminRequest,
    UserResponse,
    UserStats,
)
from contentlynk.services import admin as admin_service
from contentlynk.services.beta import (
    ApprovalResult,
    get_application,
    list_applications,
    review_application,
)
from contentlynk.services.engagement import recount_post_counters

router = APIRouter(prefix="/admin", tags=["admin"])


def _user_response(report: admin_service.UserReport) -> AdminUserResponse:
    base = UserResponse.model_validate(report.user).model_dump()
    return AdminUserResponse(
        **base,
        posts_count=report.posts,
        comments_count=report.comments,
        bot_analysis=BotAnalysisResponse(**report.analysis.as_dict()),
    )


@router.post("/make-admin")
async def make_admin(payload: MakeAdminRequest, db: SessionDep) -> dict[str, object]:
    """Promote an account using the one-time setup secret; no session needed."""
    user = admin_service.make_admin(db, payload.email, payload.secret)
    db.commit()
    return {
        "success": True,
        "message": "User is now an admin!",
        "user": {"email": user.email, "username": user.username, "is_admin": user.is_admin},
    }


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    _admin: AdminUserDep,
    db: SessionDep,
    status: str | None = Query(None, description="all, verified, unverified, admin, likely-bots or suspicious"),
    search: str | None = Query(None, description="Matches e-mail, username or display name"),
) -> AdminUserListResponse:
    reports = admin_service.list_users(db, status=status, search=search)
    return AdminUserListResponse(
        users=[_user_response(r) for r in reports],
        stats=UserStats(**admin_service.user_stats(db)),
    )


@router.get("/users/{user_id}", response_model=AdminUserResponse)
async def get_user(user_id: int, _admin: AdminUserDep, db: SessionDep) -> AdminUserResponse:
    return _user_response(admin_service.get_user_report(db, user_id))


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    admin: AdminUserDep,
    db: SessionDep,
    payload: Annotated[DeleteUserRequest | None, Body()] = None,
) -> dict[str, object]:
    """Delete an account and everything it owns; an audit row is kept."""
    reason = payload.reason if payload else None
    username = admin_service.delete_user(db, admin.id, user_id, reason)
    db.commit()
    return {"success": True, "message": f"User {username} deleted successfully"}


@router.post("/users/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_users(payload: BulkDeleteRequest, admin: AdminUserDep, db: SessionDep) -> BulkDeleteResponse:
    result = admin_service.bulk_delete_users(
        db,
        admin.id,
        payload.user_ids,
        reason=payload.reason,
        confirmed_bots_only=payload.confirmed_bots_only,
    )
    db.commit()
    return BulkDeleteResponse(
        deleted_count=result.deleted_count,
        requested_count=result.requested_count,
        errors=result.errors,
    )


@router.get("/beta-applications", response_model=BetaApplicationListResponse)
async def get_beta_applications(
    _admin: AdminUserDep,
    db: SessionDep,
    status: str | None = Query(None, description="Filter by application status"),
) -> BetaApplicationListResponse:
    applications = list_applications(db, status)
    return BetaApplicationListResponse(
        applications=[BetaApplicationResponse.model_validate(a) for a in applications]
    )


@router.get("/beta-applications/{application_id}", response_model=BetaApplicationResponse)
async def get_beta_application(application_id: int, _admin: AdminUserDep, db: SessionDep) -> BetaApplication:
    return get_application(db, application_id)


@router.post("/beta-applications/{application_id}/review")
async def review_beta_application(
    application_id: int,
    payload: ReviewRequest,
    admin: AdminUserDep,
    db: SessionDep,
    email_service: EmailServiceDep,
) -> dict[str, object]:
    """Approve (creating the account) or reject (issuing a waitlist link)."""
    outcome = await review_application(
        db,
        email_service,
        application_id,
        admin.id,
        payload.action,
        payload.review_notes,
    )
    db.commit()

    if isinstance(outcome, ApprovalResult):
        return {
            "success": True,
            "message": "Application approved successfully",
            "data": {
                "application_id": outcome.application.id,
                "user_id": outcome.user.id,
                "user_created": outcome.user_created,
                "username": outcome.user.username,
                "beta_tester_number": outcome.user.beta_tester_number,
            },
        }
    return {
        "success": True,
        "message": "Application rejected and waitlist invitation sent",
        "data": {"application_id": outcome.id, "status": outcome.status},
    }


@router.post("/posts/{post_id}/recount", response_model=PostResponse)
async def recount_post(post_id: int, _admin: AdminUserDep, db: SessionDep) -> Post:
    """Rebuild a post's counters from the engagement, comment and view tables."""
    post = recount_post_counters(db, post_id)
    db.commit()
    db.refresh(post)
    return post
