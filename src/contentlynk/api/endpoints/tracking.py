"""Consumption telemetry posted by reader clients."""

from fastapi import APIRouter, Request

from contentlynk.api.dependencies import OptionalUserDep, SessionDep, client_ip
from contentlynk.schemas.tracking import ConsumptionReportIn, ConsumptionResponse
from contentlynk.services.tracking import ConsumptionReport, track_consumption

router = APIRouter(tags=["tracking"])


@router.post("/track-consumption", response_model=ConsumptionResponse)
async def report_consumption(
    payload: ConsumptionReportIn,
    request: Request,
    viewer: OptionalUserDep,
    db: SessionDep,
) -> ConsumptionResponse:
    """Merge a depth report; the response carries the session id to reuse."""
    outcome = track_consumption(
        db,
        ConsumptionReport(**payload.model_dump()),
        user_id=viewer.id if viewer else None,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    db.commit()
    record = outcome.consumption
    return ConsumptionResponse(
        session_id=outcome.session_id,
        updated=outcome.updated,
        scroll_depth=record.scroll_depth,
        watch_percentage=record.watch_percentage,
        completed=record.completed,
    )
