import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from cpr_booking.application.exceptions import (
    SchedulerContractError,
    SchedulerRemoteError,
    SchedulerUpstreamError,
)
from cpr_booking.application.utils.normalizers import normalize_date
from cpr_booking.wiring.dependencies import get_scheduler_diagnostics_use_case

router = APIRouter()
logger = logging.getLogger(__name__)

_SCHEDULER_ERRORS = (SchedulerUpstreamError, SchedulerRemoteError, SchedulerContractError)


@router.get("/simplybook/status")
def simplybook_status():
    try:
        uc = get_scheduler_diagnostics_use_case()
    except ValueError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})

    try:
        return uc.status()
    except _SCHEDULER_ERRORS as e:
        logger.exception("SimplyBook.me status check failed")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to connect to SimplyBook.me API", "details": str(e)},
        )


@router.get("/simplybook/time-slots")
def simplybook_time_slots(
    event_id: int | None = Query(None, alias="eventId"),
    date: str | None = Query(None),
    unit_id: str | None = Query(None, alias="unitId"),
):
    day = None
    if date:
        day = normalize_date(date)
        if day is None:
            return JSONResponse(status_code=400, content={"error": f"Invalid date: {date}"})

    try:
        uc = get_scheduler_diagnostics_use_case()
    except ValueError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})

    try:
        return uc.time_slots(event_id=event_id, day=day, unit_id=unit_id)
    except _SCHEDULER_ERRORS as e:
        logger.exception("Time slot check failed", extra={"event_id": event_id})
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to check time slots", "details": str(e)},
        )
