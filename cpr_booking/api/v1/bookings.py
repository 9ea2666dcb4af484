import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from cpr_booking.api.v1.schemas import (
    IntakeRequestSchema,
    RescheduleSchema,
    SaveBookingSchema,
    StatusUpdateSchema,
)
from cpr_booking.application.dto.intake import IntakeCommand
from cpr_booking.application.exceptions import BookingNotFoundError
from cpr_booking.application.use_cases.intake import BookingIntakeUseCase, IntakeFailure
from cpr_booking.application.use_cases.manage_bookings import ManageBookingsUseCase
from cpr_booking.wiring.dependencies import get_intake_use_case, get_manage_bookings_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/bookings")
def list_bookings(uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case)):
    return {"success": True, "bookings": [b.to_dict() for b in uc.list_bookings()]}


@router.post("/bookings")
def save_booking(
    req: SaveBookingSchema,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking, created = uc.save_booking(req.store_fields(), session_id=req.session_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "message": "Booking saved successfully" if created else "Booking updated successfully",
        "booking": booking.to_dict(),
    }


@router.post("/bookings/intake")
def intake_booking(
    req: IntakeRequestSchema,
    uc: BookingIntakeUseCase = Depends(get_intake_use_case),
):
    command = IntakeCommand(
        email=req.email,
        service=req.service,
        date=req.date,
        time=req.time,
        client_name=req.client_name,
        phone=req.phone,
        participants=req.participants,
        notes=req.notes,
        session_id=req.session_id,
        unit_id=req.unit_id,
    )
    try:
        outcome = uc.execute(command)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IntakeFailure as e:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to process booking",
                "details": str(e),
                "simplybookResponse": e.remote.to_dict() if e.remote else None,
            },
        )

    return outcome.to_dict()


@router.get("/bookings/{booking_id}")
def get_booking(booking_id: str, uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case)):
    try:
        return uc.get_booking(booking_id).to_dict()
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")


@router.patch("/bookings/{booking_id}")
def update_booking_status(
    booking_id: str,
    req: StatusUpdateSchema,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking = uc.update_status(booking_id, req.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")

    logger.info("Booking status changed", extra={"booking_id": booking_id, "status": booking.status.value})
    return booking.to_dict()


@router.patch("/bookings/{booking_id}/reschedule")
def reschedule_booking(
    booking_id: str,
    req: RescheduleSchema,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking = uc.reschedule(booking_id, req.date or "", req.time or "")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking.to_dict()
