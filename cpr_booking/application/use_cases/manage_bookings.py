from __future__ import annotations

import logging
from typing import Any

from cpr_booking.application.exceptions import BookingNotFoundError
from cpr_booking.application.ports.booking_store import BookingStorePort
from cpr_booking.domain.entities.booking import BookingRecord, BookingStatus


class ManageBookingsUseCase:
    """Admin dashboard operations. Status transitions are unconstrained; any status may follow any other."""

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def list_bookings(self) -> list[BookingRecord]:
        bookings = self._store.list()
        self._logger.info("Returning bookings from server memory", extra={"reason": f"count={len(bookings)}"})
        return bookings

    def get_booking(self, booking_id: str) -> BookingRecord:
        record = self._store.get(booking_id)
        if record is None:
            raise BookingNotFoundError(booking_id)
        return record

    def save_booking(self, fields: dict[str, Any], session_id: str | None = None) -> tuple[BookingRecord, bool]:
        """Create a booking, or merge into the one owning session_id. Returns (record, created)."""
        if not fields.get("email"):
            raise ValueError("Missing required email field")
        if fields.get("status"):
            BookingStatus.parse(fields["status"])
        if session_id:
            return self._store.upsert_by_session_id(session_id, fields)
        return self._store.create(fields), True

    def update_status(self, booking_id: str, status: Any) -> BookingRecord:
        if not booking_id:
            raise ValueError("Booking ID is required")
        parsed = BookingStatus.parse(status)
        return self._store.update_status(booking_id, parsed)

    def reschedule(self, booking_id: str, date: str, time: str) -> BookingRecord:
        if not date or not time:
            raise ValueError("Both date and time are required to reschedule")
        record = self._store.update(
            booking_id,
            {"date": date, "time": time, "status": BookingStatus.upcoming},
        )
        self._logger.info("Booking rescheduled", extra={"booking_id": booking_id, "reason": f"{date} {time}"})
        return record
