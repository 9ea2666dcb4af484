from __future__ import annotations

import logging
from datetime import date as date_cls, timedelta
from typing import Any

from cpr_booking.application.exceptions import SchedulerRemoteError
from cpr_booking.application.ports.scheduler import SchedulerPort

DEFAULT_EVENTS: dict[str, dict[str, Any]] = {
    "1": {"id": "1", "name": "CPR Training", "duration": 180, "price": "75.00", "unit_map": {"1": None}},
    "2": {"id": "2", "name": "First Aid Certification", "duration": 180, "price": "85.00", "unit_map": {"1": None}},
    "3": {"id": "3", "name": "BLS for Healthcare Providers", "duration": 240, "price": "95.00", "unit_map": {"1": None}},
    "4": {"id": "4", "name": "Pediatric Training", "duration": 180, "price": "85.00", "unit_map": {"1": None}},
    "5": {"id": "5", "name": "Babysitter Course", "duration": 120, "price": "65.00", "unit_map": {"1": None}},
}
DEFAULT_UNITS: dict[str, dict[str, Any]] = {"1": {"id": "1", "name": "Lead Instructor"}}
DEFAULT_SLOTS = ("09:00:00", "10:00:00", "11:00:00", "13:00:00", "14:00:00", "15:00:00", "16:00:00")


class MockScheduler(SchedulerPort):
    """In-memory stand-in for SimplyBook.me used in dev/local runs."""

    def __init__(
        self,
        events: dict[str, dict[str, Any]] | None = None,
        slots_by_date: dict[str, list[str]] | None = None,
        default_slots: tuple[str, ...] = DEFAULT_SLOTS,
    ) -> None:
        self._events = dict(DEFAULT_EVENTS if events is None else events)
        self._units = dict(DEFAULT_UNITS)
        self._slots_by_date = dict(slots_by_date or {})
        self._default_slots = default_slots
        self._bookings: dict[str, dict[str, Any]] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def bookings(self) -> list[dict[str, Any]]:
        return list(self._bookings.values())

    def get_token(self) -> str:
        return "mock-token"

    def get_event_list(self, token: str) -> dict[str, dict[str, Any]]:
        return dict(self._events)

    def get_event(self, token: str, event_id: int) -> dict[str, Any]:
        event = self._events.get(str(event_id))
        if event is None:
            raise SchedulerRemoteError("getEvent", "Event not found", code=-32000)
        return dict(event)

    def get_unit_list(self, token: str) -> dict[str, dict[str, Any]]:
        return dict(self._units)

    def get_start_time_list(
        self,
        token: str,
        event_id: int,
        unit_id: int | None,
        date: str,
    ) -> dict[str, Any] | list[str]:
        return {slot: slot for slot in self._free_slots(date)}

    def get_start_time_matrix(
        self,
        token: str,
        date_from: str,
        date_to: str,
        event_id: int,
        unit_id: int | None,
        count: int = 1,
    ) -> dict[str, list[str]]:
        start = date_cls.fromisoformat(date_from)
        end = date_cls.fromisoformat(date_to)
        matrix: dict[str, list[str]] = {}
        current = start
        while current <= end:
            matrix[current.isoformat()] = self._free_slots(current.isoformat())
            current += timedelta(days=1)
        return matrix

    def book(
        self,
        token: str,
        event_id: int,
        unit_id: int | None,
        date: str,
        time: str,
        client_info: dict[str, Any],
        additional_fields: dict[str, Any],
    ) -> dict[str, Any]:
        if str(event_id) not in self._events:
            raise SchedulerRemoteError("book", "Selected event id is not available", code=-32000)
        if time not in self._free_slots(date):
            raise SchedulerRemoteError("book", "Selected time start is not available", code=-32000)

        booking_id = str(len(self._bookings) + 1)
        booking = {
            "id": booking_id,
            "event_id": str(event_id),
            "unit_id": unit_id,
            "start_date_time": f"{date} {time}",
            "client": dict(client_info),
            "additional": dict(additional_fields),
        }
        self._bookings[booking_id] = booking
        self._logger.info("Mock scheduler booking created", extra={"event_id": event_id, "booking_id": booking_id})
        return {"require_confirm": False, "bookings": [{"id": booking_id, "event_id": str(event_id)}]}

    def get_work_calendar(self, token: str, year: int, month: int, unit_id: int | None) -> dict[str, Any]:
        calendar: dict[str, Any] = {}
        current = date_cls(year, month, 1)
        while current.month == month:
            calendar[current.isoformat()] = {
                "from": self._default_slots[0] if self._default_slots else "00:00:00",
                "to": "17:00:00",
                "is_day_off": 0 if current.weekday() < 6 else 1,
            }
            current += timedelta(days=1)
        return calendar

    def _free_slots(self, date: str) -> list[str]:
        slots = self._slots_by_date.get(date, list(self._default_slots))
        taken = {b["start_date_time"] for b in self._bookings.values()}
        return [s for s in slots if f"{date} {s}" not in taken]
