from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any

from cpr_booking.application.ports.scheduler import SchedulerPort
from cpr_booking.application.utils.normalizers import normalize_phone, parse_unit_id

PHONE_EXAMPLES = ("(555) 123-4567", "555-123-4567", "1-555-123-4567", "+1 555-123-4567", "5551234567")
DEFAULT_EVENT_ID = 2


def _tomorrow() -> str:
    return (date.today() + timedelta(days=1)).isoformat()


def _first_unit(event: dict[str, Any]) -> int | None:
    unit_map = event.get("unit_map") or []
    keys = list(unit_map.keys()) if isinstance(unit_map, dict) else list(unit_map)
    return parse_unit_id(keys[0]) if keys else None


class SchedulerDiagnosticsUseCase:
    """Operator-facing probes of the scheduler configuration. Scheduler errors propagate to the caller."""

    def __init__(self, scheduler: SchedulerPort) -> None:
        self._scheduler = scheduler
        self._logger = logging.getLogger(__name__)

    def status(self) -> dict[str, Any]:
        token = self._scheduler.get_token()
        events = self._scheduler.get_event_list(token)
        performers = self._scheduler.get_unit_list(token)

        time_slot_test: dict[str, Any] = {}
        if events:
            test_event_id = int(next(iter(events)))
            test_date = _tomorrow()
            event = self._scheduler.get_event(token, test_event_id)
            performer = _first_unit(event)
            matrix = self._scheduler.get_start_time_matrix(token, test_date, test_date, test_event_id, performer, 1)
            time_slot_test = {
                "eventId": test_event_id,
                "date": test_date,
                "performerId": performer,
                "availableSlots": matrix.get(test_date, []),
                "eventDetails": event,
                "rawMatrixResponse": matrix,
            }

        return {
            "status": "API connection successful",
            "token": "Valid token received" if token else "Failed to get token",
            "phoneFormatting": [{"original": p, "formatted": normalize_phone(p)} for p in PHONE_EXAMPLES],
            "events": events,
            "performers": performers,
            "timeSlotTest": time_slot_test,
            "message": "SimplyBook.me API is properly configured.",
        }

    def time_slots(self, event_id: int | None = None, day: str | None = None, unit_id: Any = None) -> dict[str, Any]:
        event_id = event_id or DEFAULT_EVENT_ID
        day = day or _tomorrow()

        token = self._scheduler.get_token()
        events = self._scheduler.get_event_list(token)
        performers = self._scheduler.get_unit_list(token)
        event = self._scheduler.get_event(token, event_id)
        unit_map = event.get("unit_map") or []

        chosen_unit = parse_unit_id(unit_id)
        if chosen_unit is None:
            chosen_unit = _first_unit(event)
        self._logger.info("Checking time slots", extra={"event_id": event_id, "reason": f"date={day} unit={chosen_unit}"})

        matrix = self._scheduler.get_start_time_matrix(token, day, day, event_id, chosen_unit, 1)
        slots = list(matrix.get(day, []))

        now = datetime.now()
        calendar = self._scheduler.get_work_calendar(token, now.year, now.month, chosen_unit)

        performer_note = f" with performer ID {chosen_unit}" if chosen_unit else ""
        return {
            "events": events,
            "performers": performers,
            "eventId": event_id,
            "unitId": chosen_unit,
            "unitMap": unit_map,
            "date": day,
            "availableTimeSlots": slots,
            "calendar": calendar,
            "message": f"Found {len(slots)} available time slots for event ID {event_id} on {day}{performer_note}",
        }
