from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from cpr_booking.application.ports.scheduler import SchedulerPort


@dataclass(frozen=True)
class AlternativeDay:
    date: str
    slots: list[str]


@dataclass(frozen=True)
class AvailabilityReport:
    available: bool
    requested_date: str
    requested_time: str
    alternatives: list[AlternativeDay] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "date": self.requested_date,
            "time": self.requested_time,
            "alternatives": [{"date": a.date, "slots": list(a.slots)} for a in self.alternatives],
            "error": self.error,
        }


class AvailabilityUseCase:
    """
    Advisory availability signal for a requested slot.

    Errors count as unavailable. When the slot is unavailable, the next few days
    are probed for alternatives; probe failures are skipped.
    """

    def __init__(
        self,
        scheduler: SchedulerPort,
        scan_days: int = 10,
        max_days: int = 3,
        slots_per_day: int = 3,
    ) -> None:
        self._scheduler = scheduler
        self._scan_days = scan_days
        self._max_days = max_days
        self._slots_per_day = slots_per_day
        self._logger = logging.getLogger(__name__)

    def check(
        self,
        event_id: int,
        requested_date: str,
        requested_time: str,
        token: str,
        unit_id: int | None = None,
    ) -> AvailabilityReport:
        try:
            slots = _slot_keys(self._scheduler.get_start_time_list(token, event_id, unit_id, requested_date))
        except Exception as e:
            self._logger.warning("Availability check failed", extra={"event_id": event_id, "error": str(e)})
            return AvailabilityReport(
                available=False,
                requested_date=requested_date,
                requested_time=requested_time,
                alternatives=self.find_alternatives(event_id, requested_date, token, unit_id),
                error=str(e),
            )

        if requested_time in slots:
            return AvailabilityReport(available=True, requested_date=requested_date, requested_time=requested_time)

        self._logger.info(
            "Requested slot unavailable",
            extra={"event_id": event_id, "reason": f"{requested_date} {requested_time}"},
        )
        return AvailabilityReport(
            available=False,
            requested_date=requested_date,
            requested_time=requested_time,
            alternatives=self.find_alternatives(event_id, requested_date, token, unit_id),
        )

    def find_alternatives(
        self,
        event_id: int,
        requested_date: str,
        token: str,
        unit_id: int | None = None,
    ) -> list[AlternativeDay]:
        try:
            start = date.fromisoformat(requested_date)
        except ValueError:
            return []

        found: list[AlternativeDay] = []
        for offset in range(1, self._scan_days + 1):
            if len(found) >= self._max_days:
                break
            day = (start + timedelta(days=offset)).isoformat()
            try:
                slots = _slot_keys(self._scheduler.get_start_time_list(token, event_id, unit_id, day))
            except Exception as e:
                self._logger.debug("Alternative probe failed", extra={"event_id": event_id, "error": str(e)})
                continue
            if slots:
                found.append(AlternativeDay(date=day, slots=slots[: self._slots_per_day]))
        return found


def _slot_keys(result: Any) -> list[str]:
    if isinstance(result, dict):
        return [str(key) for key in result.keys()]
    if isinstance(result, list):
        return [str(item) for item in result]
    return []
