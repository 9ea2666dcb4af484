from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from cpr_booking.application.exceptions import SchedulerRemoteError
from cpr_booking.application.ports.scheduler import SchedulerPort

UNIT_UNAVAILABLE_MESSAGE = "selected unit id is not available"
EVENT_UNAVAILABLE_MESSAGE = "selected event id is not available"


@dataclass(frozen=True)
class RemoteBookingOutcome:
    status: str  # "booked" | "rejected"
    event_id: int
    unit_id: int | None
    result: dict[str, Any] | None = None
    error: dict[str, Any] | None = None

    @property
    def booked(self) -> bool:
        return self.status == "booked"

    @property
    def error_message(self) -> str | None:
        return (self.error or {}).get("message")


@dataclass(frozen=True)
class ClientContact:
    name: str
    email: str
    phone: str

    def to_remote(self) -> dict[str, str]:
        return {"name": self.name, "email": self.email, "phone": self.phone}


@dataclass(frozen=True)
class RemoteBookingRequest:
    event_id: int
    unit_id: int | None
    date: str  # YYYY-MM-DD
    time: str  # HH:MM:SS
    client: ClientContact
    additional_fields: dict[str, Any] = field(default_factory=dict)


class RemoteBookingUseCase:
    """
    Submit a booking to the scheduler.

    A remote `error` object is a soft failure: it is logged and returned as a
    rejected outcome, never raised. Transport errors still raise and are the
    orchestrator's to handle.
    """

    def __init__(self, scheduler: SchedulerPort) -> None:
        self._scheduler = scheduler
        self._logger = logging.getLogger(__name__)

    def submit(self, token: str, request: RemoteBookingRequest) -> RemoteBookingOutcome:
        try:
            result = self._scheduler.book(
                token,
                request.event_id,
                request.unit_id,
                request.date,
                request.time,
                request.client.to_remote(),
                request.additional_fields,
            )
        except SchedulerRemoteError as e:
            self._logger.error(
                "Scheduler rejected booking",
                extra={"event_id": request.event_id, "error": e.message, "status": e.code},
            )
            self._log_diagnostics(token, request, e.message)
            return RemoteBookingOutcome(
                status="rejected",
                event_id=request.event_id,
                unit_id=request.unit_id,
                error=e.to_dict(),
            )

        self._logger.info("Scheduler booking confirmed", extra={"event_id": request.event_id})
        return RemoteBookingOutcome(
            status="booked",
            event_id=request.event_id,
            unit_id=request.unit_id,
            result=result,
        )

    def _log_diagnostics(self, token: str, request: RemoteBookingRequest, message: str) -> None:
        lowered = (message or "").lower()
        try:
            if UNIT_UNAVAILABLE_MESSAGE in lowered:
                units = self._scheduler.get_unit_list(token)
                event = self._scheduler.get_event(token, request.event_id)
                self._logger.warning(
                    "Unit unavailable for event",
                    extra={
                        "event_id": request.event_id,
                        "reason": f"requested_unit={request.unit_id} unit_map={event.get('unit_map')} units={list(units.keys())}",
                    },
                )
            elif EVENT_UNAVAILABLE_MESSAGE in lowered:
                events = self._scheduler.get_event_list(token)
                known = {key: value.get("name") for key, value in events.items()}
                self._logger.warning(
                    "Event unavailable",
                    extra={"event_id": request.event_id, "reason": f"known_events={known}"},
                )
        except Exception as e:
            self._logger.debug("Diagnostic lookup failed", extra={"event_id": request.event_id, "error": str(e)})
