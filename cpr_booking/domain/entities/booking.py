from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class BookingStatus(str, Enum):
    upcoming = "upcoming"
    completed = "completed"
    canceled = "canceled"

    @classmethod
    def parse(cls, value: Any) -> "BookingStatus":
        """Return the matching status or raise ValueError for anything outside the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            raise ValueError(f"Invalid status provided: {value!r}") from None


@dataclass(frozen=True)
class BookingRecord:
    id: str
    client_name: str
    email: str
    phone: str
    service: str
    participants: int = 1
    date: str = ""  # ISO-8601, loosely validated
    time: str = ""  # display string, e.g. "2:00 PM"
    status: BookingStatus = BookingStatus.upcoming
    notes: str = ""
    external_session_id: str | None = None  # payment session id, dedup key

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "clientName": self.client_name,
            "email": self.email,
            "phone": self.phone,
            "service": self.service,
            "participants": self.participants,
            "date": self.date,
            "time": self.time,
            "status": self.status.value,
            "notes": self.notes,
            "externalSessionId": self.external_session_id,
            "sessionId": self.external_session_id,
        }
