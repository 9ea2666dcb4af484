from __future__ import annotations

from dataclasses import dataclass
from typing import Any

REQUIRED_INTAKE_FIELDS = ("email", "service", "date", "time")


@dataclass(frozen=True)
class IntakeCommand:
    email: str | None
    service: str | None
    date: str | None
    time: str | None
    client_name: str | None = None
    phone: str | None = None
    participants: int | str | None = 1
    notes: str | None = None
    session_id: str | None = None
    unit_id: Any = None

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_INTAKE_FIELDS if not str(getattr(self, name) or "").strip()]

    def participant_count(self) -> int:
        try:
            count = int(self.participants)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 1
        return count if count >= 1 else 1
