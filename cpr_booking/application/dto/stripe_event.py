from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cpr_booking.application.dto.intake import IntakeCommand

CHECKOUT_COMPLETED = "checkout.session.completed"


class StripeEventDTO(BaseModel):
    id: str | None = None
    type: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    def checkout_session(self) -> dict[str, Any] | None:
        if self.type != CHECKOUT_COMPLETED:
            return None
        session = self.data.get("object")
        return session if isinstance(session, dict) else None

    def extract_intake(self) -> IntakeCommand | None:
        """Intake command for a completed checkout session, None for any other event."""
        session = self.checkout_session()
        if session is None:
            return None

        metadata = session.get("metadata") or {}
        details = session.get("customer_details") or {}
        email = session.get("customer_email") or details.get("email") or metadata.get("customerEmail")

        return IntakeCommand(
            email=email,
            service=metadata.get("service"),
            date=metadata.get("date"),
            time=metadata.get("time"),
            client_name=metadata.get("customerName") or details.get("name"),
            phone=details.get("phone") or metadata.get("phone"),
            participants=metadata.get("participants") or 1,
            notes=metadata.get("notes"),
            session_id=session.get("id"),
            unit_id=metadata.get("unitId"),
        )
