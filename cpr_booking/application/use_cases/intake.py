from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from cpr_booking.application.dto.intake import IntakeCommand
from cpr_booking.application.dto.stage_result import StageResult, SyncErrorKind
from cpr_booking.application.ports.booking_store import BookingStorePort
from cpr_booking.application.ports.scheduler import SchedulerPort
from cpr_booking.application.use_cases.availability import AvailabilityReport, AvailabilityUseCase
from cpr_booking.application.use_cases.catalog_lookup import CatalogLookupUseCase, CatalogResolution
from cpr_booking.application.use_cases.remote_booking import (
    ClientContact,
    RemoteBookingOutcome,
    RemoteBookingRequest,
    RemoteBookingUseCase,
)
from cpr_booking.application.utils.normalizers import (
    DEFAULT_PLACEHOLDER_PHONE,
    normalize_date,
    normalize_phone,
    normalize_time,
    parse_unit_id,
)
from cpr_booking.domain.entities.booking import BookingRecord


class IntakeValidationError(ValueError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


class IntakeFailure(RuntimeError):
    """The internal save failed. Carries the remote sync report produced before it."""

    def __init__(self, message: str, remote: "RemoteSyncReport | None") -> None:
        super().__init__(message)
        self.remote = remote


@dataclass(frozen=True)
class RemoteSyncReport:
    stage: StageResult[RemoteBookingOutcome]
    catalog: CatalogResolution | None = None
    availability: AvailabilityReport | None = None
    normalized_date: str | None = None
    normalized_time: str | None = None

    def to_dict(self) -> dict[str, Any]:
        outcome = self.stage.value
        if self.stage.ok:
            status = "booked"
        elif outcome is not None:
            status = outcome.status
        else:
            status = "skipped"
        return {
            "status": status,
            "errorKind": self.stage.error_kind.value if self.stage.error_kind else None,
            "detail": self.stage.detail,
            "eventId": self.catalog.event_id if self.catalog else None,
            "matchTier": self.catalog.tier.value if self.catalog else None,
            "date": self.normalized_date,
            "time": self.normalized_time,
            "result": outcome.result if outcome else None,
            "error": outcome.error if outcome else None,
        }


@dataclass(frozen=True)
class IntakeOutcome:
    success: bool
    message: str
    booking: BookingRecord
    created: bool
    remote: RemoteSyncReport

    def to_dict(self) -> dict[str, Any]:
        availability = self.remote.availability
        return {
            "success": self.success,
            "message": self.message,
            "booking": self.booking.to_dict(),
            "created": self.created,
            "simplybookResponse": self.remote.to_dict(),
            "availability": availability.to_dict() if availability else None,
        }


class BookingIntakeUseCase:
    """
    Turn a paid booking request into an internal record and mirror it to the scheduler.

    The remote sync and the internal save are independent failure domains:
    remote problems only change the response message, the internal save
    decides success.
    """

    def __init__(
        self,
        store: BookingStorePort,
        scheduler: SchedulerPort | None,
        availability: AvailabilityUseCase | None = None,
        placeholder_phone: str = DEFAULT_PLACEHOLDER_PHONE,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._placeholder_phone = placeholder_phone
        self._catalog = CatalogLookupUseCase(scheduler) if scheduler else None
        self._availability = availability or (AvailabilityUseCase(scheduler) if scheduler else None)
        self._remote_booking = RemoteBookingUseCase(scheduler) if scheduler else None
        self._logger = logging.getLogger(__name__)

    def execute(self, command: IntakeCommand) -> IntakeOutcome:
        missing = command.missing_fields()
        if missing:
            raise IntakeValidationError(missing)

        phone = normalize_phone(command.phone, self._placeholder_phone)
        remote = self._sync_remote(command, phone)

        # The save is the only step allowed to fail the intake.
        try:
            booking, created = self._save(command, phone)
        except Exception as e:
            self._logger.exception("Intake failed while saving booking", extra={"session_id": command.session_id})
            raise IntakeFailure(str(e), remote=remote) from e
        message = compose_message(remote)

        self._logger.info(
            "Intake completed",
            extra={
                "booking_id": booking.id,
                "session_id": command.session_id,
                "status": remote.to_dict()["status"],
            },
        )
        return IntakeOutcome(success=True, message=message, booking=booking, created=created, remote=remote)

    def _sync_remote(self, command: IntakeCommand, phone: str) -> RemoteSyncReport:
        if self._scheduler is None or self._catalog is None or self._remote_booking is None or self._availability is None:
            return RemoteSyncReport(
                stage=StageResult.failure(SyncErrorKind.not_configured, "Scheduler credentials are not configured")
            )

        catalog: CatalogResolution | None = None
        availability: AvailabilityReport | None = None
        date: str | None = None
        time: str | None = None
        try:
            token_stage = self._acquire_token(self._scheduler)
            if not token_stage.ok or token_stage.value is None:
                return RemoteSyncReport(stage=StageResult.failure(SyncErrorKind.auth, token_stage.detail or "login failed"))
            token = token_stage.value

            catalog = self._catalog.resolve(command.service or "", token).value

            date = normalize_date(command.date)
            time = normalize_time(command.time)
            if date is None or time is None:
                bad = "date" if date is None else "time"
                return RemoteSyncReport(
                    stage=StageResult.failure(SyncErrorKind.normalization, f"Could not normalize {bad}"),
                    catalog=catalog,
                    normalized_date=date,
                    normalized_time=time,
                )

            unit_id = parse_unit_id(command.unit_id)
            availability = self._availability.check(catalog.event_id, date, time, token, unit_id)
            if not availability.available:
                # Advisory only: the scheduler has the final word.
                self._logger.warning(
                    "Requested slot looks unavailable; attempting booking anyway",
                    extra={"event_id": catalog.event_id, "session_id": command.session_id},
                )

            outcome = self._remote_booking.submit(
                token,
                RemoteBookingRequest(
                    event_id=catalog.event_id,
                    unit_id=unit_id,
                    date=date,
                    time=time,
                    client=ClientContact(
                        name=command.client_name or "Valued Customer",
                        email=command.email or "",
                        phone=phone,
                    ),
                    additional_fields={
                        "participants": command.participant_count(),
                        "notes": command.notes or "",
                        "session_id": command.session_id,
                    },
                ),
            )
        except Exception as e:
            self._logger.exception("Scheduler sync failed", extra={"session_id": command.session_id})
            return RemoteSyncReport(
                stage=StageResult.failure(SyncErrorKind.exception, str(e)),
                catalog=catalog,
                availability=availability,
                normalized_date=date,
                normalized_time=time,
            )

        if outcome.booked:
            stage = StageResult.success(outcome)
        else:
            stage = StageResult.failure(SyncErrorKind.rejected, outcome.error_message or "Booking rejected", value=outcome)
        return RemoteSyncReport(
            stage=stage,
            catalog=catalog,
            availability=availability,
            normalized_date=date,
            normalized_time=time,
        )

    def _acquire_token(self, scheduler: SchedulerPort) -> StageResult[str]:
        try:
            return StageResult.success(scheduler.get_token())
        except Exception as e:
            self._logger.error("Scheduler login failed", extra={"error": str(e)})
            return StageResult.failure(SyncErrorKind.auth, str(e))

    def _save(self, command: IntakeCommand, phone: str) -> tuple[BookingRecord, bool]:
        # A placeholder phone only fills a new record; it never replaces a stored number.
        submitted_phone = phone if re.search(r"\d", command.phone or "") else None
        fields = {
            "client_name": command.client_name,
            "email": command.email,
            "phone": submitted_phone,
            "service": command.service,
            "participants": command.participant_count(),
            "date": command.date,
            "time": command.time,
            "notes": command.notes,
        }
        if command.session_id:
            return self._store.upsert_by_session_id(command.session_id, fields, defaults={"phone": phone})
        return self._store.create({**fields, "phone": phone}), True


def compose_message(remote: RemoteSyncReport) -> str:
    stage = remote.stage
    if stage.ok:
        return "Booking confirmed and synced with our scheduling system."
    if stage.error_kind is SyncErrorKind.rejected:
        return f"Booking saved. Our scheduling system could not confirm the slot ({stage.detail}); we will review it manually."
    if stage.error_kind is SyncErrorKind.normalization:
        return "Booking saved. The requested date or time could not be sent to our scheduling system; we will confirm your session manually."
    if stage.error_kind is SyncErrorKind.not_configured:
        return "Booking saved. Scheduling sync is not configured; we will confirm your session manually."
    return "Booking saved. Scheduling sync is pending manual review."
