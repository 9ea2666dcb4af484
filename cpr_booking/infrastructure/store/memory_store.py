from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from cpr_booking.application.exceptions import BookingNotFoundError
from cpr_booking.application.ports.booking_store import BookingStorePort
from cpr_booking.domain.entities.booking import BookingRecord, BookingStatus

_MERGEABLE_FIELDS = ("client_name", "email", "phone", "service", "participants", "date", "time", "status", "notes")


class MemoryBookingStore(BookingStorePort):
    """Process-lifetime booking store. One lock serializes every read-modify-write."""

    def __init__(self) -> None:
        self._records: dict[str, BookingRecord] = {}
        self._by_session: dict[str, str] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def upsert_by_session_id(
        self,
        session_id: str,
        fields: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> tuple[BookingRecord, bool]:
        if not session_id:
            raise ValueError("session_id is required for upsert")
        with self._lock:
            existing_id = self._by_session.get(session_id)
            if existing_id is not None:
                merged = _merge(self._records[existing_id], fields)
                self._records[existing_id] = merged
                self._logger.info("Updated booking for existing session", extra={"booking_id": existing_id, "session_id": session_id})
                return merged, False

            initial = dict(defaults or {})
            initial.update({name: value for name, value in fields.items() if value})
            record = _build(initial, session_id=session_id)
            self._records[record.id] = record
            self._by_session[session_id] = record.id
            self._logger.info("Created booking", extra={"booking_id": record.id, "session_id": session_id})
            return record, True

    def create(self, fields: dict[str, Any]) -> BookingRecord:
        with self._lock:
            record = _build(fields, session_id=None)
            self._records[record.id] = record
            self._logger.info("Created booking", extra={"booking_id": record.id})
            return record

    def get(self, booking_id: str) -> BookingRecord | None:
        with self._lock:
            return self._records.get(booking_id)

    def list(self) -> list[BookingRecord]:
        with self._lock:
            return list(self._records.values())

    def update_status(self, booking_id: str, status: BookingStatus) -> BookingRecord:
        with self._lock:
            record = self._records.get(booking_id)
            if record is None:
                raise BookingNotFoundError(booking_id)
            updated = replace(record, status=status)
            self._records[booking_id] = updated
            self._logger.info("Booking status updated", extra={"booking_id": booking_id, "status": status.value})
            return updated

    def update(self, booking_id: str, fields: dict[str, Any]) -> BookingRecord:
        with self._lock:
            record = self._records.get(booking_id)
            if record is None:
                raise BookingNotFoundError(booking_id)
            updated = _merge(record, fields)
            self._records[booking_id] = updated
            return updated


def new_booking_id() -> str:
    return f"b{int(time.time() * 1000)}{uuid.uuid4().hex[:8]}"


def _build(fields: dict[str, Any], session_id: str | None) -> BookingRecord:
    status = fields.get("status")
    return BookingRecord(
        id=new_booking_id(),
        client_name=fields.get("client_name") or "Valued Customer",
        email=fields.get("email") or "",
        phone=fields.get("phone") or "",
        service=fields.get("service") or "CPR Training",
        participants=_coerce_participants(fields.get("participants")) or 1,
        date=fields.get("date") or datetime.now(timezone.utc).isoformat(),
        time=fields.get("time") or "12:00 PM",
        status=BookingStatus.parse(status) if status else BookingStatus.upcoming,
        notes=fields.get("notes") or "",
        external_session_id=session_id,
    )


def _merge(record: BookingRecord, fields: dict[str, Any]) -> BookingRecord:
    """New values win when present; empty/falsy values keep the old one. id and session id never change."""
    changes: dict[str, Any] = {}
    for name in _MERGEABLE_FIELDS:
        value = fields.get(name)
        if name == "participants":
            value = _coerce_participants(value)
        elif name == "status" and value:
            value = BookingStatus.parse(value)
        if value:
            changes[name] = value
    return replace(record, **changes)


def _coerce_participants(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
