from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from cpr_booking.domain.entities.booking import BookingRecord, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def upsert_by_session_id(
        self,
        session_id: str,
        fields: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> tuple[BookingRecord, bool]:
        """
        Merge fields into the record owning session_id, or create one.
        `defaults` fill empty fields only when a new record is created.
        Returns (record, created). Check and insert happen atomically.
        """
        raise NotImplementedError

    @abstractmethod
    def create(self, fields: dict[str, Any]) -> BookingRecord:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> BookingRecord | None:
        raise NotImplementedError

    @abstractmethod
    def list(self) -> list[BookingRecord]:
        raise NotImplementedError

    @abstractmethod
    def update_status(self, booking_id: str, status: BookingStatus) -> BookingRecord:
        """Raises BookingNotFoundError for unknown ids."""
        raise NotImplementedError

    @abstractmethod
    def update(self, booking_id: str, fields: dict[str, Any]) -> BookingRecord:
        """Merge fields into an existing record. Raises BookingNotFoundError for unknown ids."""
        raise NotImplementedError
