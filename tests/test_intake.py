"""
Tests for the intake pipeline: validation, remote sync outcomes and the internal save.
"""

from __future__ import annotations

import pytest

from cpr_booking.application.dto.intake import IntakeCommand
from cpr_booking.application.dto.stage_result import SyncErrorKind
from cpr_booking.application.utils.catalog_matcher import MatchTier
from cpr_booking.application.use_cases.intake import (
    BookingIntakeUseCase,
    IntakeFailure,
    IntakeValidationError,
)
from cpr_booking.infrastructure.store.memory_store import MemoryBookingStore


def _command(**overrides) -> IntakeCommand:
    fields = {
        "email": "ana@example.com",
        "service": "CPR Training",
        "date": "April 14, 2030",
        "time": "2:00 PM",
        "client_name": "Ana Ruiz",
        "phone": "(555) 123-4567",
        "participants": 2,
        "session_id": "cs_test_123",
    }
    fields.update(overrides)
    return IntakeCommand(**fields)


def test_happy_path_books_remotely_and_saves(store, mock_scheduler):
    outcome = BookingIntakeUseCase(store=store, scheduler=mock_scheduler).execute(_command())

    assert outcome.success is True
    assert outcome.created is True
    assert outcome.remote.stage.ok
    assert outcome.remote.catalog.tier is MatchTier.exact
    assert outcome.message == "Booking confirmed and synced with our scheduling system."

    remote = mock_scheduler.bookings[0]
    assert remote["start_date_time"] == "2030-04-14 14:00:00"
    assert remote["client"]["phone"] == "+15551234567"
    assert remote["additional"]["participants"] == 2

    # phone stored normalized, date/time stored as submitted
    saved = store.get(outcome.booking.id)
    assert saved.phone == "+15551234567"
    assert saved.date == "April 14, 2030"
    assert saved.time == "2:00 PM"
    assert saved.external_session_id == "cs_test_123"


def test_to_dict_shape(store, mock_scheduler):
    payload = BookingIntakeUseCase(store=store, scheduler=mock_scheduler).execute(_command()).to_dict()

    assert payload["success"] is True
    assert payload["booking"]["sessionId"] == "cs_test_123"
    assert payload["simplybookResponse"]["status"] == "booked"
    assert payload["simplybookResponse"]["eventId"] == 1
    assert payload["simplybookResponse"]["date"] == "2030-04-14"
    assert payload["simplybookResponse"]["time"] == "14:00:00"
    assert payload["availability"]["available"] is True


def test_missing_required_fields(store, mock_scheduler):
    uc = BookingIntakeUseCase(store=store, scheduler=mock_scheduler)
    with pytest.raises(IntakeValidationError) as exc:
        uc.execute(_command(service="", time=None))

    assert exc.value.missing == ["service", "time"]
    assert store.list() == []
    assert mock_scheduler.bookings == []


def test_remote_rejection_is_soft(store, rejecting_scheduler):
    """Payment already happened; a remote rejection must not fail the intake."""
    outcome = BookingIntakeUseCase(store=store, scheduler=rejecting_scheduler).execute(_command())
    payload = outcome.to_dict()

    assert outcome.success is True
    assert outcome.remote.stage.error_kind is SyncErrorKind.rejected
    assert payload["simplybookResponse"]["status"] == "rejected"
    assert payload["simplybookResponse"]["error"]["message"] == "Selected unit id is not available"
    assert "could not confirm the slot" in outcome.message
    assert len(store.list()) == 1


def test_unparseable_date_skips_remote_but_saves_raw(store, mock_scheduler):
    outcome = BookingIntakeUseCase(store=store, scheduler=mock_scheduler).execute(_command(date="someday soon"))

    assert outcome.success is True
    assert outcome.remote.stage.error_kind is SyncErrorKind.normalization
    assert outcome.to_dict()["simplybookResponse"]["status"] == "skipped"
    assert mock_scheduler.bookings == []
    assert store.get(outcome.booking.id).date == "someday soon"


def test_login_failure_still_saves(store, login_failing_scheduler):
    outcome = BookingIntakeUseCase(store=store, scheduler=login_failing_scheduler).execute(_command())

    assert outcome.success is True
    assert outcome.remote.stage.error_kind is SyncErrorKind.auth
    assert outcome.message == "Booking saved. Scheduling sync is pending manual review."
    assert len(store.list()) == 1


def test_scheduler_not_configured(store):
    outcome = BookingIntakeUseCase(store=store, scheduler=None).execute(_command())

    assert outcome.success is True
    assert outcome.remote.stage.error_kind is SyncErrorKind.not_configured
    assert "not configured" in outcome.message


def test_unavailable_slot_is_advisory(store, busy_scheduler):
    """Availability says no, but the booking is still submitted."""
    outcome = BookingIntakeUseCase(store=store, scheduler=busy_scheduler).execute(_command())

    assert outcome.remote.availability.available is False
    assert outcome.remote.stage.ok
    assert len(busy_scheduler.bookings) == 1


def test_catalog_outage_uses_static_table(store, catalog_down_scheduler):
    outcome = BookingIntakeUseCase(store=store, scheduler=catalog_down_scheduler).execute(
        _command(service="First Aid Certification")
    )

    assert outcome.remote.catalog.tier is MatchTier.static
    assert outcome.remote.catalog.event_id == 2
    assert catalog_down_scheduler.bookings[0]["event_id"] == "2"


def test_redelivery_updates_existing_record(store, mock_scheduler):
    uc = BookingIntakeUseCase(store=store, scheduler=mock_scheduler)
    first = uc.execute(_command(participants=2))
    second = uc.execute(_command(participants=4))

    assert first.created is True
    assert second.created is False
    assert second.booking.id == first.booking.id
    assert second.booking.participants == 4
    assert len(store.list()) == 1
    # the slot is taken by the first delivery; the second is a soft rejection
    assert second.remote.stage.error_kind is SyncErrorKind.rejected


def test_without_session_id_always_creates(store):
    uc = BookingIntakeUseCase(store=store, scheduler=None)
    uc.execute(_command(session_id=None))
    uc.execute(_command(session_id=None))
    assert len(store.list()) == 2


def test_empty_phone_uses_placeholder(store, mock_scheduler):
    uc = BookingIntakeUseCase(store=store, scheduler=mock_scheduler, placeholder_phone="+10000000000")
    outcome = uc.execute(_command(phone=""))

    assert outcome.booking.phone == "+10000000000"
    assert mock_scheduler.bookings[0]["client"]["phone"] == "+10000000000"


def test_save_failure_raises_intake_failure(mock_scheduler):
    class BrokenStore(MemoryBookingStore):
        def upsert_by_session_id(self, session_id, fields, defaults=None):
            raise RuntimeError("disk full")

    with pytest.raises(IntakeFailure) as exc:
        BookingIntakeUseCase(store=BrokenStore(), scheduler=mock_scheduler).execute(_command())

    assert exc.value.remote.stage.ok
    assert "disk full" in str(exc.value)


def test_participant_count_coercion():
    assert _command(participants="3").participant_count() == 3
    assert _command(participants="lots").participant_count() == 1
    assert _command(participants=0).participant_count() == 1
    assert _command(participants=None).participant_count() == 1


def test_redelivery_without_phone_keeps_stored_phone(store, mock_scheduler):
    """A later delivery with an empty phone must not overwrite the real number with the placeholder."""
    uc = BookingIntakeUseCase(store=store, scheduler=mock_scheduler)
    first = uc.execute(_command(phone="(555) 123-4567"))
    second = uc.execute(_command(phone=""))

    assert second.booking.id == first.booking.id
    assert store.get(first.booking.id).phone == "+15551234567"


def test_redelivery_with_new_phone_replaces_it(store):
    uc = BookingIntakeUseCase(store=store, scheduler=None)
    first = uc.execute(_command(phone=""))
    assert first.booking.phone == "+15555555555"

    second = uc.execute(_command(phone="555-987-6543"))
    assert second.booking.phone == "+15559876543"
