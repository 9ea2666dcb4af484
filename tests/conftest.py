"""
Shared fixtures: a fresh in-memory store and scheduler doubles per test.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from cpr_booking.application.exceptions import SchedulerRemoteError, SchedulerUpstreamError
from cpr_booking.application.use_cases.intake import BookingIntakeUseCase
from cpr_booking.application.use_cases.manage_bookings import ManageBookingsUseCase
from cpr_booking.infrastructure.simplybook.mock_scheduler import MockScheduler
from cpr_booking.infrastructure.store.memory_store import MemoryBookingStore
from cpr_booking.main import app
from cpr_booking.wiring.dependencies import get_intake_use_case, get_manage_bookings_use_case


class RejectingScheduler(MockScheduler):
    """Answers every booking with a JSON-RPC error, like a misconfigured unit map."""

    def __init__(self, message: str = "Selected unit id is not available", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.message = message
        self.diagnostic_calls: list[str] = []

    def book(self, token, event_id, unit_id, date, time, client_info, additional_fields):
        raise SchedulerRemoteError("book", self.message, code=-32000)

    def get_unit_list(self, token):
        self.diagnostic_calls.append("getUnitList")
        return super().get_unit_list(token)

    def get_event(self, token, event_id):
        self.diagnostic_calls.append("getEvent")
        return super().get_event(token, event_id)


class LoginFailingScheduler(MockScheduler):
    def get_token(self) -> str:
        raise SchedulerUpstreamError("getToken request failed: connection refused")


class CatalogDownScheduler(MockScheduler):
    def get_event_list(self, token):
        raise SchedulerUpstreamError("getEventList request failed: timeout")


class BusyScheduler(MockScheduler):
    """Reports no free slots anywhere but still accepts bookings."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.probed_dates: list[str] = []

    def get_start_time_list(self, token, event_id, unit_id, date):
        self.probed_dates.append(date)
        return {}


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def mock_scheduler() -> MockScheduler:
    return MockScheduler()


@pytest.fixture
def rejecting_scheduler() -> RejectingScheduler:
    return RejectingScheduler()


@pytest.fixture
def login_failing_scheduler() -> LoginFailingScheduler:
    return LoginFailingScheduler()


@pytest.fixture
def catalog_down_scheduler() -> CatalogDownScheduler:
    return CatalogDownScheduler()


@pytest.fixture
def busy_scheduler() -> BusyScheduler:
    return BusyScheduler()


@pytest.fixture
def make_client(store):
    """Build a TestClient whose intake use case talks to the given scheduler double."""
    clients: list[TestClient] = []

    def _make(scheduler=None) -> TestClient:
        scheduler = scheduler if scheduler is not None else MockScheduler()
        app.dependency_overrides[get_manage_bookings_use_case] = lambda: ManageBookingsUseCase(store)
        app.dependency_overrides[get_intake_use_case] = lambda: BookingIntakeUseCase(store=store, scheduler=scheduler)
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
