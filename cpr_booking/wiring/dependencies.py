from functools import lru_cache
import logging
import threading

from cpr_booking.core.config import settings
from cpr_booking.application.ports.booking_store import BookingStorePort
from cpr_booking.application.ports.scheduler import SchedulerPort
from cpr_booking.application.use_cases.availability import AvailabilityUseCase
from cpr_booking.application.use_cases.intake import BookingIntakeUseCase
from cpr_booking.application.use_cases.manage_bookings import ManageBookingsUseCase
from cpr_booking.application.use_cases.scheduler_diagnostics import SchedulerDiagnosticsUseCase
from cpr_booking.infrastructure.simplybook.mock_scheduler import MockScheduler
from cpr_booking.infrastructure.simplybook.simplybook_client import SimplyBookClient
from cpr_booking.infrastructure.store.memory_store import MemoryBookingStore


_booking_store: MemoryBookingStore | None = None
_booking_store_lock = threading.Lock()


def get_booking_store() -> BookingStorePort:
    global _booking_store
    with _booking_store_lock:
        if _booking_store is None:
            _booking_store = MemoryBookingStore()
        return _booking_store


@lru_cache
def get_scheduler() -> SchedulerPort | None:
    logger = logging.getLogger(__name__)
    if settings.is_dev:
        logger.info("Using MockScheduler (ENV=%s)", settings.ENV)
        return MockScheduler()
    if not settings.simplybook_configured:
        logger.warning("SimplyBook.me credentials missing; scheduler sync disabled")
        return None
    logger.info("Using SimplyBook.me scheduler")
    return SimplyBookClient()


def get_availability_use_case() -> AvailabilityUseCase | None:
    scheduler = get_scheduler()
    if scheduler is None:
        return None
    return AvailabilityUseCase(
        scheduler=scheduler,
        scan_days=settings.AVAILABILITY_SCAN_DAYS,
        max_days=settings.AVAILABILITY_MAX_DAYS,
        slots_per_day=settings.AVAILABILITY_SLOTS_PER_DAY,
    )


def get_intake_use_case() -> BookingIntakeUseCase:
    return BookingIntakeUseCase(
        store=get_booking_store(),
        scheduler=get_scheduler(),
        availability=get_availability_use_case(),
        placeholder_phone=settings.PLACEHOLDER_PHONE,
    )


def get_manage_bookings_use_case() -> ManageBookingsUseCase:
    return ManageBookingsUseCase(store=get_booking_store())


def get_scheduler_diagnostics_use_case() -> SchedulerDiagnosticsUseCase:
    scheduler = get_scheduler()
    if scheduler is None:
        raise ValueError("SimplyBook.me credentials are not configured")
    return SchedulerDiagnosticsUseCase(scheduler=scheduler)
