import logging

from fastapi import FastAPI

from cpr_booking.api.v1.bookings import router as bookings_router
from cpr_booking.api.v1.simplybook import router as simplybook_router
from cpr_booking.api.v1.utilities import router as utilities_router
from cpr_booking.api.webhooks import router as webhooks_router
from cpr_booking.core.config import settings

CONTEXT_KEYS = ("booking_id", "session_id", "service", "event_id", "method", "status", "reason", "error")


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Booking API", version="1.0.0")

app.include_router(bookings_router, prefix="/api", tags=["bookings"])
app.include_router(webhooks_router, prefix="/api", tags=["webhooks"])
app.include_router(simplybook_router, prefix="/api", tags=["simplybook"])
app.include_router(utilities_router, prefix="/api", tags=["utilities"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
