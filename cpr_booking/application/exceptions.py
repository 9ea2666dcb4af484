from __future__ import annotations

from typing import Any


class SchedulerUpstreamError(RuntimeError):
    """Raised when the remote scheduler cannot be reached (timeouts, network errors, HTTP errors)."""
    pass


class SchedulerContractError(RuntimeError):
    """Raised when the remote scheduler answers with an unexpected shape (e.g. login without token)."""
    pass


class SchedulerRemoteError(RuntimeError):
    """Raised when a JSON-RPC response carries an `error` object."""

    def __init__(self, method: str, message: str, code: int | None = None, data: Any = None) -> None:
        super().__init__(f"{method}: {message}")
        self.method = method
        self.message = message
        self.code = code
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


class BookingNotFoundError(LookupError):
    pass


class WebhookVerificationError(ValueError):
    pass
