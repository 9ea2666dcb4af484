from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class SchedulerPort(ABC):
    """
    Remote scheduling service (SimplyBook.me JSON-RPC API).

    Raises:
        SchedulerUpstreamError: transport or HTTP failures
        SchedulerRemoteError: the response carried an `error` object
        SchedulerContractError: malformed response
    """

    @abstractmethod
    def get_token(self) -> str:
        """Obtain a fresh bearer token. Tokens are not cached."""
        raise NotImplementedError

    @abstractmethod
    def get_event_list(self, token: str) -> dict[str, dict[str, Any]]:
        """Remote catalog keyed by event id."""
        raise NotImplementedError

    @abstractmethod
    def get_event(self, token: str, event_id: int) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def get_unit_list(self, token: str) -> dict[str, dict[str, Any]]:
        """Performers/units keyed by unit id."""
        raise NotImplementedError

    @abstractmethod
    def get_start_time_list(
        self,
        token: str,
        event_id: int,
        unit_id: int | None,
        date: str,
    ) -> dict[str, Any] | list[str]:
        """Available start times (HH:MM:SS) for one date."""
        raise NotImplementedError

    @abstractmethod
    def get_start_time_matrix(
        self,
        token: str,
        date_from: str,
        date_to: str,
        event_id: int,
        unit_id: int | None,
        count: int = 1,
    ) -> dict[str, list[str]]:
        raise NotImplementedError

    @abstractmethod
    def book(
        self,
        token: str,
        event_id: int,
        unit_id: int | None,
        date: str,
        time: str,
        client_info: dict[str, Any],
        additional_fields: dict[str, Any],
    ) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def get_work_calendar(self, token: str, year: int, month: int, unit_id: int | None) -> dict[str, Any]:
        raise NotImplementedError
