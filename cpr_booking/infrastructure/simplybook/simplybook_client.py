from __future__ import annotations

import logging
from typing import Any

import httpx

from cpr_booking.application.exceptions import (
    SchedulerContractError,
    SchedulerRemoteError,
    SchedulerUpstreamError,
)
from cpr_booking.application.ports.scheduler import SchedulerPort
from cpr_booking.core.config import settings


class SimplyBookClient(SchedulerPort):
    """
    JSON-RPC 2.0 adapter for the SimplyBook.me user API.

    Login goes to the login endpoint; every other method goes to the API
    endpoint with X-Company-Login / X-Token headers.
    """

    def __init__(
        self,
        company_login: str | None = None,
        api_key: str | None = None,
        api_url: str | None = None,
        login_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._company_login = company_login or settings.SIMPLYBOOK_COMPANY_LOGIN
        self._api_key = api_key or settings.SIMPLYBOOK_API_KEY
        self._api_url = api_url or settings.SIMPLYBOOK_API_URL
        self._login_url = login_url or settings.SIMPLYBOOK_LOGIN_URL
        self._client = http_client or httpx.Client(timeout=settings.SIMPLYBOOK_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._company_login or not self._api_key:
            raise ValueError("SIMPLYBOOK_COMPANY_LOGIN and SIMPLYBOOK_API_KEY are required for SimplyBook.me")

    def get_token(self) -> str:
        token = self._call(self._login_url, "getToken", [self._company_login, self._api_key], "login")
        if not token or not isinstance(token, str):
            raise SchedulerContractError("SimplyBook.me login response did not include a token.")
        self._logger.info("Obtained SimplyBook.me token")
        return token

    def get_event_list(self, token: str) -> dict[str, dict[str, Any]]:
        return self._authed(token, "getEventList", [], "events") or {}

    def get_event(self, token: str, event_id: int) -> dict[str, Any]:
        return self._authed(token, "getEvent", [int(event_id)], "event_details") or {}

    def get_unit_list(self, token: str) -> dict[str, dict[str, Any]]:
        return self._authed(token, "getUnitList", [], "units") or {}

    def get_start_time_list(
        self,
        token: str,
        event_id: int,
        unit_id: int | None,
        date: str,
    ) -> dict[str, Any] | list[str]:
        return self._authed(token, "getStartTimeList", [int(event_id), unit_id, date], "start_times") or {}

    def get_start_time_matrix(
        self,
        token: str,
        date_from: str,
        date_to: str,
        event_id: int,
        unit_id: int | None,
        count: int = 1,
    ) -> dict[str, list[str]]:
        params = [date_from, date_to, int(event_id), unit_id, count]
        return self._authed(token, "getStartTimeMatrix", params, "timeslots") or {}

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
        params = [int(event_id), unit_id, date, time, client_info, additional_fields]
        result = self._authed(token, "book", params, "book")
        self._logger.info("SimplyBook.me booking created", extra={"event_id": event_id})
        return result if isinstance(result, dict) else {"result": result}

    def get_work_calendar(self, token: str, year: int, month: int, unit_id: int | None) -> dict[str, Any]:
        return self._authed(token, "getWorkCalendar", [year, month, unit_id], "calendar") or {}

    def _authed(self, token: str, method: str, params: list[Any], request_id: str) -> Any:
        headers = {"X-Company-Login": self._company_login, "X-Token": token}
        return self._call(self._api_url, method, params, request_id, headers=headers)

    def _call(
        self,
        url: str,
        method: str,
        params: list[Any],
        request_id: str,
        headers: dict[str, str] | None = None,
    ) -> Any:
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": request_id}
        try:
            response = self._client.post(url, json=payload, headers=headers or {})
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("SimplyBook.me request failed", extra={"method": method, "error": str(e)})
            raise SchedulerUpstreamError(f"{method} request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SchedulerContractError(f"{method} returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise SchedulerContractError(f"{method} returned an unexpected payload")

        error = data.get("error")
        if error:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            self._logger.warning(
                "SimplyBook.me returned an error",
                extra={"method": method, "error": error.get("message"), "status": error.get("code")},
            )
            raise SchedulerRemoteError(
                method,
                str(error.get("message") or "Unknown error"),
                code=error.get("code"),
                data=error.get("data"),
            )
        return data.get("result")
