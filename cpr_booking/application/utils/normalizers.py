"""Convert loosely formatted form/checkout input into the exact formats the scheduler API expects."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Any

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_PHONE = "+15555555555"

_MONTH_DAY_YEAR = re.compile(r"^[A-Za-z]+\.?\s+\d{1,2},\s*\d{4}$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_DAY_YEAR_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%B %d %Y", "%b %d %Y")

_HMS = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")
_TWELVE_HOUR = re.compile(r"^(\d{1,2}):(\d{2})\s*([ap])\.?m\.?$", re.IGNORECASE)
_HM = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_phone(raw: str | None, placeholder: str = DEFAULT_PLACEHOLDER_PHONE) -> str:
    """
    Canonicalize a phone number to a `+`-prefixed digit string.

    Never raises. Empty input (or input with no digits) yields the placeholder,
    because the scheduler rejects bookings without a phone number.
    """
    text = (raw or "").strip()
    if not text:
        logger.info("Empty phone provided, using placeholder number")
        return placeholder

    digits = re.sub(r"\D", "", text)
    if not digits:
        logger.info("Phone has no digits, using placeholder number", extra={"reason": "no_digits"})
        return placeholder

    if text.startswith("+"):
        formatted = f"+{digits}"
    elif len(digits) == 11 and digits.startswith("1"):
        formatted = f"+{digits}"
    elif len(digits) == 10:
        formatted = f"+1{digits}"
    else:
        formatted = f"+{digits}"
        logger.warning("Unexpected phone digit count; prefixing with + anyway", extra={"reason": f"digits={len(digits)}"})

    logger.debug("Formatted phone from %r to %r", text, formatted)
    return formatted


def normalize_date(raw: str | None) -> str | None:
    """
    Return YYYY-MM-DD, or None when the input is not a valid date.

    Accepts "April 14, 2025", ISO timestamps ("2025-04-14T10:00:00Z") and plain
    "2025-04-14"; anything else goes through dateutil as a last resort.
    """
    text = (raw or "").strip()
    if not text:
        return None

    if _MONTH_DAY_YEAR.match(text):
        parsed = _parse_month_day_year(text)
    elif "T" in text:
        parsed = _parse_iso_timestamp(text)
    elif "-" in text:
        parsed = _parse_strict_iso_date(text) if _ISO_DATE.match(text) else _parse_loose(text)
    else:
        parsed = _parse_month_day_year(text) or _parse_loose(text)

    if parsed is None:
        logger.warning("Could not normalize date", extra={"reason": text})
        return None
    return parsed.isoformat()


def normalize_time(raw: str | None) -> str | None:
    """Return HH:MM:SS (24-hour), or None when the input cannot be parsed."""
    text = (raw or "").strip()
    if not text:
        return None

    match = _HMS.match(text)
    if match:
        return _format_time(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _TWELVE_HOUR.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 1 <= hour <= 12:
            return None
        meridiem = match.group(3).lower()
        if meridiem == "p" and hour != 12:
            hour += 12
        elif meridiem == "a" and hour == 12:
            hour = 0
        return _format_time(hour, minute, 0)

    match = _HM.match(text)
    if match:
        return _format_time(int(match.group(1)), int(match.group(2)), 0)

    logger.warning("Could not normalize time", extra={"reason": text})
    return None


def parse_unit_id(raw: Any) -> int | None:
    """Optional scheduler unit id; None when absent or non-numeric."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    return int(text) if text.isdigit() else None


def _format_time(hour: int, minute: int, second: int) -> str | None:
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        return None
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def _parse_month_day_year(text: str) -> date | None:
    collapsed = " ".join(text.replace(".", "").split())
    for fmt in _MONTH_DAY_YEAR_FORMATS:
        try:
            return datetime.strptime(collapsed, fmt).date()
        except ValueError:
            continue
    return None


def _parse_iso_timestamp(text: str) -> date | None:
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return _parse_loose(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def _parse_strict_iso_date(text: str) -> date | None:
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _parse_loose(text: str) -> date | None:
    try:
        parsed = date_parser.parse(text)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()
