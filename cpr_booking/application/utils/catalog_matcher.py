from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from cpr_booking.domain.entities.remote_catalog import RemoteCatalogEntry

# Used when the remote catalog cannot be fetched at all.
STATIC_SERVICE_IDS: dict[str, int] = {
    "CPR Training": 1,
    "First Aid Certification": 2,
    "BLS for Healthcare Providers": 3,
    "Pediatric Training": 4,
    "Babysitter Course": 5,
}
DEFAULT_SERVICE_ID = 1


class MatchTier(str, Enum):
    exact = "exact"
    case_insensitive = "case_insensitive"
    substring = "substring"
    first_entry = "first_entry"
    static = "static"


@dataclass(frozen=True)
class CatalogMatch:
    entry: RemoteCatalogEntry
    tier: MatchTier


def match_exact(name: str, entries: list[RemoteCatalogEntry]) -> RemoteCatalogEntry | None:
    return next((e for e in entries if e.name == name), None)


def match_case_insensitive(name: str, entries: list[RemoteCatalogEntry]) -> RemoteCatalogEntry | None:
    wanted = name.strip().lower()
    return next((e for e in entries if e.name.strip().lower() == wanted), None)


def match_substring(name: str, entries: list[RemoteCatalogEntry]) -> RemoteCatalogEntry | None:
    wanted = name.strip().lower()
    if not wanted:
        return None
    for entry in entries:
        candidate = entry.name.strip().lower()
        if candidate and (wanted in candidate or candidate in wanted):
            return entry
    return None


def match_first_entry(name: str, entries: list[RemoteCatalogEntry]) -> RemoteCatalogEntry | None:
    return entries[0] if entries else None


_TIERS: tuple[tuple[MatchTier, Callable[[str, list[RemoteCatalogEntry]], RemoteCatalogEntry | None]], ...] = (
    (MatchTier.exact, match_exact),
    (MatchTier.case_insensitive, match_case_insensitive),
    (MatchTier.substring, match_substring),
    (MatchTier.first_entry, match_first_entry),
)


def match_catalog_entry(name: str, entries: Iterable[RemoteCatalogEntry]) -> CatalogMatch | None:
    """Walk the tiers in rank order. Returns None only for an empty catalog."""
    catalog = list(entries)
    for tier, matcher in _TIERS:
        entry = matcher(name, catalog)
        if entry is not None:
            return CatalogMatch(entry=entry, tier=tier)
    return None


def static_service_id(name: str) -> int:
    if name in STATIC_SERVICE_IDS:
        return STATIC_SERVICE_IDS[name]
    lowered = name.strip().lower()
    for known, service_id in STATIC_SERVICE_IDS.items():
        if known.lower() == lowered:
            return service_id
    return DEFAULT_SERVICE_ID
