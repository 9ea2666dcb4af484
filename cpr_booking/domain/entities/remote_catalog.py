from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RemoteCatalogEntry:
    id: int
    name: str
    duration: int | None = None
    price: float | None = None
    unit_map: list[int] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_remote(cls, key: str | int, payload: dict[str, Any]) -> "RemoteCatalogEntry":
        """Build an entry from one item of the getEventList map (keyed by event id)."""
        raw_id = payload.get("id", key)
        unit_map = payload.get("unit_map") or []
        if isinstance(unit_map, dict):
            unit_map = list(unit_map.keys())
        return cls(
            id=int(raw_id),
            name=str(payload.get("name") or ""),
            duration=_to_int(payload.get("duration")),
            price=_to_float(payload.get("price")),
            unit_map=[int(u) for u in unit_map if str(u).isdigit()],
            raw=dict(payload),
        )


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
