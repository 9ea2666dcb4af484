from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class SyncErrorKind(str, Enum):
    not_configured = "not_configured"
    auth = "auth"
    normalization = "normalization"
    rejected = "rejected"
    exception = "exception"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one step of the intake pipeline. The orchestrator decides which failures are fatal."""

    ok: bool
    value: T | None = None
    error_kind: SyncErrorKind | None = None
    detail: str | None = None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: SyncErrorKind, detail: str, value: T | None = None) -> "StageResult[T]":
        return cls(ok=False, value=value, error_kind=kind, detail=detail)
