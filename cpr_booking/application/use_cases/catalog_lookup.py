from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cpr_booking.application.dto.stage_result import StageResult
from cpr_booking.application.ports.scheduler import SchedulerPort
from cpr_booking.application.utils.catalog_matcher import MatchTier, match_catalog_entry, static_service_id
from cpr_booking.domain.entities.remote_catalog import RemoteCatalogEntry


@dataclass(frozen=True)
class CatalogResolution:
    event_id: int
    tier: MatchTier
    remote_name: str | None = None
    unit_map: list[int] = field(default_factory=list)


class CatalogLookupUseCase:
    """Map a display service name to a scheduler event id. Always produces an id, possibly the wrong one."""

    def __init__(self, scheduler: SchedulerPort) -> None:
        self._scheduler = scheduler
        self._logger = logging.getLogger(__name__)

    def resolve(self, service_name: str, token: str) -> StageResult[CatalogResolution]:
        try:
            raw_catalog = self._scheduler.get_event_list(token)
            entries = [RemoteCatalogEntry.from_remote(key, value) for key, value in raw_catalog.items()]
        except Exception as e:
            self._logger.warning(
                "Catalog fetch failed; using static service table",
                extra={"service": service_name, "error": str(e)},
            )
            return StageResult.success(self._static(service_name))

        match = match_catalog_entry(service_name, entries)
        if match is None:
            self._logger.warning("Remote catalog is empty; using static service table", extra={"service": service_name})
            return StageResult.success(self._static(service_name))

        if match.tier is MatchTier.first_entry:
            self._logger.warning(
                "No catalog match for service; falling back to first catalog entry",
                extra={"service": service_name, "event_id": match.entry.id},
            )
        else:
            self._logger.info(
                "Resolved service to catalog entry",
                extra={"service": service_name, "event_id": match.entry.id, "reason": match.tier.value},
            )

        return StageResult.success(
            CatalogResolution(
                event_id=match.entry.id,
                tier=match.tier,
                remote_name=match.entry.name,
                unit_map=list(match.entry.unit_map),
            )
        )

    @staticmethod
    def _static(service_name: str) -> CatalogResolution:
        return CatalogResolution(event_id=static_service_id(service_name), tier=MatchTier.static)
