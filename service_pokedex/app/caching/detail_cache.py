"""
Process-lifetime cache of full detail records.

The cache is unbounded. It holds at most one record per catalog id, so its
size is capped by the catalog itself (~1300 records). Entries are never
evicted.
"""

from __future__ import annotations

from typing import Dict, Optional, TYPE_CHECKING

from shared.errors import NotFoundError, PermanentUpstreamError
from shared.logging import get_logger

from service_pokedex.app.domain.models import DetailRecord, IndexEntry
from service_pokedex.app.hydration.policy import FetchPolicy, HydrationState, Resolution

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_pokedex.app.adapters.catalog_client import CatalogClient
    from service_pokedex.app.index.store import IndexStore
    from shared.metrics import MetricsCollector


class DetailCache:
    """Keyed id -> DetailRecord cache backed by the catalog client.

    Concurrent misses for the same id are not coalesced; each caller fetches
    and the last write wins.
    """

    def __init__(
        self,
        client: "CatalogClient",
        index_store: "IndexStore",
        policy: Optional[FetchPolicy] = None,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.client = client
        self.index_store = index_store
        self.policy = policy or FetchPolicy()
        self.metrics = metrics
        self.logger = get_logger("pokedex.detail_cache")
        self._records: Dict[int, DetailRecord] = {}

    def __contains__(self, record_id: int) -> bool:
        return record_id in self._records

    @property
    def size(self) -> int:
        return len(self._records)

    def peek(self, record_id: int) -> Optional[DetailRecord]:
        """Return a cached record without fetching."""
        return self._records.get(record_id)

    async def get(self, record_id: int) -> DetailRecord:
        """
        Return the detail record for ``record_id``.

        Misses go through the fetch policy, falling back to the index
        entry's locator when one exists. Raises ``NotFoundError`` when the
        id is unknown to both the upstream and the index, otherwise the
        last upstream error.
        """
        entry = self.index_store.find(record_id)
        resolution = await self._resolve(record_id, entry.source_url if entry else None)
        if resolution.record is not None:
            return resolution.record

        error = resolution.error
        if entry is None and isinstance(error, PermanentUpstreamError) and error.is_not_found:
            raise NotFoundError(
                f"No catalog record with id {record_id}",
                details={"id": record_id},
            ) from error
        raise error

    async def resolve(self, entry: IndexEntry) -> Resolution:
        """Resolve an index entry, using its own locator for the fallback. Never raises."""
        return await self._resolve(entry.id, entry.source_url)

    async def _resolve(self, record_id: int, source_url: Optional[str]) -> Resolution:
        cached = self._records.get(record_id)
        if cached is not None:
            self._count("detail_cache_hits_total")
            return Resolution(
                record_id=record_id,
                state=HydrationState.RESOLVED,
                record=cached,
                transitions=[HydrationState.RESOLVED],
            )

        self._count("detail_cache_misses_total")

        async def _primary() -> DetailRecord:
            return await self.client.fetch_by_id(record_id)

        fallback = None
        if source_url:
            async def _fallback() -> DetailRecord:
                return await self.client.fetch_by_url(source_url)
            fallback = _fallback
        else:
            self.logger.debug("No catalog locator for id; fallback unavailable", id=record_id)

        resolution = await self.policy.resolve(record_id, _primary, fallback)
        if resolution.record is not None:
            self._records[record_id] = resolution.record
        return resolution

    def _count(self, metric_name: str) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name)
