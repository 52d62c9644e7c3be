"""
Concurrent, order-preserving hydration of index slices into pages.
"""

from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from shared.logging import get_logger

from service_pokedex.app.domain.models import DetailRecord, Edge, IndexEntry, Page, PageInfo
from service_pokedex.app.hydration.policy import HydrationState, Resolution
from service_pokedex.app.pagination.cursor import encode_cursor

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_pokedex.app.caching.detail_cache import DetailCache
    from shared.metrics import MetricsCollector


class HydrationPipeline:
    """Fans out detail lookups for a slice and reassembles them into a Page.

    One failing item never cancels or fails its siblings: it is logged and
    left out of the page. Pagination fields are computed from the requested
    window, not from how many items survived.
    """

    def __init__(
        self,
        cache: "DetailCache",
        *,
        max_concurrency: int = 20,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.cache = cache
        self.metrics = metrics
        self.logger = get_logger("pokedex.hydration")
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def hydrate(
        self,
        entries: Sequence[IndexEntry],
        *,
        offset: int,
        limit: int,
        total_count: int,
    ) -> Page:
        start = time.perf_counter()
        tasks = [self._resolve_at(position, entry) for position, entry in enumerate(entries)]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        resolved: List[Tuple[int, DetailRecord]] = []
        for position, outcome in enumerate(outcomes):
            entry = entries[position]
            if isinstance(outcome, BaseException):
                self.logger.error(
                    "Hydration task failed unexpectedly",
                    id=entry.id,
                    name=entry.name,
                    error=str(outcome),
                )
                self._record_outcome(HydrationState.DROPPED)
                continue

            tagged_position, resolution = outcome
            self._record_outcome(resolution.state)
            if resolution.record is None:
                self.logger.warning(
                    "Failed to hydrate catalog entry; dropping from page",
                    id=entry.id,
                    name=entry.name,
                    attempts=resolution.attempts,
                    used_fallback=resolution.used_fallback,
                    error=str(resolution.error),
                )
                continue
            resolved.append((tagged_position, resolution.record))

        resolved.sort(key=lambda pair: pair[0])
        edges = [
            Edge(node=record, cursor=encode_cursor(offset + position))
            for position, record in resolved
        ]

        page = Page(
            edges=edges,
            page_info=PageInfo(
                has_next_page=offset + limit < total_count,
                has_previous_page=offset > 0,
                start_cursor=edges[0].cursor if edges else None,
                end_cursor=edges[-1].cursor if edges else None,
            ),
            total_count=total_count,
        )

        if self.metrics:
            self.metrics.observe_histogram("hydration_duration_seconds", time.perf_counter() - start)
        self.logger.debug(
            "Page hydrated",
            offset=offset,
            requested=len(entries),
            returned=len(edges),
            total_count=total_count,
        )
        return page

    async def _resolve_at(self, position: int, entry: IndexEntry) -> Tuple[int, Resolution]:
        async with self._semaphore:
            return position, await self.cache.resolve(entry)

    def _record_outcome(self, state: HydrationState) -> None:
        if self.metrics:
            self.metrics.increment_counter("hydration_outcomes_total", state=state.value)
