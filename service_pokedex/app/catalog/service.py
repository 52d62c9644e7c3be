"""
Catalog service: the query contract consumed by the HTTP layer.

Coordinates the index store, detail cache, hydration pipeline and search
index. Everything here except ``get_details`` and ``get_hydrated_page`` is
synchronous and served from memory.
"""

from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

from shared.logging import get_logger

from service_pokedex.app.adapters.catalog_client import CatalogClient
from service_pokedex.app.caching.detail_cache import DetailCache
from service_pokedex.app.domain.models import DetailRecord, IndexEntry, Page, PageResult, PreviewRecord
from service_pokedex.app.hydration.pipeline import HydrationPipeline
from service_pokedex.app.hydration.policy import FetchPolicy, detail_retry_config
from service_pokedex.app.index.store import IndexStore, SortKey
from service_pokedex.app.pagination import cursor
from service_pokedex.app.search.search_index import SearchIndex

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.config import BaseConfig
    from shared.metrics import MetricsCollector


DEFAULT_PAGE_SIZE = 20
DEFAULT_SPRITE_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{id}.png"
)


class CatalogService:
    """Front door for paging, searching and hydrating the catalog."""

    def __init__(
        self,
        index_store: IndexStore,
        detail_cache: DetailCache,
        pipeline: HydrationPipeline,
        search_index: SearchIndex,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        sprite_url_template: str = DEFAULT_SPRITE_URL_TEMPLATE,
    ) -> None:
        self.index_store = index_store
        self.detail_cache = detail_cache
        self.pipeline = pipeline
        self.search_index = search_index
        self.default_page_size = default_page_size
        self.sprite_url_template = sprite_url_template
        self.logger = get_logger("pokedex.catalog")

    @classmethod
    def from_config(
        cls,
        config: "BaseConfig",
        client: CatalogClient,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ) -> "CatalogService":
        """Wire the catalog components from service configuration."""
        index_store = IndexStore(client, load_limit=config.index_load_limit, metrics=metrics)
        policy = FetchPolicy(
            detail_retry_config(
                retries=config.detail_retry_attempts,
                base_delay=config.detail_retry_base_delay,
                max_delay=config.detail_retry_max_delay,
                jitter=config.retry_jitter,
            )
        )
        detail_cache = DetailCache(client, index_store, policy, metrics=metrics)
        pipeline = HydrationPipeline(
            detail_cache,
            max_concurrency=config.hydration_concurrency,
            metrics=metrics,
        )
        search_index = SearchIndex(index_store, result_limit=config.search_result_limit)
        return cls(
            index_store,
            detail_cache,
            pipeline,
            search_index,
            default_page_size=config.default_page_size,
            sprite_url_template=config.sprite_url_template,
        )

    @staticmethod
    def encode_cursor(offset: int) -> str:
        return cursor.encode_cursor(offset)

    @staticmethod
    def decode_cursor(value: Optional[str]) -> Optional[int]:
        return cursor.decode_cursor(value)

    async def get_details(self, record_id: int) -> DetailRecord:
        """Return one full record, fetching it on a cache miss."""
        return await self.detail_cache.get(record_id)

    def get_page(self, limit: int, offset: int, sort_key: Optional[str] = None) -> PageResult:
        """Return an un-hydrated slice of the sorted index."""
        if not self.index_store.is_loaded:
            return PageResult(items=[], total_count=0)

        items, total_count = cursor.slice_page(
            self.index_store.sorted_view(SortKey.parse(sort_key)), limit, offset
        )
        return PageResult(items=items, total_count=total_count)

    async def get_hydrated_page(
        self,
        limit: Optional[int] = None,
        after_cursor: Optional[str] = None,
        sort_key: Optional[str] = None,
    ) -> Page:
        """
        Return the page of full records that follows ``after_cursor``.

        A cursor that does not decode starts from the beginning. Items whose
        details cannot be fetched are left out; ``total_count`` and the
        page-info flags still describe the requested window.
        """
        requested_limit = self.default_page_size if limit is None else max(limit, 0)
        after = cursor.decode_cursor(after_cursor)
        offset = after + 1 if after is not None else 0
        if after_cursor is not None and after is None:
            self.logger.info("Ignoring malformed cursor", cursor=after_cursor)

        page_result = self.get_page(requested_limit, offset, sort_key)
        return await self.pipeline.hydrate(
            page_result.items,
            offset=offset,
            limit=requested_limit,
            total_count=page_result.total_count,
        )

    def search(self, query: str) -> List[IndexEntry]:
        """Case-insensitive name search over the index."""
        return self.search_index.search(query)

    def search_previews(self, query: str) -> List[PreviewRecord]:
        """Search results with statically derived sprite URLs; no upstream calls."""
        return [
            PreviewRecord.from_entry(entry, self.sprite_url_template)
            for entry in self.search_index.search(query)
        ]
