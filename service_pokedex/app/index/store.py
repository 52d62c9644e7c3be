"""
In-memory catalog index.

The index is built once from a single large listing request and published
as an immutable ``IndexSnapshot``. Readers only ever dereference the current
snapshot, so they never observe a partially built list and never block.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple, TYPE_CHECKING

from shared.errors import UpstreamError
from shared.logging import get_logger

from service_pokedex.app.domain.models import IndexEntry

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_pokedex.app.adapters.catalog_client import CatalogClient
    from shared.metrics import MetricsCollector


DEFAULT_LOAD_LIMIT = 10000


class SortKey(str, Enum):
    """Orderings supported by ``IndexStore.sorted_view``."""

    NUMBER = "number"
    NAME = "name"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """Resolve a user-supplied key; anything unrecognised sorts by number."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or cls.NUMBER.value).strip().lower())
        except ValueError:
            return cls.NUMBER


class IndexSnapshot:
    """Immutable, fully built view of the catalog index."""

    __slots__ = ("entries", "by_id")

    def __init__(self, entries: Iterable[IndexEntry] = ()):
        self.entries: Tuple[IndexEntry, ...] = tuple(entries)
        self.by_id: Mapping[int, IndexEntry] = MappingProxyType(
            {entry.id: entry for entry in self.entries}
        )

    def __len__(self) -> int:
        return len(self.entries)


def parse_entry_id(url: str) -> Optional[int]:
    """Return the trailing numeric path segment of a catalog URL, if any."""
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    if not (segment.isascii() and segment.isdigit()):
        return None
    return int(segment)


class IndexStore:
    """Holds the lightweight catalog index for the life of the process."""

    def __init__(
        self,
        client: "CatalogClient",
        *,
        load_limit: int = DEFAULT_LOAD_LIMIT,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.client = client
        self.load_limit = load_limit
        self.metrics = metrics
        self.logger = get_logger("pokedex.index_store")
        self._snapshot = IndexSnapshot()
        self._loaded = False
        self._load_task: Optional[asyncio.Task] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def size(self) -> int:
        return len(self._snapshot)

    def snapshot(self) -> Tuple[IndexEntry, ...]:
        """Return the current immutable entry tuple."""
        return self._snapshot.entries

    def find(self, entry_id: int) -> Optional[IndexEntry]:
        """Return the index entry for ``entry_id`` or None."""
        return self._snapshot.by_id.get(entry_id)

    def sorted_view(self, key: Optional[str] = None) -> List[IndexEntry]:
        """Return the entries ordered by id (default) or by name."""
        entries = self._snapshot.entries
        if SortKey.parse(key) is SortKey.NAME:
            return sorted(entries, key=lambda entry: entry.name)
        return sorted(entries, key=lambda entry: entry.id)

    def publish(self, entries: Iterable[IndexEntry]) -> None:
        """Swap in a fully built snapshot in one step."""
        snapshot = IndexSnapshot(entries)
        self._snapshot = snapshot
        self._loaded = True
        if self.metrics:
            self.metrics.set_gauge("index_entries", len(snapshot))

    async def load(self) -> bool:
        """
        Fetch the whole catalog and publish it.

        Returns True when the index is (or already was) populated. Upstream
        failures are logged and leave the current snapshot untouched.
        """
        if self._loaded:
            self.logger.debug("Catalog index already loaded; skipping", size=self.size)
            return True

        self.logger.info("Initializing catalog index", limit=self.load_limit)
        try:
            response = await self.client.fetch_list(self.load_limit, 0)
        except UpstreamError as exc:
            self.logger.error("Failed to load catalog index", error=exc.message, details=exc.details)
            return False

        entries = self._build_entries((item.name, item.url) for item in response.results)
        self.publish(entries)
        self.logger.info(
            "Catalog index loaded",
            entries=len(entries),
            upstream_count=response.count,
        )
        return True

    def start_background_load(self) -> asyncio.Task:
        """Schedule ``load`` once on the running loop and return its task."""
        if self._load_task is None:
            self._load_task = asyncio.create_task(self._run_background_load())
        return self._load_task

    async def wait_until_loaded(self) -> bool:
        """Wait for the background load, if one was started."""
        if self._load_task is None:
            return self._loaded
        return await self._load_task

    async def _run_background_load(self) -> bool:
        try:
            return await self.load()
        except Exception as exc:
            # The load is fire-and-forget; surface anything unexpected in the logs.
            self.logger.error("Catalog index load crashed", error=str(exc), exc_info=True)
            return False

    def _build_entries(self, rows: Iterable[Tuple[str, str]]) -> List[IndexEntry]:
        entries: List[IndexEntry] = []
        seen = set()
        for name, url in rows:
            entry_id = parse_entry_id(url)
            if entry_id is None:
                self.logger.warning("Dropping catalog entry with malformed url", name=name, url=url)
                continue
            if entry_id in seen:
                self.logger.warning("Dropping duplicate catalog entry", id=entry_id, name=name)
                continue
            seen.add(entry_id)
            entries.append(IndexEntry(id=entry_id, name=name, source_url=url))
        return entries
