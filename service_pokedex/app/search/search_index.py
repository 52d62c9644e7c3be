"""
Substring search over the catalog index.
"""

from typing import List, TYPE_CHECKING

from service_pokedex.app.domain.models import IndexEntry

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_pokedex.app.index.store import IndexStore


DEFAULT_RESULT_LIMIT = 10


class SearchIndex:
    """Case-insensitive name search in index order, no ranking."""

    def __init__(self, index_store: "IndexStore", *, result_limit: int = DEFAULT_RESULT_LIMIT):
        self.index_store = index_store
        self.result_limit = result_limit

    def search(self, query: str) -> List[IndexEntry]:
        needle = (query or "").strip().lower()
        if not needle:
            return []

        matches: List[IndexEntry] = []
        for entry in self.index_store.snapshot():
            if needle in entry.name.lower():
                matches.append(entry)
                if len(matches) >= self.result_limit:
                    break
        return matches
