"""
Unit tests for SearchIndex.
"""

import pytest

from fakes import FakeCatalogClient, make_entry
from service_pokedex.app.index.store import IndexStore
from service_pokedex.app.search.search_index import SearchIndex


@pytest.fixture
def store():
    store = IndexStore(FakeCatalogClient())
    store.publish(
        [
            make_entry(25, "pikachu"),
            make_entry(1, "bulbasaur"),
            make_entry(26, "raichu"),
            make_entry(172, "pichu"),
            make_entry(10080, "Pikachu-Rock-Star"),
        ]
    )
    return store


class TestSearchIndex:
    """Test cases for SearchIndex."""

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_returns_nothing(self, store, query):
        assert SearchIndex(store).search(query) == []

    def test_case_insensitive_substring_in_index_order(self, store):
        results = SearchIndex(store).search("  PIKA ")

        assert [entry.id for entry in results] == [25, 10080]

    def test_matches_inside_names(self, store):
        results = SearchIndex(store).search("chu")

        assert [entry.name for entry in results] == ["pikachu", "raichu", "pichu", "Pikachu-Rock-Star"]

    def test_no_match(self, store):
        assert SearchIndex(store).search("mewtwo") == []

    def test_results_capped_at_ten(self):
        store = IndexStore(FakeCatalogClient())
        store.publish([make_entry(i, f"unown-{i}") for i in range(1, 30)])

        results = SearchIndex(store).search("unown")

        assert len(results) == 10
        assert [entry.id for entry in results] == list(range(1, 11))

    def test_custom_limit(self, store):
        assert len(SearchIndex(store, result_limit=2).search("chu")) == 2

    def test_empty_index(self):
        store = IndexStore(FakeCatalogClient())

        assert SearchIndex(store).search("pika") == []
