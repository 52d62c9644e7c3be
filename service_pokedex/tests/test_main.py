"""
HTTP tests for the Pokedex service endpoints.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from fakes import FakeCatalogClient, make_entry
from service_pokedex.app.main import create_app
from service_pokedex.app.pagination.cursor import encode_cursor
from shared.config import get_config


@pytest.fixture
def config():
    return get_config(
        "pokedex",
        8000,
        detail_retry_base_delay=0.0,
        sprite_url_template="https://sprites.test/{id}.png",
        max_page_size=50,
    )


@pytest.fixture
def app(config, fake_client):
    return create_app(config, fake_client, load_index_on_startup=False)


@pytest.fixture
def pokedex(app):
    service = app.state.pokedex_service
    service.catalog.index_store.publish([make_entry(1, "pikachu"), make_entry(2, "charizard")])
    return service


@pytest.fixture
def client(app, pokedex):
    return TestClient(app)


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["service"] == "pokedex"


def test_list_pokemon_returns_connection(client):
    response = client.get("/api/v1/pokemon", params={"first": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 2
    assert [edge["node"]["name"] for edge in body["edges"]] == ["pikachu"]
    assert body["edges"][0]["cursor"] == encode_cursor(0)
    assert body["pageInfo"] == {
        "hasNextPage": True,
        "hasPreviousPage": False,
        "startCursor": encode_cursor(0),
        "endCursor": encode_cursor(0),
    }

    follow = client.get("/api/v1/pokemon", params={"first": 1, "after": body["pageInfo"]["endCursor"]})
    assert [edge["node"]["id"] for edge in follow.json()["edges"]] == [2]


def test_list_pokemon_oversized_cursor_starts_from_beginning(client):
    oversized = base64.b64encode(b"9" * 5000).decode()

    response = client.get("/api/v1/pokemon", params={"first": 1, "after": oversized})

    assert response.status_code == 200
    body = response.json()
    assert [edge["node"]["id"] for edge in body["edges"]] == [1]
    assert body["pageInfo"]["hasPreviousPage"] is False


def test_list_pokemon_sorted_by_name(client):
    response = client.get("/api/v1/pokemon", params={"sort_by": "name"})

    assert [edge["node"]["name"] for edge in response.json()["edges"]] == ["charizard", "pikachu"]


def test_list_pokemon_rejects_oversized_page(client):
    response = client.get("/api/v1/pokemon", params={"first": 51})

    assert response.status_code == 422


def test_list_pokemon_before_index_loads(config):
    app = create_app(config, FakeCatalogClient([(1, "pikachu")]), load_index_on_startup=False)
    response = TestClient(app).get("/api/v1/pokemon")

    assert response.status_code == 200
    assert response.json() == {
        "edges": [],
        "pageInfo": {
            "hasNextPage": False,
            "hasPreviousPage": False,
            "startCursor": None,
            "endCursor": None,
        },
        "totalCount": 0,
    }


def test_index_page(client):
    response = client.get("/api/v1/pokemon/index", params={"limit": 1, "offset": 1})

    assert response.status_code == 200
    assert response.json() == {
        "items": [
            {"id": 2, "name": "charizard", "sourceUrl": "https://pokeapi.test/api/v2/pokemon/2/"}
        ],
        "totalCount": 2,
    }


def test_search(client):
    response = client.get("/api/v1/pokemon/search", params={"query": "Chari"})

    assert response.status_code == 200
    assert response.json() == {
        "query": "Chari",
        "count": 1,
        "results": [
            {"id": 2, "name": "charizard", "number": 2, "imageUrl": "https://sprites.test/2.png"}
        ],
    }


def test_search_blank_query(client):
    assert client.get("/api/v1/pokemon/search").json()["results"] == []


def test_get_pokemon(client, fake_client):
    response = client.get("/api/v1/pokemon/1")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "pikachu"
    assert body["imageUrl"] == "https://sprites.test/1.png"
    assert body["abilities"] == [{"name": "static", "isHidden": False}]

    client.get("/api/v1/pokemon/1")
    assert fake_client.id_calls == [1]


def test_get_pokemon_not_found(client):
    response = client.get("/api/v1/pokemon/9999", headers={"X-Request-ID": "req-404"})

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "NOT_FOUND"
    assert body["details"] == {"id": 9999}
    assert body["request_id"] == "req-404"
    assert response.headers["X-Request-ID"] == "req-404"


def test_get_pokemon_rejects_non_positive_id(client):
    assert client.get("/api/v1/pokemon/0").status_code == 422


def test_health_reports_index_state(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["dependencies"] == {"index": "ok", "index_entries": 2, "cached_details": 0}


def test_request_id_generated(client):
    response = client.get("/health")

    assert response.headers["X-Request-ID"]


def test_metrics_endpoint(client):
    client.get("/api/v1/pokemon/1")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "detail_cache_misses_total" in response.text
    assert "http_requests_total" in response.text


def test_lifespan_loads_index_and_closes_client(config):
    fake_client = FakeCatalogClient([(1, "pikachu")])
    app = create_app(config, fake_client)

    with TestClient(app) as client:
        service = app.state.pokedex_service
        client.portal.call(service.catalog.index_store.wait_until_loaded)
        assert client.get("/health").json()["dependencies"]["index"] == "ok"

    assert fake_client.closed is True


def test_http_metrics_use_route_template(client, pokedex):
    client.get("/api/v1/pokemon/1")
    client.get("/api/v1/pokemon/2")
    client.get("/no/such/path")

    registry = pokedex.metrics.registry
    assert registry.get_sample_value(
        "http_requests_total",
        {"method": "GET", "endpoint": "/api/v1/pokemon/{pokemon_id}", "status_code": "200"},
    ) == 2.0
    assert registry.get_sample_value(
        "http_requests_total",
        {"method": "GET", "endpoint": "/api/v1/pokemon/1", "status_code": "200"},
    ) is None
    assert registry.get_sample_value(
        "http_requests_total",
        {"method": "GET", "endpoint": "unmatched", "status_code": "404"},
    ) == 1.0
