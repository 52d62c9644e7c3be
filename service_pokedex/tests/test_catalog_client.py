"""
Unit tests for the upstream CatalogClient.
"""

import json

import httpx
import pytest

from service_pokedex.app.adapters.catalog_client import CatalogClient
from shared.errors import PermanentUpstreamError, TransientUpstreamError
from shared.metrics import MetricsCollector


BASE_URL = "https://pokeapi.test/api/v2"

PIKACHU_PAYLOAD = {
    "id": 25,
    "name": "pikachu",
    "height": 4,
    "sprites": {"front_default": "https://sprites.test/25.png", "back_default": None},
    "abilities": [
        {"ability": {"name": "static", "url": "x"}, "is_hidden": False, "slot": 1},
        {"ability": {"name": "lightning-rod", "url": "y"}, "is_hidden": True, "slot": 3},
    ],
    "moves": [
        {
            "move": {"name": "thunder-shock", "url": "z"},
            "version_group_details": [{"level_learned_at": 1}, {"level_learned_at": 5}],
        },
        {"move": {"name": "mega-punch", "url": "w"}, "version_group_details": []},
    ],
    "forms": [{"name": "pikachu", "url": f"{BASE_URL}/pokemon-form/25/"}],
}


def _client(handler, metrics=None):
    transport = httpx.MockTransport(handler)
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=transport)
    return CatalogClient(BASE_URL, client=http_client, metrics=metrics)


class TestCatalogClient:
    """Test cases for CatalogClient."""

    @pytest.mark.asyncio
    async def test_fetch_list(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={
                    "count": 1302,
                    "next": None,
                    "previous": None,
                    "results": [{"name": "bulbasaur", "url": f"{BASE_URL}/pokemon/1/"}],
                },
            )

        client = _client(handler)
        response = await client.fetch_list(10000, 0)
        await client.close()

        assert seen == {"path": "/api/v2/pokemon", "params": {"limit": "10000", "offset": "0"}}
        assert response.count == 1302
        assert response.results[0].name == "bulbasaur"

    @pytest.mark.asyncio
    async def test_fetch_by_id_maps_detail_record(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v2/pokemon/25"
            return httpx.Response(200, json=PIKACHU_PAYLOAD)

        client = _client(handler)
        record = await client.fetch_by_id(25)

        assert record.id == 25
        assert record.number == 25
        assert record.image_url == "https://sprites.test/25.png"
        assert [(a.name, a.is_hidden) for a in record.abilities] == [("static", False), ("lightning-rod", True)]
        assert [(m.name, m.level_learned_at) for m in record.moves] == [("thunder-shock", 1), ("mega-punch", None)]
        assert record.forms[0].url == f"{BASE_URL}/pokemon-form/25/"

    @pytest.mark.asyncio
    async def test_missing_sprite_maps_to_empty_string(self):
        payload = dict(PIKACHU_PAYLOAD, sprites={"front_default": None})

        client = _client(lambda request: httpx.Response(200, json=payload))
        record = await client.fetch_by_id(25)

        assert record.image_url == ""

    @pytest.mark.asyncio
    async def test_fetch_by_url_uses_absolute_locator(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=PIKACHU_PAYLOAD)

        client = _client(handler)
        record = await client.fetch_by_url(f"{BASE_URL}/pokemon/25/")

        assert record.name == "pikachu"
        assert seen == [f"{BASE_URL}/pokemon/25/"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [500, 502, 503])
    async def test_server_errors_are_transient(self, status):
        client = _client(lambda request: httpx.Response(status, text="oops"))

        with pytest.raises(TransientUpstreamError) as exc_info:
            await client.fetch_by_id(25)

        assert exc_info.value.status == status
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 429])
    async def test_client_errors_are_permanent(self, status):
        client = _client(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(PermanentUpstreamError) as exc_info:
            await client.fetch_by_id(25)

        assert exc_info.value.status == status
        assert exc_info.value.retryable is False
        assert exc_info.value.is_not_found is (status == 404)

    @pytest.mark.asyncio
    async def test_transport_errors_are_transient(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)

        with pytest.raises(TransientUpstreamError):
            await client.fetch_by_id(25)

    @pytest.mark.asyncio
    async def test_invalid_json_is_permanent(self):
        client = _client(lambda request: httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"}))

        with pytest.raises(PermanentUpstreamError):
            await client.fetch_by_id(25)

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_permanent(self):
        client = _client(lambda request: httpx.Response(200, content=json.dumps({"name": "pikachu"})))

        with pytest.raises(PermanentUpstreamError):
            await client.fetch_by_id(25)

    @pytest.mark.asyncio
    async def test_ping(self):
        healthy = _client(lambda request: httpx.Response(200, json={"count": 1, "results": []}))
        broken = _client(lambda request: httpx.Response(503))

        assert await healthy.ping() is True
        assert await broken.ping() is False

    @pytest.mark.asyncio
    async def test_records_request_metrics(self):
        metrics = MetricsCollector("pokedex")
        client = _client(lambda request: httpx.Response(503), metrics=metrics)

        with pytest.raises(TransientUpstreamError):
            await client.fetch_by_id(25)

        assert metrics.registry.get_sample_value(
            "upstream_requests_total", {"operation": "detail", "outcome": "server_error"}
        ) == 1.0
