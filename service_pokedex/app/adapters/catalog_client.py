"""
Async client for the upstream PokeAPI catalog.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from shared.errors import PermanentUpstreamError, TransientUpstreamError
from shared.logging import get_logger

from service_pokedex.app.adapters.upstream_models import CatalogListResponse, DetailResponse
from service_pokedex.app.domain.models import DetailRecord

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


UPSTREAM_SERVICE = "pokeapi"


class CatalogClient:
    """Thin wrapper over the PokeAPI list and detail endpoints.

    The client does not retry: every call maps its failure to either a
    ``TransientUpstreamError`` (5xx, timeouts, connection problems) or a
    ``PermanentUpstreamError`` (4xx, undecodable payloads) and leaves
    recovery to the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger("pokedex.catalog_client")
        self.metrics = metrics
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch_list(self, limit: int, offset: int) -> CatalogListResponse:
        """Fetch one page of the lightweight catalog listing."""
        payload = await self._get_json(
            "list", "/pokemon", params={"limit": limit, "offset": offset}
        )
        return self._parse(CatalogListResponse, payload, operation="list")

    async def fetch_by_id(self, record_id: int) -> DetailRecord:
        """Fetch the full record for an id."""
        payload = await self._get_json("detail", f"/pokemon/{record_id}")
        return self._parse(DetailResponse, payload, operation="detail").to_record()

    async def fetch_by_url(self, url: str) -> DetailRecord:
        """Fetch the full record from its catalog locator.

        Absolute URLs are requested as-is; relative ones resolve against the
        base URL.
        """
        payload = await self._get_json("detail_by_url", url)
        return self._parse(DetailResponse, payload, operation="detail_by_url").to_record()

    async def ping(self) -> bool:
        """Return True when the upstream answers a minimal list request."""
        try:
            await self.fetch_list(1, 0)
            return True
        except (TransientUpstreamError, PermanentUpstreamError):
            return False

    async def _get_json(
        self,
        operation: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            self._record(operation, "transport_error")
            self.logger.warning("Catalog request failed", operation=operation, url=url, error=str(exc))
            raise TransientUpstreamError(
                UPSTREAM_SERVICE,
                f"{type(exc).__name__}: {exc}",
                details={"url": url},
            ) from exc

        if response.status_code >= 500:
            self._record(operation, "server_error")
            self.logger.warning(
                "Catalog server error",
                operation=operation,
                url=url,
                status_code=response.status_code,
            )
            raise TransientUpstreamError(
                UPSTREAM_SERVICE,
                f"Unexpected status {response.status_code}",
                status=response.status_code,
                details={"url": url},
            )

        if response.status_code >= 400:
            self._record(operation, "client_error")
            self.logger.info(
                "Catalog request rejected",
                operation=operation,
                url=url,
                status_code=response.status_code,
            )
            raise PermanentUpstreamError(
                UPSTREAM_SERVICE,
                f"Unexpected status {response.status_code}",
                status=response.status_code,
                details={"url": url},
            )

        try:
            data = response.json()
        except ValueError as exc:
            self._record(operation, "malformed")
            raise PermanentUpstreamError(
                UPSTREAM_SERVICE,
                "Response body is not valid JSON",
                details={"url": url},
            ) from exc

        return data

    def _parse(self, model, payload: Any, *, operation: str):
        try:
            parsed = model.model_validate(payload)
        except PydanticValidationError as exc:
            self._record(operation, "malformed")
            self.logger.warning("Malformed catalog payload", operation=operation, error=str(exc))
            raise PermanentUpstreamError(
                UPSTREAM_SERVICE,
                f"Malformed {operation} payload",
                details={"errors": exc.error_count()},
            ) from exc

        self._record(operation, "ok")
        return parsed

    def _record(self, operation: str, outcome: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("upstream_requests_total", operation=operation, outcome=outcome)
