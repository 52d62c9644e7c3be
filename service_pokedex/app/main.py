"""
Pokedex service for the Pokedex Access Layer.
"""

from typing import Optional

from fastapi import Path, Query

from shared.base_service import BaseService
from shared.config import ServiceConfig

from service_pokedex.app.adapters.catalog_client import CatalogClient
from service_pokedex.app.catalog.service import CatalogService


class PokedexService(BaseService):
    """HTTP surface over the in-memory catalog."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        catalog_client: Optional[CatalogClient] = None,
        *,
        load_index_on_startup: bool = True,
    ):
        super().__init__("pokedex", 8000, config=config)
        self.catalog_client = catalog_client or CatalogClient(
            self.config.upstream_base_url,
            timeout=self.config.upstream_timeout_seconds,
            metrics=self.metrics,
        )
        self.catalog = CatalogService.from_config(self.config, self.catalog_client, metrics=self.metrics)
        self.load_index_on_startup = load_index_on_startup

        self._setup_catalog_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.pokedex_service = self

    async def on_startup(self) -> None:
        if self.load_index_on_startup:
            self.catalog.index_store.start_background_load()
            self.logger.info("Catalog index load scheduled")

    async def on_shutdown(self) -> None:
        await self.catalog_client.close()

    async def _check_dependencies(self):
        index_store = self.catalog.index_store
        return {
            "index": "ok" if index_store.is_loaded else "loading",
            "index_entries": index_store.size,
            "cached_details": self.catalog.detail_cache.size,
        }

    def _setup_catalog_routes(self):
        """Set up catalog routes."""
        max_page_size = self.config.max_page_size

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "pokedex",
                "message": "Pokedex Access Layer",
                "version": "1.0.0"
            }

        @self.app.get("/api/v1/pokemon")
        async def list_pokemon(
            first: Optional[int] = Query(None, ge=0, le=max_page_size),
            after: Optional[str] = Query(None, description="Opaque cursor of the last seen edge"),
            sort_by: str = Query("number", description="'number' or 'name'"),
        ):
            """Return a cursor-paginated page of full records."""
            page = await self.catalog.get_hydrated_page(first, after, sort_by)
            return page.to_dict()

        @self.app.get("/api/v1/pokemon/index")
        async def list_index(
            limit: int = Query(20, ge=0, le=max_page_size),
            offset: int = Query(0, ge=0),
            sort_by: str = Query("number", description="'number' or 'name'"),
        ):
            """Return an offset-paginated slice of the lightweight index."""
            return self.catalog.get_page(limit, offset, sort_by).to_dict()

        @self.app.get("/api/v1/pokemon/search")
        async def search_pokemon(query: str = Query("", max_length=100)):
            """Return up to ten previews whose names contain the query."""
            previews = self.catalog.search_previews(query)
            return {
                "query": query,
                "count": len(previews),
                "results": [preview.to_dict() for preview in previews],
            }

        @self.app.get("/api/v1/pokemon/{pokemon_id}")
        async def get_pokemon(pokemon_id: int = Path(..., ge=1)):
            """Return the full record for one id."""
            record = await self.catalog.get_details(pokemon_id)
            return record.to_dict()


def create_app(
    config: Optional[ServiceConfig] = None,
    catalog_client: Optional[CatalogClient] = None,
    *,
    load_index_on_startup: bool = True,
):
    """Create FastAPI application."""
    service = PokedexService(config, catalog_client, load_index_on_startup=load_index_on_startup)
    return service.app


if __name__ == "__main__":
    service = PokedexService()
    service.run()
