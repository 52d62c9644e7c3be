"""
Pokedex Service package for the Pokedex Access Layer.

The service fronts the read-only PokeAPI catalog with:
- An in-memory index loaded once at startup (sorting, paging, search)
- A process-lifetime cache of full records
- Concurrent hydration with per-item retry and fallback

Structure:
- app.main: FastAPI app, routes, and lifecycle wiring.
- app.adapters: HTTP client and payload models for the upstream catalog.
- app.domain: Catalog records.
- app.index: Index snapshot store.
- app.pagination: Cursor codec and slicing.
- app.caching: Detail cache.
- app.hydration: Fetch policy and hydration pipeline.
- app.search: Name search.
- app.catalog: Query contract tying the pieces together.
"""
