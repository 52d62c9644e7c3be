"""
Adapters package for the Pokedex Service.

Contains the HTTP client for the upstream catalog. Adapters encapsulate:

- Base URLs and request shapes
- Payload validation
- Error mapping to shared transient/permanent upstream errors

Retries live in the hydration policy, not here.
"""

from .catalog_client import CatalogClient

__all__ = ["CatalogClient"]
