"""
Catalog query service.
"""

from .service import CatalogService

__all__ = ["CatalogService"]
