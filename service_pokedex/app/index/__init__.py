"""
Catalog index package.

Holds the immutable index snapshot and its one-shot background loader.
"""

from .store import IndexSnapshot, IndexStore, SortKey

__all__ = ["IndexSnapshot", "IndexStore", "SortKey"]
