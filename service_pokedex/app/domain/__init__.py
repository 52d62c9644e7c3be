"""
Catalog domain records.
"""

from .models import (
    Ability,
    DetailRecord,
    Edge,
    Form,
    IndexEntry,
    Move,
    Page,
    PageInfo,
    PageResult,
    PreviewRecord,
)

__all__ = [
    "Ability",
    "DetailRecord",
    "Edge",
    "Form",
    "IndexEntry",
    "Move",
    "Page",
    "PageInfo",
    "PageResult",
    "PreviewRecord",
]
