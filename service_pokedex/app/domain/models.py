"""
Catalog domain records shared by the index, cache and hydration layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class IndexEntry:
    """Lightweight catalog row: enough to sort, page and search."""

    id: int
    name: str
    source_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "sourceUrl": self.source_url}


@dataclass(frozen=True)
class Ability:
    name: str
    is_hidden: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "isHidden": self.is_hidden}


@dataclass(frozen=True)
class Move:
    name: str
    level_learned_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "levelLearnedAt": self.level_learned_at}


@dataclass(frozen=True)
class Form:
    name: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True)
class DetailRecord:
    """Full record for one catalog item."""

    id: int
    name: str
    number: int
    image_url: str
    abilities: Tuple[Ability, ...] = ()
    moves: Tuple[Move, ...] = ()
    forms: Tuple[Form, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the record to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "imageUrl": self.image_url,
            "abilities": [ability.to_dict() for ability in self.abilities],
            "moves": [move.to_dict() for move in self.moves],
            "forms": [form.to_dict() for form in self.forms],
        }


@dataclass(frozen=True)
class PreviewRecord:
    """Search result preview built from the index alone."""

    id: int
    name: str
    number: int
    image_url: str

    @classmethod
    def from_entry(cls, entry: IndexEntry, sprite_url_template: str) -> "PreviewRecord":
        return cls(
            id=entry.id,
            name=entry.name,
            number=entry.id,
            image_url=sprite_url_template.format(id=entry.id),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "number": self.number, "imageUrl": self.image_url}


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
            "startCursor": self.start_cursor,
            "endCursor": self.end_cursor,
        }


@dataclass(frozen=True)
class Edge:
    node: DetailRecord
    cursor: str

    def to_dict(self) -> Dict[str, Any]:
        return {"node": self.node.to_dict(), "cursor": self.cursor}


@dataclass(frozen=True)
class Page:
    """Cursor-paginated slice of hydrated records."""

    edges: List[Edge]
    page_info: PageInfo
    total_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edges": [edge.to_dict() for edge in self.edges],
            "pageInfo": self.page_info.to_dict(),
            "totalCount": self.total_count,
        }


@dataclass(frozen=True)
class PageResult:
    """Un-hydrated slice of the sorted index."""

    items: List[IndexEntry] = field(default_factory=list)
    total_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "totalCount": self.total_count,
        }
