"""
Upstream payload shapes for the PokeAPI catalog.

Unknown fields are ignored; only what the domain needs is declared.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from service_pokedex.app.domain.models import Ability, DetailRecord, Form, Move


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CatalogListItem(_UpstreamModel):
    name: str
    url: str


class CatalogListResponse(_UpstreamModel):
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[CatalogListItem] = Field(default_factory=list)


class _Named(_UpstreamModel):
    name: str


class Sprites(_UpstreamModel):
    front_default: Optional[str] = None


class AbilitySlot(_UpstreamModel):
    ability: _Named
    is_hidden: bool = False


class VersionGroupDetail(_UpstreamModel):
    level_learned_at: Optional[int] = None


class MoveSlot(_UpstreamModel):
    move: _Named
    version_group_details: List[VersionGroupDetail] = Field(default_factory=list)


class FormRef(_UpstreamModel):
    name: str
    url: str


class DetailResponse(_UpstreamModel):
    id: int
    name: str
    sprites: Sprites = Field(default_factory=Sprites)
    abilities: List[AbilitySlot] = Field(default_factory=list)
    moves: List[MoveSlot] = Field(default_factory=list)
    forms: List[FormRef] = Field(default_factory=list)

    def to_record(self) -> DetailRecord:
        """Map the upstream payload to the domain record."""
        return DetailRecord(
            id=self.id,
            name=self.name,
            number=self.id,
            image_url=self.sprites.front_default or "",
            abilities=tuple(
                Ability(name=slot.ability.name, is_hidden=slot.is_hidden)
                for slot in self.abilities
            ),
            moves=tuple(
                Move(
                    name=slot.move.name,
                    level_learned_at=(
                        slot.version_group_details[0].level_learned_at
                        if slot.version_group_details
                        else None
                    ),
                )
                for slot in self.moves
            ),
            forms=tuple(Form(name=form.name, url=form.url) for form in self.forms),
        )
