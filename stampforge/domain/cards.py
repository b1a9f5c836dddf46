"""Card design models and the design catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .exceptions import NotFoundError


@dataclass(frozen=True, slots=True)
class SlotPosition:
    """Center of a stamp slot on the template, in template pixels."""

    cx: int
    cy: int


@dataclass(frozen=True, slots=True)
class StampStyle:
    """Size of the stamp glyph and a nudge applied to every slot."""

    width: int = 90
    height: int = 90
    dx: int = 0
    dy: int = 0


@dataclass(frozen=True, slots=True)
class CardDesign:
    """Definition of a visual stamp card."""

    card_id: str
    name: str
    template: str
    slots: tuple[SlotPosition, ...]
    style: StampStyle = field(default_factory=StampStyle)

    @property
    def slot_count(self) -> int:
        return len(self.slots)


class CardCatalog:
    """Read-only registry of card designs, keyed by id."""

    def __init__(self, designs: Iterable[CardDesign] = ()) -> None:
        registered: dict[str, CardDesign] = {}
        for design in designs:
            if design.card_id in registered:
                raise ValueError(f"Card {design.card_id} already registered")
            registered[design.card_id] = design
        self._designs: Mapping[str, CardDesign] = MappingProxyType(registered)

    def lookup(self, card_id: str) -> CardDesign:
        try:
            return self._designs[card_id]
        except KeyError as exc:
            raise NotFoundError(f"Card {card_id} not found") from exc

    def iter_designs(self) -> Iterator[CardDesign]:
        return iter(self._designs.values())

    def choices(self) -> list[tuple[str, str]]:
        """Return ``(card_id, name)`` pairs in catalog order."""
        return [(design.card_id, design.name) for design in self._designs.values()]

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._designs

    def __len__(self) -> int:
        return len(self._designs)
