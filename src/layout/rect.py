"""Positioned rectangle tree produced by the layout builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterator

    from snapshot.models import Symbol

RectKind = Literal["snapshot", "section", "atom"]


@dataclass
class LayoutRect:
    """A box in the diagram; each rect exclusively owns its children."""

    kind: RectKind
    x: int
    y: int
    width: int
    height: int
    label: str | None = None
    address: int | None = None
    size: int | None = None
    symbols: tuple[Symbol, ...] = ()
    children: list[LayoutRect] = field(default_factory=list)

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    def walk(self) -> Iterator[LayoutRect]:
        """Yield this rect and its descendants depth-first in child order."""
        yield self
        for child in self.children:
            yield from child.walk()


__all__ = ["LayoutRect", "RectKind"]
