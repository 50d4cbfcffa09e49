"""Layout tree builder: snapshot -> sections -> atoms as stacked boxes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from diagnostics import get_logger
from layout.rect import LayoutRect
from settings.config import LayoutSettings
from symbols.index import SymbolIndex

if TYPE_CHECKING:
    from snapshot.models import Node, Section, Snapshot, Symbol

logger = get_logger("layout")

UNNAMED_LABEL = "unnamed"


def atom_label(own_symbols: list[Symbol]) -> str:
    """Label an atom by the symbols bound at its start address."""
    if not own_symbols:
        return UNNAMED_LABEL
    return ", ".join(symbol.name for symbol in own_symbols)


class LayoutBuilder:
    """Builds the rectangle tree for one snapshot.

    Every box is placed directly below its previous sibling, so siblings never
    overlap. Heights accumulate bottom-up: a section starts at the header
    height and grows by one row per atom; the root grows by each finished
    section.
    """

    def __init__(self, settings: LayoutSettings | None = None) -> None:
        self.settings = settings or LayoutSettings()

    def build(self, snapshot: Snapshot, index: SymbolIndex | None = None) -> LayoutRect:
        if index is None:
            index = SymbolIndex.from_symtab(snapshot.symtab)

        root = LayoutRect(
            kind="snapshot",
            x=0,
            y=0,
            width=self.settings.width,
            height=0,
        )
        for section in snapshot.sections:
            section_rect = self._place_section(root, section, index)
            root.height += section_rect.height

        logger.debug(
            "laid out snapshot %s: %d section(s), height %d",
            snapshot.timestamp,
            len(root.children),
            root.height,
        )
        return root

    def _place_section(
        self, root: LayoutRect, section: Section, index: SymbolIndex
    ) -> LayoutRect:
        y = root.children[-1].bottom if root.children else root.y
        rect = LayoutRect(
            kind="section",
            x=root.x,
            y=y,
            width=root.width - self.settings.right_margin,
            height=self.settings.section_header_height,
            label=section.name,
            address=section.address,
            size=section.size,
        )
        root.children.append(rect)

        for node in section.nodes:
            atom_rect = self._place_atom(rect, node, index)
            rect.height += atom_rect.height
        return rect

    def _place_atom(
        self, section_rect: LayoutRect, node: Node, index: SymbolIndex
    ) -> LayoutRect:
        indent = self.settings.atom_indent
        if section_rect.children:
            y = section_rect.children[-1].bottom
        else:
            y = section_rect.y + self.settings.atom_top_offset
        rect = LayoutRect(
            kind="atom",
            x=section_rect.x + indent,
            y=y,
            width=section_rect.width - 2 * indent,
            height=self.settings.atom_row_height,
            label=atom_label(index.lookup_exact(node.address)),
            address=node.address,
            size=node.size,
        )
        section_rect.children.append(rect)
        rect.symbols = tuple(index.symbols_in_range(node))
        return rect


def build_layout(
    snapshot: Snapshot, settings: LayoutSettings | None = None
) -> LayoutRect:
    """Build the rectangle tree for a snapshot with a fresh symbol index."""
    return LayoutBuilder(settings).build(snapshot)


__all__ = ["UNNAMED_LABEL", "LayoutBuilder", "atom_label", "build_layout"]
