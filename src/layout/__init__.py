"""Layout tree construction for snapshot diagrams."""

from layout.builder import UNNAMED_LABEL, LayoutBuilder, atom_label, build_layout
from layout.rect import LayoutRect, RectKind

__all__ = [
    "UNNAMED_LABEL",
    "LayoutBuilder",
    "LayoutRect",
    "RectKind",
    "atom_label",
    "build_layout",
]
