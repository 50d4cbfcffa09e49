"""Symbol attribution for snapshot-viz."""

from symbols.index import SymbolIndex

__all__ = ["SymbolIndex"]
