"""Address lookups over one snapshot's symbol table."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from snapshot.models import Node, Symbol, Symtab


class SymbolIndex:
    """Address-to-symbols index for a single snapshot.

    Only globals and locals are indexed (in that order); undefined symbols
    carry no placement address.
    """

    def __init__(self, symtab: Symtab) -> None:
        self._symtab = symtab
        self._by_address: dict[int, list[Symbol]] = {}
        for symbol in self._placed():
            self._by_address.setdefault(symbol.address, []).append(symbol)

    @classmethod
    def from_symtab(cls, symtab: Symtab) -> SymbolIndex:
        return cls(symtab)

    def _placed(self) -> Iterator[Symbol]:
        yield from self._symtab.globals
        yield from self._symtab.locals

    def lookup_exact(self, address: int) -> list[Symbol]:
        """Return every symbol bound exactly at ``address``, in table order."""
        return list(self._by_address.get(address, ()))

    def symbols_in_range(self, node: Node) -> list[Symbol]:
        """Return the interior symbols of an atom.

        A symbol is interior when ``node.address < s.address < node.end``;
        the atom's own address is its name, not an interior symbol. Symbols
        are unique by address: the first one seen (globals before locals)
        wins and later aliases at that address are dropped. Results follow
        table order, not address order.
        """
        end = node.address + node.size
        found: dict[int, Symbol] = {}
        for symbol in self._placed():
            if symbol.address == node.address:
                continue
            if node.address <= symbol.address < end and symbol.address not in found:
                found[symbol.address] = symbol
        return list(found.values())


__all__ = ["SymbolIndex"]
