"""Snapshot models for decoded linker state.

A snapshot captures the linker's in-memory state at one point of a link:
input objects, output sections with their placed atoms, the symbol table
and the resolver table. Models are frozen once validated.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from utils import parse_u64


def _coerce_u64(value: Any) -> int:
    try:
        return parse_u64(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc


U64 = Annotated[int, BeforeValidator(_coerce_u64)]
U32 = Annotated[int, Field(ge=0, le=(1 << 32) - 1)]
I32 = Annotated[int, Field(ge=-(1 << 31), le=(1 << 31) - 1)]
U8 = Annotated[int, Field(ge=0, le=0xFF)]

ResolverWhere = Literal["global", "undef"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Link(_Frozen):
    """Relocation edge from one atom address to a target address."""

    source_address: U64
    target_address: U64


class Node(_Frozen):
    """One atom placed inside a section."""

    address: U64
    size: U64
    section: U8 | None = Field(
        default=None, description="Section ordinal (flat node encoding only)"
    )
    links: tuple[Link, ...]

    @property
    def end(self) -> int:
        return self.address + self.size


class Section(_Frozen):
    """A named contiguous output region."""

    name: str
    address: U64
    size: U64
    nodes: tuple[Node, ...] = ()

    @property
    def end(self) -> int:
        return self.address + self.size


class Symbol(_Frozen):
    name: str
    address: U64
    section: U8


class Symtab(_Frozen):
    locals: tuple[Symbol, ...]
    globals: tuple[Symbol, ...]
    undefs: tuple[Symbol, ...]


class ResolverEntry(_Frozen):
    """Where a symbol name was finally bound."""

    name: str
    where: ResolverWhere
    where_index: U32
    local_sym_index: U32
    file: I32 = Field(description="Owning object index, -1 when none")


class Snapshot(_Frozen):
    """One point-in-time capture of linker state."""

    timestamp: int
    objects: tuple[str, ...]
    sections: tuple[Section, ...]
    symtab: Symtab
    resolver: tuple[ResolverEntry, ...]


__all__ = [
    "Link",
    "Node",
    "ResolverEntry",
    "ResolverWhere",
    "Section",
    "Snapshot",
    "Symbol",
    "Symtab",
    "I32",
    "U8",
    "U32",
    "U64",
]
