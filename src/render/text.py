"""Plain-text report rendered straight from snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

from layout.builder import atom_label
from symbols.index import SymbolIndex
from utils import format_address

if TYPE_CHECKING:
    from collections.abc import Sequence

    from snapshot.models import ResolverEntry, Section, Snapshot

BANNER_WIDTH = 64
INDENT = "  "


def _banner(title: str) -> list[str]:
    rule = "+" + "-" * (BANNER_WIDTH - 2) + "+"
    return [rule, f"| {title:<{BANNER_WIDTH - 4}} |", rule]


def _section_lines(number: int, section: Section, index: SymbolIndex) -> list[str]:
    lines = [f"section {number}: {section.name} @ {format_address(section.address)}"]
    for node in section.nodes:
        lines.append(
            f"{INDENT}atom {format_address(node.address)} - "
            f"{format_address(node.end)} {atom_label(index.lookup_exact(node.address))}"
        )
        for symbol in index.symbols_in_range(node):
            lines.append(
                f"{INDENT * 3}{symbol.name} @ {format_address(symbol.address)}"
            )
        lines.append("")
    lines.append(f"end of {section.name} @ {format_address(section.end)}")
    return lines


def _object_name(snapshot: Snapshot, file_index: int) -> str:
    if 0 <= file_index < len(snapshot.objects):
        return snapshot.objects[file_index]
    return "-"


def _resolver_line(snapshot: Snapshot, entry: ResolverEntry) -> str:
    return (
        f"{INDENT}{entry.name}  {entry.where} #{entry.where_index}  "
        f"local #{entry.local_sym_index}  file {_object_name(snapshot, entry.file)}"
    )


def render_snapshot_text(number: int, snapshot: Snapshot) -> str:
    """Render one snapshot; section numbering starts at 0 for every snapshot."""
    index = SymbolIndex.from_symtab(snapshot.symtab)
    lines = _banner(f"snapshot {number}  timestamp {snapshot.timestamp}")

    lines.append("objects:")
    lines.extend(
        f"{INDENT}[{position}] {name}" for position, name in enumerate(snapshot.objects)
    )
    lines.append("")

    for section_number, section in enumerate(snapshot.sections):
        lines.extend(_section_lines(section_number, section, index))
        lines.append("")

    if snapshot.resolver:
        lines.append("resolver:")
        lines.extend(_resolver_line(snapshot, entry) for entry in snapshot.resolver)
        lines.append("")

    return "\n".join(lines) + "\n"


def render_text(snapshots: Sequence[Snapshot]) -> str:
    """Render every snapshot as an independent report, in input order."""
    return "".join(
        render_snapshot_text(number, snapshot)
        for number, snapshot in enumerate(snapshots)
    )


__all__ = ["render_snapshot_text", "render_text"]
