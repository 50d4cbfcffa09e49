"""Consistency checks for decoded snapshots.

Checks report suspicious input without changing it: layout trusts the
snapshot regardless of what is reported here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from snapshot.models import Section, Snapshot


@dataclass(frozen=True)
class CheckMessage:
    snapshot: int
    where: str
    message: str

    def location(self) -> str:
        return f"snapshot[{self.snapshot}].{self.where}"

    def to_dict(self) -> dict[str, object]:
        return {
            "snapshot": self.snapshot,
            "where": self.where,
            "message": self.message,
        }


@dataclass
class CheckResult:
    errors: list[CheckMessage] = field(default_factory=list)
    warnings: list[CheckMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, message: CheckMessage, *, strict: bool) -> None:
        (self.errors if strict else self.warnings).append(message)


def check_snapshots(
    snapshots: Sequence[Snapshot], *, strict: bool = False
) -> CheckResult:
    """Check every snapshot; with ``strict`` all findings become errors."""
    result = CheckResult()
    for index, snapshot in enumerate(snapshots):
        for section_index, section in enumerate(snapshot.sections):
            _check_section(index, section_index, section, result, strict=strict)
        _check_resolver(index, snapshot, result, strict=strict)
    return result


def _check_section(
    index: int,
    section_index: int,
    section: Section,
    result: CheckResult,
    *,
    strict: bool,
) -> None:
    previous = None
    for node_index, node in enumerate(section.nodes):
        where = f"sections[{section_index}].nodes[{node_index}]"
        if node.address < section.address or node.end > section.end:
            result.add(
                CheckMessage(
                    snapshot=index,
                    where=where,
                    message=(
                        f"atom [{node.address:#x}..{node.end:#x}) outside section "
                        f"'{section.name}' [{section.address:#x}..{section.end:#x})"
                    ),
                ),
                strict=strict,
            )
        if previous is not None and previous.end > node.address:
            result.add(
                CheckMessage(
                    snapshot=index,
                    where=where,
                    message=(
                        f"atom at {node.address:#x} overlaps previous atom "
                        f"[{previous.address:#x}..{previous.end:#x})"
                    ),
                ),
                strict=strict,
            )
        previous = node


def _check_resolver(
    index: int, snapshot: Snapshot, result: CheckResult, *, strict: bool
) -> None:
    tables = {
        "global": snapshot.symtab.globals,
        "undef": snapshot.symtab.undefs,
    }
    for entry_index, entry in enumerate(snapshot.resolver):
        where = f"resolver[{entry_index}]"
        table = tables[entry.where]
        if not 0 <= entry.where_index < len(table):
            result.add(
                CheckMessage(
                    snapshot=index,
                    where=where,
                    message=(
                        f"'{entry.name}' points at {entry.where} #{entry.where_index} "
                        f"but the table has {len(table)} entries"
                    ),
                ),
                strict=strict,
            )
        if entry.file != -1 and not 0 <= entry.file < len(snapshot.objects):
            result.add(
                CheckMessage(
                    snapshot=index,
                    where=where,
                    message=(
                        f"'{entry.name}' references object #{entry.file} "
                        f"but there are {len(snapshot.objects)} objects"
                    ),
                ),
                strict=strict,
            )


__all__ = ["CheckMessage", "CheckResult", "check_snapshots"]
