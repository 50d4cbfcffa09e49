"""Decoding of snapshot documents into validated models.

Besides the nested ``sections[].nodes[]`` layout, two alternative encodings
are normalised here before validation:

- flat nodes: a snapshot-level ``nodes`` array whose entries carry a
  ``section`` ordinal into ``sections``;
- tagged events: a snapshot-level ``nodes`` array of ``section_start`` /
  ``section_end`` / ``atom_start`` / ``atom_end`` / ``relocation`` events,
  each with an ``address``; ``section_start`` carries ``payload.name`` and
  ``relocation`` carries ``payload.target``.

Both produce the same nested records, so layout never sees event tags.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from diagnostics import get_logger
from snapshot.models import Snapshot
from utils import parse_u64

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger("decode")

EVENT_TAGS = frozenset(
    {"section_start", "section_end", "atom_start", "atom_end", "relocation"}
)


class SnapshotDecodeError(Exception):
    """Raised when a snapshot document does not match the expected schema."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"snapshot[{index}]: {message}"
        super().__init__(message)


def load_snapshots(path: Path) -> list[Snapshot]:
    """Read and decode a snapshot document; OSError propagates."""
    raw = path.read_bytes()
    snapshots = decode_snapshots(raw)
    logger.debug("decoded %d snapshot(s) from %s", len(snapshots), path)
    return snapshots


def decode_snapshots(raw: bytes | str) -> list[Snapshot]:
    """Decode a JSON array of snapshot records.

    Raises:
        SnapshotDecodeError: On invalid JSON, a non-array document, or any
            record failing normalisation or schema validation.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc}"
        raise SnapshotDecodeError(msg) from exc

    if not isinstance(data, list):
        msg = "Expected a JSON array of snapshots"
        raise SnapshotDecodeError(msg)

    snapshots: list[Snapshot] = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            msg = "Expected a JSON object"
            raise SnapshotDecodeError(msg, index=index)
        normalized = _normalize_record(record, index)
        try:
            snapshots.append(Snapshot.model_validate(normalized))
        except ValidationError as exc:
            msg = f"Schema validation failed: {exc}"
            raise SnapshotDecodeError(msg, index=index) from exc
    return snapshots


def _normalize_record(record: dict[str, Any], index: int) -> dict[str, Any]:
    if "nodes" not in record:
        return record

    nodes = record["nodes"]
    if not isinstance(nodes, list):
        msg = "'nodes' must be an array"
        raise SnapshotDecodeError(msg, index=index)

    normalized = {key: value for key, value in record.items() if key != "nodes"}
    if any(isinstance(node, dict) and "tag" in node for node in nodes):
        if record.get("sections"):
            logger.debug(
                "snapshot[%d]: tagged nodes replace the sections array", index
            )
        normalized["sections"] = _sections_from_events(nodes, index)
    else:
        normalized["sections"] = _attach_flat_nodes(
            record.get("sections") or [], nodes, index
        )
    return normalized


def _attach_flat_nodes(
    sections: Any, nodes: list[Any], index: int
) -> list[dict[str, Any]]:
    if not isinstance(sections, list) or not all(
        isinstance(section, dict) for section in sections
    ):
        msg = "'sections' must be an array of objects"
        raise SnapshotDecodeError(msg, index=index)

    grouped: list[list[Any]] = [
        list(section.get("nodes") or []) for section in sections
    ]
    for position, node in enumerate(nodes):
        if not isinstance(node, dict):
            msg = f"nodes[{position}]: expected a JSON object"
            raise SnapshotDecodeError(msg, index=index)
        ordinal = node.get("section")
        if isinstance(ordinal, bool) or not isinstance(ordinal, int):
            msg = f"nodes[{position}]: missing integer 'section' ordinal"
            raise SnapshotDecodeError(msg, index=index)
        if not 0 <= ordinal < len(sections):
            msg = (
                f"nodes[{position}]: section ordinal {ordinal} is out of range "
                f"(have {len(sections)} sections)"
            )
            raise SnapshotDecodeError(msg, index=index)
        grouped[ordinal].append(node)

    return [
        {**section, "nodes": section_nodes}
        for section, section_nodes in zip(sections, grouped, strict=True)
    ]


def _event_address(event: dict[str, Any], position: int, index: int) -> int:
    try:
        return parse_u64(event.get("address"))
    except (TypeError, ValueError) as exc:
        msg = f"nodes[{position}]: invalid address: {exc}"
        raise SnapshotDecodeError(msg, index=index) from exc


def _required(
    payload: dict[str, Any], key: str, tag: str, position: int, index: int
) -> Any:
    if key not in payload:
        msg = f"nodes[{position}]: {tag} payload is missing '{key}'"
        raise SnapshotDecodeError(msg, index=index)
    return payload[key]


def _span(start: int, end: int, what: str, position: int, index: int) -> int:
    if end < start:
        msg = (
            f"nodes[{position}]: {what} ends at {end:#x} before it starts at {start:#x}"
        )
        raise SnapshotDecodeError(msg, index=index)
    return end - start


def _sections_from_events(events: list[Any], index: int) -> list[dict[str, Any]]:
    sections: list[dict[str, Any]] = []
    section: dict[str, Any] | None = None
    atom: dict[str, Any] | None = None

    for position, event in enumerate(events):
        if not isinstance(event, dict):
            msg = f"nodes[{position}]: expected a JSON object"
            raise SnapshotDecodeError(msg, index=index)
        tag = event.get("tag")
        if tag not in EVENT_TAGS:
            msg = f"nodes[{position}]: unknown node tag {tag!r}"
            raise SnapshotDecodeError(msg, index=index)
        payload = event.get("payload") or {}
        if not isinstance(payload, dict):
            msg = f"nodes[{position}]: 'payload' must be an object"
            raise SnapshotDecodeError(msg, index=index)
        address = _event_address(event, position, index)

        if tag == "section_start":
            if section is not None:
                msg = f"nodes[{position}]: section_start inside an open section"
                raise SnapshotDecodeError(msg, index=index)
            section = {
                "name": _required(payload, "name", tag, position, index),
                "address": address,
                "nodes": [],
            }
        elif tag == "section_end":
            if section is None or atom is not None:
                msg = f"nodes[{position}]: section_end without a matching section_start"
                raise SnapshotDecodeError(msg, index=index)
            section["size"] = _span(
                section["address"], address, "section", position, index
            )
            sections.append(section)
            section = None
        elif tag == "atom_start":
            if section is None or atom is not None:
                msg = f"nodes[{position}]: misplaced atom_start"
                raise SnapshotDecodeError(msg, index=index)
            atom = {"address": address, "links": []}
        elif tag == "atom_end":
            if atom is None or section is None:
                msg = f"nodes[{position}]: atom_end without a matching atom_start"
                raise SnapshotDecodeError(msg, index=index)
            atom["size"] = _span(atom["address"], address, "atom", position, index)
            section["nodes"].append(atom)
            atom = None
        else:
            if atom is None:
                msg = f"nodes[{position}]: relocation outside an atom"
                raise SnapshotDecodeError(msg, index=index)
            target = _required(payload, "target", tag, position, index)
            atom["links"].append({"source_address": address, "target_address": target})

    if section is not None or atom is not None:
        msg = "unterminated section or atom at end of nodes"
        raise SnapshotDecodeError(msg, index=index)
    return sections


__all__ = [
    "EVENT_TAGS",
    "SnapshotDecodeError",
    "decode_snapshots",
    "load_snapshots",
]
