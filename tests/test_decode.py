from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from snapshot.decode import SnapshotDecodeError, decode_snapshots, load_snapshots

FIXTURE = Path(__file__).parent / "fixtures" / "two_snapshots.json"


def _record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "timestamp": 7,
        "objects": ["a.o"],
        "sections": [],
        "symtab": {"locals": [], "globals": [], "undefs": []},
        "resolver": [],
    }
    record.update(overrides)
    return record


def _decode(*records: dict[str, Any]) -> list:
    return decode_snapshots(json.dumps(list(records)).encode("utf-8"))


def test_load_fixture_preserves_order_and_nesting() -> None:
    snapshots = load_snapshots(FIXTURE)

    assert [snapshot.timestamp for snapshot in snapshots] == [1000, 2000]
    first = snapshots[0]
    assert first.objects == ("main.o", "util.o")
    assert [section.name for section in first.sections] == ["__TEXT", "__DATA"]
    assert [node.address for node in first.sections[0].nodes] == [4096, 4128]
    assert first.sections[0].nodes[0].links[0].target_address == 8192
    assert first.resolver[1].where == "undef"
    assert first.resolver[1].file == -1


def test_hex_strings_are_accepted_for_addresses() -> None:
    second = load_snapshots(FIXTURE)[1]

    section = second.sections[0]
    assert (section.address, section.size) == (0x1000, 0x100)
    assert second.symtab.globals[0].address == 0x1000


def test_models_are_frozen() -> None:
    snapshot = load_snapshots(FIXTURE)[0]

    with pytest.raises(ValidationError):
        snapshot.timestamp = 3  # type: ignore[misc]


def test_missing_file_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_snapshots(tmp_path / "missing.json")


def test_invalid_json_is_a_decode_error() -> None:
    with pytest.raises(SnapshotDecodeError, match="Invalid JSON"):
        decode_snapshots(b"[{")


def test_top_level_must_be_array() -> None:
    with pytest.raises(SnapshotDecodeError, match="JSON array"):
        decode_snapshots(b"{}")


def test_empty_array_decodes_to_no_snapshots() -> None:
    assert decode_snapshots(b"[]") == []


def test_schema_error_reports_record_index() -> None:
    with pytest.raises(SnapshotDecodeError, match=r"snapshot\[1\]") as exc_info:
        _decode(_record(), _record(timestamp="not-a-number"))

    assert exc_info.value.index == 1
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_unknown_resolver_tag_is_rejected() -> None:
    entry = {
        "name": "_x",
        "where": "local",
        "where_index": 0,
        "local_sym_index": 0,
        "file": 0,
    }
    with pytest.raises(SnapshotDecodeError):
        _decode(_record(resolver=[entry]))


@pytest.mark.parametrize("address", [-1, 1 << 64, "0xzz", True])
def test_out_of_range_or_malformed_address_is_rejected(address: object) -> None:
    section = {"name": "s", "address": address, "size": 0}
    with pytest.raises(SnapshotDecodeError):
        _decode(_record(sections=[section]))


def test_flat_nodes_are_grouped_by_section_ordinal() -> None:
    record = _record(
        sections=[
            {"name": "__text", "address": 0x1000, "size": 0x100},
            {"name": "__data", "address": 0x2000, "size": 0x100},
        ],
        nodes=[
            {"address": 0x2000, "size": 8, "section": 1, "links": []},
            {"address": 0x1000, "size": 4, "section": 0, "links": []},
            {"address": 0x1004, "size": 4, "section": 0, "links": []},
        ],
    )

    (snapshot,) = _decode(record)

    text, data = snapshot.sections
    assert [node.address for node in text.nodes] == [0x1000, 0x1004]
    assert [node.address for node in data.nodes] == [0x2000]


def test_flat_node_with_bad_ordinal_is_rejected() -> None:
    record = _record(
        sections=[{"name": "__text", "address": 0, "size": 4}],
        nodes=[{"address": 0, "size": 4, "section": 3}],
    )

    with pytest.raises(SnapshotDecodeError, match="out of range"):
        _decode(record)


def test_tagged_events_normalize_into_sections() -> None:
    record = _record(
        nodes=[
            {"tag": "section_start", "address": 0x1000, "payload": {"name": "__text"}},
            {"tag": "atom_start", "address": 0x1000},
            {"tag": "relocation", "address": 0x1004, "payload": {"target": 0x2000}},
            {"tag": "atom_end", "address": 0x1010},
            {"tag": "atom_start", "address": 0x1010},
            {"tag": "atom_end", "address": 0x1010},
            {"tag": "section_end", "address": 0x1020},
            {"tag": "section_start", "address": 0x2000, "payload": {"name": "__data"}},
            {"tag": "section_end", "address": 0x2000},
        ]
    )

    (snapshot,) = _decode(record)

    text, data = snapshot.sections
    assert (text.name, text.address, text.size) == ("__text", 0x1000, 0x20)
    assert [(node.address, node.size) for node in text.nodes] == [
        (0x1000, 0x10),
        (0x1010, 0),
    ]
    (link,) = text.nodes[0].links
    assert (link.source_address, link.target_address) == (0x1004, 0x2000)
    assert (data.name, data.size, data.nodes) == ("__data", 0, ())


@pytest.mark.parametrize(
    "events",
    [
        [{"tag": "atom_start", "address": 0}],
        [{"tag": "section_end", "address": 0}],
        [{"tag": "section_start", "address": 0, "payload": {"name": "s"}}],
        [
            {"tag": "section_start", "address": 0, "payload": {"name": "s"}},
            {"tag": "relocation", "address": 0, "payload": {"target": 1}},
        ],
        [
            {"tag": "section_start", "address": 0x10, "payload": {"name": "s"}},
            {"tag": "section_end", "address": 0x8},
        ],
        [{"tag": "bogus", "address": 0}],
    ],
)
def test_malformed_event_streams_are_rejected(events: list[dict[str, Any]]) -> None:
    with pytest.raises(SnapshotDecodeError):
        _decode(_record(nodes=events))


@pytest.mark.parametrize(
    ("events", "missing"),
    [
        (
            [
                {"tag": "section_start", "address": 0, "payload": {}},
                {"tag": "section_end", "address": 0},
            ],
            "section_start payload is missing 'name'",
        ),
        (
            [
                {"tag": "section_start", "address": 0, "payload": {"name": "s"}},
                {"tag": "atom_start", "address": 0},
                {"tag": "relocation", "address": 0},
                {"tag": "atom_end", "address": 4},
                {"tag": "section_end", "address": 4},
            ],
            "relocation payload is missing 'target'",
        ),
    ],
)
def test_event_payload_fields_are_required(
    events: list[dict[str, Any]], missing: str
) -> None:
    with pytest.raises(SnapshotDecodeError, match=missing):
        _decode(_record(nodes=events))


def test_global_symbol_without_address_is_rejected() -> None:
    symtab = {
        "locals": [],
        "globals": [{"name": "_main", "section": 0}],
        "undefs": [],
    }

    with pytest.raises(SnapshotDecodeError, match="Schema validation failed"):
        _decode(_record(symtab=symtab))


@pytest.mark.parametrize("field", ["objects", "sections", "symtab", "resolver"])
def test_record_missing_a_table_is_rejected(field: str) -> None:
    record = _record()
    del record[field]

    with pytest.raises(SnapshotDecodeError, match="Schema validation failed"):
        _decode(record)


def test_node_without_links_is_rejected() -> None:
    section = {
        "name": "__text",
        "address": 0,
        "size": 4,
        "nodes": [{"address": 0, "size": 4}],
    }

    with pytest.raises(SnapshotDecodeError, match="Schema validation failed"):
        _decode(_record(sections=[section]))


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("where_index", -1),
        ("where_index", 1 << 32),
        ("local_sym_index", -1),
        ("file", -(1 << 31) - 1),
        ("file", 1 << 31),
    ],
)
def test_resolver_indices_must_fit_their_widths(field: str, value: int) -> None:
    entry = {
        "name": "_x",
        "where": "global",
        "where_index": 0,
        "local_sym_index": 0,
        "file": -1,
    }
    entry[field] = value

    with pytest.raises(SnapshotDecodeError, match="Schema validation failed"):
        _decode(_record(resolver=[entry]))
