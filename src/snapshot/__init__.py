"""Snapshot model, decoding and checks for snapshot-viz."""

from snapshot.check import CheckMessage, CheckResult, check_snapshots
from snapshot.decode import SnapshotDecodeError, decode_snapshots, load_snapshots
from snapshot.models import (
    Link,
    Node,
    ResolverEntry,
    Section,
    Snapshot,
    Symbol,
    Symtab,
)

__all__ = [
    "CheckMessage",
    "CheckResult",
    "Link",
    "Node",
    "ResolverEntry",
    "Section",
    "Snapshot",
    "SnapshotDecodeError",
    "Symbol",
    "Symtab",
    "check_snapshots",
    "decode_snapshots",
    "load_snapshots",
]
