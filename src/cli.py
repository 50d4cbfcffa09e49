"""Command-line interface for snapshot-viz."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from diagnostics import configure_cli_logging, get_logger
from render import render_document
from settings.config import ConfigError, SnapshotVizConfig, load_config
from snapshot.check import check_snapshots
from snapshot.decode import SnapshotDecodeError, load_snapshots

if TYPE_CHECKING:
    from snapshot.models import Snapshot

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapshot-viz",
        description="Render linker snapshots as layout diagrams or text reports.",
    )
    parser.add_argument("input", help="Snapshot JSON file")
    parser.add_argument(
        "--format",
        choices=("html", "text"),
        default=None,
        help="Output format (default: config format, else html)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: config output, else standard output)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: ./snapshotviz.toml when present)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Report suspicious snapshot contents as warnings",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Like --check, but findings are errors and nothing is rendered",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return parser


def _load_config(config: str | None) -> SnapshotVizConfig:
    config_path = Path(config).expanduser() if config is not None else None
    return load_config(Path.cwd(), config_path)


def _run_checks(snapshots: list[Snapshot], *, strict: bool) -> bool:
    result = check_snapshots(snapshots, strict=strict)
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    for error in result.errors:
        sys.stderr.write(f"error: {error.location()}: {error.message}\n")
    return result.ok


def _write_output(document: str, output: str | None) -> None:
    if output is None:
        sys.stdout.write(document)
        return
    path = Path(output).expanduser()
    path.write_text(document, encoding="utf-8")
    logger.info("wrote %s", path)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(quiet=args.quiet, verbose=args.verbose)

    try:
        config = _load_config(args.config)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    input_path = Path(args.input).expanduser()
    try:
        snapshots = load_snapshots(input_path)
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    except SnapshotDecodeError as exc:
        sys.stderr.write(f"{input_path}: {exc}\n")
        return 1

    if (args.check or args.strict) and not _run_checks(snapshots, strict=args.strict):
        return 1

    output_format = args.format or config.format
    document = render_document(snapshots, output_format, config.layout)

    try:
        _write_output(document, args.output or config.output)
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
