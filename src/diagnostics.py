"""Logging helpers for snapshot-viz."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAMESPACE = "snapshot_viz"
LOG_LEVEL_ENV = "SNAPSHOT_VIZ_LOG_LEVEL"

_configured = False


def _resolve_level() -> int:
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if raw:
        level = logging.getLevelName(raw)
        if isinstance(level, int):
            return level
    return logging.WARNING


def _attach_stderr_handler(logger: logging.Logger) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False


def configure_cli_logging(*, quiet: bool = False, verbose: bool = False) -> None:
    """Set snapshot_viz.* logger levels; --quiet/--verbose override the env."""
    global _configured
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = _resolve_level()
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)
    _attach_stderr_handler(root)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the snapshot_viz namespace."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    if not _configured:
        _attach_stderr_handler(root)
        if root.level == logging.NOTSET:
            root.setLevel(_resolve_level())
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
