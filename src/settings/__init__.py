"""Configuration for snapshot-viz."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    LayoutSettings,
    OutputFormat,
    SnapshotVizConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LayoutSettings",
    "OutputFormat",
    "SnapshotVizConfig",
    "load_config",
]
