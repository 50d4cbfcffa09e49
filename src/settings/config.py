from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

CONFIG_FILENAME = "snapshotviz.toml"

OutputFormat = Literal["html", "text"]


class LayoutSettings(BaseModel):
    """Fixed geometry constants used by the layout builder and renderer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(default=800, gt=0, description="Snapshot diagram width")
    right_margin: int = Field(
        default=200,
        ge=0,
        description="Space right of each section reserved for address annotations",
    )
    section_header_height: int = Field(
        default=40, gt=0, description="Height of a section box before any atoms"
    )
    atom_indent: int = Field(
        default=20, ge=0, description="Horizontal inset of atoms inside a section"
    )
    atom_top_offset: int = Field(
        default=40,
        ge=0,
        description="Distance from a section's top edge to its first atom",
    )
    atom_row_height: int = Field(default=24, gt=0, description="Height of one atom row")
    annotation_offset: int = Field(
        default=10,
        ge=0,
        description="Gap between a section's right edge and its address annotation",
    )

    @model_validator(mode="after")
    def check_geometry(self) -> LayoutSettings:
        if self.atom_top_offset > self.section_header_height:
            msg = (
                "atom_top_offset must not exceed section_header_height "
                f"({self.atom_top_offset} > {self.section_header_height})"
            )
            raise ValueError(msg)
        section_width = self.width - self.right_margin
        if section_width <= 0:
            msg = "right_margin leaves no room for section boxes"
            raise ValueError(msg)
        if section_width - 2 * self.atom_indent <= 0:
            msg = "atom_indent leaves no room for atom boxes"
            raise ValueError(msg)
        return self


class SnapshotVizConfig(BaseModel):
    """Configuration for snapshot-viz rendering."""

    model_config = ConfigDict(extra="forbid")

    format: OutputFormat = Field(default="html", description="Output format")
    output: str | None = Field(
        default=None, description="Output file (default: standard output)"
    )
    layout: LayoutSettings = Field(
        default_factory=LayoutSettings,
        description="Diagram geometry",
    )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path, config_path: Path | None = None) -> SnapshotVizConfig:
    """Load configuration from snapshotviz.toml if it exists.

    An explicit ``config_path`` must exist; the default file under ``root``
    is optional.
    """
    if config_path is None:
        config_path = Path(root) / CONFIG_FILENAME
        if not config_path.is_file():
            return SnapshotVizConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Failed to read {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return SnapshotVizConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
