"""Output renderers for snapshot-viz."""

from __future__ import annotations

from typing import TYPE_CHECKING

from layout.builder import LayoutBuilder
from render.html import render_html
from render.svg import Svg, render_svg
from render.text import render_snapshot_text, render_text
from settings.config import LayoutSettings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from settings.config import OutputFormat
    from snapshot.models import Snapshot


def render_document(
    snapshots: Sequence[Snapshot],
    output_format: OutputFormat,
    settings: LayoutSettings | None = None,
) -> str:
    """Render all snapshots into a complete document of the requested format."""
    if output_format == "text":
        return render_text(snapshots)

    settings = settings or LayoutSettings()
    builder = LayoutBuilder(settings)
    diagrams = [builder.build(snapshot) for snapshot in snapshots]
    return render_html(snapshots, diagrams, settings)


__all__ = [
    "Svg",
    "render_document",
    "render_html",
    "render_snapshot_text",
    "render_svg",
    "render_text",
]
