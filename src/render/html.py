"""Single-page HTML output holding one diagram block per snapshot."""

from __future__ import annotations

import html as html_lib
from typing import TYPE_CHECKING

from render.svg import render_svg

if TYPE_CHECKING:
    from collections.abc import Sequence

    from layout.rect import LayoutRect
    from settings.config import LayoutSettings
    from snapshot.models import Snapshot

PAGE_TITLE = "Linker snapshots"

PAGE_HEAD = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<title>{title}</title>
<style>
  body {{ margin: 16px; font-family: system-ui, Segoe UI, Arial; color: #1b1b1b; }}
  .snapshot {{ margin-bottom: 24px; }}
  .snapshot h2 {{ font-size: 16px; margin: 0 0 8px 0; }}
  .diagram {{ max-height: 80vh; overflow: auto; border: 1px solid #bdbdbd; }}
</style>
</head>
<body>
"""

PAGE_TAIL = """</body>
</html>
"""


def render_html(
    snapshots: Sequence[Snapshot],
    diagrams: Sequence[LayoutRect],
    settings: LayoutSettings,
) -> str:
    """Render laid-out snapshots as one HTML page, in input order.

    ``diagrams[i]`` is the rectangle tree of ``snapshots[i]``; each block is
    headed by the snapshot number and timestamp.
    """
    parts = [PAGE_HEAD.format(title=html_lib.escape(PAGE_TITLE))]
    for number, (snapshot, root) in enumerate(zip(snapshots, diagrams, strict=True)):
        heading = f"Snapshot {number}: timestamp {snapshot.timestamp}"
        parts.append('<div class="snapshot">\n')
        parts.append(f"<h2>{html_lib.escape(heading)}</h2>\n")
        parts.append('<div class="diagram">\n')
        parts.append(render_svg(root, settings))
        parts.append("\n</div>\n</div>\n")
    parts.append(PAGE_TAIL)
    return "".join(parts)


__all__ = ["PAGE_TITLE", "render_html"]
