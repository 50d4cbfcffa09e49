"""SVG rendering of a positioned rectangle tree."""

from __future__ import annotations

import html as html_lib
from typing import TYPE_CHECKING

from utils import format_address

if TYPE_CHECKING:
    from layout.rect import LayoutRect
    from settings.config import LayoutSettings

FONT_FAMILY = "ui-monospace, Menlo, Consolas, monospace"
FONT_SIZE = 12
TEXT_PAD = 6
LABEL_BASELINE = 16

FILL = {
    "snapshot": "#ffffff",
    "section": "#e8eef9",
    "atom": "#fdf6e3",
}
STROKE = {
    "snapshot": "#444444",
    "section": "#5a6f9c",
    "atom": "#b58900",
}
ANNOTATION_FILL = "#2b2b2b"


class Svg:
    """Lightweight SVG fragment builder."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def text(
        self, x: int, y: int, content: str, *, fill: str, size: int = FONT_SIZE
    ) -> None:
        self._parts.append(
            f'<text x="{x}" y="{y}" fill="{fill}" font-size="{size}" '
            f'font-family="{FONT_FAMILY}">{html_lib.escape(content)}</text>'
        )

    def rect(
        self,
        x: int,
        y: int,
        w: int,
        h: int,
        *,
        fill: str,
        stroke: str,
        title: str | None = None,
    ) -> None:
        attrs = (
            f'x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="1"'
        )
        if title:
            self._parts.append(
                f"<rect {attrs}><title>{html_lib.escape(title)}</title></rect>"
            )
        else:
            self._parts.append(f"<rect {attrs}/>")

    def open(self, width: int, height: int) -> None:
        self._parts.append(
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" '
            f'height="{height}" viewBox="0 0 {width} {height}">'
        )

    def close(self) -> None:
        self._parts.append("</svg>")

    def __str__(self) -> str:
        return "\n".join(self._parts)


def _tooltip(rect: LayoutRect) -> str | None:
    if not rect.symbols:
        return None
    return "\n".join(
        f"{symbol.name} @ {format_address(symbol.address)}" for symbol in rect.symbols
    )


def _atom_text(rect: LayoutRect) -> str:
    text = rect.label or ""
    if rect.address is not None:
        end = rect.address + (rect.size or 0)
        text = f"{text}  {format_address(rect.address)}..{format_address(end)}"
    if rect.symbols:
        text = f"{text}  (+{len(rect.symbols)} symbols)"
    return text


def _draw(svg: Svg, rect: LayoutRect, settings: LayoutSettings) -> None:
    svg.rect(
        rect.x,
        rect.y,
        rect.width,
        rect.height,
        fill=FILL[rect.kind],
        stroke=STROKE[rect.kind],
        title=_tooltip(rect),
    )

    if rect.kind == "atom":
        svg.text(
            rect.x + TEXT_PAD,
            rect.y + rect.height // 2 + FONT_SIZE // 3,
            _atom_text(rect),
            fill=ANNOTATION_FILL,
        )
    elif rect.kind == "section" and rect.label is not None:
        svg.text(
            rect.x + TEXT_PAD,
            rect.y + LABEL_BASELINE,
            rect.label,
            fill=ANNOTATION_FILL,
            size=FONT_SIZE + 2,
        )

    if rect.kind == "section" and rect.address is not None:
        annotation_x = rect.right + settings.annotation_offset
        svg.text(
            annotation_x,
            rect.y + LABEL_BASELINE,
            format_address(rect.address),
            fill=ANNOTATION_FILL,
        )
        svg.text(
            annotation_x,
            rect.bottom - TEXT_PAD,
            format_address(rect.address + (rect.size or 0)),
            fill=ANNOTATION_FILL,
        )

    for child in rect.children:
        _draw(svg, child, settings)


def render_svg(root: LayoutRect, settings: LayoutSettings) -> str:
    """Render one snapshot's rectangle tree as a framed ``<svg>`` element."""
    svg = Svg()
    svg.open(root.width, root.height)
    _draw(svg, root, settings)
    svg.close()
    return str(svg)


__all__ = ["Svg", "render_svg"]
