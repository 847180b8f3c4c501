"""Compose a measured, positioned label from text and style."""

from __future__ import annotations

from overlay_types import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    Anchor,
    BackgroundBox,
    Dimensions,
    LabelDocument,
    ResolvedStyle,
    StyleConfig,
    TextBlock,
)

from .markup import parse_runs, strip_markup
from .measure import TextMeasurer
from .style import resolve_style


async def compose_label(
    text: str,
    css: StyleConfig | None,
    *,
    measurer: TextMeasurer,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    anchor: Anchor = Anchor.BOTTOM_RIGHT,
) -> LabelDocument:
    """Return the label document for ``text`` on a ``width`` x ``height`` canvas.

    The background box is sized to the measured plain text plus padding. It is
    not clamped to the canvas, so an oversized label gets negative offsets.
    Measurement failures propagate.
    """

    style = resolve_style(css)
    plain_text = strip_markup(text)
    extent = await measurer.measure(plain_text, style.font)
    return layout_label(text, style, extent, width=width, height=height, anchor=anchor)


def layout_label(
    text: str,
    style: ResolvedStyle,
    extent: Dimensions,
    *,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    anchor: Anchor = Anchor.BOTTOM_RIGHT,
) -> LabelDocument:
    padding = style.padding
    rect_width = extent.width + padding.horizontal
    rect_height = extent.height + padding.vertical
    x, y = anchor_origin(anchor, width, height, rect_width, rect_height)

    background = BackgroundBox(
        x=x,
        y=y,
        width=rect_width,
        height=rect_height,
        corner_radius=style.border_radius,
        fill=style.background_color,
        fill_opacity=style.opacity,
        shadow=style.box_shadow,
    )
    text_block = TextBlock(
        x=x + padding.left,
        y=y + rect_height - padding.bottom,
        runs=tuple(parse_runs(text, base_weight=style.font_weight)),
        color=style.color,
        font_family=style.font_family,
        font_size=style.font_size,
        font_weight=style.font_weight,
        shadow=style.text_shadow,
    )
    return LabelDocument(
        width=width,
        height=height,
        background=background,
        text=text_block,
    )


def anchor_origin(
    anchor: Anchor,
    canvas_width: int,
    canvas_height: int,
    rect_width: int,
    rect_height: int,
) -> tuple[int, int]:
    """Return the top-left corner of a ``rect_width`` x ``rect_height`` box."""

    if anchor is Anchor.BOTTOM_RIGHT:
        return canvas_width - rect_width, canvas_height - rect_height
    raise ValueError(f"Unsupported anchor '{anchor}'")


__all__ = ["anchor_origin", "compose_label", "layout_label"]
