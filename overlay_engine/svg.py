"""Serialise a label document to a standalone SVG overlay."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

from overlay_types import DropShadow, LabelDocument

TEXT_SHADOW_ID = "textShadow"
BOX_SHADOW_ID = "boxShadow"


class Layer(Enum):
    BACKGROUND = "background"
    TEXT = "text"


ALL_LAYERS = (Layer.BACKGROUND, Layer.TEXT)


def _number(value: float) -> str:
    return f"{value:g}"


_ENV = Environment(
    loader=PackageLoader("overlay_engine", "templates"),
    autoescape=select_autoescape(["svg"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_ENV.filters["number"] = _number


def render_svg(
    document: LabelDocument,
    layers: Iterable[Layer] = ALL_LAYERS,
    *,
    filters: bool = True,
) -> bytes:
    """Return UTF-8 SVG bytes for the selected layers of ``document``.

    With ``filters`` the drop shadows are emitted as ``feDropShadow`` filters;
    without them only the shapes themselves are drawn.
    """

    selected = set(layers)
    box = document.background if Layer.BACKGROUND in selected else None
    text = document.text if Layer.TEXT in selected else None

    shadows: list[tuple[str, DropShadow]] = []
    box_filter = text_filter = None
    if filters:
        if text is not None and text.shadow is not None:
            text_filter = TEXT_SHADOW_ID
            shadows.append((TEXT_SHADOW_ID, text.shadow))
        if box is not None and box.shadow is not None:
            box_filter = BOX_SHADOW_ID
            shadows.append((BOX_SHADOW_ID, box.shadow))

    svg = _ENV.get_template("label.svg").render(
        width=document.width,
        height=document.height,
        filters=shadows,
        box=box,
        box_filter=box_filter,
        text=text,
        text_filter=text_filter,
    )
    return svg.encode("utf-8")


__all__ = ["ALL_LAYERS", "BOX_SHADOW_ID", "Layer", "TEXT_SHADOW_ID", "render_svg"]
