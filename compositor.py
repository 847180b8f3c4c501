"""Rasterise label overlays and composite them onto base images.

PyMuPDF draws the label shapes but ignores SVG filters, so each layer is
rasterised on its own and its drop shadow is painted underneath with Pillow.
"""

from __future__ import annotations

import logging
import re
from io import BytesIO

import fitz
from PIL import Image, ImageColor, ImageFilter

from overlay_engine.svg import Layer, render_svg
from overlay_types import DropShadow, LabelDocument

logger = logging.getLogger(__name__)

JPEG_QUALITY = 80

# CSS rgba() takes a 0-1 alpha; Pillow's parser expects 0-255.
_RGBA_RE = re.compile(
    r"rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d*\.?\d+)\s*\)",
    re.IGNORECASE,
)


def rasterize_svg(svg: bytes, size: tuple[int, int]) -> Image.Image:
    """Render ``svg`` to an RGBA image of exactly ``size`` pixels."""

    with fitz.open(stream=svg, filetype="svg") as doc:
        page = doc.load_page(0)
        pix = page.get_pixmap(alpha=True)
        png_bytes = pix.tobytes("png")

    overlay = Image.open(BytesIO(png_bytes)).convert("RGBA")
    if overlay.size != size:
        overlay = overlay.resize(size)
    return overlay


def flood_color(color: str) -> tuple[int, int, int, float]:
    """Parse a CSS color into RGB plus a 0-1 alpha. Unknown colors are black."""

    text = color.strip()
    match = _RGBA_RE.fullmatch(text)
    if match:
        red, green, blue = (min(int(value), 255) for value in match.groups()[:3])
        return red, green, blue, min(float(match.group(4)), 1.0)
    try:
        rgb = ImageColor.getrgb(text)
    except ValueError:
        logger.warning("Unknown shadow color %r; using black", color)
        return 0, 0, 0, 1.0
    if len(rgb) == 4:
        red, green, blue, alpha = rgb
        return red, green, blue, alpha / 255
    red, green, blue = rgb[:3]
    return red, green, blue, 1.0


def drop_shadow(layer: Image.Image, shadow: DropShadow) -> Image.Image:
    """Return the offset, blurred and tinted silhouette of ``layer``."""

    red, green, blue, alpha = flood_color(shadow.color)
    mask = Image.new("L", layer.size, 0)
    mask.paste(layer.getchannel("A"), (shadow.dx, shadow.dy))
    if shadow.std_deviation > 0:
        mask = mask.filter(ImageFilter.GaussianBlur(shadow.std_deviation))
    strength = alpha * shadow.opacity
    if strength < 1:
        mask = mask.point(lambda value: round(value * strength))

    tinted = Image.new("RGBA", layer.size, (red, green, blue, 0))
    tinted.putalpha(mask)
    return tinted


def rasterize_label(document: LabelDocument) -> Image.Image:
    """Render ``document`` to an RGBA overlay of the document's canvas size."""

    size = (document.width, document.height)
    overlay = Image.new("RGBA", size, (0, 0, 0, 0))
    for layer, shadow in (
        (Layer.BACKGROUND, document.background.shadow),
        (Layer.TEXT, document.text.shadow),
    ):
        image = rasterize_svg(render_svg(document, [layer], filters=False), size)
        if shadow is not None:
            overlay.alpha_composite(drop_shadow(image, shadow))
        overlay.alpha_composite(image)
    return overlay


def composite_label(base_image: bytes, document: LabelDocument) -> bytes:
    """Resize ``base_image`` to the label canvas, lay the label over it at
    (0, 0) and return JPEG bytes."""

    size = (document.width, document.height)
    with Image.open(BytesIO(base_image)) as img:
        canvas = img.convert("RGBA").resize(size)

    canvas.alpha_composite(rasterize_label(document), dest=(0, 0))

    buffer = BytesIO()
    canvas.convert("RGB").save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return buffer.getvalue()


__all__ = [
    "composite_label",
    "drop_shadow",
    "flood_color",
    "rasterize_label",
    "rasterize_svg",
]
