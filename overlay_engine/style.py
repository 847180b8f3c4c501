"""Resolve a sparse CSS-like style configuration into a complete style."""

from __future__ import annotations

import math
import re

from overlay_types import CssValue, DropShadow, Padding, ResolvedStyle, StyleConfig

DEFAULT_FONT_SIZE = 20
DEFAULT_FONT_WEIGHT = "normal"
DEFAULT_FONT_FAMILY = "sans-serif"
DEFAULT_COLOR = "white"
DEFAULT_BACKGROUND_COLOR = "black"
DEFAULT_OPACITY = 0.6
DEFAULT_PADDING = "12px 25px 12px 15px"
DEFAULT_BORDER_RADIUS = 0
DEFAULT_TEXT_SHADOW = "3px 3px 6px rgba(0,0,0,1)"
DEFAULT_BOX_SHADOW = "none"

# Per-side values used when a padding token cannot be read.
FALLBACK_PADDING = Padding(top=12, right=15, bottom=12, left=15)

# Box shadow used when a value other than "none" cannot be parsed.
FALLBACK_BOX_SHADOW = DropShadow(dx=2, dy=2, blur=4, color="black", opacity=0.5)

SHADOW_NONE = "none"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_SHADOW_RE = re.compile(r"(-?\d+)px\s+(-?\d+)px\s+(\d+)px\s+(.+)")


def parse_css_int(value: CssValue) -> int | None:
    """Read the leading integer of ``value`` (``"12px"`` -> 12).

    Returns ``None`` when no integer can be read.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def parse_padding(shorthand: CssValue) -> Padding:
    """Expand a 1-4 value CSS padding shorthand into four sides."""

    text = _as_text(shorthand) or DEFAULT_PADDING
    tokens = text.split()
    if not 1 <= len(tokens) <= 4:
        return FALLBACK_PADDING

    values = [_non_negative(parse_css_int(token)) for token in tokens]
    if len(values) == 1:
        top = right = bottom = left = values[0]
    elif len(values) == 2:
        top = bottom = values[0]
        right = left = values[1]
    elif len(values) == 3:
        top, right, bottom = values
        left = right
    else:
        top, right, bottom, left = values

    return Padding(
        top=_or_default(top, FALLBACK_PADDING.top),
        right=_or_default(right, FALLBACK_PADDING.right),
        bottom=_or_default(bottom, FALLBACK_PADDING.bottom),
        left=_or_default(left, FALLBACK_PADDING.left),
    )


def parse_shadow(value: CssValue) -> DropShadow | None:
    """Parse ``"<dx>px <dy>px <blur>px <color>"``.

    Returns ``None`` for ``"none"`` and for values that do not match.
    """

    text = _as_text(value)
    if not text or text == SHADOW_NONE:
        return None
    match = _SHADOW_RE.search(text)
    if match is None:
        return None
    return DropShadow(
        dx=int(match.group(1)),
        dy=int(match.group(2)),
        blur=int(match.group(3)),
        color=match.group(4).strip(),
    )


def resolve_style(config: StyleConfig | None) -> ResolvedStyle:
    """Apply defaults to ``config``; never raises for malformed values."""

    config = config or StyleConfig()

    font_size = parse_css_int(config.font_size)
    if font_size is None or font_size <= 0:
        font_size = DEFAULT_FONT_SIZE

    border_radius = _non_negative(parse_css_int(config.border_radius))

    return ResolvedStyle(
        font_size=font_size,
        font_weight=_as_text(config.font_weight) or DEFAULT_FONT_WEIGHT,
        font_family=_as_text(config.font_family) or DEFAULT_FONT_FAMILY,
        color=_as_text(config.color) or DEFAULT_COLOR,
        background_color=(
            _as_text(config.background_color) or DEFAULT_BACKGROUND_COLOR
        ),
        opacity=_resolve_opacity(config.opacity),
        padding=parse_padding(config.padding),
        border_radius=_or_default(border_radius, DEFAULT_BORDER_RADIUS),
        text_shadow=_resolve_text_shadow(config.text_shadow),
        box_shadow=_resolve_box_shadow(config.box_shadow),
    )


def _resolve_text_shadow(value: CssValue) -> DropShadow | None:
    text = _as_text(value) or DEFAULT_TEXT_SHADOW
    if text == SHADOW_NONE:
        return None
    return parse_shadow(text) or parse_shadow(DEFAULT_TEXT_SHADOW)


def _resolve_box_shadow(value: CssValue) -> DropShadow | None:
    text = _as_text(value) or DEFAULT_BOX_SHADOW
    if text == SHADOW_NONE:
        return None
    return parse_shadow(text) or FALLBACK_BOX_SHADOW


def _resolve_opacity(value: CssValue) -> float:
    if value is None or isinstance(value, bool):
        return DEFAULT_OPACITY
    try:
        return float(value)
    except ValueError:
        return DEFAULT_OPACITY


def _as_text(value: CssValue) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _non_negative(value: int | None) -> int | None:
    if value is None or value < 0:
        return None
    return value


def _or_default(value: int | None, default: int) -> int:
    return default if value is None else value


__all__ = [
    "DEFAULT_BACKGROUND_COLOR",
    "DEFAULT_BORDER_RADIUS",
    "DEFAULT_BOX_SHADOW",
    "DEFAULT_COLOR",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_FONT_SIZE",
    "DEFAULT_FONT_WEIGHT",
    "DEFAULT_OPACITY",
    "DEFAULT_PADDING",
    "DEFAULT_TEXT_SHADOW",
    "FALLBACK_BOX_SHADOW",
    "FALLBACK_PADDING",
    "parse_css_int",
    "parse_padding",
    "parse_shadow",
    "resolve_style",
]
