# pyright: reportMissingTypeStubs=false

"""Font resolution for label measurement.

Maps a CSS ``font-family`` list and ``font-weight`` onto one of the PDF
standard fonts ReportLab ships with. The same generic faces are what the SVG
rasterizer falls back to, so measured boxes fit the drawn text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

BOLD_THRESHOLD = 600

_CSS_WEIGHTS = {
    "normal": 400,
    "bold": 700,
    "bolder": 700,
    "lighter": 300,
}


class FontError(RuntimeError):
    """Raised when a font family cannot be resolved."""


@dataclass(frozen=True)
class BuiltinFont:
    """PDF standard font pair; always available to ReportLab."""

    regular: str
    bold: str


def _font_key(name: str) -> str:
    return " ".join(name.strip().strip("'\"").lower().split())


_HELVETICA = BuiltinFont(regular="Helvetica", bold="Helvetica-Bold")
_TIMES = BuiltinFont(regular="Times-Roman", bold="Times-Bold")
_COURIER = BuiltinFont(regular="Courier", bold="Courier-Bold")

FONT_SOURCES: dict[str, BuiltinFont] = {
    "sans-serif": _HELVETICA,
    "helvetica": _HELVETICA,
    "arial": _HELVETICA,
    "system-ui": _HELVETICA,
    "serif": _TIMES,
    "times": _TIMES,
    "times new roman": _TIMES,
    "monospace": _COURIER,
    "courier": _COURIER,
    "courier new": _COURIER,
}

GENERIC_FALLBACK = "sans-serif"


def css_weight(value: str | float) -> float:
    """Translate a CSS ``font-weight`` value into a numeric weight."""

    if isinstance(value, (int, float)):
        return float(value)
    text = value.strip().lower()
    if text in _CSS_WEIGHTS:
        return float(_CSS_WEIGHTS[text])
    try:
        return float(text)
    except ValueError:
        return float(_CSS_WEIGHTS["normal"])


def family_candidates(font_family: str) -> list[str]:
    """Split a CSS family list (``"Arial, sans-serif"``) into lookup keys."""

    return [key for key in (_font_key(part) for part in font_family.split(",")) if key]


class FontRegistry:
    """Resolve CSS font declarations to ReportLab font names."""

    def __init__(self, sources: Mapping[str, BuiltinFont] | None = None) -> None:
        self._sources = dict(FONT_SOURCES if sources is None else sources)

    def font_name(self, font_family: str, weight: str | float) -> str:
        """Return the font name for the first known family in ``font_family``.

        Unknown families fall back to the generic sans-serif font.
        """

        numeric_weight = css_weight(weight)
        for key in family_candidates(font_family):
            if key in self._sources:
                return self.get_font_name(key, numeric_weight)
        logger.warning(
            "Unknown font family %r; falling back to %s",
            font_family,
            GENERIC_FALLBACK,
        )
        return self.get_font_name(GENERIC_FALLBACK, numeric_weight)

    def get_font_name(self, family_key: str, weight: float) -> str:
        info = self._sources.get(family_key)
        if info is None:
            available = ", ".join(sorted(self._sources))
            raise FontError(
                f"Unknown font family '{family_key}'. Available: {available}")
        return info.bold if weight >= BOLD_THRESHOLD else info.regular


_REGISTRY = FontRegistry()


def default_registry() -> FontRegistry:
    return _REGISTRY


__all__ = [
    "BuiltinFont",
    "FontError",
    "FontRegistry",
    "css_weight",
    "default_registry",
    "family_candidates",
]
