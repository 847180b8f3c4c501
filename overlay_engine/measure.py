"""Text extent measurement for single-line labels."""

from __future__ import annotations

import asyncio
import math
from abc import ABC, abstractmethod

from reportlab.pdfbase.pdfmetrics import getAscent, getDescent, stringWidth

from fonts import FontError, FontRegistry, default_registry
from overlay_types import Dimensions, FontDescriptor


class MeasurementError(RuntimeError):
    """The text extent could not be determined."""


class TextMeasurer(ABC):
    """Reports the rendered extent of one unwrapped line of plain text."""

    @abstractmethod
    async def measure(self, text: str, font: FontDescriptor) -> Dimensions:
        """Return the pixel width and height of ``text`` set in ``font``."""


class FontMetricsMeasurer(TextMeasurer):
    """Measure with ReportLab font metrics at one pixel per point."""

    def __init__(self, registry: FontRegistry | None = None) -> None:
        self.registry = registry or default_registry()

    async def measure(self, text: str, font: FontDescriptor) -> Dimensions:
        return await asyncio.to_thread(self.measure_sync, text, font)

    def measure_sync(self, text: str, font: FontDescriptor) -> Dimensions:
        try:
            font_name = self.registry.font_name(font.family, font.weight)
            width = stringWidth(text, font_name, font.size)
            ascent = getAscent(font_name, font.size)
            descent = getDescent(font_name, font.size)
        except (FontError, KeyError, OSError, ValueError) as exc:
            raise MeasurementError(
                f"Unable to measure text with font '{font.family}': {exc}"
            ) from exc
        return Dimensions(
            width=math.ceil(width),
            height=math.ceil(ascent - descent),
        )


__all__ = [
    "FontMetricsMeasurer",
    "MeasurementError",
    "TextMeasurer",
]
