"""Text-overlay rendering engine for credit labels."""

from __future__ import annotations

from .composer import anchor_origin, compose_label, layout_label
from .markup import parse_runs, strip_markup, tokenize
from .measure import FontMetricsMeasurer, MeasurementError, TextMeasurer
from .style import parse_padding, parse_shadow, resolve_style
from .svg import render_svg

__all__ = [
    "FontMetricsMeasurer",
    "MeasurementError",
    "TextMeasurer",
    "anchor_origin",
    "compose_label",
    "layout_label",
    "parse_padding",
    "parse_runs",
    "parse_shadow",
    "render_svg",
    "resolve_style",
    "strip_markup",
    "tokenize",
]
