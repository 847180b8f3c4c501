"""Immutable value types shared by the label engine, compositor and service."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any


def js_round(value: float) -> int:
    """Round half up, matching ``Math.round`` rather than banker's rounding."""

    return int(math.floor(value + 0.5))


CANVAS_WIDTH = 1000
CANVAS_HEIGHT = js_round((9 / 16) * CANVAS_WIDTH)


class Anchor(StrEnum):
    BOTTOM_RIGHT = "bottom-right"


CssValue = str | int | float | None


@dataclass(frozen=True)
class StyleConfig:
    """Sparse, caller-provided style description (CSS-like keys)."""

    font_size: CssValue = None
    font_weight: CssValue = None
    font_family: CssValue = None
    color: CssValue = None
    background_color: CssValue = None
    opacity: CssValue = None
    padding: CssValue = None
    border_radius: CssValue = None
    text_shadow: CssValue = None
    box_shadow: CssValue = None

    @classmethod
    def from_mapping(cls, css: Any) -> StyleConfig:
        """Build from a request ``css`` object; anything but a mapping is empty."""

        if not isinstance(css, Mapping):
            return cls()
        values: dict[str, CssValue] = {}
        for f in fields(cls):
            value = css.get(_camel_case(f.name))
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                values[f.name] = value
        return cls(**values)


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class Padding:
    top: int
    right: int
    bottom: int
    left: int

    @property
    def horizontal(self) -> int:
        return self.left + self.right

    @property
    def vertical(self) -> int:
        return self.top + self.bottom


@dataclass(frozen=True)
class DropShadow:
    dx: int
    dy: int
    blur: int
    color: str
    opacity: float = 1.0

    @property
    def std_deviation(self) -> float:
        return self.blur / 2


@dataclass(frozen=True)
class ResolvedStyle:
    """Fully populated style, built once per request."""

    font_size: int
    font_weight: str
    font_family: str
    color: str
    background_color: str
    opacity: float
    padding: Padding
    border_radius: int
    text_shadow: DropShadow | None
    box_shadow: DropShadow | None

    @property
    def has_box_shadow(self) -> bool:
        return self.box_shadow is not None

    @property
    def font(self) -> FontDescriptor:
        return FontDescriptor(
            family=self.font_family,
            size=self.font_size,
            weight=self.font_weight,
        )


@dataclass(frozen=True)
class FontDescriptor:
    family: str
    size: int
    weight: str


@dataclass(frozen=True)
class StyledRun:
    """A contiguous span of label text sharing one style."""

    content: str
    bold: bool = False
    italic: bool = False
    base_weight: str = "normal"

    @property
    def font_weight(self) -> str:
        return "bold" if self.bold else self.base_weight

    @property
    def font_style(self) -> str:
        return "italic" if self.italic else "normal"


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int


@dataclass(frozen=True)
class BackgroundBox:
    x: int
    y: int
    width: int
    height: int
    corner_radius: int
    fill: str
    fill_opacity: float
    shadow: DropShadow | None = None


@dataclass(frozen=True)
class TextBlock:
    x: int
    y: int
    runs: tuple[StyledRun, ...]
    color: str
    font_family: str
    font_size: int
    font_weight: str
    shadow: DropShadow | None = None

    @property
    def plain_text(self) -> str:
        return "".join(run.content for run in self.runs)


@dataclass(frozen=True)
class LabelDocument:
    """Vector description of a label overlay on a ``width`` x ``height`` canvas."""

    width: int
    height: int
    background: BackgroundBox
    text: TextBlock


__all__ = [
    "Anchor",
    "BackgroundBox",
    "CssValue",
    "CANVAS_HEIGHT",
    "CANVAS_WIDTH",
    "Dimensions",
    "DropShadow",
    "FontDescriptor",
    "LabelDocument",
    "Padding",
    "ResolvedStyle",
    "StyleConfig",
    "StyledRun",
    "TextBlock",
    "js_round",
]
