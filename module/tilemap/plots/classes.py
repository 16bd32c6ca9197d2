"""Fixed colour classes for the investment tile map.

Boundaries are fixed rather than derived from the data, so yearly editions
of the chart stay comparable. Classes are listed low to high; each covers
``lower <= value < upper`` with open ends where a bound is None. Unknown
takes None, NaN and anything at or below UNKNOWN_CEILING before the other
classes are consulted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from tilemap.core.config import UNKNOWN_CEILING
from tilemap.core.utils import format_number


@dataclass(frozen=True)
class ColorClass:
    label: str
    color: str
    lower: Optional[float] = None
    upper: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value >= self.upper:
            return False
        return True

    def to_option(self) -> dict:
        """Highcharts ``dataClasses`` entry."""
        option: dict = {}
        if self.lower is not None:
            option["from"] = self.lower
        if self.upper is not None:
            option["to"] = self.upper
        option["color"] = self.color
        option["name"] = self.label
        return option


UNKNOWN = ColorClass("Unknown", "#fff", upper=UNKNOWN_CEILING)

COLOR_CLASSES: Tuple[ColorClass, ...] = (
    UNKNOWN,
    ColorClass("Below $0.5 bn", "#9c9e9f", lower=UNKNOWN_CEILING, upper=0.5),
    ColorClass("$0.5 to 1.0 bn", "#fabc72", lower=0.5, upper=1.0),
    ColorClass("$1.0 to $1.9 bn", "#f18e00", lower=1.0, upper=2.0),
    ColorClass("$2.0 to $2.9 bn", "#6dbfa9", lower=2.0, upper=3.0),
    ColorClass("Above $3.0 bn", "#009473", lower=3.0),
)


def is_unknown(value: Optional[float]) -> bool:
    return value is None or math.isnan(value) or value <= UNKNOWN_CEILING


def classify(value: Optional[float]) -> ColorClass:
    """Return the single class *value* falls into."""
    if is_unknown(value):
        return UNKNOWN
    for color_class in COLOR_CLASSES[1:]:
        if color_class.contains(value):
            return color_class
    # Unreachable: the known classes cover (UNKNOWN_CEILING, inf].
    raise AssertionError(f"no colour class for {value!r}")


def classify_label(value: Optional[float]) -> str:
    return classify(value).label


def format_tooltip_value(value: Optional[float], unit_suffix: str = "billion USD", decimals: int = 1) -> str:
    """Tooltip text for a tile value: '2.3 billion USD' or 'Unknown'."""
    if is_unknown(value) or math.isinf(value):
        return "Unknown"
    return f"{format_number(value, decimals)} {unit_suffix}"
