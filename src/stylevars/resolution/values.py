"""Value-semantics classification: sizes, colors and plain numbers."""

from __future__ import annotations

import colorsys
import re
from collections.abc import Iterable
from enum import Enum

from stylevars.resolution.colors import parse_css_color

_SIZE_RE = re.compile(r"^\d+(\.\d+)?(px|rem|em|%|vh|vw|pt)$", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_LEADING_NUMBER_RE = re.compile(r"^(\d+(?:\.\d+)?)")

_PIXEL_FACTORS: tuple[tuple[str, float], ...] = (
    ("rem", 16.0),
    ("em", 16.0),
    ("px", 1.0),
    ("pt", 1.33),
    ("%", 1.0),
    ("vh", 10.0),
    ("vw", 10.0),
)


class ValueType(Enum):
    """Value classes in listing order."""

    SIZE = 0
    COLOR = 1
    NUMBER = 2
    OTHER = 3


def value_type(text: str) -> ValueType:
    """Classify a resolved value; sizes win over colors, colors over numbers."""
    cleaned = text.strip()
    if is_size(cleaned):
        return ValueType.SIZE
    if parse_css_color(cleaned) is not None:
        return ValueType.COLOR
    if is_numeric(cleaned):
        return ValueType.NUMBER
    return ValueType.OTHER


def is_size(text: str) -> bool:
    return _SIZE_RE.match(text.strip()) is not None


def is_numeric(text: str) -> bool:
    return _NUMERIC_RE.match(text.strip()) is not None


def convert_to_pixels(text: str) -> float:
    """Approximate pixel magnitude of a size; unknown units count as pixels."""
    trimmed = text.strip()
    match = _LEADING_NUMBER_RE.match(trimmed)
    number = float(match.group(1)) if match is not None else 0.0
    lowered = trimmed.lower()
    for unit, factor in _PIXEL_FACTORS:
        if lowered.endswith(unit):
            return number * factor
    return number


def compare_sizes(a: str, b: str) -> int:
    return _compare(convert_to_pixels(a), convert_to_pixels(b))


def compare_numbers(a: str, b: str) -> int:
    return _compare(_as_float(a), _as_float(b))


def compare_colors(a: str, b: str) -> int:
    """Order colors by hue, then saturation, then brightness.

    Falls back to case-insensitive text order when either side is not a color.
    """
    color_a = parse_css_color(a)
    color_b = parse_css_color(b)
    if color_a is None or color_b is None:
        return _compare(a.lower(), b.lower())
    hsv_a = colorsys.rgb_to_hsv(color_a.red / 255, color_a.green / 255, color_a.blue / 255)
    hsv_b = colorsys.rgb_to_hsv(color_b.red / 255, color_b.green / 255, color_b.blue / 255)
    for left, right in zip(hsv_a, hsv_b, strict=True):
        result = _compare(left, right)
        if result != 0:
            return result
    return 0


def sort_by_value(items: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Sort ``(name, resolved value)`` pairs by value class, then magnitude, then name."""

    def sort_key(item: tuple[str, str]) -> tuple[int, float, str]:
        name, value = item
        kind = value_type(value)
        if kind is ValueType.SIZE:
            magnitude = convert_to_pixels(value)
        elif kind is ValueType.NUMBER:
            magnitude = _as_float(value)
        else:
            magnitude = 0.0
        return (kind.value, magnitude, name)

    return sorted(items, key=sort_key)


def _as_float(text: str) -> float:
    if not is_numeric(text):
        return 0.0
    return float(text.strip())


def _compare(left: float | str, right: float | str) -> int:
    if left < right:  # type: ignore[operator]
        return -1
    if left > right:  # type: ignore[operator]
        return 1
    return 0
