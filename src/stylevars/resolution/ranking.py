"""Deterministic priority ordering of declaration contexts."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass

from stylevars.index.models import DEFAULT_CONTEXT

_MEDIA_UNITS = "px|rem|em|vh|vw|%|ch|ex|cm|mm|in|pt|pc|vmin|vmax"
_PIXELS_PER_UNIT: dict[str, float] = {
    "px": 1.0,
    "rem": 16.0,
    "em": 16.0,
    "vh": 7.68,
    "vw": 13.66,
    "%": 10.0,
    "ch": 8.0,
    "cm": 37.8,
    "mm": 3.78,
    "in": 96.0,
    "pt": 1.33,
    "pc": 16.0,
    "vmin": 10.0,
    "vmax": 10.0,
}
_SIZE_BANDS = (("min-width", 2), ("max-width", 3), ("min-height", 4), ("max-height", 5))
_KEYWORD_BANDS: tuple[tuple[tuple[str, ...], int, int], ...] = (
    (("prefers-reduced-motion",), 6, 0),
    (("prefers-contrast",), 6, 1),
    (("orientation", "portrait"), 6, 2),
    (("orientation", "landscape"), 6, 3),
    (("hover", "none"), 6, 4),
    (("hover",), 7, 0),
    (("focus",), 7, 1),
    (("active",), 7, 2),
    (("print",), 8, 0),
    (("screen",), 8, 1),
)
_FEATURE_PATTERNS: dict[str, re.Pattern[str]] = {}


@dataclass(slots=True, frozen=True)
class RankKey:
    """Sortable priority of one context; lower sorts first."""

    major: int
    secondary: int | None
    tiebreak: str

    def sort_key(self) -> tuple[int, int, str]:
        secondary = sys.maxsize if self.secondary is None else self.secondary
        return (self.major, secondary, self.tiebreak)


def rank(context: str) -> RankKey:
    """Map a context string to its priority band and in-band ordering."""
    normalized = context.lower().strip()
    if normalized in ("", DEFAULT_CONTEXT) or (
        "prefers-color-scheme" in normalized and "light" in normalized
    ):
        return RankKey(0, None, normalized)
    if "prefers-color-scheme" in normalized and "dark" in normalized:
        return RankKey(1, None, normalized)
    for feature, band in _SIZE_BANDS:
        pixels = media_pixels(normalized, feature)
        if pixels is not None:
            return RankKey(band, -pixels, normalized)
    for keywords, band, order in _KEYWORD_BANDS:
        if all(keyword in normalized for keyword in keywords):
            return RankKey(band, order, normalized)
    return RankKey(9, None, normalized)


def media_pixels(context: str, feature: str) -> int | None:
    """Pixel magnitude of ``feature: <number><unit>`` inside a context, floored at 0."""
    match = _feature_pattern(feature).search(context)
    if match is None:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    unit = (match.group(2) or "px").lower()
    pixels = int(number * _PIXELS_PER_UNIT.get(unit, 1.0))
    return max(0, pixels)


def sort_contexts(contexts: Iterable[str]) -> list[str]:
    return sorted(contexts, key=lambda context: rank(context).sort_key())


def _feature_pattern(feature: str) -> re.Pattern[str]:
    pattern = _FEATURE_PATTERNS.get(feature)
    if pattern is None:
        pattern = re.compile(
            rf"{re.escape(feature)}:\s*([+-]?\d*\.?\d+)({_MEDIA_UNITS})?"
        )
        _FEATURE_PATTERNS[feature] = pattern
    return pattern
