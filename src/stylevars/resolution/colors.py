"""CSS color parsing to 8-bit RGBA channels."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3,8})$")
_RGB_RE = re.compile(r"^rgba?\(([^)]*)\)$", re.IGNORECASE)
_HSL_RE = re.compile(r"^hsla?\(([^)]*)\)$", re.IGNORECASE)
_BARE_HSL_RE = re.compile(r"^([\d.]+)\s+([\d.]+%)\s+([\d.]+%)$")
_HWB_RE = re.compile(r"^hwb\(([^)]*)\)$", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[,\s/]+")


@dataclass(slots=True, frozen=True)
class Color:
    """An sRGB color with 0-255 channels."""

    red: int
    green: int
    blue: int
    alpha: int = 255


def parse_css_color(text: str) -> Color | None:
    """Parse hex, rgb(), hsl(), bare HSL triplet or hwb() text; None otherwise."""
    value = text.strip()
    hex_match = _HEX_RE.match(value)
    if hex_match is not None:
        return _parse_hex(hex_match.group(1))

    rgb_match = _RGB_RE.match(value)
    if rgb_match is not None:
        parts = _split_body(rgb_match.group(1))
        if len(parts) >= 3:
            return Color(
                red=_rgb_channel(parts[0]),
                green=_rgb_channel(parts[1]),
                blue=_rgb_channel(parts[2]),
                alpha=_alpha_channel(parts[3] if len(parts) > 3 else None),
            )

    hsl_match = _HSL_RE.match(value)
    if hsl_match is not None:
        parts = _split_body(hsl_match.group(1))
        if len(parts) >= 3:
            return hsl_to_rgb(
                _hue(parts[0]),
                _fraction(parts[1]),
                _fraction(parts[2]),
                _alpha_fraction(parts[3] if len(parts) > 3 else None),
            )

    bare_match = _BARE_HSL_RE.match(value)
    if bare_match is not None:
        hue, saturation, lightness = bare_match.groups()
        return hsl_to_rgb(_hue(hue), _fraction(saturation), _fraction(lightness), 1.0)

    hwb_match = _HWB_RE.match(value)
    if hwb_match is not None:
        parts = _split_body(hwb_match.group(1))
        if len(parts) >= 3:
            return hwb_to_rgb(
                _hue(parts[0]),
                _fraction(parts[1]),
                _fraction(parts[2]),
                _alpha_fraction(parts[3] if len(parts) > 3 else None),
            )
    return None


def color_to_hex(color: Color) -> str:
    """Return uppercase ``#RRGGBB``; alpha is dropped."""
    return f"#{color.red:02X}{color.green:02X}{color.blue:02X}"


def to_hex_string(text: str) -> str | None:
    """Parse then format as hex in one call."""
    color = parse_css_color(text)
    return color_to_hex(color) if color is not None else None


def hsl_to_rgb(hue: float, saturation: float, lightness: float, alpha: float) -> Color:
    """Convert HSL (hue in degrees, other components in 0..1) to RGB."""
    chroma = (1.0 - abs(2 * lightness - 1.0)) * saturation
    secondary = chroma * (1.0 - abs((hue / 60.0) % 2 - 1.0))
    match_value = lightness - chroma / 2.0
    if hue < 60:
        r1, g1, b1 = chroma, secondary, 0.0
    elif hue < 120:
        r1, g1, b1 = secondary, chroma, 0.0
    elif hue < 180:
        r1, g1, b1 = 0.0, chroma, secondary
    elif hue < 240:
        r1, g1, b1 = 0.0, secondary, chroma
    elif hue < 300:
        r1, g1, b1 = secondary, 0.0, chroma
    else:
        r1, g1, b1 = chroma, 0.0, secondary
    return Color(
        red=_to_byte(r1 + match_value),
        green=_to_byte(g1 + match_value),
        blue=_to_byte(b1 + match_value),
        alpha=_to_byte(alpha),
    )


def hwb_to_rgb(hue: float, whiteness: float, blackness: float, alpha: float) -> Color:
    """Convert HWB to RGB by mixing the pure hue with white and black."""
    chroma = max(0.0, 1.0 - whiteness - blackness)
    base = hsl_to_rgb(hue, 1.0, 0.5, 1.0)
    return Color(
        red=_to_byte(_clamp(whiteness + chroma * base.red / 255.0, 0.0, 1.0)),
        green=_to_byte(_clamp(whiteness + chroma * base.green / 255.0, 0.0, 1.0)),
        blue=_to_byte(_clamp(whiteness + chroma * base.blue / 255.0, 0.0, 1.0)),
        alpha=_to_byte(alpha),
    )


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _parse_hex(digits: str) -> Color | None:
    if len(digits) in (3, 4):
        digits = "".join(char * 2 for char in digits)
    if len(digits) not in (6, 8):
        return None
    alpha = int(digits[6:8], 16) if len(digits) == 8 else 255
    return Color(
        red=int(digits[0:2], 16),
        green=int(digits[2:4], 16),
        blue=int(digits[4:6], 16),
        alpha=alpha,
    )


def _split_body(body: str) -> list[str]:
    return [part for part in _SEPARATOR_RE.split(body.strip()) if part]


def _rgb_channel(raw: str) -> int:
    if raw.endswith("%"):
        number = _to_float(raw[:-1])
        if number is None:
            return 0
        return int(_clamp(round_half_up(number * 255 / 100), 0, 255))
    number = _to_float(raw)
    if number is None:
        return 0
    return int(_clamp(round_half_up(number), 0, 255))


def _alpha_channel(raw: str | None) -> int:
    return _to_byte(_alpha_fraction(raw))


def _alpha_fraction(raw: str | None) -> float:
    if raw is None:
        return 1.0
    if raw.endswith("%"):
        number = _to_float(raw[:-1])
        return 1.0 if number is None else _clamp(number / 100.0, 0.0, 1.0)
    number = _to_float(raw)
    return 1.0 if number is None else _clamp(number, 0.0, 1.0)


def _hue(raw: str) -> float:
    number = _to_float(raw.lower().removesuffix("deg"))
    return 0.0 if number is None else number % 360.0


def _fraction(raw: str) -> float:
    number = _to_float(raw.removesuffix("%"))
    return 0.0 if number is None else number / 100.0


def _to_float(raw: str) -> float | None:
    try:
        number = float(raw)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _to_byte(fraction: float) -> int:
    return int(_clamp(round_half_up(fraction * 255), 0, 255))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
