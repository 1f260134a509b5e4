"""Color conversions and contrast decisions shared by the whole pipeline."""

from __future__ import annotations

import re
from typing import NamedTuple

DARK_LUMINANCE_THRESHOLD = 0.179
FALLBACK_HEX = "#000000"

_HEX_PATTERN = re.compile(r"^#?([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


class RGB(NamedTuple):
    r: int
    g: int
    b: int


def hex_to_rgb(hex_color: str) -> RGB:
    """Return the RGB channels of *hex_color*; anything unparsable becomes black."""
    if not isinstance(hex_color, str):
        return RGB(0, 0, 0)
    match = _HEX_PATTERN.match(hex_color.strip())
    if match is None:
        return RGB(0, 0, 0)
    clean = match.group(1)
    if len(clean) == 3:
        clean = "".join(ch * 2 for ch in clean)
    return RGB(int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Return a lower-case ``#rrggbb`` string for the given channels."""
    channels = (max(0, min(255, int(value))) for value in (r, g, b))
    return "#" + "".join(f"{value:02x}" for value in channels)


def _linearize(channel: int) -> float:
    normalized = channel / 255
    if normalized <= 0.03928:
        return normalized / 12.92
    return ((normalized + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: tuple[int, int, int]) -> float:
    """Return the sRGB relative luminance of *rgb* in the unit interval."""
    r, g, b = rgb
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def is_dark_color(hex_color: str | None) -> bool:
    """Return ``True`` when white text would read better than black on *hex_color*."""
    if not hex_color or not isinstance(hex_color, str):
        return False
    return relative_luminance(hex_to_rgb(hex_color)) < DARK_LUMINANCE_THRESHOLD


def contrast_text_color(background: str | None) -> str:
    """Return the CSS keyword used for auto-contrast text on *background*."""
    return "white" if is_dark_color(background) else "black"


def contrast_background(icon_color: str | None) -> str:
    """Dark icons get a white backdrop, light icons stay on a transparent one."""
    return "#ffffff" if is_dark_color(icon_color) else "transparent"


def dotted_pattern_color(icon_color: str | None) -> str:
    """Return the dot color for the checkered preview background."""
    return "#000000" if is_dark_color(icon_color) else "#666666"


def is_valid_hex_color(value: object) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(_HEX_PATTERN.match(value))


def normalize_hex_color(value: object) -> str:
    """Return ``#rrggbb`` for any 3- or 6-digit hex input, ``#000000`` otherwise."""
    if not isinstance(value, str):
        return FALLBACK_HEX
    cleaned = value.strip()
    if not is_valid_hex_color(cleaned):
        return FALLBACK_HEX
    digits = cleaned.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.lower()}"
