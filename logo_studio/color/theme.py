"""Derive dark page theme colors from a logo's primary brand color."""

from __future__ import annotations

from dataclasses import dataclass

from .contrast import hex_to_rgb, rgb_to_hex

DEFAULT_DARK_BACKGROUND = "#050505"


@dataclass(frozen=True, slots=True)
class ThemeColors:
    """Page and card backgrounds derived from a brand color."""

    background: str
    card: str


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Return hue in degrees and saturation/lightness in percent."""
    rn, gn, bn = r / 255, g / 255, b / 255
    high = max(rn, gn, bn)
    low = min(rn, gn, bn)
    lightness = (high + low) / 2

    if high == low:
        return 0.0, 0.0, lightness * 100

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2 - high - low)
    else:
        saturation = delta / (high + low)

    if high == rn:
        hue = (gn - bn) / delta + (6 if gn < bn else 0)
    elif high == gn:
        hue = (bn - rn) / delta + 2
    else:
        hue = (rn - gn) / delta + 4
    hue /= 6

    return hue * 360, saturation * 100, lightness * 100


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Inverse of :func:`rgb_to_hsl`, rounding channels to integers."""
    h, s, l = h / 360, s / 100, l / 100
    if s == 0:
        channel = round(l * 255)
        return channel, channel, channel

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    return (
        round(_hue_to_channel(p, q, h + 1 / 3) * 255),
        round(_hue_to_channel(p, q, h) * 255),
        round(_hue_to_channel(p, q, h - 1 / 3) * 255),
    )


def create_dark_theme_color(hex_color: str | None, darkness_factor: float = 0.95) -> str:
    """Return a very dark shade of *hex_color* that keeps its hue."""
    if not hex_color or hex_color.lower() == "#ffffff":
        return DEFAULT_DARK_BACKGROUND

    hue, saturation, lightness = rgb_to_hsl(*hex_to_rgb(hex_color))
    new_lightness = max(lightness * (1 - darkness_factor), 3)
    new_saturation = max(saturation * 0.9, 25)
    return rgb_to_hex(*hsl_to_rgb(hue, new_saturation, new_lightness))


def create_card_theme_color(dark_background: str) -> str:
    """Return a card color barely lighter than *dark_background*."""
    hue, saturation, lightness = rgb_to_hsl(*hex_to_rgb(dark_background))
    new_lightness = min(lightness + 1, 5)
    return rgb_to_hex(*hsl_to_rgb(hue, saturation, new_lightness))


def theme_colors(primary_color: str | None) -> ThemeColors:
    background = create_dark_theme_color(primary_color)
    return ThemeColors(background=background, card=create_card_theme_color(background))
