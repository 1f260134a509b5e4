"""Colorable regions of logos that carry more than one brand color."""

from __future__ import annotations

import re
from typing import Mapping, Sequence

from ..color.contrast import is_dark_color
from ..io.models import AUTO_COLOR, ColorRegion
from .original_colors import get_primary_original_color, get_secondary_original_color

BACKGROUND_REGION_KEY = "bg"
_STRICT_HEX = re.compile(r"^#[0-9A-Fa-f]{6}$")

MULTI_COLOR_CONFIGS: Mapping[str, Sequence[ColorRegion]] = {
    "banco-itau": (
        ColorRegion(
            key="bg",
            label="Fundo",
            css_var="--itau-bg-color",
            default_color=get_primary_original_color("banco-itau"),
            description="Cor do fundo do logo",
        ),
        ColorRegion(
            key="text",
            label="Texto",
            css_var="--itau-text-color",
            auto_contrast_var="--itau-auto-text-color",
            default_color=get_secondary_original_color("banco-itau") or AUTO_COLOR,
            description="Cor do texto do logo",
        ),
    ),
    "agora-investimentos": (
        ColorRegion(
            key="bg",
            label="Fundo",
            css_var="--agora-bg-color",
            default_color=get_primary_original_color("agora-investimentos"),
            description="Cor do fundo e elementos principais",
        ),
        ColorRegion(
            key="text",
            label="Texto",
            css_var="--agora-text-color",
            default_color=get_secondary_original_color("agora-investimentos") or "#ffffff",
            description="Cor do texto inferior",
        ),
    ),
}


def has_multiple_colors(identifier: str) -> bool:
    return identifier in MULTI_COLOR_CONFIGS


def get_multi_color_config(identifier: str) -> Sequence[ColorRegion] | None:
    return MULTI_COLOR_CONFIGS.get(identifier)


def get_default_color_map(identifier: str) -> dict[str, str]:
    """Return a fresh ``{region key: default color}`` map, ``{}`` when unknown."""
    regions = get_multi_color_config(identifier) or ()
    return {region.key: region.default_color for region in regions}


def background_color_for(regions: Sequence[ColorRegion], color_map: Mapping[str, str]) -> str:
    """Return the color auto-contrast regions are measured against."""
    background = next((r for r in regions if r.key == BACKGROUND_REGION_KEY), None)
    if background is None:
        return "#000000"
    return color_map.get(background.key) or background.default_color or "#000000"


def resolve_auto_colors(color_map: Mapping[str, str], identifier: str) -> dict[str, str]:
    """Replace ``"auto"`` entries with the black or white they stand for."""
    regions = get_multi_color_config(identifier)
    if not regions:
        return dict(color_map)

    resolved = dict(color_map)
    for region in regions:
        if color_map.get(region.key) == AUTO_COLOR and region.auto_contrast_var:
            background = background_color_for(regions, color_map)
            resolved[region.key] = "#ffffff" if is_dark_color(background) else "#000000"
    return resolved


def validate_color_map(color_map: Mapping[str, str], identifier: str) -> dict[str, str]:
    """Keep ``"auto"`` and ``#RRGGBB`` values, fall back to defaults otherwise."""
    regions = get_multi_color_config(identifier)
    if not regions:
        return {}

    validated: dict[str, str] = {}
    for region in regions:
        color = color_map.get(region.key)
        if color and (color == AUTO_COLOR or _STRICT_HEX.match(color)):
            validated[region.key] = color
        else:
            validated[region.key] = region.default_color
    return validated


def is_default_color_map(color_map: Mapping[str, str], identifier: str) -> bool:
    regions = get_multi_color_config(identifier)
    if not regions:
        return True
    return all(color_map.get(region.key) == region.default_color for region in regions)
