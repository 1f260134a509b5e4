"""Size and color transforms applied to raw logo markup."""

from __future__ import annotations

import logging
from typing import Mapping

from ..color.contrast import contrast_text_color
from ..io.models import AUTO_COLOR, DetectedRegion
from ..registry.multi_color import background_color_for, get_multi_color_config
from .document import (
    SHAPE_TAGS,
    best_effort,
    find_svg_root,
    iter_elements,
    parse_svg,
    serialize,
    set_style_property,
    stylesheet_text,
)

logger = logging.getLogger(__name__)

ITAU_TEXT_MARKER = "itau-text"
ITAU_AUTO_TEXT_VAR = "--itau-auto-text-color"

_PRESERVED_PAINTS = frozenset({"none", "transparent"})


@best_effort()
def apply_size_to_svg(svg_content: str, size: int) -> str:
    """Set the root ``width`` and ``height`` to *size*, making the logo square."""
    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content
    svg.set("width", str(int(size)))
    svg.set("height", str(int(size)))
    return serialize(root)


def _is_recolorable_paint(value: str | None) -> bool:
    if not value or value in _PRESERVED_PAINTS:
        return False
    return value == "currentColor" or value.startswith("#") or value.startswith("rgb")


@best_effort()
def apply_color_to_svg(svg_content: str, color: str) -> str:
    """Recolor every ``currentColor`` or literal fill and stroke to *color*.

    The root also gets ``color: <color>`` so anything inheriting
    ``currentColor`` follows along. Logos whose stylesheet has the Itaú text
    rule additionally get an auto-contrast text color.
    """
    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content

    set_style_property(svg, "color", color)

    css = stylesheet_text(svg)
    if css and ITAU_TEXT_MARKER in css:
        set_style_property(svg, ITAU_AUTO_TEXT_VAR, contrast_text_color(color))

    for element in iter_elements(svg, *SHAPE_TAGS):
        for attribute in ("fill", "stroke"):
            if _is_recolorable_paint(element.get(attribute)):
                element.set(attribute, color)

    return serialize(root)


def apply_svg_modifications(svg_content: str, size: int, color: str) -> str:
    """Resize then recolor *svg_content* for a single-color logo."""
    return apply_color_to_svg(apply_size_to_svg(svg_content, size), color)


@best_effort()
def apply_multiple_colors(
    svg_content: str, color_map: Mapping[str, str], identifier: str
) -> str:
    """Write each region's color into its CSS variable on the root element.

    Regions are visited in their configured order. A region set to ``"auto"``
    only contributes its auto-contrast variable, measured against the
    background region.
    """
    regions = get_multi_color_config(identifier)
    if not regions:
        return svg_content

    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content

    for region in regions:
        color = color_map.get(region.key)
        if not color:
            continue
        if color == AUTO_COLOR:
            if region.auto_contrast_var:
                background = background_color_for(regions, color_map)
                set_style_property(
                    svg, region.auto_contrast_var, contrast_text_color(background)
                )
            continue
        set_style_property(svg, region.css_var, color)
        if region.auto_contrast_var:
            set_style_property(svg, region.auto_contrast_var, contrast_text_color(color))

    return serialize(root)


@best_effort(fallback=lambda _: [])
def detect_colorable_elements(
    svg_content: str,
    identifier: str,
    color_map: Mapping[str, str] | None = None,
) -> list[DetectedRegion]:
    """Return the configured regions whose CSS variable the stylesheet uses."""
    regions = get_multi_color_config(identifier)
    if not regions:
        return []

    css = stylesheet_text(parse_svg(svg_content))
    if css is None:
        logger.debug("No stylesheet in %s, nothing to detect", identifier)
        return []

    current = color_map or {}
    return [
        DetectedRegion(region=region, current_color=current.get(region.key) or region.default_color)
        for region in regions
        if region.css_var in css
    ]
