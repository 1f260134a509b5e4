"""Brand colors of the unmodified logos and the files they were taken from."""

from __future__ import annotations

import logging
from typing import Mapping, TypedDict

from lxml import etree

from ..svg.document import local_name, parse_svg

logger = logging.getLogger(__name__)

ORIGINAL_FOLDER = "logo_original"
FALLBACK_PRIMARY = "#ffffff"


class BrandColors(TypedDict, total=False):
    primary: str
    secondary: str


ORIGINAL_COLORS: Mapping[str, BrandColors] = {
    "banco-itau": {"primary": "#003399", "secondary": "#FFFF00"},
    "banco-bradesco": {"primary": "#E51736"},
    # designed for dark backgrounds
    "btg-pactual": {"primary": "#ffffff"},
    "banco-brasil": {"primary": "#33348E"},
    "caixa-economica": {"primary": "#0070AF", "secondary": "#F6822A"},
    "xp-investimentos": {"primary": "#FFC709"},
    "agora-investimentos": {"primary": "#00C88D", "secondary": "#ffffff"},
}

ORIGINAL_LOGO_FILES: Mapping[str, str] = {
    "banco-itau": "Itau.svg",
    "banco-bradesco": "Bradesco.svg",
    "banco-brasil": "Banco do brasil.svg",
    "btg-pactual": "BTG.svg",
    "caixa-economica": "Caixa.svg",
    "xp-investimentos": "XP CORRETORA.svg",
    "agora-investimentos": "ÁGORA.svg",
}


def get_original_colors(identifier: str) -> BrandColors | None:
    return ORIGINAL_COLORS.get(identifier)


def get_primary_original_color(identifier: str) -> str:
    """Return the primary brand color, white when the logo is unknown."""
    colors = get_original_colors(identifier) or {}
    return colors.get("primary") or FALLBACK_PRIMARY


def get_secondary_original_color(identifier: str) -> str | None:
    colors = get_original_colors(identifier) or {}
    return colors.get("secondary")


def has_multiple_original_colors(identifier: str) -> bool:
    colors = get_original_colors(identifier)
    return bool(colors) and "secondary" in colors


def default_logo_color(identifier: str) -> str:
    """Color the single-color editor starts from when *identifier* is selected."""
    return get_primary_original_color(identifier)


def available_logos_with_original_colors() -> list[str]:
    return list(ORIGINAL_COLORS)


def original_logo_filename(identifier: str) -> str | None:
    return ORIGINAL_LOGO_FILES.get(identifier)


def has_original_logo(identifier: str) -> bool:
    return identifier in ORIGINAL_LOGO_FILES


def extract_colors_from_svg(svg_content: str | None) -> list[str]:
    """Return the unique hex ``fill``/``stroke`` colors used in *svg_content*.

    Colors are upper-cased, fills before strokes. ``none`` and
    ``transparent`` are skipped, as is anything that is not a hex literal.
    """
    if not svg_content:
        return []
    try:
        root = parse_svg(svg_content)
    except etree.XMLSyntaxError as exc:
        logger.warning("Cannot extract colors from malformed SVG: %s", exc)
        return []

    colors: list[str] = []
    seen: set[str] = set()
    for attribute in ("fill", "stroke"):
        for element in root.iter():
            if local_name(element) is None:
                continue
            value = (element.get(attribute) or "").strip()
            if not value.startswith("#"):
                continue
            color = value.upper()
            if color not in seen:
                seen.add(color)
                colors.append(color)
    return colors
