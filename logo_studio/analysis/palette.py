"""Palette diagnostics for the unmodified brand logos."""

from __future__ import annotations

import logging
from io import BytesIO

import numpy as np
from PIL import Image

from ..color.contrast import rgb_to_hex
from ..export.raster import render_png
from ..registry.original_colors import extract_colors_from_svg

logger = logging.getLogger(__name__)

_ALPHA_CUTOFF = 128
_RENDER_SIZE = 128


def dominant_colors(img: Image.Image, k: int = 3) -> list[str]:
    """Return the *k* most frequent opaque colors of *img* as hex strings."""
    if k <= 0:
        return []

    rgba_image = img.convert("RGBA") if img.mode != "RGBA" else img
    pixels = np.asarray(rgba_image).reshape(-1, 4)
    if pixels.size == 0:
        return []

    opaque = pixels[pixels[:, 3] >= _ALPHA_CUTOFF][:, :3]
    if opaque.size == 0:
        return []

    colors, counts = np.unique(opaque, axis=0, return_counts=True)
    top_indices = np.argsort(counts)[::-1][:k]
    return [rgb_to_hex(*(int(channel) for channel in colors[idx])) for idx in top_indices]


def palette_report(svg_content: str, k: int = 3) -> dict[str, list[str]]:
    """Compare attribute colors with what the rendered logo actually shows."""
    report: dict[str, list[str]] = {
        "declared": extract_colors_from_svg(svg_content),
        "rendered": [],
    }
    try:
        png = render_png(svg_content, _RENDER_SIZE)
        with Image.open(BytesIO(png)) as image:
            report["rendered"] = [color.upper() for color in dominant_colors(image, k)]
    except Exception as exc:  # noqa: BLE001 - diagnostics only
        logger.warning("Could not render logo for palette analysis: %s", exc)
    return report
