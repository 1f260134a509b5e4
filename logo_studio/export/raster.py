"""Rasterize optimized logo markup onto a square PNG canvas."""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from ..svg.document import best_effort, find_svg_root, parse_svg, serialize
from ..svg.output import create_webflow_optimized_svg

try:  # pragma: no cover - optional dependency
    import cairosvg  # type: ignore
except Exception:  # pragma: no cover - cairo libraries missing on the host
    cairosvg = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


@best_effort()
def prepare_for_canvas(svg_content: str, size: int) -> str:
    """Give responsive markup fixed pixel dimensions so it renders at *size*."""
    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content
    svg.attrib.pop("style", None)
    svg.set("width", str(size))
    svg.set("height", str(size))
    return serialize(root)


def render_png(svg_content: str, size: int) -> bytes:
    """Render *svg_content* with cairosvg; raises when rendering is impossible."""
    if cairosvg is None:
        raise RuntimeError("cairosvg is not available; cannot rasterize SVG")
    return cairosvg.svg2png(  # type: ignore[attr-defined]
        bytestring=svg_content.encode("utf-8"),
        output_width=size,
        output_height=size,
    )


def _square_canvas(png_bytes: bytes, size: int) -> bytes:
    with Image.open(BytesIO(png_bytes)) as rendered:
        image = rendered.convert("RGBA")
    if image.size != (size, size):
        image.thumbnail((size, size))
    canvas = Image.new("RGBA", (size, size), TRANSPARENT)
    offset = ((size - image.width) // 2, (size - image.height) // 2)
    canvas.paste(image, offset, mask=image)
    buffer = BytesIO()
    canvas.save(buffer, format="PNG")
    canvas.close()
    image.close()
    return buffer.getvalue()


def svg_to_png(svg_content: str, size: int = 256) -> bytes | None:
    """Return PNG bytes for *svg_content* drawn on a *size* square canvas.

    The markup is Webflow-optimized first. ``None`` signals a rendering or
    decoding failure; nothing is raised.
    """
    if size <= 0:
        logger.warning("Refusing to rasterize at non-positive size %s", size)
        return None
    optimized = create_webflow_optimized_svg(svg_content)
    try:
        rendered = render_png(prepare_for_canvas(optimized, size), size)
        return _square_canvas(rendered, size)
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Rendered SVG could not be decoded as an image: %s", exc)
    except Exception as exc:  # noqa: BLE001 - cairosvg raises a wide range of errors
        logger.warning("SVG rasterization failed: %s", exc)
    return None
