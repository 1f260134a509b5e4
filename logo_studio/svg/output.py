"""Final output stages: clean, responsive and pretty-printed markup."""

from __future__ import annotations

import re

from lxml import etree

from .document import (
    SVG_NAMESPACE,
    best_effort,
    find_svg_root,
    format_style,
    iter_elements,
    parse_svg,
    serialize,
)
from .flatten import convert_styles_to_attributes, hard_code_colors
from .prune import remove_unused_definitions

DEFAULT_VIEWBOX = "0 0 240 240"
RESPONSIVE_STYLE = {"width": "100%", "height": "100%", "display": "block"}
INDENT = "  "

PREFERRED_ATTRIBUTE_ORDER = (
    "width",
    "height",
    "viewBox",
    "fill",
    "stroke",
    "stroke-width",
    "opacity",
    "d",
    "fill-rule",
    "clip-rule",
    "transform",
    "id",
    "class",
)
_ATTRIBUTE_RANK = {name: index for index, name in enumerate(PREFERRED_ATTRIBUTE_ORDER)}

_BETWEEN_TAGS = re.compile(r">\s*<")
_START_TAG = re.compile(r"<(?![/!?])[^>]*>")
_END_TAG = re.compile(r"</[^>]*>")
_ROOT_START_TAG = re.compile(r"<svg\b[^>]*>")


def _qualified_name(element: etree._Element, name: str) -> str:
    qname = etree.QName(name)
    if qname.namespace is None:
        return name
    prefixes = {uri: prefix for prefix, uri in element.nsmap.items() if prefix}
    prefix = prefixes.get(qname.namespace)
    return f"{prefix}:{qname.localname}" if prefix else qname.localname


def normalize_attribute_order(element: etree._Element) -> None:
    """Reorder attributes: preferred names first, the rest alphabetically."""
    items = list(element.attrib.items())
    if len(items) < 2:
        return

    def sort_key(item: tuple[str, str]) -> tuple[int, str]:
        name = item[0]
        rank = _ATTRIBUTE_RANK.get(name, len(_ATTRIBUTE_RANK))
        return rank, _qualified_name(element, name)

    element.attrib.clear()
    for name, value in sorted(items, key=sort_key):
        element.set(name, value)


def _ensure_default_namespace(markup: str) -> str:
    match = _ROOT_START_TAG.search(markup)
    if match is None or "xmlns=" in match.group(0):
        return markup
    tag = match.group(0)
    patched = tag.replace("<svg", f'<svg xmlns="{SVG_NAMESPACE}"', 1)
    return markup[: match.start()] + patched + markup[match.end() :]


def indent_markup(markup: str) -> str:
    """Put one tag per line and indent by nesting depth.

    Depth is tracked by counting start and end tags on each line and never
    drops below zero.
    """
    lines = _BETWEEN_TAGS.sub(">\n<", markup).split("\n")
    formatted: list[str] = []
    depth = 0
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        opens = sum(1 for tag in _START_TAG.findall(line) if not tag.endswith("/>"))
        closes = len(_END_TAG.findall(line))
        if line.startswith("</"):
            depth = max(0, depth - 1)
            closes -= 1
        formatted.append(f"{INDENT * depth}{line}")
        depth = max(0, depth + opens - closes)
    return "\n".join(formatted)


@best_effort()
def format_svg_content(svg_content: str) -> str:
    """Pretty-print *svg_content* with normalized attribute order."""
    root = parse_svg(svg_content)
    if find_svg_root(root) is None:
        return svg_content
    for element in iter_elements(root):
        normalize_attribute_order(element)
    etree.cleanup_namespaces(root)

    markup = serialize(root).replace("\r\n", "\n").replace("\r", "\n")
    return indent_markup(_ensure_default_namespace(markup))


@best_effort()
def make_responsive(svg_content: str) -> str:
    """Let the embedding container size the logo through its viewBox."""
    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content

    svg.attrib.pop("width", None)
    svg.attrib.pop("height", None)
    if not svg.get("viewBox"):
        svg.set("viewBox", DEFAULT_VIEWBOX)
    svg.set("preserveAspectRatio", "xMidYMid meet")
    svg.set("style", format_style(RESPONSIVE_STYLE))
    return serialize(root)


def create_clean_svg_output(svg_content: str) -> str:
    """Return markup with no stylesheet, dead definitions or ``currentColor``."""
    flattened = convert_styles_to_attributes(svg_content)
    pruned = remove_unused_definitions(flattened)
    return hard_code_colors(pruned)


def create_webflow_optimized_svg(svg_content: str) -> str:
    """Return self-contained, responsive, pretty-printed markup for page builders."""
    return format_svg_content(make_responsive(create_clean_svg_output(svg_content)))
