"""Parsing, serialization and inline-style helpers for SVG markup."""

from __future__ import annotations

import functools
import logging
from typing import Callable, Iterator, TypeVar

from lxml import etree

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

SHAPE_TAGS = frozenset({"path", "circle", "rect", "polygon", "ellipse"})

_PARSER = etree.XMLParser(
    remove_blank_text=True,
    resolve_entities=False,
    no_network=True,
    huge_tree=False,
)

Transform = TypeVar("Transform", bound=Callable[..., object])


def best_effort(fallback: Callable[[str], object] | None = None) -> Callable[[Transform], Transform]:
    """Make a markup transform fail open.

    Any exception raised by the wrapped function is logged and the caller gets
    ``fallback(markup)``, or the unmodified markup when no fallback is given.
    """

    def decorator(func: Transform) -> Transform:
        @functools.wraps(func)
        def wrapper(svg_content, *args, **kwargs):
            try:
                return func(svg_content, *args, **kwargs)
            except Exception as exc:  # noqa: BLE001 - transforms never raise past the pipeline
                logger.warning("%s failed, keeping input unchanged: %s", func.__name__, exc)
                logger.debug("%s traceback", func.__name__, exc_info=True)
                return fallback(svg_content) if fallback else svg_content

        return wrapper  # type: ignore[return-value]

    return decorator


def parse_svg(svg_content: str) -> etree._Element:
    """Parse *svg_content* and return the document's root element."""
    data = svg_content.strip().encode("utf-8")
    return etree.fromstring(data, _PARSER)


def serialize(root: etree._Element) -> str:
    """Serialize the document owning *root* without an XML declaration."""
    return etree.tostring(root, encoding="unicode")


def local_name(node: etree._Element) -> str | None:
    """Return the namespace-free tag of *node*, ``None`` for comments and PIs."""
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname


def find_svg_root(root: etree._Element) -> etree._Element | None:
    """Return the first ``svg`` element in document order."""
    for node in root.iter():
        if local_name(node) == "svg":
            return node
    return None


def iter_elements(root: etree._Element, *names: str) -> Iterator[etree._Element]:
    """Yield elements under *root* (inclusive) whose local name is in *names*."""
    wanted = set(names)
    for node in root.iter():
        name = local_name(node)
        if name is not None and (not wanted or name in wanted):
            yield node


def stylesheet_text(root: etree._Element) -> str | None:
    """Return the concatenated text of every ``<style>`` element, if any."""
    blocks = [node.text or "" for node in iter_elements(root, "style")]
    if not blocks:
        return None
    return "\n".join(blocks)


def parse_style(value: str | None) -> dict[str, str]:
    """Parse an inline ``style`` attribute into an ordered property map."""
    properties: dict[str, str] = {}
    if not value:
        return properties
    for declaration in _split_declarations(value):
        name, sep, prop_value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip()
        prop_value = prop_value.strip()
        if not name:
            continue
        # custom property names are case sensitive, standard ones are not
        properties[name if name.startswith("--") else name.lower()] = prop_value
    return properties


def format_style(properties: dict[str, str]) -> str:
    return " ".join(f"{name}: {value};" for name, value in properties.items())


def set_style_property(element: etree._Element, name: str, value: str) -> None:
    """Set one inline style property on *element*, keeping the others."""
    properties = parse_style(element.get("style"))
    properties[name] = value
    element.set("style", format_style(properties))


def _split_declarations(value: str) -> Iterator[str]:
    # semicolons inside parentheses (e.g. data URIs) do not end a declaration
    depth = 0
    current: list[str] = []
    for ch in value:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        if ch == ";" and depth == 0:
            yield "".join(current)
            current = []
            continue
        current.append(ch)
    if current:
        yield "".join(current)
