"""Remove definitions nothing points at, inert groups and markup noise."""

from __future__ import annotations

import copy
import logging
import re

from lxml import etree

from .document import best_effort, iter_elements, local_name, parse_svg, serialize

logger = logging.getLogger(__name__)

DEFINITION_TAGS = frozenset(
    {"linearGradient", "radialGradient", "pattern", "clipPath", "mask", "filter"}
)
DRAWABLE_TAGS = frozenset(
    {"path", "circle", "rect", "polygon", "polyline", "ellipse", "line", "text", "image", "use"}
)
CONSEQUENTIAL_GROUP_ATTRIBUTES = (
    "transform",
    "clip-path",
    "mask",
    "filter",
    "opacity",
    "fill",
    "stroke",
)
# kept inside <defs> regardless of ids: they are never referenced by url()
_UNREFERENCED_DEFS_KEEP = frozenset({"style"})

_URL_REFERENCE = re.compile(r"url\(\s*['\"]?#([^'\")\s]+)")


def _href_target(element: etree._Element) -> str | None:
    for name, value in element.attrib.items():
        if etree.QName(name).localname == "href" and value.startswith("#"):
            return value[1:]
    return None


def collect_referenced_ids(root: etree._Element) -> set[str]:
    """Return every id reachable through ``url(#id)`` or ``href="#id"``."""
    referenced: set[str] = set()
    for element in iter_elements(root):
        for value in element.attrib.values():
            referenced.update(_URL_REFERENCE.findall(value))
        target = _href_target(element)
        if target:
            referenced.add(target)
        if local_name(element) == "style" and element.text:
            referenced.update(_URL_REFERENCE.findall(element.text))
    return referenced


def _is_inside_defs(element: etree._Element) -> bool:
    return any(local_name(ancestor) == "defs" for ancestor in element.iterancestors())


def _unreferenced_definitions(root: etree._Element, referenced: set[str]) -> list[etree._Element]:
    doomed: list[etree._Element] = []
    for defs in iter_elements(root, "defs"):
        for child in defs:
            name = local_name(child)
            if name is None or name in _UNREFERENCED_DEFS_KEEP:
                continue
            if child.get("id") not in referenced:
                doomed.append(child)
    for element in iter_elements(root, *DEFINITION_TAGS):
        if _is_inside_defs(element):
            continue
        if element.get("id") not in referenced:
            doomed.append(element)
    return doomed


def _is_inert_group(group: etree._Element, referenced: set[str]) -> bool:
    if any(group.get(name) for name in CONSEQUENTIAL_GROUP_ATTRIBUTES):
        return False
    for node in group.iter():
        name = local_name(node)
        if name is None:
            continue
        if name in DRAWABLE_TAGS or name in DEFINITION_TAGS or node.get("id") in referenced:
            return False
    return True


def _remove(element: etree._Element) -> None:
    parent = element.getparent()
    if parent is None:
        return
    # lxml drops the tail together with the element
    if element.tail:
        previous = element.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + element.tail
        else:
            parent.text = (parent.text or "") + element.tail
    parent.remove(element)


@best_effort()
def remove_unused_definitions(svg_content: str) -> str:
    """Prune unreferenced definitions, empty ``defs``, inert groups and comments.

    Removal repeats until nothing changes so definitions only referenced by
    other dead definitions disappear too.
    """
    root = parse_svg(svg_content)

    etree.strip_tags(root, etree.Comment, etree.ProcessingInstruction)

    removed = 0
    while True:
        doomed = _unreferenced_definitions(root, collect_referenced_ids(root))
        if not doomed:
            break
        for element in doomed:
            _remove(element)
        removed += len(doomed)

    for defs in list(iter_elements(root, "defs")):
        if not any(local_name(child) for child in defs):
            _remove(defs)

    referenced = collect_referenced_ids(root)
    groups = list(iter_elements(root, "g"))
    for group in reversed(groups):
        if group is not root and _is_inert_group(group, referenced):
            _remove(group)
            removed += 1

    for element in iter_elements(root):
        for name, value in element.attrib.items():
            if not value.strip():
                del element.attrib[name]

    logger.debug("Pruned %d unused element(s)", removed)
    # a fresh copy leaves out comments and PIs that sat beside the root element
    return serialize(_detached_copy(root))


def _detached_copy(root: etree._Element) -> etree._Element:
    return copy.deepcopy(root)
