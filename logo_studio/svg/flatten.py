"""Turn stylesheet and custom-property driven coloring into plain attributes.

Page builders and vector editors frequently ignore ``<style>`` blocks inside
pasted SVG, so every rule that paints an element is resolved against the
root's inline custom properties and written back as a presentation attribute.
Rules are matched with real CSS selectors and applied in cascade order:
presentation attributes, then stylesheet rules by specificity and source
order, then the element's inline ``style``. The stylesheet and the root's
inline style are dropped afterwards.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass
from typing import Mapping, Sequence

from cssselect import GenericTranslator, SelectorError
from cssselect import parse as parse_selectors
from lxml import etree

from .document import (
    best_effort,
    find_svg_root,
    format_style,
    iter_elements,
    parse_style,
    parse_svg,
    serialize,
    stylesheet_text,
)

logger = logging.getLogger(__name__)

FLATTENED_PROPERTIES = ("fill", "stroke", "opacity", "stroke-width")
COLOR_PROPERTIES = frozenset({"fill", "stroke"})
HARD_CODED_FALLBACK = "#000000"

_CSS_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_CSS_RULE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_CLASS_NAME = re.compile(r"\.(-?[_A-Za-z][\w-]*)")
_TRANSLATOR = GenericTranslator()
_MAX_VAR_DEPTH = 16


@dataclass(frozen=True, slots=True)
class StyleRule:
    """One selector of a stylesheet rule with the declarations it carries."""

    selector: str
    specificity: tuple[int, int, int]
    order: int
    declarations: Mapping[str, str]
    classes: frozenset[str]
    xpath: etree.XPath


def parse_style_rules(css: str) -> list[StyleRule]:
    """Compile the rules of *css* that set a flattenable property.

    Selector groups are split into one rule per selector. Selectors that
    cannot be matched against a static document (pseudo-elements, syntax
    errors, unsupported pseudo-classes) are skipped.
    """
    rules: list[StyleRule] = []
    for selector_text, body in _CSS_RULE.findall(_CSS_COMMENT.sub("", css)):
        declarations = {
            name: value
            for name, value in parse_style(body).items()
            if name in FLATTENED_PROPERTIES
        }
        if not declarations or selector_text.strip().startswith("@"):
            continue
        try:
            selectors = parse_selectors(selector_text.strip())
        except SelectorError as exc:
            logger.debug("Skipping unparsable selector %r: %s", selector_text.strip(), exc)
            continue
        for selector in selectors:
            if selector.pseudo_element:
                continue
            canonical = selector.canonical()
            try:
                xpath = etree.XPath(_TRANSLATOR.selector_to_xpath(selector))
            except SelectorError as exc:
                logger.debug("Skipping selector %r: %s", canonical, exc)
                continue
            rules.append(
                StyleRule(
                    selector=canonical,
                    specificity=selector.specificity(),
                    order=len(rules),
                    declarations=declarations,
                    classes=frozenset(_CLASS_NAME.findall(canonical)),
                    xpath=xpath,
                )
            )
    return rules


def _unqualified_copy(svg: etree._Element) -> etree._Element:
    # selectors carry no namespace, so they are matched against a copy with
    # namespace-free tag names
    twin = copy.deepcopy(svg)
    for node in twin.iter():
        if isinstance(node.tag, str):
            node.tag = etree.QName(node).localname
    return twin


def match_rules(
    svg: etree._Element, rules: Sequence[StyleRule]
) -> dict[etree._Element, list[StyleRule]]:
    """Map each element under *svg* to its matching rules in cascade order."""
    if not rules:
        return {}
    twin = _unqualified_copy(svg)
    originals = dict(zip(twin.iter(), svg.iter()))
    matches: dict[etree._Element, list[StyleRule]] = {}
    for rule in rules:
        for node in rule.xpath(twin):
            matches.setdefault(originals[node], []).append(rule)
    for matched in matches.values():
        matched.sort(key=lambda rule: (rule.specificity, rule.order))
    return matches


def _split_var_arguments(arguments: str) -> tuple[str, str | None]:
    depth = 0
    for index, ch in enumerate(arguments):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            return arguments[:index].strip(), arguments[index + 1 :].strip()
    return arguments.strip(), None


def resolve_css_value(
    value: str,
    variables: Mapping[str, str],
    root_color: str | None,
    _depth: int = 0,
) -> str | None:
    """Resolve ``var(--name, fallback)`` and ``currentColor`` in *value*.

    Returns ``None`` when nothing concrete can be derived.
    """
    cleaned = value.replace("!important", "").strip()
    if _depth > _MAX_VAR_DEPTH:
        return None
    if cleaned.startswith("var(") and cleaned.endswith(")"):
        name, fallback = _split_var_arguments(cleaned[4:-1])
        if name in variables:
            return resolve_css_value(variables[name], variables, root_color, _depth + 1)
        if fallback:
            return resolve_css_value(fallback, variables, root_color, _depth + 1)
        return root_color
    if cleaned.lower() == "currentcolor":
        return root_color
    return cleaned or None


def _resolve_property(
    name: str, value: str, variables: Mapping[str, str], root_color: str | None
) -> str | None:
    resolved = resolve_css_value(value, variables, root_color)
    if resolved is None and name in COLOR_PROPERTIES:
        # left for hard_code_colors to pin down
        return "currentColor"
    return resolved


def _flatten_inline_style(
    element: etree._Element, variables: Mapping[str, str], root_color: str | None
) -> None:
    properties = parse_style(element.get("style"))
    if not properties:
        return
    for name in FLATTENED_PROPERTIES:
        if name not in properties:
            continue
        resolved = _resolve_property(name, properties.pop(name), variables, root_color)
        if resolved is not None:
            element.set(name, resolved)
    if properties:
        element.set("style", format_style(properties))
    else:
        del element.attrib["style"]


def _apply_rules(
    element: etree._Element,
    matched: Sequence[StyleRule],
    variables: Mapping[str, str],
    root_color: str | None,
) -> set[str]:
    """Write matched declarations onto *element*; return classes left unresolved."""
    unresolved: set[str] = set()
    for rule in matched:
        for name, value in rule.declarations.items():
            resolved = _resolve_property(name, value, variables, root_color)
            if resolved is None:
                unresolved.update(rule.classes)
                continue
            element.set(name, resolved)
    return unresolved


def _strip_classes(element: etree._Element, known: set[str], unresolved: set[str]) -> None:
    classes = (element.get("class") or "").split()
    if not classes:
        return
    kept = [name for name in classes if name not in known or name in unresolved]
    if kept:
        element.set("class", " ".join(kept))
    else:
        del element.attrib["class"]


def _flatten_attributes(
    element: etree._Element, variables: Mapping[str, str], root_color: str | None
) -> None:
    for name in FLATTENED_PROPERTIES:
        value = element.get(name)
        if not value or ("var(" not in value and value != "currentColor"):
            continue
        resolved = _resolve_property(name, value, variables, root_color)
        if resolved is None:
            del element.attrib[name]
        elif resolved != value:
            element.set(name, resolved)


@best_effort()
def convert_styles_to_attributes(svg_content: str) -> str:
    """Flatten stylesheet rules, custom properties and ``currentColor`` into attributes."""
    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content

    inline = parse_style(svg.get("style"))
    variables = {name: value for name, value in inline.items() if name.startswith("--")}
    root_color = None
    if inline.get("color"):
        root_color = resolve_css_value(inline["color"], variables, None)

    rules = parse_style_rules(stylesheet_text(svg) or "")
    matches = match_rules(svg, rules)
    known_classes: set[str] = set()
    for rule in rules:
        known_classes.update(rule.classes)
    logger.debug(
        "Flattening %d style rule(s) with %d custom propert(ies)", len(rules), len(variables)
    )

    for element in iter_elements(svg):
        unresolved = _apply_rules(element, matches.get(element, ()), variables, root_color)
        if element is not svg:
            _flatten_inline_style(element, variables, root_color)
        _flatten_attributes(element, variables, root_color)
        _strip_classes(element, known_classes, unresolved)

    for style in list(iter_elements(svg, "style")):
        style.getparent().remove(style)
    svg.attrib.pop("style", None)

    return serialize(root)


@best_effort()
def hard_code_colors(svg_content: str, fallback: str = HARD_CODED_FALLBACK) -> str:
    """Replace any attribute still equal to ``currentColor`` with *fallback*."""
    root = parse_svg(svg_content)
    for element in iter_elements(root):
        for name, value in element.attrib.items():
            if value.strip().lower() == "currentcolor":
                element.set(name, fallback)
    return serialize(root)
