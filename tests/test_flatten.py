from __future__ import annotations

from samples import parse, svg_elements

from logo_studio.svg.flatten import (
    convert_styles_to_attributes,
    hard_code_colors,
    parse_style_rules,
    resolve_css_value,
)
from logo_studio.svg.output import create_webflow_optimized_svg
from logo_studio.svg.transform import apply_color_to_svg

NS = 'xmlns="http://www.w3.org/2000/svg"'


def test_current_color_after_recolor_is_concrete(simple_svg):
    result = convert_styles_to_attributes(apply_color_to_svg(simple_svg, "#ff0000"))
    assert 'fill="#ff0000"' in result
    assert 'fill="currentColor"' not in result


def test_class_with_current_color_takes_root_color():
    svg = (
        f'<svg {NS} style="color: #00ff00"><style>.logo {{ fill: currentColor; }}</style>'
        '<path class="logo" d="M0 0"/></svg>'
    )
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("fill") == "#00ff00"
    assert path.get("class") is None


def test_custom_properties_are_resolved_and_removed():
    svg = (
        f'<svg {NS} fill="none" style="--bg-color: #0000ff">'
        "<style>.bg-class { fill: var(--bg-color, currentColor); }</style>"
        '<path class="bg-class" d="M0 0"/></svg>'
    )
    result = convert_styles_to_attributes(svg)
    root = parse(result)
    assert svg_elements(root, "path")[0].get("fill") == "#0000ff"
    assert "<style" not in result
    assert "var(--" not in result
    assert "class=" not in result
    assert root.get("style") is None
    assert root.get("fill") == "none"


def test_var_fallback_chain():
    svg = (
        f'<svg {NS} style="--itau-auto-text-color: black">'
        "<style>.itau-text { fill: var(--itau-text-color, var(--itau-auto-text-color, #ffffff)); }"
        ".other { fill: var(--missing, #abcdef); }</style>"
        '<path class="itau-text" d="M0 0"/><path class="other" d="M1 1"/></svg>'
    )
    first, second = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert first.get("fill") == "black"
    assert second.get("fill") == "#abcdef"


def test_non_color_properties_are_flattened():
    svg = (
        f'<svg {NS}><style>/* brand */ .a {{ opacity: 0.9; stroke-width: 2; }}</style>'
        '<path class="a" d="M0 0"/></svg>'
    )
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("opacity") == "0.9"
    assert path.get("stroke-width") == "2"


def test_unknown_classes_are_kept():
    svg = (
        f'<svg {NS}><style>.bg {{ fill: #111111; }}</style>'
        '<path class="foo bg" d="M0 0"/></svg>'
    )
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("class") == "foo"
    assert path.get("fill") == "#111111"


def test_inline_element_style_is_flattened():
    svg = f'<svg {NS}><path style="fill: #222222; mix-blend-mode: multiply" d="M0 0"/></svg>'
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("fill") == "#222222"
    assert path.get("style") == "mix-blend-mode: multiply;"


def test_unresolved_color_becomes_current_color_then_fallback():
    svg = f'<svg {NS}><style>.x {{ fill: var(--nope); }}</style><path class="x" d="M0 0"/></svg>'
    flattened = convert_styles_to_attributes(svg)
    assert svg_elements(parse(flattened), "path")[0].get("fill") == "currentColor"
    hardened = hard_code_colors(flattened)
    assert svg_elements(parse(hardened), "path")[0].get("fill") == "#000000"


def test_hard_code_colors_covers_every_attribute():
    svg = f'<svg {NS}><path fill="currentColor" stroke="currentColor" d="M0 0"/></svg>'
    (path,) = svg_elements(parse(hard_code_colors(svg, "#123123")), "path")
    assert path.get("fill") == "#123123"
    assert path.get("stroke") == "#123123"


def test_flatten_leaves_non_svg_alone():
    assert convert_styles_to_attributes("<html/>") == "<html/>"
    assert convert_styles_to_attributes("broken <") == "broken <"


def test_parse_style_rules_splits_selector_groups():
    rules = parse_style_rules(
        "path.a, .b { fill: red; color: blue; } g > .c { fill: green; } "
        ".d::before { fill: gray; } .e { color: red; } .f[ { fill: pink; }"
    )
    assert [sorted(rule.classes) for rule in rules] == [["a"], ["b"], ["c"]]
    assert rules[0].declarations == {"fill": "red"}
    assert rules[0].specificity == (0, 1, 1)
    assert rules[1].specificity == (0, 1, 0)


def test_inline_style_beats_class_rule():
    svg = (
        f'<svg {NS}><style>.a {{ fill: #0000ff; }}</style>'
        '<path class="a" style="fill:#ff0000" d="M0 0"/></svg>'
    )
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("fill") == "#ff0000"
    assert path.get("class") is None
    assert path.get("style") is None


def test_more_specific_rule_wins_over_later_rule():
    svg = (
        f"<svg {NS}><style>.a {{ fill: #111111; }} path.a {{ fill: #222222; }}"
        ".a { fill: #333333; }</style>"
        '<path class="a" d="M0 0"/><rect class="a" width="1" height="1"/></svg>'
    )
    root = parse(convert_styles_to_attributes(svg))
    assert svg_elements(root, "path")[0].get("fill") == "#222222"
    assert svg_elements(root, "rect")[0].get("fill") == "#333333"


def test_stylesheet_rule_overrides_presentation_attribute():
    svg = (
        f'<svg {NS}><style>.a {{ fill: #0000ff; }}</style>'
        '<path class="a" fill="#00ff00" d="M0 0"/></svg>'
    )
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("fill") == "#0000ff"


def test_descendant_and_child_selectors_are_applied():
    svg = (
        f"<svg {NS}><style>svg .a {{ fill: #0000ff; }} g > .b {{ stroke: #00ff00; }}</style>"
        '<path class="a" d="M0 0"/><g><path class="b" d="M1 1"/></g></svg>'
    )
    result = convert_styles_to_attributes(svg)
    first, second = svg_elements(parse(result), "path")
    assert first.get("fill") == "#0000ff"
    assert second.get("stroke") == "#00ff00"
    assert "class=" not in result


def test_descendant_selector_survives_webflow_pipeline():
    svg = (
        f'<svg {NS} viewBox="0 0 10 10"><style>svg .a {{ fill: #0000ff; }}</style>'
        '<path class="a" d="M0 0h1v1H0z"/></svg>'
    )
    result = create_webflow_optimized_svg(svg)
    (path,) = svg_elements(parse(result), "path")
    assert path.get("fill") == "#0000ff"
    assert "class=" not in result


def test_class_of_unmatched_rule_is_stripped_without_painting():
    svg = (
        f"<svg {NS}><style>g > .b {{ fill: #00ff00; }}</style>"
        '<path class="b" d="M0 0"/></svg>'
    )
    (path,) = svg_elements(parse(convert_styles_to_attributes(svg)), "path")
    assert path.get("fill") is None
    assert path.get("class") is None


def test_resolve_css_value():
    assert resolve_css_value("currentColor", {}, "#abcabc") == "#abcabc"
    assert resolve_css_value("var(--a)", {"--a": "var(--b)", "--b": "#010101"}, None) == "#010101"
    assert resolve_css_value("var(--a)", {"--a": "var(--a)"}, None) is None
    assert resolve_css_value("#fff !important", {}, None) == "#fff"
