from __future__ import annotations

from samples import parse, svg_elements

from logo_studio.svg.document import parse_style
from logo_studio.svg.transform import (
    apply_color_to_svg,
    apply_multiple_colors,
    apply_size_to_svg,
    apply_svg_modifications,
    detect_colorable_elements,
)


def test_apply_size_sets_square_dimensions(simple_svg):
    root = parse(apply_size_to_svg(simple_svg, 64))
    assert root.get("width") == "64"
    assert root.get("height") == "64"
    assert root.get("viewBox") == "0 0 240 240"


def test_apply_size_is_idempotent(simple_svg):
    once = apply_size_to_svg(simple_svg, 48)
    assert apply_size_to_svg(once, 48) == once


def test_apply_size_leaves_unusable_input_alone():
    assert apply_size_to_svg("not svg <", 64) == "not svg <"
    assert apply_size_to_svg("<html/>", 64) == "<html/>"


def test_apply_color_rewrites_paints(simple_svg):
    root = parse(apply_color_to_svg(simple_svg, "#ff0000"))
    assert parse_style(root.get("style"))["color"] == "#ff0000"
    (path,) = svg_elements(root, "path")
    (rect,) = svg_elements(root, "rect")
    (circle,) = svg_elements(root, "circle")
    assert path.get("fill") == "#ff0000"
    assert rect.get("fill") == "none"
    assert circle.get("fill") == "transparent"
    assert circle.get("stroke") == "#ff0000"
    # the root is not a shape
    assert root.get("fill") == "none"


def test_apply_color_sets_auto_text_for_itau(itau_svg):
    dark = parse_style(parse(apply_color_to_svg(itau_svg, "#000000")).get("style"))
    light = parse_style(parse(apply_color_to_svg(itau_svg, "#ffff00")).get("style"))
    assert dark["--itau-auto-text-color"] == "white"
    assert light["--itau-auto-text-color"] == "black"


def test_apply_color_skips_auto_text_without_itau_rule(simple_svg):
    style = parse_style(parse(apply_color_to_svg(simple_svg, "#000000")).get("style"))
    assert "--itau-auto-text-color" not in style


def test_apply_svg_modifications_resizes_and_recolors(simple_svg):
    root = parse(apply_svg_modifications(simple_svg, 32, "#00ff00"))
    assert root.get("width") == "32"
    assert svg_elements(root, "path")[0].get("fill") == "#00ff00"


def test_apply_multiple_colors_auto_region(itau_svg):
    result = apply_multiple_colors(itau_svg, {"bg": "#003399", "text": "auto"}, "banco-itau")
    style = parse_style(parse(result).get("style"))
    assert style["--itau-bg-color"] == "#003399"
    assert style["--itau-auto-text-color"] == "white"
    assert "--itau-text-color" not in style


def test_apply_multiple_colors_explicit_region(itau_svg):
    result = apply_multiple_colors(itau_svg, {"bg": "#003399", "text": "#ffff00"}, "banco-itau")
    style = parse_style(parse(result).get("style"))
    assert list(style) == ["--itau-bg-color", "--itau-text-color", "--itau-auto-text-color"]
    assert style["--itau-text-color"] == "#ffff00"
    assert style["--itau-auto-text-color"] == "black"


def test_apply_multiple_colors_unknown_logo_is_identity(itau_svg):
    assert apply_multiple_colors(itau_svg, {"bg": "#000000"}, "banco-bradesco") == itau_svg


def test_detect_colorable_elements(itau_svg):
    detected = detect_colorable_elements(itau_svg, "banco-itau", {"bg": "#111111"})
    assert [region.key for region in detected] == ["bg", "text"]
    assert detected[0].current_color == "#111111"
    assert detected[1].current_color == "#FFFF00"


def test_detect_colorable_elements_only_reports_used_variables():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg"><style>'
        ".itau-bg { fill: var(--itau-bg-color); }</style><rect class=\"itau-bg\"/></svg>"
    )
    assert [region.key for region in detect_colorable_elements(svg, "banco-itau")] == ["bg"]


def test_detect_colorable_elements_empty_cases(simple_svg, itau_svg):
    assert detect_colorable_elements(simple_svg, "banco-itau") == []
    assert detect_colorable_elements(itau_svg, "banco-bradesco") == []
    assert detect_colorable_elements("<svg", "banco-itau") == []
