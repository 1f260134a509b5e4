from __future__ import annotations

from samples import parse, svg_elements

from logo_studio.svg.prune import collect_referenced_ids, remove_unused_definitions

NS = 'xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink"'

CLUTTERED = f"""<!-- exported by an editor -->
<svg {NS} viewBox="0 0 10 10">
<!-- layer 1 -->
<g clip-path="url(#used)"><path d="M0 0h1v1H0z" fill="url(#grad)"/></g>
<g><g/></g>
<g transform="translate(1 1)"/>
<use xlink:href="#shape"/>
<path d="M2 2h1v1H2z" data-note=""/>
<defs>
<clipPath id="used"><rect width="1" height="1"/></clipPath>
<clipPath id="unused_clip"><rect width="1" height="1"/></clipPath>
<linearGradient id="grad"><stop offset="0"/></linearGradient>
<linearGradient id="chain-target"/>
<linearGradient id="chain-source" href="#chain-target"/>
<path id="shape" d="M3 3h1v1H3z"/>
</defs>
<radialGradient id="top-level-unused"/>
</svg>"""


def _ids(markup: str) -> set[str]:
    return {node.get("id") for node in parse(markup).iter() if node.get("id")}


def test_unreferenced_definitions_are_removed():
    result = remove_unused_definitions(CLUTTERED)
    ids = _ids(result)
    assert {"used", "grad", "shape"} <= ids
    assert "unused_clip" not in ids
    assert "top-level-unused" not in ids


def test_dead_reference_chains_are_removed():
    ids = _ids(remove_unused_definitions(CLUTTERED))
    assert "chain-source" not in ids
    assert "chain-target" not in ids


def test_every_remaining_reference_resolves():
    result = remove_unused_definitions(CLUTTERED)
    root = parse(result)
    assert collect_referenced_ids(root) <= _ids(result)


def test_comments_and_empty_attributes_are_dropped():
    result = remove_unused_definitions(CLUTTERED)
    assert "<!--" not in result
    assert "data-note" not in result


def test_inert_groups_are_removed_but_consequential_ones_stay():
    root = parse(remove_unused_definitions(CLUTTERED))
    groups = svg_elements(root, "g")
    assert len(groups) == 2
    assert {group.get("clip-path") or group.get("transform") for group in groups} == {
        "url(#used)",
        "translate(1 1)",
    }


def test_empty_defs_are_removed():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg"><path d="M0 0"/>'
        '<defs><clipPath id="lonely"><rect/></clipPath></defs></svg>'
    )
    result = remove_unused_definitions(svg)
    assert "<defs" not in result
    assert "lonely" not in result
    assert "<path" in result


def test_references_from_stylesheet_keep_definitions():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg"><style>.a { fill: url(#paint); }</style>'
        '<defs><linearGradient id="paint"/></defs><path class="a" d="M0 0"/></svg>'
    )
    assert "paint" in _ids(remove_unused_definitions(svg))


def test_malformed_markup_is_returned_unchanged():
    assert remove_unused_definitions("<svg><g>") == "<svg><g>"


def test_groups_wrapping_definitions_are_kept():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<g><linearGradient id="grad"><stop offset="0"/></linearGradient></g>'
        '<path fill="url(#grad)" d="M0 0"/></svg>'
    )
    result = remove_unused_definitions(svg)
    assert "grad" in _ids(result)
    assert collect_referenced_ids(parse(result)) <= _ids(result)


def test_referenced_groups_are_kept():
    svg = (
        f'<svg {NS}><defs><g id="mark"/></defs>'
        '<g><g id="inner"/></g><use xlink:href="#mark"/><use href="#inner"/></svg>'
    )
    assert {"mark", "inner"} <= _ids(remove_unused_definitions(svg))


def test_wrapper_of_unused_definition_is_removed():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<g><linearGradient id="stale"/></g><path d="M0 0"/></svg>'
    )
    result = remove_unused_definitions(svg)
    assert "stale" not in result
    assert not svg_elements(parse(result), "g")


def test_text_after_comments_is_kept():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<text x="0" y="10">Banco <!-- kerning -->Itau</text></svg>'
    )
    (text,) = svg_elements(parse(remove_unused_definitions(svg)), "text")
    assert "".join(text.itertext()) == "Banco Itau"
