"""Command-line interface for the logo studio."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable

from .analysis.palette import palette_report
from .assets.fetch import load_original_svg_content, make_loader
from .color.contrast import is_valid_hex_color, normalize_hex_color
from .export.download import SUPPORTED_FORMATS, DownloadSink
from .io.models import ExportResult
from .io.outputs import write_export_report, write_palette_report
from .registry.catalog import BANK_LOGOS, display_name
from .registry.multi_color import (
    has_multiple_colors,
    resolve_auto_colors,
    validate_color_map,
)
from .registry.original_colors import available_logos_with_original_colors
from .store.svg_store import DEFAULT_SIZE, SvgStore

DEFAULT_OUT_DIR = Path("out") / "downloads"


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the logo studio."""
    parser = argparse.ArgumentParser(
        description="Recolor, resize and export bank logos as SVG or PNG."
    )
    parser.add_argument(
        "--source",
        required=True,
        help="Base URL or directory holding the logos_bancos/ and logo_original/ folders.",
    )
    parser.add_argument(
        "--logo",
        action="append",
        default=[],
        metavar="ID",
        help="Logo identifier to export; repeat for several. Defaults to the first loaded.",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Export every logo that loaded, bundled into one archive.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=DEFAULT_SIZE,
        help="Export size in pixels (clamped to 24-256).",
    )
    parser.add_argument(
        "--color",
        default=None,
        help="Color for single-color logos, e.g. '#ff0000'.",
    )
    parser.add_argument(
        "--region",
        action="append",
        default=[],
        metavar="KEY=COLOR",
        help="Region color for multi-color logos, e.g. 'bg=#003399' or 'text=auto'.",
    )
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default="svg",
        help="Export format.",
    )
    parser.add_argument(
        "--out",
        default=str(DEFAULT_OUT_DIR),
        help="Directory where downloads are written.",
    )
    parser.add_argument(
        "--list",
        dest="list_logos",
        action="store_true",
        help="List the logos that loaded and exit.",
    )
    parser.add_argument(
        "--print",
        dest="print_markup",
        action="store_true",
        help="Print the formatted markup of the edited logo.",
    )
    parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON summary of the exports to this path.",
    )
    parser.add_argument(
        "--debug-colors",
        action="store_true",
        help="Report declared and rendered colors of the original brand files.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def _parse_regions(values: Iterable[str]) -> dict[str, str]:
    regions: dict[str, str] = {}
    for value in values:
        key, sep, color = value.partition("=")
        if not sep or not key.strip() or not color.strip():
            print(f"[warn] ignoring malformed region '{value}' (expected KEY=COLOR)")
            continue
        regions[key.strip()] = color.strip()
    return regions


def _debug_colors(source: str, identifiers: Iterable[str], out_dir: Path) -> None:
    """Print the palette of each original brand file and persist it."""
    palettes: dict[str, dict[str, list[str]]] = {}
    for identifier in identifiers:
        content = load_original_svg_content(identifier, source)
        if not content:
            print(f"[colors] {identifier}: original not available")
            continue
        report = palette_report(content)
        palettes[identifier] = report
        declared = ", ".join(report["declared"]) or "-"
        rendered = ", ".join(report["rendered"]) or "-"
        print(f"[colors] {display_name(identifier)}: declared {declared}; rendered {rendered}")
    if palettes:
        path = write_palette_report(out_dir / "palettes.json", palettes)
        print(f"[colors] wrote {len(palettes)} palette(s) to {path}")


def _apply_regions(store: SvgStore, identifier: str, requested: dict[str, str]) -> None:
    validated = validate_color_map({**store.data.color_map, **requested}, identifier)
    for key, color in requested.items():
        if key not in validated:
            print(f"[warn] {identifier} has no '{key}' region")
        elif validated[key] != color:
            print(f"[warn] {identifier}: '{color}' is not a valid color for '{key}'")
    for key, color in validated.items():
        store.set_element_color(key, color)
    resolved = resolve_auto_colors(store.data.color_map, identifier)
    summary = ", ".join(f"{key}={color}" for key, color in resolved.items())
    print(f"[regions] {identifier}: {summary}")


def _edit_selection(store: SvgStore, identifier: str, args: argparse.Namespace) -> bool:
    if not store.select_logo(identifier):
        print(f"[warn] {identifier}: not loaded")
        return False
    store.set_size(args.size)
    if store.data.is_multi_color:
        _apply_regions(store, identifier, _parse_regions(args.region))
    elif args.color:
        if is_valid_hex_color(args.color):
            store.set_color(normalize_hex_color(args.color))
        else:
            print(f"[warn] ignoring invalid color '{args.color}'")
    return True


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = SvgStore(make_loader(args.source))
    loaded = store.load_all_logos(auto_select_first=not args.logo and not args.all)
    print(f"[loaded] {loaded} of {len(BANK_LOGOS)} logos")
    if store.data.error:
        print(f"[error] {store.data.error}")
        return 1

    if args.list_logos:
        for asset in store.logo_assets():
            kind = "multi-color" if has_multiple_colors(asset.identifier) else "single-color"
            print(f"[logo] {asset.identifier}: {asset.name} ({kind})")
        return 0

    out_dir = Path(args.out)
    sink = DownloadSink(out_dir)
    results: list[ExportResult] = []

    if args.debug_colors:
        with_originals = [
            identifier
            for identifier in available_logos_with_original_colors()
            if identifier in store.data.logos
        ]
        _debug_colors(args.source, with_originals, out_dir)

    if args.all:
        store.set_size(args.size)
        results.append(store.export_selected(store.available_logos(), sink, args.format))
    else:
        targets = args.logo or [store.data.selected_logo]
        for identifier in targets:
            if identifier is None or not _edit_selection(store, identifier, args):
                continue
            if args.print_markup:
                print(store.formatted_svg)
            success = store.export_current(sink, args.format)
            results.append(ExportResult(success=success, count=1, written=int(success)))

    for path, media_type in sink.saved:
        print(f"[saved] {path} ({media_type})")
    for result in results:
        if result.failed:
            print(f"[warn] {result.failed} of {result.count} logo(s) failed to export")

    if args.report:
        report_path = write_export_report(Path(args.report), results)
        print(f"[report] wrote {len(results)} result(s) to {report_path}")

    return 0 if results and all(result.success for result in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
