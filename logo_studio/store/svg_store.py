"""State container for the logo editor.

The store owns the loaded logo table and the view state. Collaborators change
it only through the action methods; preview and export markup are derived on
read from the current inputs through memoized pure functions, so the two can
never disagree.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from threading import RLock
from typing import Iterable, Sequence, Tuple

from ..assets.fetch import SvgLoader
from ..color.contrast import contrast_background, dotted_pattern_color, is_dark_color
from ..color.theme import ThemeColors, theme_colors
from ..export.download import (
    DownloadSink,
    download_selected_logos,
    download_single_logo,
    download_svg_as_png,
)
from ..io.models import ExportResult, LogoAsset, ViewState
from ..registry.catalog import BANK_LOGOS, display_name
from ..registry.multi_color import (
    get_default_color_map,
    has_multiple_colors,
    is_default_color_map,
)
from ..registry.original_colors import default_logo_color, get_primary_original_color
from ..svg.output import create_webflow_optimized_svg, format_svg_content
from ..svg.transform import (
    apply_multiple_colors,
    apply_size_to_svg,
    apply_svg_modifications,
    detect_colorable_elements,
)

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 24
MIN_SIZE = 24
MAX_SIZE = 256
PREVIEW_SIZE = 120
DEFAULT_COLOR = "#ffffff"
LOAD_ERROR_MESSAGE = "Failed to load SVG logos"
_LOAD_WORKERS = 8

ColorMapKey = Tuple[Tuple[str, str], ...]


@lru_cache(maxsize=128)
def render_logo(
    identifier: str,
    markup: str,
    size: int,
    color: str,
    color_map: ColorMapKey,
    is_multi_color: bool,
) -> str:
    """Return *markup* colored and sized for display or export."""
    if is_multi_color and color_map:
        colored = apply_multiple_colors(markup, dict(color_map), identifier)
        return apply_size_to_svg(colored, size)
    return apply_svg_modifications(markup, size, color)


@lru_cache(maxsize=32)
def _formatted(svg_content: str) -> str:
    return format_svg_content(svg_content)


@lru_cache(maxsize=32)
def _webflow(svg_content: str) -> str:
    return create_webflow_optimized_svg(svg_content)


class SvgStore:
    """Single-writer store behind the logo editor."""

    def __init__(
        self,
        loader: SvgLoader,
        catalog: Sequence[str] = BANK_LOGOS,
        max_workers: int = _LOAD_WORKERS,
    ) -> None:
        self._loader = loader
        self._catalog = tuple(catalog)
        self._max_workers = max(1, max_workers)
        self._state = ViewState(size=DEFAULT_SIZE, color=DEFAULT_COLOR)
        self._lock = RLock()
        self._load_generation = 0
        self._theme: ThemeColors = theme_colors(None)

    @property
    def data(self) -> ViewState:
        """The live view state; treat it as read-only."""
        return self._state

    @property
    def theme(self) -> ThemeColors:
        return self._theme

    def _render(self, size: int) -> str | None:
        with self._lock:
            state = self._state
            identifier = state.selected_logo
            if identifier is None or identifier not in state.logos:
                return None
            return render_logo(
                identifier,
                state.logos[identifier],
                size,
                state.color,
                tuple(sorted(state.color_map.items())),
                state.is_multi_color,
            )

    @property
    def preview_svg(self) -> str | None:
        """Selected logo at the fixed preview size."""
        return self._render(PREVIEW_SIZE)

    @property
    def modified_svg(self) -> str | None:
        """Selected logo at the size chosen for export."""
        return self._render(self._state.size)

    @property
    def formatted_svg(self) -> str:
        svg = self.modified_svg
        return _formatted(svg) if svg else ""

    @property
    def webflow_svg(self) -> str:
        svg = self.modified_svg
        return _webflow(svg) if svg else ""

    @property
    def background_color(self) -> str:
        """Manual background when pinned, otherwise the automatic contrast one."""
        manual = self.current_background_color()
        return manual if manual is not None else contrast_background(self._state.color)

    @property
    def dot_color(self) -> str:
        return dotted_pattern_color(self._state.color)

    def get_original_svg(self, identifier: str) -> str | None:
        return self._state.logos.get(identifier)

    def available_logos(self) -> list[str]:
        return list(self._state.logos)

    def logo_assets(self) -> list[LogoAsset]:
        """Loaded logos in catalog order, with their display names."""
        with self._lock:
            return [
                LogoAsset(identifier=identifier, markup=markup, name=display_name(identifier))
                for identifier, markup in self._state.logos.items()
            ]

    def current_svg_content(self) -> str | None:
        selected = self._state.selected_logo
        if selected is None:
            return None
        return self._state.logos.get(selected)

    def _safe_load(self, identifier: str) -> str | None:
        try:
            return self._loader(identifier)
        except Exception:  # noqa: BLE001 - one broken asset must not sink the catalog
            logger.exception("Loader failed for %s", identifier)
            return None

    def load_all_logos(self, auto_select_first: bool = False) -> int:
        """Load every catalog entry in parallel and return how many loaded.

        Entries that fail to load are left out of the table. A load that was
        superseded by a newer one while fetching is discarded.
        """
        with self._lock:
            self._load_generation += 1
            generation = self._load_generation
            self._state.loading = True
            self._state.error = None

        try:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                results = list(pool.map(self._safe_load, self._catalog))
        except Exception:  # noqa: BLE001 - surfaced through the error flag
            logger.exception("Loading the logo catalog failed")
            with self._lock:
                if generation == self._load_generation:
                    self._state.error = LOAD_ERROR_MESSAGE
                    self._state.loading = False
            return 0

        with self._lock:
            if generation != self._load_generation:
                logger.debug("Discarding superseded load #%d", generation)
                return 0
            self._state.logos.clear()
            for identifier, content in zip(self._catalog, results):
                if content:
                    self._state.logos[identifier] = content
            loaded = len(self._state.logos)
            logger.info("Loaded %d of %d logos", loaded, len(self._catalog))
            if self._catalog and not loaded:
                self._state.error = LOAD_ERROR_MESSAGE
            self._state.loading = False

            if auto_select_first and loaded:
                first = next(iter(self._state.logos))
                logger.debug("Auto-selecting first logo: %s", first)
                self.select_logo(first)
        return loaded

    def select_logo(self, identifier: str) -> bool:
        """Select *identifier*; unknown identifiers leave the state untouched."""
        with self._lock:
            state = self._state
            if identifier not in state.logos:
                logger.debug("Ignoring selection of unloaded logo %s", identifier)
                return False

            state.selected_logo = identifier
            state.manual_background_override = False
            state.manual_background_color = "transparent"
            state.is_multi_color = has_multiple_colors(identifier)

            if state.is_multi_color:
                state.color_map = get_default_color_map(identifier)
                state.colorable_elements = detect_colorable_elements(
                    state.logos[identifier], identifier, state.color_map
                )
            else:
                state.colorable_elements = []
                state.color_map = {}
            state.color = default_logo_color(identifier)
            self._theme = theme_colors(get_primary_original_color(identifier))
            return True

    def set_size(self, value: object) -> None:
        """Set the export size, clamped to the supported pixel range."""
        try:
            size = int(float(value))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring invalid size %r", value)
            return
        with self._lock:
            self._state.size = max(MIN_SIZE, min(MAX_SIZE, size))

    def set_color(self, color: str) -> None:
        with self._lock:
            self._state.color = color

    def set_element_color(self, key: str, color: str) -> None:
        with self._lock:
            if not self._state.is_multi_color:
                return
            self._state.color_map = {**self._state.color_map, key: color}

    def reset_element_color(self, key: str) -> None:
        with self._lock:
            state = self._state
            if not state.is_multi_color or state.selected_logo is None:
                return
            defaults = get_default_color_map(state.selected_logo)
            if key in defaults:
                state.color_map = {**state.color_map, key: defaults[key]}

    def get_element_color(self, key: str) -> str | None:
        if not self._state.is_multi_color:
            return None
        return self._state.color_map.get(key)

    def is_default_colors(self) -> bool:
        state = self._state
        if not state.is_multi_color or state.selected_logo is None:
            return True
        return is_default_color_map(state.color_map, state.selected_logo)

    def reset(self) -> None:
        """Restore size, colors and background to the selected logo's defaults."""
        with self._lock:
            state = self._state
            state.size = DEFAULT_SIZE
            if state.selected_logo:
                if state.is_multi_color:
                    state.color_map = get_default_color_map(state.selected_logo)
                else:
                    state.color = default_logo_color(state.selected_logo)
                self._theme = theme_colors(get_primary_original_color(state.selected_logo))
            else:
                state.color = DEFAULT_COLOR
                self._theme = theme_colors(None)
            state.manual_background_override = False
            state.manual_background_color = "transparent"

    def toggle_comparison(self) -> None:
        with self._lock:
            self._state.show_comparison = not self._state.show_comparison

    def set_comparison(self, show: bool) -> None:
        with self._lock:
            self._state.show_comparison = bool(show)

    def toggle_background(self) -> None:
        """Cycle the preview background.

        The first press pins the opposite of the automatic choice; after that
        presses alternate between white and transparent.
        """
        with self._lock:
            state = self._state
            if not state.manual_background_override:
                state.manual_background_override = True
                state.manual_background_color = (
                    "transparent" if is_dark_color(state.color) else "#ffffff"
                )
            elif state.manual_background_color == "#ffffff":
                state.manual_background_color = "transparent"
            else:
                state.manual_background_color = "#ffffff"

    def current_background_color(self) -> str | None:
        """Pinned background color, or ``None`` while automatic contrast applies."""
        if self._state.manual_background_override:
            return self._state.manual_background_color
        return None

    def is_manual_background_active(self) -> bool:
        return self._state.manual_background_override

    def export_current(self, sink: DownloadSink, fmt: str = "svg") -> bool:
        """Download the selected logo as currently edited."""
        svg = self.modified_svg
        identifier = self._state.selected_logo
        if svg is None or identifier is None:
            logger.warning("Nothing selected to export")
            return False
        size = self._state.size
        if fmt == "png":
            return download_svg_as_png(svg, f"{identifier}-{size}px", sink, size)
        return download_single_logo(identifier, svg, size, sink)

    def export_selected(
        self, identifiers: Iterable[str], sink: DownloadSink, fmt: str = "svg"
    ) -> ExportResult:
        """Download the loaded logos among *identifiers* at the current size."""
        with self._lock:
            logos = self._state.logos
            selected = {name: logos[name] for name in identifiers if name in logos}
            size = self._state.size
        return download_selected_logos(selected, size, sink, fmt)
