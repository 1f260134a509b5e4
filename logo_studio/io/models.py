"""Data models shared across the logo studio."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

AUTO_COLOR = "auto"


@dataclass(frozen=True, slots=True)
class LogoAsset:
    """A catalog logo as loaded from the asset source."""

    identifier: str
    markup: str
    name: str


@dataclass(frozen=True, slots=True)
class ColorRegion:
    """An independently colorable part of a multi-color logo."""

    key: str
    label: str
    css_var: str
    default_color: str
    description: str = ""
    auto_contrast_var: str | None = None


@dataclass(frozen=True, slots=True)
class DetectedRegion:
    """A configured region found in a logo's stylesheet, with its live color."""

    region: ColorRegion
    current_color: str

    @property
    def key(self) -> str:
        return self.region.key


@dataclass(slots=True)
class ViewState:
    """Everything the editor shows for the current selection."""

    logos: Dict[str, str] = field(default_factory=dict)
    selected_logo: str | None = None
    size: int = 24
    color: str = "#ffffff"
    loading: bool = False
    error: str | None = None
    is_multi_color: bool = False
    colorable_elements: List[DetectedRegion] = field(default_factory=list)
    color_map: Dict[str, str] = field(default_factory=dict)
    show_comparison: bool = False
    manual_background_override: bool = False
    manual_background_color: str = "transparent"


@dataclass(slots=True)
class ExportResult:
    """Outcome of an export request.

    ``count`` is the number of logos requested; ``written`` and ``failed``
    break down how many files actually landed in the output.
    """

    success: bool
    count: int
    written: int = 0
    failed: int = 0
    path: Path | None = None
