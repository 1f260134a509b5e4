"""Output helpers for persisting export results."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

from .models import ExportResult


def _jsonable(result: ExportResult) -> dict[str, Any]:
    payload = asdict(result)
    payload["path"] = str(result.path) if result.path else None
    return payload


def write_export_report(path: Path, results: Sequence[ExportResult]) -> Path:
    """Write *results* to *path* as JSON and return the path."""
    serialised = [_jsonable(result) for result in results]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(serialised, indent=2), encoding="utf-8")
    return path


def write_palette_report(path: Path, palettes: dict[str, dict[str, list[str]]]) -> Path:
    """Write per-logo palette diagnostics to *path* as JSON and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(palettes, indent=2, ensure_ascii=False), encoding="utf-8")
    return path
