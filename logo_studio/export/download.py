"""Save single logos or archives of many logos to a download directory."""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
from concurrent.futures import ThreadPoolExecutor
from io import BytesIO
from pathlib import Path
from typing import Iterable, Mapping, Sequence, Tuple

from tqdm import tqdm

from ..io.models import ExportResult
from ..registry.catalog import asset_filename
from ..svg.output import create_webflow_optimized_svg
from .raster import svg_to_png

logger = logging.getLogger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml"
PNG_MEDIA_TYPE = "image/png"
ZIP_MEDIA_TYPE = "application/zip"
ARCHIVE_FOLDER = "logos"
SUPPORTED_FORMATS = ("svg", "png")
_MAX_WORKERS = 4

LogoEntry = Tuple[str, str]


class DownloadSink:
    """Directory-backed stand-in for the browser's save dialog.

    Each payload is staged in a temporary file that is moved into place on
    success and always removed afterwards. Saved files are recorded in
    :attr:`saved` in the order they were written.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.saved: list[tuple[Path, str]] = []

    def save(self, filename: str, payload: bytes | str, media_type: str) -> Path:
        """Write *payload* to ``directory/filename`` and return the final path."""
        data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / filename
        handle, staging = tempfile.mkstemp(
            dir=self.directory, prefix=".download-", suffix=".part"
        )
        try:
            with os.fdopen(handle, "wb") as stream:
                stream.write(data)
            os.replace(staging, target)
        finally:
            if os.path.exists(staging):
                os.unlink(staging)
        self.saved.append((target, media_type))
        logger.info("Saved %s (%s, %d bytes)", target, media_type, len(data))
        return target


def _trigger_download(
    sink: DownloadSink, filename: str, payload: bytes | str, media_type: str
) -> Path | None:
    try:
        return sink.save(filename, payload, media_type)
    except OSError as exc:
        logger.error("Failed to save %s: %s", filename, exc)
        return None


def download_svg_as_file(svg_content: str, filename: str, sink: DownloadSink) -> bool:
    """Save *svg_content* verbatim as ``{filename}.svg``."""
    return _trigger_download(sink, f"{filename}.svg", svg_content, SVG_MEDIA_TYPE) is not None


def download_svg_as_png(
    svg_content: str, filename: str, sink: DownloadSink, size: int = 256
) -> bool:
    """Rasterize *svg_content* and save it as ``{filename}.png``."""
    png = svg_to_png(svg_content, size)
    if png is None:
        logger.error("Failed to convert %s to PNG", filename)
        return False
    return _trigger_download(sink, f"{filename}.png", png, PNG_MEDIA_TYPE) is not None


def download_single_logo(
    identifier: str, svg_content: str, size: int, sink: DownloadSink
) -> bool:
    """Save the Webflow-optimized SVG of one logo as ``{identifier}-{size}px.svg``."""
    optimized = create_webflow_optimized_svg(svg_content)
    filename = asset_filename(identifier, size, "svg")
    return _trigger_download(sink, filename, optimized, SVG_MEDIA_TYPE) is not None


def _rasterize_all(logos: Sequence[LogoEntry], size: int) -> list[bytes | None]:
    with ThreadPoolExecutor(max_workers=_MAX_WORKERS) as pool:
        results = pool.map(lambda entry: svg_to_png(entry[1], size), logos)
        return list(
            tqdm(results, total=len(logos), desc="Rasterizing logos", unit="logo", leave=False)
        )


def build_logo_archive(
    logos: Sequence[LogoEntry], size: int, fmt: str = "svg"
) -> tuple[bytes, int, int]:
    """Return the zip payload plus the number of files written and failed."""
    buffer = BytesIO()
    written = 0
    failed = 0
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        if fmt == "svg":
            for identifier, svg_content in logos:
                optimized = create_webflow_optimized_svg(svg_content)
                name = asset_filename(identifier, size, "svg")
                archive.writestr(f"{ARCHIVE_FOLDER}/{name}", optimized)
                written += 1
        else:
            for (identifier, _), png in zip(logos, _rasterize_all(logos, size)):
                if png is None:
                    failed += 1
                    continue
                name = asset_filename(identifier, size, "png")
                archive.writestr(f"{ARCHIVE_FOLDER}/{name}", png)
                written += 1
    if failed:
        logger.warning("Failed to convert %d logo(s) to PNG", failed)
    return buffer.getvalue(), written, failed


def download_multiple_logos_as_zip(
    logos: Iterable[LogoEntry],
    size: int,
    sink: DownloadSink,
    fmt: str = "svg",
) -> ExportResult:
    """Bundle one optimized file per logo into ``logos-{size}px-{fmt}.zip``.

    PNG conversion failures are counted, not fatal.
    """
    entries = list(logos)
    if fmt not in SUPPORTED_FORMATS:
        logger.error("Unsupported export format: %s", fmt)
        return ExportResult(success=False, count=0)
    try:
        payload, written, failed = build_logo_archive(entries, size, fmt)
    except (OSError, zipfile.BadZipFile, ValueError) as exc:
        logger.error("Error creating ZIP file: %s", exc)
        return ExportResult(success=False, count=len(entries), failed=len(entries))

    path = _trigger_download(sink, f"logos-{size}px-{fmt}.zip", payload, ZIP_MEDIA_TYPE)
    return ExportResult(
        success=path is not None,
        count=len(entries),
        written=written if path is not None else 0,
        failed=failed,
        path=path,
    )


def download_selected_logos(
    selected_logos: Mapping[str, str],
    size: int,
    sink: DownloadSink,
    fmt: str = "svg",
) -> ExportResult:
    """Download whatever is selected: nothing, one file, or an archive."""
    count = len(selected_logos)
    if count == 0:
        return ExportResult(success=False, count=0)
    if fmt not in SUPPORTED_FORMATS:
        logger.error("Unsupported export format: %s", fmt)
        return ExportResult(success=False, count=0)

    if count == 1:
        identifier, svg_content = next(iter(selected_logos.items()))
        if fmt == "svg":
            success = download_single_logo(identifier, svg_content, size, sink)
        else:
            success = download_svg_as_png(svg_content, f"{identifier}-{size}px", sink, size)
        return ExportResult(
            success=success,
            count=1,
            written=1 if success else 0,
            failed=0 if success else 1,
            path=sink.saved[-1][0] if success else None,
        )

    return download_multiple_logos_as_zip(list(selected_logos.items()), size, sink, fmt)
