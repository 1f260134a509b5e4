"""Load logo markup from a static asset source.

A source is either an ``http(s)://`` base URL or a local directory; assets are
addressed as ``{source}/{folder}/{identifier}.svg``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Callable, Optional
from urllib.parse import quote

import requests
from requests import Session
from tenacity import (  # type: ignore[import-untyped]
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..registry.catalog import CATALOG_FOLDER
from ..registry.original_colors import ORIGINAL_FOLDER, original_logo_filename

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10.0
_USER_AGENT = "logo-studio/0.1"

_session_lock = Lock()
_session: Session | None = None

SvgLoader = Callable[[str], Optional[str]]


class RetryableHTTPStatusError(Exception):
    """Raised for HTTP status codes that should trigger a retry."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Server returned status {status_code}")
        self.status_code = status_code


def _get_session() -> Session:
    """Return a shared requests session configured with default headers."""
    global _session
    if _session is None:
        with _session_lock:
            if _session is None:
                session = requests.Session()
                session.headers.update(
                    {
                        "User-Agent": _USER_AGENT,
                        "Accept": "image/svg+xml,text/xml;q=0.9,*/*;q=0.8",
                    }
                )
                _session = session
    return _session


_retryer = Retrying(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    retry=retry_if_exception_type(
        (requests.Timeout, requests.ConnectionError, RetryableHTTPStatusError)
    ),
    before_sleep=before_sleep_log(logger, logging.DEBUG),
    reraise=True,
)


def is_remote_source(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def asset_url(base_url: str, folder: str, filename: str) -> str:
    """Return ``{base_url}/{folder}/{filename}`` with the file name URL-quoted."""
    return f"{base_url.rstrip('/')}/{folder}/{quote(filename)}"


def _fetch_once(url: str, timeout: float) -> str | None:
    response = _get_session().get(url, timeout=timeout)
    if 500 <= response.status_code < 600:
        raise RetryableHTTPStatusError(response.status_code)
    if not response.ok:
        logger.warning("Asset %s returned status %s", url, response.status_code)
        return None
    if not response.encoding:
        response.encoding = "utf-8"
    return response.text


def fetch_text(url: str) -> str | None:
    """Fetch *url* and return its body, or ``None`` when it cannot be loaded.

    Timeouts, connection errors and server errors are retried before giving up.
    """
    try:
        return _retryer(lambda: _fetch_once(url, _DEFAULT_TIMEOUT))
    except RetryableHTTPStatusError as exc:
        logger.warning("Server error fetching %s: %s", url, exc)
    except requests.RequestException as exc:
        logger.warning("Request error fetching %s: %s", url, exc)
    return None


def read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        logger.warning("Asset file does not exist: %s", path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read asset %s: %s", path, exc)
    return None


def _load_asset(source: str | Path, folder: str, filename: str) -> str | None:
    if is_remote_source(source):
        return fetch_text(asset_url(str(source), folder, filename))
    return read_text(Path(source) / folder / filename)


def load_svg_content(identifier: str, source: str | Path) -> str | None:
    """Return the catalog markup for *identifier*, ``None`` when unavailable."""
    return _load_asset(source, CATALOG_FOLDER, f"{identifier}.svg")


def load_original_svg_content(identifier: str, source: str | Path) -> str | None:
    """Return the unmodified brand file mapped to *identifier*, if any."""
    filename = original_logo_filename(identifier)
    if not filename:
        logger.warning("No original logo mapping found for: %s", identifier)
        return None
    return _load_asset(source, ORIGINAL_FOLDER, filename)


def make_loader(source: str | Path) -> SvgLoader:
    """Bind :func:`load_svg_content` to *source* for the store."""

    def load(identifier: str) -> str | None:
        return load_svg_content(identifier, source)

    return load
