"""Shared HTTP plumbing for repository backends.

All transport and status failures are mapped to ``DownloaderError`` here so
the backends only deal with payloads.  404 maps to ``NOT_FOUND``; any other
non-2xx status and every transport error to ``NETWORK_ERROR``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import httpx

from nexusdl.config import DownloaderSettings
from nexusdl.core.errors import DownloaderError
from nexusdl.core.hasher import normalize_sidecar
from nexusdl.core.metadata import MavenMetadata
from nexusdl.models.results import ErrorKind

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
SHA1_EXTENSION = ".sha1"
PARTIAL_SUFFIX = ".part"


def create_client(
    settings: DownloaderSettings,
    *,
    auth: httpx.Auth | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Build a client; ``httpx.BasicAuth`` sends credentials on the first request."""
    return httpx.Client(
        auth=auth,
        transport=transport,
        timeout=httpx.Timeout(settings.http_read_timeout, connect=settings.http_connect_timeout),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


def _check_status(response: httpx.Response, url: str) -> None:
    if response.status_code == 404:
        raise DownloaderError(ErrorKind.NOT_FOUND, f"Not found: GET {url}")
    if not response.is_success:
        raise DownloaderError.request_failed(url, f"HTTP {response.status_code}")


def _get(client: httpx.Client, url: str, **kwargs: Any) -> httpx.Response:
    logger.debug("GET %s", url)
    try:
        response = client.get(url, **kwargs)
    except httpx.HTTPError as exc:
        raise DownloaderError.request_failed(url, exc) from exc
    _check_status(response, url)
    return response


def get_text(client: httpx.Client, url: str) -> str:
    return _get(client, url).text


def get_json(client: httpx.Client, url: str, params: dict[str, str]) -> Any:
    """GET a JSON document, insisting on an ``application/json`` response."""
    response = _get(client, url, params=params, headers={"Accept": JSON_MEDIA_TYPE})
    media_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise DownloaderError.wrong_content_type(JSON_MEDIA_TYPE, media_type)
    try:
        return response.json()
    except ValueError as exc:
        raise DownloaderError.unparsable(f"JSON from {url}", exc) from exc


def fetch_metadata(client: httpx.Client, url: str) -> MavenMetadata:
    return MavenMetadata(get_text(client, url))


def fetch_sidecar_hash(client: httpx.Client, asset_url: str) -> str:
    """Fetch ``<asset_url>.sha1`` and return the digest it carries."""
    return normalize_sidecar(get_text(client, asset_url + SHA1_EXTENSION))


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial download %s: %s", path, exc)


def download_to(client: httpx.Client, url: str, path: Path) -> int:
    """Stream *url* into *path*.

    Bytes land in ``<path>.part`` first and are renamed into place only when
    the transfer completed, so an interrupted download never appears as an
    archived file.  Returns the number of bytes written.
    """
    partial = path.with_name(path.name + PARTIAL_SUFFIX)
    written = 0
    logger.debug("Downloading %s to %s", url, path)
    try:
        with client.stream("GET", url) as response:
            _check_status(response, url)
            with partial.open("wb") as handle:
                for chunk in response.iter_bytes():
                    handle.write(chunk)
                    written += len(chunk)
    except httpx.HTTPError as exc:
        _discard(partial)
        raise DownloaderError.request_failed(url, exc) from exc
    except OSError as exc:
        _discard(partial)
        raise DownloaderError.filesystem("store artifact at", path, exc) from exc
    except DownloaderError:
        _discard(partial)
        raise

    try:
        os.replace(partial, path)
    except OSError as exc:
        _discard(partial)
        raise DownloaderError.filesystem("store artifact at", path, exc) from exc
    return written
