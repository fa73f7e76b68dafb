"""Shared test fixtures for nexusdl."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from nexusdl.config import DownloaderSettings
from nexusdl.models.artifacts import ArtifactRequest, Candidate, RepositoryStrategy
from nexusdl.models.config import DownloaderConfig

NEXUS_URL = "https://nexus.test/"
NEXUS_SEARCH_URL = "https://nexus.test/service/rest/v1/search/assets"
CENTRAL_URL = "https://central.test/maven2/"
GITHUB_URL = "https://github.test/"


def sha1_hex(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


class FakeRepository:
    """In-memory HTTP repository served through ``httpx.MockTransport``.

    Routes are keyed by URL without query string; Nexus search pages are
    additionally keyed by their ``continuationToken``.  Unknown URLs answer 404.
    """

    nexus_url = NEXUS_URL
    search_url = NEXUS_SEARCH_URL
    central_url = CENTRAL_URL
    github_url = GITHUB_URL

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes, str]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    @staticmethod
    def _key(url: str, token: str | None = None) -> str:
        return f"{url}#{token}" if token else url

    def add(
        self,
        url: str,
        body: bytes | str,
        *,
        status: int = 200,
        content_type: str = "application/octet-stream",
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[url] = (status, body, content_type)

    def add_artifact(self, url: str, content: bytes, *, sha1: str | None = None) -> None:
        """Serve *content* at *url* and its SHA-1 sidecar at ``<url>.sha1``."""
        self.add(url, content)
        self.add(url + ".sha1", f"{sha1 or sha1_hex(content)}\n", content_type="text/plain")

    def add_search_page(
        self, payload: Any, *, token: str | None = None, content_type: str = "application/json"
    ) -> None:
        self.routes[self._key(NEXUS_SEARCH_URL, token)] = (
            200,
            json.dumps(payload).encode("utf-8"),
            content_type,
        )

    def requested_urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?", 1)[0]
        route = self.routes.get(self._key(url, request.url.params.get("continuationToken")))
        if route is None:
            return httpx.Response(404, text="not found")
        status, body, content_type = route
        return httpx.Response(status, content=body, headers={"content-type": content_type})


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Provide an empty in-memory repository."""
    return FakeRepository()


@pytest.fixture
def settings() -> DownloaderSettings:
    """Provide settings isolated from the environment and any .env file."""
    return DownloaderSettings(
        _env_file=None,
        log_level="INFO",
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
        maven_central_url=CENTRAL_URL,
        github_packages_url=GITHUB_URL,
        config_server="",
    )


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Provide a working root for archives and links."""
    path = tmp_path / "work"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Model factories shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_request() -> Callable[..., ArtifactRequest]:
    """Factory fixture: build an ArtifactRequest with sensible defaults."""

    def _factory(**overrides: Any) -> ArtifactRequest:
        defaults: dict[str, Any] = {
            "group_id": "com.example",
            "artifact_id": "app",
            "type": "jar",
            "repository": "releases",
        }
        defaults.update(overrides)
        return ArtifactRequest(**defaults)

    return _factory


@pytest.fixture
def make_candidate() -> Callable[..., Candidate]:
    """Factory fixture: build a Candidate served from the fake Nexus."""

    def _factory(version: str = "1.0.0", content: bytes = b"jar-bytes", **overrides: Any) -> Candidate:
        defaults: dict[str, Any] = {
            "version": version,
            "download_url": f"{NEXUS_URL}repository/releases/com/example/app/{version}/app-{version}.jar",
            "expected_hash": sha1_hex(content),
        }
        defaults.update(overrides)
        return Candidate(**defaults)

    return _factory


@pytest.fixture
def make_config(working_dir: Path) -> Callable[..., DownloaderConfig]:
    """Factory fixture: build a DownloaderConfig rooted at ``working_dir``."""

    def _factory(**overrides: Any) -> DownloaderConfig:
        defaults: dict[str, Any] = {
            "nexus_url": NEXUS_URL,
            "nexus_username": "deploy",
            "nexus_password": "secret",
            "maven_central_url": CENTRAL_URL,
            "github_packages_url": GITHUB_URL,
            "github_owner": "example-org",
            "github_repo": "packages",
            "github_token": "ghp_token",
            "working_path": working_dir,
            "default_strategy": RepositoryStrategy.NEXUS,
        }
        defaults.update(overrides)
        return DownloaderConfig(**defaults)

    return _factory


def nexus_item(version: str, *assets: tuple[str, str | None]) -> dict[str, Any]:
    """Build one search ``items[]`` entry from ``(downloadUrl, sha1)`` pairs."""
    return {
        "version": version,
        "assets": [
            {"downloadUrl": url, "checksum": {"sha1": sha1} if sha1 else {}}
            for url, sha1 in assets
        ],
    }


@pytest.fixture
def make_nexus_item() -> Callable[..., dict[str, Any]]:
    return nexus_item
