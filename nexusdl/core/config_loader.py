"""Configuration sources — JSON file, configuration server or CLI options.

A configuration document looks like::

    {
      "baseConfig": {
        "nexusUrl": "https://nexus.example.com/",
        "nexusUsername": "deploy",
        "nexusPassword": "secret",
        "createRelativeSymlinks": true,
        "basePath": "/opt/apps",
        "verbose": false,
        "moreVerbose": false,
        "oldEntries": {"countToKeep": 3, "delete": true}
      },
      "mavenArtifacts": [
        {"groupId": "com.example", "artifactId": "app", "type": "runnable.jar",
         "repo": "releases", "name": "app"}
      ]
    }

Every source produces the same immutable ``DownloaderConfig``.
"""

from __future__ import annotations

import json
import logging
import socket
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from nexusdl.config import DownloaderSettings
from nexusdl.models.artifacts import ArtifactRequest, RepositoryStrategy
from nexusdl.models.config import DEFAULT_KEEP_COUNT, DownloaderConfig, SnapshotResolution

logger = logging.getLogger(__name__)

BASE_CONFIG = "baseConfig"
MAVEN_ARTIFACTS = "mavenArtifacts"
OLD_ENTRIES = "oldEntries"

DEFAULT_VARIANT = "default.json"
HEADER_PROJECT = "IDQ-NEXUS-DL-PROJECT"
HEADER_VARIANT = "IDQ-NEXUS-DL-VARIANT"
HEADER_HOST = "IDQ-NEXUS-DL-HOST"

# baseConfig key -> DownloaderConfig field
_BASE_KEYS = {
    "nexusUrl": "nexus_url",
    "nexusUsername": "nexus_username",
    "nexusPassword": "nexus_password",
    "nexusPathRestSearch": "nexus_search_path",
    "mavenCentralUrl": "maven_central_url",
    "githubPackagesUrl": "github_packages_url",
    "githubOwner": "github_owner",
    "githubRepo": "github_repo",
    "githubToken": "github_token",
    "snapshotResolution": "snapshot_resolution",
    "createRelativeSymlinks": "relative_symlinks",
    "basePath": "working_path",
    "discardCorrupt": "discard_corrupt",
    "verbose": "verbose",
    "moreVerbose": "more_verbose",
    "repoStrategy": "default_strategy",
}

# mavenArtifacts entry key -> ArtifactRequest field
_ARTIFACT_KEYS = {
    "groupId": "group_id",
    "artifactId": "artifact_id",
    "type": "type",
    "repo": "repository",
    "version": "version",
    "name": "project",
    "repoStrategy": "strategy",
}
_REQUIRED_ARTIFACT_KEYS = ("groupId", "artifactId", "type")


class ConfigurationError(ValueError):
    """Raised when a configuration cannot be read or is incomplete."""


def _missing(parameter: str, context: str) -> ConfigurationError:
    return ConfigurationError(f"Parameter '{parameter}' is missing in '{context}'")


# ---------------------------------------------------------------------------
# Document parsing
# ---------------------------------------------------------------------------


def _parse_artifact(
    entry: Any, default_strategy: RepositoryStrategy
) -> ArtifactRequest:
    if not isinstance(entry, dict):
        raise ConfigurationError("artifact configuration must be a JSON object")
    for key in _REQUIRED_ARTIFACT_KEYS:
        if key not in entry:
            raise _missing(key, "artifact configuration")

    values: dict[str, Any] = {"strategy": default_strategy}
    for key, field in _ARTIFACT_KEYS.items():
        if entry.get(key) is not None:
            values[field] = entry[key]
    try:
        return ArtifactRequest(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid artifact configuration: {exc}") from exc


def _endpoint_defaults(settings: DownloaderSettings | None) -> dict[str, Any]:
    if settings is None:
        return {}
    return {
        "maven_central_url": settings.maven_central_url,
        "github_packages_url": settings.github_packages_url,
        "nexus_search_path": settings.nexus_search_path,
    }


def parse_config(
    document: bytes | str, settings: DownloaderSettings | None = None
) -> DownloaderConfig:
    """Parse a JSON configuration document.

    Endpoints the document does not name fall back to *settings*.

    Raises
    ------
    ConfigurationError
        If the document is not JSON, lacks ``baseConfig`` or
        ``mavenArtifacts``, or carries invalid base values.  An individual
        invalid artifact entry is logged and skipped instead.
    """
    try:
        data = json.loads(document)
    except ValueError as exc:
        raise ConfigurationError(f"Configuration is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object")

    base = data.get(BASE_CONFIG)
    if not isinstance(base, dict):
        raise _missing(BASE_CONFIG, "Configuration file")
    artifacts = data.get(MAVEN_ARTIFACTS)
    if not isinstance(artifacts, list):
        raise _missing(MAVEN_ARTIFACTS, "config")

    values = _endpoint_defaults(settings)
    values.update(
        (field, base[key]) for key, field in _BASE_KEYS.items() if base.get(key) is not None
    )
    old_entries = base.get(OLD_ENTRIES)
    if isinstance(old_entries, dict):
        if "countToKeep" not in old_entries:
            raise _missing("countToKeep", OLD_ENTRIES)
        if "delete" not in old_entries:
            raise _missing("delete", OLD_ENTRIES)
        values["keep_count"] = old_entries["countToKeep"]
        values["delete_old_entries"] = old_entries["delete"]

    try:
        default_strategy = RepositoryStrategy(values.get("default_strategy", RepositoryStrategy.NEXUS))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid repoStrategy: {exc}") from exc

    requests: list[ArtifactRequest] = []
    for index, entry in enumerate(artifacts):
        try:
            requests.append(_parse_artifact(entry, default_strategy))
        except ConfigurationError as exc:
            logger.error("Could not read artifact configuration number %d: %s", index, exc)

    try:
        return DownloaderConfig(**values, artifacts=requests)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {BASE_CONFIG}: {exc}") from exc


def load_config_file(path: Path, settings: DownloaderSettings | None = None) -> DownloaderConfig:
    """Read and parse a configuration file."""
    path = Path(path)
    try:
        document = path.read_bytes()
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration file '{path}': {exc}") from exc
    try:
        return parse_config(document, settings)
    except ConfigurationError as exc:
        raise ConfigurationError(f"Failed to parse configuration file '{path}': {exc}") from exc


# ---------------------------------------------------------------------------
# Configuration server
# ---------------------------------------------------------------------------


def variant_file_name(variant: str | None) -> str:
    """``prod`` -> ``prod.json``; empty or missing -> ``default.json``."""
    if not variant:
        return DEFAULT_VARIANT
    if ".json" in variant:
        return variant
    return f"{variant}.json"


def fetch_remote_config(
    project: str,
    variant: str | None = None,
    *,
    server: str | None = None,
    hostname: str | None = None,
    settings: DownloaderSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> DownloaderConfig:
    """Download the configuration variant of *project* and parse it.

    The server learns which host is asking through ``IDQ-NEXUS-DL-HOST``
    (explicit *hostname* or the local FQDN).
    """
    settings = settings or DownloaderSettings()
    server = server or settings.config_server
    if not server:
        raise ConfigurationError("No configuration server given")

    scheme = "http" if settings.config_server_insecure else "https"
    url = f"{scheme}://{server}/configuration"
    headers = {
        "Accept": "application/json",
        HEADER_PROJECT: project,
        HEADER_VARIANT: variant_file_name(variant),
        HEADER_HOST: hostname or socket.getfqdn(),
    }
    logger.debug("Requesting configuration %s for project %s", headers[HEADER_VARIANT], project)

    try:
        with httpx.Client(
            transport=transport,
            timeout=httpx.Timeout(settings.http_read_timeout, connect=settings.http_connect_timeout),
            headers={"User-Agent": settings.user_agent},
        ) as client:
            response = client.get(url, headers=headers)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        raise ConfigurationError(f"Could not download configuration: {exc}") from exc

    return parse_config(response.content, settings)


# ---------------------------------------------------------------------------
# Command-line options
# ---------------------------------------------------------------------------


def config_from_options(
    *,
    url: str,
    username: str,
    password: str,
    group_id: str,
    artifact_id: str,
    repository: str = "releases",
    type_: str = "jar",
    version: str | None = None,
    strategy: RepositoryStrategy = RepositoryStrategy.NEXUS,
    delete_old_entries: bool = False,
    keep_count: int = DEFAULT_KEEP_COUNT,
    relative_symlinks: bool = False,
    working_path: Path = Path("."),
    verbose: bool = False,
    more_verbose: bool = False,
    github_owner: str = "",
    github_repo: str = "",
    snapshot_resolution: SnapshotResolution = SnapshotResolution.TIMESTAMP,
    settings: DownloaderSettings | None = None,
) -> DownloaderConfig:
    """Build a single-artifact configuration from command-line options.

    For ``GITHUB_PACKAGES`` the password doubles as the access token; for
    ``MAVEN_CENTRAL`` a non-empty *url* replaces the default repository.
    """
    try:
        request = ArtifactRequest(
            group_id=group_id,
            artifact_id=artifact_id,
            type=type_,
            repository=repository,
            version=version or None,
            strategy=strategy,
        )
        values = _endpoint_defaults(settings)
        values.update({
            "nexus_url": url,
            "nexus_username": username,
            "nexus_password": password,
            "github_owner": github_owner or username,
            "github_repo": github_repo,
            "github_token": password,
            "snapshot_resolution": snapshot_resolution,
            "working_path": working_path,
            "relative_symlinks": relative_symlinks,
            "delete_old_entries": delete_old_entries,
            "keep_count": keep_count,
            "verbose": verbose,
            "more_verbose": more_verbose,
            "default_strategy": strategy,
            "artifacts": [request],
        })
        if strategy is RepositoryStrategy.MAVEN_CENTRAL and url:
            values["maven_central_url"] = url
        if strategy is RepositoryStrategy.GITHUB_PACKAGES and url:
            values["github_packages_url"] = url
        return DownloaderConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid options: {exc}") from exc
