"""Repository backends.

Defines the ``RepositoryBackend`` Protocol every backend satisfies and the
factory that builds one backend per configured strategy:

1. **Nexus** — paginated JSON search API (only when URL and credentials are set).
2. **Maven Central** — static ``maven-metadata.xml`` layout (always available).
3. **GitHub Packages** — timestamped snapshot layout (only when owner, repo
   and token are set).
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import httpx

from nexusdl.config import DownloaderSettings
from nexusdl.models.artifacts import ArtifactRequest, Candidate, RepositoryStrategy
from nexusdl.models.config import DownloaderConfig


@runtime_checkable
class RepositoryBackend(Protocol):
    """Protocol for repository backends.

    Backends hold no state shared with each other; each owns its own HTTP
    client and releases it in ``close()``.
    """

    strategy: RepositoryStrategy

    def resolve_candidates(self, request: ArtifactRequest) -> list[Candidate]:
        """Return every downloadable candidate matching *request*.

        Raises
        ------
        DownloaderError
            On transport, status or payload failures.
        """
        ...

    def fetch_content(self, candidate: Candidate, path: Path) -> int:
        """Download *candidate* to *path*, returning the bytes written."""
        ...

    def close(self) -> None:
        ...


def build_backends(
    config: DownloaderConfig,
    settings: DownloaderSettings,
    transport: httpx.BaseTransport | None = None,
) -> dict[RepositoryStrategy, RepositoryBackend]:
    """Instantiate the backends *config* has enough information for."""
    from nexusdl.backends.github_packages import GithubPackagesBackend
    from nexusdl.backends.maven_central import MavenCentralBackend
    from nexusdl.backends.nexus import NexusBackend

    backends: dict[RepositoryStrategy, RepositoryBackend] = {
        RepositoryStrategy.MAVEN_CENTRAL: MavenCentralBackend(
            config.maven_central_url, settings=settings, transport=transport
        ),
    }
    if config.nexus_configured:
        backends[RepositoryStrategy.NEXUS] = NexusBackend(
            config.nexus_url,
            config.nexus_username,
            config.nexus_password,
            config.nexus_search_path,
            settings=settings,
            transport=transport,
        )
    if config.github_configured:
        backends[RepositoryStrategy.GITHUB_PACKAGES] = GithubPackagesBackend(
            config.github_packages_url,
            config.github_owner,
            config.github_repo,
            config.github_token,
            resolution=config.snapshot_resolution,
            settings=settings,
            transport=transport,
        )
    return backends


__all__ = ["RepositoryBackend", "build_backends"]
