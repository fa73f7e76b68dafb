"""Snapshot-layout backend (GitHub Packages).

Release versions are addressed like any static Maven layout.  A
``-SNAPSHOT`` version is a directory holding timestamped builds
(``1.0-20240102.101500-7``); the concrete build is read from the versioned
``maven-metadata.xml`` and used in the file name, while the directory keeps
the declared version.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from nexusdl.backends._http import create_client, download_to, fetch_metadata, fetch_sidecar_hash
from nexusdl.backends._layout import MAVEN_METADATA_XML, asset_file_name, group_path, join_url
from nexusdl.config import DownloaderSettings
from nexusdl.core.errors import DownloaderError
from nexusdl.core.metadata import MavenMetadata
from nexusdl.models.artifacts import ArtifactRequest, Candidate, RepositoryStrategy
from nexusdl.models.config import SnapshotResolution
from nexusdl.models.versioning import MavenVersion

logger = logging.getLogger(__name__)


class GithubPackagesBackend:
    """Resolves releases directly and snapshots through their build metadata.

    Parameters
    ----------
    base_url:
        GitHub Packages Maven endpoint.
    owner, repo:
        Repository hosting the packages; *owner* doubles as the basic-auth
        user name.
    token:
        Personal access token with ``read:packages``.
    resolution:
        How a concrete snapshot build is chosen, see ``SnapshotResolution``.
    """

    strategy = RepositoryStrategy.GITHUB_PACKAGES

    def __init__(
        self,
        base_url: str,
        owner: str,
        repo: str,
        token: str,
        *,
        resolution: SnapshotResolution = SnapshotResolution.TIMESTAMP,
        settings: DownloaderSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._root = join_url(base_url, owner, repo)
        self._resolution = resolution
        self._client = create_client(
            settings, auth=httpx.BasicAuth(owner, token), transport=transport
        )

    def artifact_url(self, request: ArtifactRequest, *segments: str) -> str:
        return join_url(self._root, group_path(request.group_id), request.artifact_id, *segments)

    def resolve_candidates(self, request: ArtifactRequest) -> list[Candidate]:
        version = request.version
        timestamp: str | None = None
        if not version:
            metadata = fetch_metadata(self._client, self.artifact_url(request, MAVEN_METADATA_XML))
            version = metadata.latest
            if version is None:
                raise DownloaderError.no_latest_version(
                    request.group_id, request.artifact_id, request.type
                )
            timestamp = metadata.last_updated
            logger.debug("Latest version %s, last updated %s", version, timestamp)

        if not MavenVersion(version).is_snapshot:
            return [self._candidate(request, version, version)]

        build_metadata = fetch_metadata(
            self._client, self.artifact_url(request, version, MAVEN_METADATA_XML)
        )
        if self._resolution is SnapshotResolution.NEWEST:
            builds = build_metadata.snapshot_values(request.artifact_type)
            if not builds:
                raise DownloaderError.no_snapshot_build(version, None)
            return [self._candidate(request, version, build) for build in builds]

        build = self._build_at_timestamp(build_metadata, request, version, timestamp)
        return [self._candidate(request, version, build)]

    def fetch_content(self, candidate: Candidate, path: Path) -> int:
        return download_to(self._client, candidate.download_url, path)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _build_at_timestamp(
        metadata: MavenMetadata,
        request: ArtifactRequest,
        version: str,
        timestamp: str | None,
    ) -> str:
        # A pinned version carries no artifact-level timestamp.
        if timestamp is None:
            timestamp = metadata.last_updated
        build = metadata.snapshot_value_for(timestamp, request.artifact_type)
        if build is None:
            raise DownloaderError.no_snapshot_build(version, timestamp)
        logger.debug("Snapshot %s resolved to build %s", version, build)
        return build

    def _candidate(self, request: ArtifactRequest, directory: str, build: str) -> Candidate:
        file_name = asset_file_name(request.artifact_id, build, request.artifact_type)
        url = self.artifact_url(request, directory, file_name)
        return Candidate(
            version=build,
            download_url=url,
            expected_hash=fetch_sidecar_hash(self._client, url),
        )
