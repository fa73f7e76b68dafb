"""Static-layout backend (Maven Central and other plain Maven repositories).

The asset URL is derived from the coordinates; the latest version, when not
pinned, comes from the artifact-level ``maven-metadata.xml``.  Access is
unauthenticated.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from nexusdl.backends._http import create_client, download_to, fetch_metadata, fetch_sidecar_hash
from nexusdl.backends._layout import MAVEN_METADATA_XML, asset_file_name, group_path, join_url
from nexusdl.config import DownloaderSettings
from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactRequest, Candidate, RepositoryStrategy

logger = logging.getLogger(__name__)


class MavenCentralBackend:
    """Produces exactly one candidate per request."""

    strategy = RepositoryStrategy.MAVEN_CENTRAL

    def __init__(
        self,
        base_url: str,
        *,
        settings: DownloaderSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._client = create_client(settings, transport=transport)

    def artifact_url(self, request: ArtifactRequest, *segments: str) -> str:
        return join_url(self._base_url, group_path(request.group_id), request.artifact_id, *segments)

    def latest_version(self, request: ArtifactRequest) -> str:
        metadata = fetch_metadata(self._client, self.artifact_url(request, MAVEN_METADATA_XML))
        version = metadata.latest or metadata.release
        if version is None:
            raise DownloaderError.no_latest_version(request.group_id, request.artifact_id, request.type)
        logger.debug("Will use version '%s' as found in <latest> tag.", version)
        return version

    def resolve_candidates(self, request: ArtifactRequest) -> list[Candidate]:
        version = request.version or self.latest_version(request)
        file_name = asset_file_name(request.artifact_id, version, request.artifact_type)
        url = self.artifact_url(request, version, file_name)
        return [
            Candidate(
                version=version,
                download_url=url,
                expected_hash=fetch_sidecar_hash(self._client, url),
            )
        ]

    def fetch_content(self, candidate: Candidate, path: Path) -> int:
        return download_to(self._client, candidate.download_url, path)

    def close(self) -> None:
        self._client.close()
