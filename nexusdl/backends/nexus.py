"""Nexus backend — paginated JSON search API.

Response shape::

    {"items": [{"version": "1.2.0",
                "assets": [{"downloadUrl": ".../app-1.2.0-runnable.jar",
                            "checksum": {"sha1": "..."}}]}],
     "continuationToken": "..."}   # absent on the last page

Every asset whose type (the URL text after the version) is included by the
requested type becomes a candidate; pages are followed until no
continuation token is returned.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from nexusdl.backends._http import create_client, download_to, get_json
from nexusdl.backends._layout import join_url
from nexusdl.config import DownloaderSettings
from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactRequest, ArtifactType, Candidate, RepositoryStrategy
from nexusdl.models.results import ErrorKind

logger = logging.getLogger(__name__)

PARAM_GROUP_ID = "maven.groupId"
PARAM_ARTIFACT_ID = "maven.artifactId"
PARAM_REPOSITORY = "repository"
PARAM_CONTINUATION_TOKEN = "continuationToken"


def asset_type(version: str, download_url: str) -> ArtifactType:
    """Parse the type from the URL text following the last occurrence of *version*."""
    index = download_url.rfind(version)
    if index < 0:
        return ArtifactType.parse("")
    return ArtifactType.parse(download_url[index + len(version):])


class NexusBackend:
    """Resolves candidates through the Nexus search REST endpoint.

    Parameters
    ----------
    base_url:
        Nexus server URL, e.g. ``https://nexus.example.com/``.
    username, password:
        Basic credentials, sent preemptively.
    search_path:
        Path of the search endpoint relative to *base_url*.
    """

    strategy = RepositoryStrategy.NEXUS

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        search_path: str,
        *,
        settings: DownloaderSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._search_url = join_url(base_url, search_path)
        self._client = create_client(
            settings, auth=httpx.BasicAuth(username, password), transport=transport
        )

    @property
    def search_url(self) -> str:
        return self._search_url

    def resolve_candidates(self, request: ArtifactRequest) -> list[Candidate]:
        requested_type = request.artifact_type
        candidates: list[Candidate] = []
        seen_tokens: set[str] = set()
        token: str | None = None

        while True:
            page = self._fetch_page(request, token)
            candidates.extend(self._extract(page, requested_type))
            token = page.get(PARAM_CONTINUATION_TOKEN)
            if not token:
                break
            if token in seen_tokens:
                raise DownloaderError(
                    ErrorKind.NETWORK_ERROR,
                    f"Search for {request.coordinates} repeated continuation token {token}",
                )
            seen_tokens.add(token)

        logger.debug("Nexus search for %s found %d candidates", request.coordinates, len(candidates))
        return candidates

    def fetch_content(self, candidate: Candidate, path: Path) -> int:
        return download_to(self._client, candidate.download_url, path)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fetch_page(self, request: ArtifactRequest, token: str | None) -> dict[str, Any]:
        params = {
            PARAM_GROUP_ID: request.group_id,
            PARAM_ARTIFACT_ID: request.artifact_id,
            PARAM_REPOSITORY: request.repository,
        }
        if token:
            params[PARAM_CONTINUATION_TOKEN] = token

        logger.debug("Searching %s with %s", self._search_url, params)
        page = get_json(self._client, self._search_url, params)
        if not isinstance(page, dict):
            raise DownloaderError.unparsable("search response", "expected a JSON object")
        return page

    @staticmethod
    def _extract(page: dict[str, Any], requested_type: ArtifactType) -> list[Candidate]:
        candidates: list[Candidate] = []
        for item in page.get("items") or []:
            version = item.get("version")
            if not version:
                continue
            for asset in item.get("assets") or []:
                download_url = asset.get("downloadUrl")
                if not download_url:
                    logger.warning("Skipping asset of version %s without downloadUrl", version)
                    continue

                found_type = asset_type(version, download_url)
                if found_type.is_auxiliary or not requested_type.includes(found_type):
                    continue

                sha1 = (asset.get("checksum") or {}).get("sha1")
                if not sha1:
                    logger.warning("Skipping %s: no sha1 checksum published", download_url)
                    continue

                candidates.append(
                    Candidate(version=version, download_url=download_url, expected_hash=sha1)
                )
        return candidates
