"""Candidate resolution — picks the newest version a backend offers."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from nexusdl.backends import RepositoryBackend
from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactRequest, Candidate, RepositoryStrategy

logger = logging.getLogger(__name__)


class ArtifactResolver:
    """Dispatches a request to the backend registered for its strategy.

    Parameters
    ----------
    backends:
        One backend per strategy; strategies without an entry are treated
        as not configured.
    """

    def __init__(self, backends: Mapping[RepositoryStrategy, RepositoryBackend]) -> None:
        self._backends = dict(backends)

    def backend_for(self, strategy: RepositoryStrategy) -> RepositoryBackend:
        try:
            return self._backends[strategy]
        except KeyError:
            raise DownloaderError.misconfiguration(strategy) from None

    def resolve(self, request: ArtifactRequest) -> Candidate:
        """Return the version-maximal candidate for *request*.

        Ties keep the first candidate in backend order.

        Raises
        ------
        DownloaderError
            ``NOT_FOUND`` when the backend returns no candidates,
            ``INTERNAL_ERROR`` when no backend serves the strategy, and
            whatever the backend raises.
        """
        candidates = self.backend_for(request.strategy).resolve_candidates(request)
        if not candidates:
            raise DownloaderError.not_found(request.group_id, request.artifact_id, request.type)

        best = max(candidates, key=lambda candidate: candidate.maven_version)
        logger.debug(
            "Selected %s out of %d candidates for %s",
            best.version,
            len(candidates),
            request.coordinates,
        )
        return best
