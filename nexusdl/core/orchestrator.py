"""Download orchestrator — the central coordinator for nexusdl runs.

The Orchestrator wires the ArtifactResolver, ArchiveStore, integrity check,
RetentionPruner and LinkPublisher into one pipeline per request::

    resolve -> place -> verify -> prune -> publish link

It is the single place where ``DownloaderError`` is turned into a failed
``DownloadResult``; every layer below it raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

import httpx

from nexusdl.backends import RepositoryBackend, build_backends
from nexusdl.config import DownloaderSettings
from nexusdl.core.archive_store import ArchiveStore
from nexusdl.core.errors import DownloaderError
from nexusdl.core.hasher import verify_file
from nexusdl.core.link_publisher import LinkPublisher
from nexusdl.core.resolver import ArtifactResolver
from nexusdl.core.retention import RetentionPruner
from nexusdl.models.artifacts import ArtifactRequest, RepositoryStrategy
from nexusdl.models.config import DownloaderConfig
from nexusdl.models.results import DownloadResult, ErrorKind

logger = logging.getLogger(__name__)


class Orchestrator:
    """Processes artifact requests against the configured backends.

    Parameters
    ----------
    config:
        Endpoints, archive behaviour and (for ``run_config``) the artifacts.
    settings:
        Process settings; defaults to a fresh ``DownloaderSettings``.
    backends:
        Pre-built backends keyed by strategy.  Built from *config* if omitted.
    transport:
        Optional httpx transport handed to the built backends.
    """

    def __init__(
        self,
        config: DownloaderConfig,
        settings: DownloaderSettings | None = None,
        *,
        backends: Mapping[RepositoryStrategy, RepositoryBackend] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._settings = settings or DownloaderSettings()
        self._backends = dict(
            backends if backends is not None
            else build_backends(config, self._settings, transport)
        )

        self.resolver = ArtifactResolver(self._backends)
        self.store = ArchiveStore(config)
        self.pruner = RetentionPruner()
        self.publisher = LinkPublisher(relative=config.relative_symlinks)

    # ------------------------------------------------------------------
    # Single request
    # ------------------------------------------------------------------

    def download(self, request: ArtifactRequest) -> DownloadResult:
        """Fetch, verify, archive and link one artifact.

        Never raises ``DownloaderError``; failures come back as a
        ``DownloadResult`` with ``success=False`` and the error kind.
        """
        logger.info("Processing %s", request.coordinates)
        try:
            return self._download(request)
        except DownloaderError as exc:
            logger.error("%s failed: [%s] %s", request.coordinates, exc.kind.value, exc.message)
            return DownloadResult(
                coordinates=request.coordinates,
                success=False,
                message=exc.message,
                error_kind=exc.kind,
            )

    def _download(self, request: ArtifactRequest) -> DownloadResult:
        candidate = self.resolver.resolve(request)
        backend = self.resolver.backend_for(request.strategy)
        artifact = self.store.artifact_path(request, candidate)

        with self.store.lock(request):
            downloaded = self.store.place(backend, candidate, artifact)
            self._verify(artifact, candidate.expected_hash)

            if self.config.delete_old_entries:
                self.pruner.prune(
                    artifact.parent, request.type, self.config.keep_count, protect=artifact
                )

            link = self.publisher.publish(
                self.store.working_directory(request), artifact, request
            )

        message = f"Symlink created {link} target: {artifact}"
        logger.info(message)
        return DownloadResult(
            coordinates=request.coordinates,
            success=True,
            message=message,
            link=link,
            target=artifact,
            downloaded=downloaded,
        )

    def _verify(self, artifact: Path, expected_hash: str) -> None:
        try:
            verify_file(artifact, expected_hash)
        except DownloaderError as exc:
            if exc.kind is ErrorKind.INTERNAL_ERROR and self.config.discard_corrupt:
                logger.warning("Discarding corrupt archive entry %s", artifact)
                try:
                    artifact.unlink(missing_ok=True)
                except OSError as unlink_exc:
                    logger.error("Could not discard %s: %s", artifact, unlink_exc)
            raise

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def run(self, requests: Iterable[ArtifactRequest] | None = None) -> list[DownloadResult]:
        """Process *requests* (default: the configured artifacts) in order.

        Stops at the first failure; the failed result is the last element.
        """
        results: list[DownloadResult] = []
        for request in self.config.artifacts if requests is None else requests:
            result = self.download(request)
            results.append(result)
            if not result.success:
                logger.error("Aborting batch after failure of %s", request.coordinates)
                break
        return results

    def close(self) -> None:
        for backend in self._backends.values():
            backend.close()

    def __enter__(self) -> Orchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
