"""Version-addressed local archive.

Storage layout: {working_path}[/{project}]/archive/{repository}/{file_name}
The filesystem is the index: a file present under its final name is a
completed download.  Files are only removed by the retention pruner.
"""

from __future__ import annotations

import fcntl
import logging
import os
from pathlib import Path
from types import TracebackType

from nexusdl.backends import RepositoryBackend
from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactRequest, Candidate
from nexusdl.models.config import DownloaderConfig
from nexusdl.models.results import ErrorKind

logger = logging.getLogger(__name__)

ARCHIVE_DIR_NAME = "archive"


class ArchiveLock:
    """Advisory, non-blocking lock serialising work on one archive directory.

    The lock file sits next to the archive directory as
    ``.<repository>.lock``.  A lock held by another process is reported as
    ``FILESYSTEM_ERROR`` instead of waiting.
    """

    def __init__(self, archive_dir: Path) -> None:
        self.path = archive_dir.parent / f".{archive_dir.name}.lock"
        self._fd: int | None = None

    def acquire(self) -> None:
        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as exc:
            raise DownloaderError.filesystem("open lock file", self.path, exc) from exc
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as exc:
            os.close(fd)
            raise DownloaderError(
                ErrorKind.FILESYSTEM_ERROR,
                f"Archive is locked by another process: {self.path}",
            ) from exc
        self._fd = fd

    def release(self) -> None:
        if self._fd is None:
            return
        fcntl.flock(self._fd, fcntl.LOCK_UN)
        os.close(self._fd)
        self._fd = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def __enter__(self) -> ArchiveLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


class ArchiveStore:
    """Computes archive paths and places downloaded artifacts.

    Parameters
    ----------
    config:
        Supplies ``working_path`` and the symlink mode, which decides
        whether archive paths stay rooted at the configured (possibly
        relative) working path.
    """

    def __init__(self, config: DownloaderConfig) -> None:
        self._working_path = Path(config.working_path)
        self._relative = config.relative_symlinks

    def _project_root(self, request: ArtifactRequest) -> Path:
        if request.project:
            return self._working_path / request.project
        return self._working_path

    def working_directory(self, request: ArtifactRequest) -> Path:
        """Absolute directory that receives the published link."""
        return Path(os.path.abspath(self._project_root(request)))

    def archive_directory(self, request: ArtifactRequest) -> Path:
        """Return (creating if needed) the archive directory for *request*."""
        if self._relative:
            directory = self._project_root(request) / ARCHIVE_DIR_NAME / request.repository
        else:
            directory = self.working_directory(request) / ARCHIVE_DIR_NAME / request.repository
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DownloaderError.filesystem("create directory", directory, exc) from exc
        return directory

    def artifact_path(self, request: ArtifactRequest, candidate: Candidate) -> Path:
        return self.archive_directory(request) / candidate.file_name

    def lock(self, request: ArtifactRequest) -> ArchiveLock:
        return ArchiveLock(self.archive_directory(request))

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place(self, backend: RepositoryBackend, candidate: Candidate, path: Path) -> bool:
        """Download *candidate* to *path* unless a file is already there.

        Returns True if a download happened, False if the existing file is
        reused.
        """
        if path.is_file():
            logger.info("Artifact %s already archived, skipping download", path.name)
            return False
        if path.exists():
            raise DownloaderError.filesystem("store artifact at", path, "not a regular file")

        written = backend.fetch_content(candidate, path)
        logger.info("Downloaded %s (%d bytes)", path.name, written)
        return True
