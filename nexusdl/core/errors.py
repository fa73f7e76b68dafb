"""Typed downloader errors.

Every failure below the orchestrator is raised as a ``DownloaderError``
carrying one ``ErrorKind``.  The orchestrator converts it into a failed
``DownloadResult``; nothing is retried.
"""

from __future__ import annotations

from pathlib import Path

from nexusdl.models.artifacts import RepositoryStrategy
from nexusdl.models.results import ErrorKind


class DownloaderError(RuntimeError):
    """A failure while resolving, fetching, placing or linking an artifact."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def message(self) -> str:
        return str(self)

    # ------------------------------------------------------------------
    # NOT_FOUND
    # ------------------------------------------------------------------

    @classmethod
    def not_found(cls, group_id: str, artifact_id: str, type_: str) -> DownloaderError:
        return cls(ErrorKind.NOT_FOUND, f"No artifact present for {group_id} {artifact_id} {type_}")

    @classmethod
    def no_latest_version(cls, group_id: str, artifact_id: str, type_: str) -> DownloaderError:
        return cls(
            ErrorKind.NOT_FOUND,
            f"No latest version of artifact found for {group_id} {artifact_id} {type_}",
        )

    @classmethod
    def no_snapshot_build(cls, version: str, timestamp: str | None) -> DownloaderError:
        return cls(
            ErrorKind.NOT_FOUND,
            f"No snapshot build of {version} matches timestamp {timestamp or '<none>'}",
        )

    # ------------------------------------------------------------------
    # NETWORK_ERROR
    # ------------------------------------------------------------------

    @classmethod
    def request_failed(cls, url: str, reason: object) -> DownloaderError:
        return cls(ErrorKind.NETWORK_ERROR, f"Error executing GET {url}: {reason}")

    @classmethod
    def wrong_content_type(cls, requested: str, returned: str) -> DownloaderError:
        return cls(
            ErrorKind.NETWORK_ERROR,
            f"Requested content type {requested} does not match returned {returned or '<none>'}.",
        )

    # ------------------------------------------------------------------
    # FILESYSTEM_ERROR
    # ------------------------------------------------------------------

    @classmethod
    def filesystem(cls, action: str, path: Path, reason: object) -> DownloaderError:
        return cls(ErrorKind.FILESYSTEM_ERROR, f"Could not {action} {path}: {reason}")

    # ------------------------------------------------------------------
    # INTERNAL_ERROR
    # ------------------------------------------------------------------

    @classmethod
    def hash_mismatch(cls, expected: str, calculated: str) -> DownloaderError:
        return cls(
            ErrorKind.INTERNAL_ERROR,
            f"Sha1 requested:\n\t{expected}\ndoes not match calculated:\n\t{calculated}",
        )

    @classmethod
    def unparsable(cls, what: str, reason: object) -> DownloaderError:
        return cls(ErrorKind.INTERNAL_ERROR, f"Could not parse {what}: {reason}")

    @classmethod
    def misconfiguration(cls, strategy: RepositoryStrategy) -> DownloaderError:
        return cls(
            ErrorKind.INTERNAL_ERROR,
            f"No repository backend configured for strategy {strategy.value}",
        )
