"""nexusdl data models — all Pydantic v2, all frozen (immutable)."""

from nexusdl.models.artifacts import (
    ArtifactRequest,
    ArtifactType,
    Candidate,
    RepositoryStrategy,
)
from nexusdl.models.config import DownloaderConfig, SnapshotResolution
from nexusdl.models.results import DownloadResult, ErrorKind
from nexusdl.models.versioning import MavenVersion

__all__ = [
    # versioning
    "MavenVersion",
    # artifacts
    "ArtifactRequest",
    "ArtifactType",
    "Candidate",
    "RepositoryStrategy",
    # config
    "DownloaderConfig",
    "SnapshotResolution",
    # results
    "DownloadResult",
    "ErrorKind",
]
