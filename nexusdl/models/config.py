"""Downloader configuration model.

Built once from a JSON configuration file, a configuration server response
or command-line options, then passed around unchanged.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from nexusdl.models.artifacts import ArtifactRequest, RepositoryStrategy

DEFAULT_MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2/"
DEFAULT_GITHUB_PACKAGES_URL = "https://maven.pkg.github.com/"
DEFAULT_NEXUS_SEARCH_PATH = "service/rest/v1/search/assets"
DEFAULT_KEEP_COUNT = 3


class SnapshotResolution(str, Enum):
    """How the GitHub Packages backend picks a concrete snapshot build."""

    TIMESTAMP = "timestamp"  # match <lastUpdated> against <snapshotVersion><updated>
    NEWEST = "newest"        # every snapshot build is a candidate, highest version wins


class DownloaderConfig(BaseModel):
    """Repository endpoints, archive behaviour and the artifacts to fetch."""

    model_config = ConfigDict(frozen=True)

    # Nexus search backend
    nexus_url: str = ""
    nexus_username: str = ""
    nexus_password: str = ""
    nexus_search_path: str = DEFAULT_NEXUS_SEARCH_PATH

    # Static layout backend
    maven_central_url: str = DEFAULT_MAVEN_CENTRAL_URL

    # Snapshot layout backend
    github_packages_url: str = DEFAULT_GITHUB_PACKAGES_URL
    github_owner: str = ""
    github_repo: str = ""
    github_token: str = ""
    snapshot_resolution: SnapshotResolution = SnapshotResolution.TIMESTAMP

    # Archive and link behaviour
    working_path: Path = Path(".")
    relative_symlinks: bool = False
    delete_old_entries: bool = False
    keep_count: int = DEFAULT_KEEP_COUNT
    discard_corrupt: bool = False

    verbose: bool = False
    more_verbose: bool = False

    default_strategy: RepositoryStrategy = RepositoryStrategy.NEXUS
    artifacts: list[ArtifactRequest] = Field(default_factory=list)

    @property
    def nexus_configured(self) -> bool:
        return bool(self.nexus_url and self.nexus_username and self.nexus_password)

    @property
    def github_configured(self) -> bool:
        return bool(self.github_owner and self.github_repo and self.github_token)
