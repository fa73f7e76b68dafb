"""Artifact request, type and candidate models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nexusdl.models.versioning import MavenVersion

# Extensions of checksum and signature sidecars published next to an asset.
SIDECAR_EXTENSIONS = ("md5", "sha1", "sha256", "sha512", "asc")
# Classifiers of documentation assets that are never deployment targets.
DOC_CLASSIFIERS = ("javadoc", "sources")


class RepositoryStrategy(str, Enum):
    """Selects the repository backend that resolves a request."""

    NEXUS = "NEXUS"
    MAVEN_CENTRAL = "MAVEN_CENTRAL"
    GITHUB_PACKAGES = "GITHUB_PACKAGES"


class ArtifactType(BaseModel):
    """Classifier and extension of an artifact file.

    ``runnable.jar`` parses to classifier ``runnable`` and extension ``jar``;
    ``-runnable.jar`` (the suffix found after the version in a file name)
    parses the same way.  ``jar`` has no classifier.  An empty type string
    is unconstrained and includes every candidate type.
    """

    model_config = ConfigDict(frozen=True)

    classifier: str | None = None
    extension: str | None = None
    constrained: bool = False

    @classmethod
    def parse(cls, type_string: str | None) -> ArtifactType:
        if not type_string:
            return cls()

        classifier: str | None = None
        index = type_string.rfind(".")
        if index > -1:
            classifier = type_string[:index].removeprefix("-") or None
        return cls(
            classifier=classifier,
            extension=type_string[index + 1:],
            constrained=True,
        )

    def includes(self, other: ArtifactType) -> bool:
        """Return True if *other* satisfies every field this type constrains."""
        if not self.constrained:
            return True
        if self.classifier is not None and self.classifier != other.classifier:
            return False
        return self.extension is None or self.extension == other.extension

    @property
    def is_auxiliary(self) -> bool:
        """Checksum/signature sidecars and javadoc/sources assets."""
        extension = self.extension or ""
        if any(marker in extension for marker in SIDECAR_EXTENSIONS):
            return True
        classifier = self.classifier or ""
        return any(marker in classifier for marker in DOC_CLASSIFIERS)

    def file_suffix(self) -> str:
        """Return ``[-<classifier>].<extension>`` for building file names."""
        suffix = f"-{self.classifier}" if self.classifier else ""
        return f"{suffix}.{self.extension}"

    def __str__(self) -> str:
        if not self.constrained:
            return "not set"
        return f"{self.classifier or ''}.{self.extension}".lstrip(".")


class ArtifactRequest(BaseModel):
    """One configured artifact to fetch, archive and link."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(min_length=1)
    artifact_id: str = Field(min_length=1)
    type: str = "jar"
    repository: str = "releases"
    version: str | None = None
    project: str | None = None
    strategy: RepositoryStrategy = RepositoryStrategy.NEXUS

    @property
    def artifact_type(self) -> ArtifactType:
        return ArtifactType.parse(self.type)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.type}:{self.version or 'LATEST'}"


class Candidate(BaseModel):
    """A resolved, downloadable artifact version."""

    model_config = ConfigDict(frozen=True)

    version: str
    download_url: str
    expected_hash: str

    @field_validator("version", "download_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @property
    def file_name(self) -> str:
        return self.download_url.rsplit("/", 1)[-1]

    @property
    def maven_version(self) -> MavenVersion:
        return MavenVersion(self.version)
