"""Maven repository layout helpers shared by the metadata-driven backends."""

from __future__ import annotations

from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactType
from nexusdl.models.results import ErrorKind

MAVEN_METADATA_XML = "maven-metadata.xml"


def group_path(group_id: str) -> str:
    """``com.example.tools`` -> ``com/example/tools``."""
    return group_id.replace(".", "/")


def join_url(base: str, *segments: str) -> str:
    url = base if base.endswith("/") else base + "/"
    return url + "/".join(segment.strip("/") for segment in segments)


def asset_file_name(artifact_id: str, version: str, artifact_type: ArtifactType) -> str:
    """``<artifactId>-<version>[-<classifier>].<extension>``."""
    if not artifact_type.extension:
        raise DownloaderError(
            ErrorKind.INTERNAL_ERROR,
            f"An artifact type is required to build the file name of {artifact_id} {version}",
        )
    return f"{artifact_id}-{version}{artifact_type.file_suffix()}"
