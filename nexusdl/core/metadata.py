"""Reader for ``maven-metadata.xml`` documents.

Two shapes are read:

* the artifact-level document (``<group>/<artifact>/maven-metadata.xml``)
  carrying ``<latest>``, ``<release>``, ``<versions>`` and ``<lastUpdated>``;
* the version-level document of a snapshot
  (``<group>/<artifact>/<version>/maven-metadata.xml``) enumerating the
  concrete timestamped builds under
  ``<versioning><snapshotVersions><snapshotVersion>``.

Namespaced documents are accepted; elements are matched by local name.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactType

logger = logging.getLogger(__name__)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _text(element: ET.Element | None) -> str | None:
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


@dataclass(frozen=True)
class SnapshotBuild:
    """One ``<snapshotVersion>`` entry."""

    value: str
    updated: str | None
    extension: str | None = None
    classifier: str | None = None

    def matches(self, artifact_type: ArtifactType) -> bool:
        if self.extension is None:
            return True
        return artifact_type.includes(
            ArtifactType(classifier=self.classifier, extension=self.extension, constrained=True)
        )


class MavenMetadata:
    """Parsed ``maven-metadata.xml``.

    Parameters
    ----------
    document:
        The raw XML text.

    Raises
    ------
    DownloaderError
        ``INTERNAL_ERROR`` if the document is not well-formed XML.
    """

    def __init__(self, document: str) -> None:
        try:
            self._root = ET.fromstring(document)
        except ET.ParseError as exc:
            raise DownloaderError.unparsable("maven metadata", exc) from exc

    def _find_all(self, name: str) -> list[ET.Element]:
        return [el for el in self._root.iter() if _local(el.tag) == name]

    def _first_text(self, name: str) -> str | None:
        for element in self._find_all(name):
            value = _text(element)
            if value is not None:
                return value
        return None

    @staticmethod
    def _child_text(element: ET.Element, name: str) -> str | None:
        for child in element:
            if _local(child.tag) == name:
                return _text(child)
        return None

    # ------------------------------------------------------------------
    # Artifact-level markers
    # ------------------------------------------------------------------

    @property
    def latest(self) -> str | None:
        return self._first_text("latest")

    @property
    def release(self) -> str | None:
        return self._first_text("release")

    @property
    def last_updated(self) -> str | None:
        """``<lastUpdated>``, falling back to the first ``<updated>``."""
        return self._first_text("lastUpdated") or self._first_text("updated")

    @property
    def versions(self) -> list[str]:
        result: list[str] = []
        for container in self._find_all("versions"):
            for child in container:
                value = _text(child)
                if _local(child.tag) == "version" and value:
                    result.append(value)
        return result

    # ------------------------------------------------------------------
    # Version-level snapshot builds
    # ------------------------------------------------------------------

    @property
    def snapshot_builds(self) -> list[SnapshotBuild]:
        builds: list[SnapshotBuild] = []
        for entry in self._find_all("snapshotVersion"):
            value = self._child_text(entry, "value")
            if value is None:
                logger.debug("Skipping <snapshotVersion> without <value>")
                continue
            builds.append(
                SnapshotBuild(
                    value=value,
                    updated=self._child_text(entry, "updated"),
                    extension=self._child_text(entry, "extension"),
                    classifier=self._child_text(entry, "classifier"),
                )
            )
        return builds

    def snapshot_value_for(
        self, timestamp: str | None, artifact_type: ArtifactType | None = None
    ) -> str | None:
        """Return the build identifier published at *timestamp*.

        Among builds sharing the timestamp, one whose extension and
        classifier match *artifact_type* is preferred; otherwise the first
        in document order is returned.
        """
        if timestamp is None:
            return None
        matching = [b for b in self.snapshot_builds if b.updated == timestamp]
        if not matching:
            return None
        if artifact_type is not None:
            for build in matching:
                if build.matches(artifact_type):
                    return build.value
        return matching[0].value

    def snapshot_values(self, artifact_type: ArtifactType | None = None) -> list[str]:
        """Distinct build identifiers in document order."""
        seen: list[str] = []
        for build in self.snapshot_builds:
            if artifact_type is not None and not build.matches(artifact_type):
                continue
            if build.value not in seen:
                seen.append(build.value)
        return seen
