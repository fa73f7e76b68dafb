"""Stable symlink publication.

The link ``<artifactId>-<classifier>.<ext>`` (or ``<artifactId>.<ext>``)
in the working directory always points at the newest verified archive
entry.  It is deleted and recreated on every successful run.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from nexusdl.core.errors import DownloaderError
from nexusdl.models.artifacts import ArtifactRequest

logger = logging.getLogger(__name__)


class LinkPublisher:
    """Creates the stable link, absolute or relative.

    Parameters
    ----------
    relative:
        Point links at ``./<path below the project directory>`` instead of
        the absolute archive path.
    """

    def __init__(self, relative: bool = False) -> None:
        self.relative = relative

    @staticmethod
    def link_name(artifact_id: str, type_string: str) -> str:
        if "." in type_string:
            return f"{artifact_id}-{type_string}"
        return f"{artifact_id}.{type_string}"

    def link_target(
        self, artifact_path: Path, project: str | None, working_dir: Path | None = None
    ) -> str:
        """Return the symlink target for *artifact_path*.

        In relative mode the target is ``./`` followed by the components
        below the project directory.  When *working_dir* (the project
        directory) is known and contains the artifact, the offset is taken
        from it.  Otherwise the last component equal to *project* is used.
        """
        absolute = os.path.abspath(artifact_path)
        if not self.relative or not project:
            return absolute

        parts = Path(absolute).parts
        offset = None
        if working_dir is not None:
            base = Path(os.path.abspath(working_dir)).parts
            if base[-1:] == (project,) and parts[: len(base)] == base:
                offset = len(base)
        if offset is None and project in parts:
            offset = len(parts) - parts[::-1].index(project)

        if offset is None or offset >= len(parts):
            logger.debug("Project %s not in %s, linking absolute", project, artifact_path)
            return absolute
        return os.path.join(".", *parts[offset:])

    def publish(self, working_dir: Path, artifact_path: Path, request: ArtifactRequest) -> Path:
        """Replace the link in *working_dir* so it points at *artifact_path*."""
        link = Path(working_dir) / self.link_name(request.artifact_id, request.type)
        self._remove_existing(link)

        target = self.link_target(artifact_path, request.project, working_dir)
        try:
            os.symlink(target, link)
        except OSError as exc:
            raise DownloaderError.filesystem("create symlink", link, exc) from exc
        logger.debug("Linked %s -> %s", link, target)
        return link

    @staticmethod
    def _remove_existing(link: Path) -> None:
        try:
            mode = os.lstat(link).st_mode
        except FileNotFoundError:
            return
        except OSError as exc:
            raise DownloaderError.filesystem("inspect", link, exc) from exc

        if stat.S_ISDIR(mode):
            raise DownloaderError.filesystem("replace", link, "a directory is in the way")
        try:
            os.unlink(link)
        except OSError as exc:
            raise DownloaderError.filesystem("delete", link, exc) from exc
