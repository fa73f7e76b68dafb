"""Retention pruning of archived artifacts.

Keeps the newest ``keep`` files of one type in an archive directory.  A
failure while pruning is logged and ends pruning; it never fails the run.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class RetentionPruner:
    """Deletes archived files beyond the retention count."""

    @staticmethod
    def _mtime(path: Path, now: float) -> float:
        try:
            return path.stat().st_mtime
        except OSError as exc:
            logger.warning("Cannot read modification time of %s: %s", path, exc)
            return now

    def prune(
        self,
        directory: Path,
        type_string: str,
        keep: int,
        *,
        protect: Path | None = None,
    ) -> list[Path]:
        """Delete all but the *keep* newest files ending in *type_string*.

        Files are ordered by modification time, then name, both descending.
        A negative *keep* disables pruning.  *protect*, the entry just
        linked, is never deleted even when it falls outside the newest
        *keep*.

        Returns
        -------
        list[Path]
            The files actually deleted.
        """
        if keep < 0:
            logger.info("Retention count %d is negative, not pruning %s", keep, directory)
            return []

        try:
            entries = [
                p for p in Path(directory).iterdir()
                if p.is_file() and p.name.endswith(type_string)
            ]
        except OSError as exc:
            logger.error("Cannot list %s for pruning: %s", directory, exc)
            return []

        now = time.time()
        entries.sort(key=lambda p: (self._mtime(p, now), p.name), reverse=True)

        deleted: list[Path] = []
        for path in entries[keep:]:
            if protect is not None and path.name == Path(protect).name:
                continue
            try:
                path.unlink()
            except OSError as exc:
                logger.error("Cannot delete old entry %s: %s", path, exc)
                break
            logger.info("Deleted old entry %s", path.name)
            deleted.append(path)
        return deleted
