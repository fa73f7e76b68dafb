"""Content hashing for archived artifacts.

Repositories publish a ``.sha1`` sidecar next to every asset.  The archived
file is streamed once and its lower-case hex digest is compared with the
published value for exact equality.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from nexusdl.core.errors import DownloaderError

CHUNK_SIZE = 64 * 1024


def sha1_file_hex(path: Path) -> str:
    """Return the SHA-1 hex digest of a file, read in chunks."""
    digest = hashlib.sha1()
    try:
        with Path(path).open("rb") as handle:
            for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        raise DownloaderError.filesystem("calculate sha1 for", path, exc) from exc
    return digest.hexdigest()


def normalize_sidecar(content: str) -> str:
    """Extract the digest from a sidecar body.

    Some repositories append the file name (``<hex>  name.jar``) or a
    trailing newline; only the first token is the digest.
    """
    parts = content.split()
    return parts[0] if parts else ""


def verify_file(path: Path, expected_hash: str) -> str:
    """Hash *path* and compare it with *expected_hash*.

    Returns the calculated digest.  Raises ``DownloaderError`` with
    ``INTERNAL_ERROR`` on mismatch; the file is left untouched.
    """
    calculated = sha1_file_hex(path)
    if calculated != expected_hash:
        raise DownloaderError.hash_mismatch(expected_hash, calculated)
    return calculated
