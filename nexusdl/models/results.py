"""Outcome of processing one artifact request."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Every failure maps to exactly one of these kinds."""

    NOT_FOUND = "NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    FILESYSTEM_ERROR = "FILESYSTEM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DownloadResult(BaseModel):
    """Success message or typed error for one artifact request."""

    model_config = ConfigDict(frozen=True)

    coordinates: str
    success: bool
    message: str
    error_kind: ErrorKind | None = None
    link: Path | None = None
    target: Path | None = None
    downloaded: bool = False
