"""
Domain models for the dashboard.

These models have no dependencies on FastAPI, boto3 or the file system.
They describe what the dashboard shows and stores, not how.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .errors import BackendUnavailable, InvalidArgument


DEFAULT_PRESIGN_EXPIRY_SECONDS = 3600

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


@dataclass(frozen=True)
class ForwardConfig:
    """
    Where the forwarding process should push the clean feed.

    Both fields default to empty string. An empty config is a valid
    state (nothing saved yet), not an error.
    """
    rtmp_url: str = ""
    stream_key: str = ""


@dataclass(frozen=True)
class StoredObject:
    """A recording as reported by the object-storage backend."""
    key: str
    size_bytes: int
    last_modified: datetime

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError("Object size cannot be negative")


@dataclass(frozen=True)
class SignedUrlRequest:
    """One request for a time-limited download link."""
    key: str
    expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS

    def __post_init__(self) -> None:
        if self.expiry_seconds <= 0:
            raise InvalidArgument("Expiry must be a positive number of seconds")


@dataclass(frozen=True)
class CatalogEntry:
    """
    A stored object plus a ready-to-use download link.

    The link expires on the backend's clock, not ours, so entries are
    built fresh on every listing and never cached.
    """
    object: StoredObject
    signed_url: str

    @property
    def key(self) -> str:
        return self.object.key

    @property
    def size_bytes(self) -> int:
        return self.object.size_bytes

    @property
    def last_modified(self) -> datetime:
        return self.object.last_modified

    @property
    def size_display(self) -> str:
        return format_file_size(self.object.size_bytes)


@dataclass
class CatalogResult:
    """
    Outcome of a single listing call.

    Either entries or an error, never both. Keeping the error as a value
    lets the caller decide what a failed listing means for its view.
    """
    entries: list[CatalogEntry] = field(default_factory=list)
    error: Optional[BackendUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: BackendUnavailable) -> "CatalogResult":
        return cls(entries=[], error=error)


def format_file_size(size_bytes: int) -> str:
    """Human-readable size: 0 B, 512 B, 1.5 KB, 2 MB, ..."""
    if not size_bytes:
        return "0 B"

    exponent = min(int(math.log(size_bytes, 1024)), len(_SIZE_UNITS) - 1)
    # log() can land a hair under an exact power of 1024
    if exponent + 1 < len(_SIZE_UNITS) and size_bytes >= 1024 ** (exponent + 1):
        exponent += 1

    value = round(size_bytes / 1024 ** exponent, 1)
    if value == int(value):
        return f"{int(value)} {_SIZE_UNITS[exponent]}"
    return f"{value} {_SIZE_UNITS[exponent]}"
