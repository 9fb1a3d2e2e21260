"""Presence cache for pipeline artifacts.

Every stage writes its output under a key derived from an identifier
(``<session>.session`` for session listings, ``<id>.xml`` for raw
downloads, ``<id>.json`` for structured documents) and treats an existing
key as "already done". There is no expiry and no size bound.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Protocol, runtime_checkable

LOGGER = logging.getLogger(__name__)

RAW_SUFFIX = ".xml"
DOCUMENT_SUFFIX = ".json"
SESSION_SUFFIX = ".session"


def raw_key(transcript_id: str) -> str:
    return f"{transcript_id}{RAW_SUFFIX}"


def document_key(transcript_id: str) -> str:
    return f"{transcript_id}{DOCUMENT_SUFFIX}"


def session_key(session: str) -> str:
    return f"{session}{SESSION_SUFFIX}"


def is_valid_key(key: str) -> bool:
    """Whether ``key`` names a single file inside the cache directory."""

    return bool(key) and "/" not in key and "\\" not in key and not key.startswith(".")


def transcript_id(key: str) -> str:
    """Return the transcript id encoded in ``key``."""

    stem, dot, _ = key.rpartition(".")
    return stem if dot else key


@runtime_checkable
class CacheStore(Protocol):
    """Capability shared by all cache backends."""

    def exists(self, key: str) -> bool: ...

    def read(self, key: str) -> bytes: ...

    def write(self, key: str, data: bytes) -> None: ...

    def keys(self, suffix: str = "") -> List[str]: ...


class FileCache:
    """Flat directory cache; a file's presence is the cache hit signal."""

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def read(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def write(self, key: str, data: bytes) -> None:
        target = self._path(key)
        # a crash mid-write must not leave a partial file behind as a cache hit
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        LOGGER.debug("Wrote %s bytes to %s", len(data), target)

    def keys(self, suffix: str = "") -> List[str]:
        return sorted(
            path.name
            for path in self._directory.iterdir()
            if path.is_file() and not path.name.startswith(".") and path.name.endswith(suffix)
        )

    def _path(self, key: str) -> Path:
        if not is_valid_key(key):
            raise ValueError(f"Invalid cache key {key!r}")
        return self._directory / key


class MemoryCache:
    """Dictionary backed cache used for tests and dry runs."""

    def __init__(self, initial: Dict[str, bytes] | None = None) -> None:
        self._entries: Dict[str, bytes] = dict(initial or {})

    def exists(self, key: str) -> bool:
        return key in self._entries

    def read(self, key: str) -> bytes:
        try:
            return self._entries[key]
        except KeyError:
            raise FileNotFoundError(key) from None

    def write(self, key: str, data: bytes) -> None:
        self._entries[key] = bytes(data)

    def keys(self, suffix: str = "") -> List[str]:
        return sorted(key for key in self._entries if key.endswith(suffix))


__all__ = [
    "CacheStore",
    "DOCUMENT_SUFFIX",
    "FileCache",
    "MemoryCache",
    "RAW_SUFFIX",
    "SESSION_SUFFIX",
    "document_key",
    "raw_key",
    "session_key",
    "transcript_id",
]
