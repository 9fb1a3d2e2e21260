"""Artifact cache shared by the pipeline stages."""
from __future__ import annotations

from .store import (
    DOCUMENT_SUFFIX,
    RAW_SUFFIX,
    SESSION_SUFFIX,
    CacheStore,
    FileCache,
    MemoryCache,
    document_key,
    is_valid_key,
    raw_key,
    session_key,
    transcript_id,
)

__all__ = [
    "CacheStore",
    "DOCUMENT_SUFFIX",
    "FileCache",
    "MemoryCache",
    "RAW_SUFFIX",
    "SESSION_SUFFIX",
    "document_key",
    "is_valid_key",
    "raw_key",
    "session_key",
    "transcript_id",
]
