"""Domain types and errors."""
from __future__ import annotations

from .errors import (
    IndexingError,
    ParseError,
    RequestTimeout,
    StortingTranscriptsError,
    UpstreamError,
)
from .types import (
    Section,
    TranscriptDocument,
    TranscriptRef,
    build_index_record,
    format_timestamp,
    record_id,
)

__all__ = [
    "IndexingError",
    "ParseError",
    "RequestTimeout",
    "Section",
    "StortingTranscriptsError",
    "TranscriptDocument",
    "TranscriptRef",
    "UpstreamError",
    "build_index_record",
    "format_timestamp",
    "record_id",
]
