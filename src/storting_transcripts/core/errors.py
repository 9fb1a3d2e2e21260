"""Error taxonomy shared by all pipeline stages."""
from __future__ import annotations


class StortingTranscriptsError(RuntimeError):
    """Base class for failures of a single unit of work."""


class UpstreamError(StortingTranscriptsError):
    """Raised when the Stortinget API responds with something unexpected."""


class RequestTimeout(UpstreamError, TimeoutError):
    """Raised when a request to the Stortinget API exceeds its deadline."""


class ParseError(StortingTranscriptsError):
    """Raised when a raw transcript cannot be turned into a document."""


class IndexingError(StortingTranscriptsError):
    """Raised when Elasticsearch rejects an admin or document request."""


__all__ = [
    "IndexingError",
    "ParseError",
    "RequestTimeout",
    "StortingTranscriptsError",
    "UpstreamError",
]
