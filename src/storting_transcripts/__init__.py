"""Ingestion of Stortinget session transcripts into Elasticsearch."""
from __future__ import annotations

from .cache import CacheStore, FileCache, MemoryCache
from .clients import StortingClient
from .config import AppConfig, load_config
from .core import (
    IndexingError,
    ParseError,
    RequestTimeout,
    Section,
    StortingTranscriptsError,
    TranscriptDocument,
    TranscriptRef,
    UpstreamError,
)
from .parsing import parse_transcript
from .pipeline import (
    DocumentIndexer,
    DocumentTransformer,
    IngestionPipeline,
    PipelineEvent,
    RunSummary,
    SessionFetcher,
)
from .runtime import PipelineResources, create_pipeline
from .search import IndexManager

__all__ = [
    "AppConfig",
    "CacheStore",
    "DocumentIndexer",
    "DocumentTransformer",
    "FileCache",
    "IndexManager",
    "IndexingError",
    "IngestionPipeline",
    "MemoryCache",
    "ParseError",
    "PipelineEvent",
    "PipelineResources",
    "RequestTimeout",
    "RunSummary",
    "Section",
    "SessionFetcher",
    "StortingClient",
    "StortingTranscriptsError",
    "TranscriptDocument",
    "TranscriptRef",
    "UpstreamError",
    "create_pipeline",
    "load_config",
    "parse_transcript",
]
