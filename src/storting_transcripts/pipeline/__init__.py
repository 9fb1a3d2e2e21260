"""Pipeline stages and orchestration components."""
from __future__ import annotations

from .fetcher import SessionFetcher, TranscriptSource
from .indexer import DocumentIndexer
from .ingestion import ALL_STAGES, IngestionPipeline, PipelineEvent
from .results import RunSummary, StageResult, UnitFailure
from .transformer import DocumentTransformer, serialize_document

__all__ = [
    "ALL_STAGES",
    "DocumentIndexer",
    "DocumentTransformer",
    "IngestionPipeline",
    "PipelineEvent",
    "RunSummary",
    "SessionFetcher",
    "StageResult",
    "TranscriptSource",
    "UnitFailure",
    "serialize_document",
]
