"""High level orchestration of the fetch, convert and index stages."""
from __future__ import annotations

from dataclasses import dataclass
from threading import Event
from typing import Callable, Iterable, Literal, Optional, Sequence
import logging

from ..search import IndexManager
from .fetcher import SessionFetcher
from .indexer import DocumentIndexer
from .results import RunSummary, StageName, StageResult, UnitFailure
from .transformer import DocumentTransformer

LOGGER = logging.getLogger(__name__)

ALL_STAGES: Sequence[StageName] = ("fetch", "convert", "index")

PipelineEventKind = Literal[
    "start",
    "index_recreated",
    "stage",
    "failed",
    "finished",
    "cancelled",
    "error",
]


@dataclass(slots=True)
class PipelineEvent:
    """Progress notification emitted by :class:`IngestionPipeline`."""

    kind: PipelineEventKind
    stage: StageName | None = None
    message: str | None = None
    result: StageResult | None = None
    failure: UnitFailure | None = None


ProgressCallback = Callable[[PipelineEvent], None]


class IngestionPipeline:
    """Runs the stages in order, each reading what the previous one cached."""

    def __init__(
        self,
        *,
        fetcher: SessionFetcher,
        transformer: DocumentTransformer,
        index_manager: IndexManager,
        indexer: DocumentIndexer,
    ) -> None:
        self._fetcher = fetcher
        self._transformer = transformer
        self._index_manager = index_manager
        self._indexer = indexer

    def run(
        self,
        sessions: Iterable[str] = (),
        *,
        stages: Sequence[StageName] = ALL_STAGES,
        recreate_index: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[Event] = None,
    ) -> RunSummary:
        """Run the selected ``stages``.

        Unit failures are collected in the returned summary. A failed index
        recreation is raised as :class:`~storting_transcripts.core.IndexingError`
        before any record is written.
        """

        unknown = set(stages) - set(ALL_STAGES)
        if unknown:
            raise ValueError(f"Unknown pipeline stages: {sorted(unknown)}")

        summary = RunSummary()
        self._notify(progress_callback, PipelineEvent(kind="start", message="Pipeline run started"))
        try:
            if "fetch" in stages:
                self._record(
                    summary,
                    self._fetcher.fetch_sessions(list(sessions), cancel_event=cancel_event),
                    progress_callback,
                )
            if "convert" in stages and not self._cancelled(cancel_event):
                self._record(summary, self._transformer.convert_all(cancel_event=cancel_event), progress_callback)
            if "index" in stages and not self._cancelled(cancel_event):
                summary.index_recreated = self._index_manager.ensure_index(
                    self._indexer.index_name, recreate=recreate_index
                )
                if summary.index_recreated:
                    self._notify(
                        progress_callback,
                        PipelineEvent(kind="index_recreated", message=f"Recreated index {self._indexer.index_name}"),
                    )
                self._record(summary, self._indexer.index_all(cancel_event=cancel_event), progress_callback)
        except Exception as exc:
            LOGGER.exception("Ingestion pipeline failed: %s", exc)
            self._notify(progress_callback, PipelineEvent(kind="error", message=str(exc)))
            raise

        summary.cancelled = self._cancelled(cancel_event)
        kind: PipelineEventKind = "cancelled" if summary.cancelled else "finished"
        LOGGER.info("Pipeline run %s: %s", kind, summary.describe())
        self._notify(progress_callback, PipelineEvent(kind=kind, message=summary.describe()))
        return summary

    def _record(
        self,
        summary: RunSummary,
        result: StageResult,
        callback: Optional[ProgressCallback],
    ) -> None:
        summary.stages[result.stage] = result
        for failure in result.failures:
            self._notify(
                callback,
                PipelineEvent(kind="failed", stage=result.stage, message=failure.message, failure=failure),
            )
        self._notify(
            callback,
            PipelineEvent(
                kind="stage",
                stage=result.stage,
                message=f"{result.processed} done, {result.skipped} cached, {result.failed} failed",
                result=result,
            ),
        )

    @staticmethod
    def _cancelled(cancel_event: Optional[Event]) -> bool:
        return bool(cancel_event and cancel_event.is_set())

    @staticmethod
    def _notify(callback: Optional[ProgressCallback], event: PipelineEvent) -> None:
        if callback:
            callback(event)


__all__ = ["ALL_STAGES", "IngestionPipeline", "PipelineEvent", "ProgressCallback"]
