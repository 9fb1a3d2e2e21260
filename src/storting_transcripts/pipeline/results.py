"""Bookkeeping for pipeline runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal

StageName = Literal["fetch", "convert", "index"]


@dataclass(slots=True, frozen=True)
class UnitFailure:
    """A single unit of work that failed and was skipped."""

    stage: StageName
    identifier: str
    message: str


@dataclass(slots=True)
class StageResult:
    """Counters for one stage: work done, cache hits and failures."""

    stage: StageName
    processed: int = 0
    skipped: int = 0
    failures: List[UnitFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def add_failure(self, identifier: str, exc: BaseException) -> UnitFailure:
        failure = UnitFailure(stage=self.stage, identifier=identifier, message=str(exc) or type(exc).__name__)
        self.failures.append(failure)
        return failure

    def extend(self, other: "StageResult") -> None:
        self.processed += other.processed
        self.skipped += other.skipped
        self.failures.extend(other.failures)


@dataclass(slots=True)
class RunSummary:
    """Aggregated outcome of :meth:`IngestionPipeline.run`."""

    stages: Dict[str, StageResult] = field(default_factory=dict)
    index_recreated: bool = False
    cancelled: bool = False

    @property
    def failures(self) -> List[UnitFailure]:
        return [failure for result in self.stages.values() for failure in result.failures]

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    def describe(self) -> str:
        parts = [
            f"{name}: {result.processed} done, {result.skipped} cached, {result.failed} failed"
            for name, result in self.stages.items()
        ]
        return "; ".join(parts) or "nothing to do"


__all__ = ["RunSummary", "StageName", "StageResult", "UnitFailure"]
