"""Typed domain objects for the transcript pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(slots=True, frozen=True)
class TranscriptRef:
    """A transcript publication listed for a session."""

    id: str
    source_url: str


@dataclass(slots=True)
class Section:
    """A single speech within a transcript."""

    name: str
    text: str
    party: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class TranscriptDocument:
    """Structured form of a transcript as stored in the cache."""

    date: datetime
    presidents: List[str] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": format_timestamp(self.date),
            "presidents": list(self.presidents),
            "sections": [section.to_dict() for section in self.sections],
        }


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as ISO-8601 without fractional seconds."""

    return value.replace(microsecond=0).isoformat()


def record_id(transcript_id: str, position: int) -> str:
    return f"{transcript_id}-{position}"


def build_index_record(document: Dict[str, Any], section: Dict[str, Any]) -> Dict[str, Any]:
    """Merge document level fields under a section; section keys win."""

    record: Dict[str, Any] = {
        "time": document.get("date"),
        "presidents": document.get("presidents"),
    }
    record.update(section)
    return record


__all__ = [
    "Section",
    "TranscriptDocument",
    "TranscriptRef",
    "build_index_record",
    "format_timestamp",
    "record_id",
]
