"""Conversion stage: raw transcript XML to structured JSON."""
from __future__ import annotations

from threading import Event
from typing import Callable, Optional
import json
import logging

from ..cache import RAW_SUFFIX, CacheStore, document_key, raw_key, transcript_id
from ..core.errors import ParseError
from ..core.types import TranscriptDocument
from ..parsing import parse_transcript
from .results import StageResult

LOGGER = logging.getLogger(__name__)

TranscriptParser = Callable[[bytes], TranscriptDocument]


def serialize_document(document: TranscriptDocument) -> bytes:
    return json.dumps(document.to_dict(), ensure_ascii=False, indent=2).encode("utf8")


class DocumentTransformer:
    """Turns every cached raw transcript into its structured JSON form."""

    def __init__(
        self,
        *,
        cache: CacheStore,
        parser: TranscriptParser = parse_transcript,
        force: bool = False,
    ) -> None:
        self._cache = cache
        self._parser = parser
        self._force = force

    def convert(self, identifier: str) -> bool:
        """Convert ``identifier`` unless already cached. Returns whether it ran."""

        source = raw_key(identifier)
        target = document_key(identifier)
        if not self._force and self._cache.exists(target):
            LOGGER.info("conversion cached: %s", target)
            return False
        LOGGER.info("converting: %s => %s", source, target)
        document = self._parser(self._cache.read(source))
        self._cache.write(target, serialize_document(document))
        return True

    def convert_all(self, *, cancel_event: Optional[Event] = None) -> StageResult:
        result = StageResult(stage="convert")
        for key in self._cache.keys(RAW_SUFFIX):
            if cancel_event and cancel_event.is_set():
                break
            identifier = transcript_id(key)
            try:
                converted = self.convert(identifier)
            except ParseError as exc:
                LOGGER.error("convert: transcript %s could not be parsed: %s", identifier, exc)
                result.add_failure(identifier, exc)
                continue
            if converted:
                result.processed += 1
            else:
                result.skipped += 1
        return result


__all__ = ["DocumentTransformer", "TranscriptParser", "serialize_document"]
