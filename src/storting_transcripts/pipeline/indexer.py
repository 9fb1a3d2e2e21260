"""Indexing stage: one Elasticsearch record per speech."""
from __future__ import annotations

from threading import Event
from typing import Any, Dict, Optional
import json
import logging

from elasticsearch import ApiError, Elasticsearch, TransportError

from ..cache import DOCUMENT_SUFFIX, CacheStore, transcript_id
from ..core.errors import IndexingError, ParseError
from ..core.types import build_index_record, record_id
from .results import StageResult

LOGGER = logging.getLogger(__name__)


class DocumentIndexer:
    """Upserts the sections of every cached structured document.

    Record ids are ``<transcript id>-<section position>``, so indexing an
    unchanged document again overwrites the same records. Records whose
    position no longer exists after a document shrinks are left in place.
    """

    def __init__(self, *, client: Elasticsearch, cache: CacheStore, index_name: str) -> None:
        self._client = client
        self._cache = cache
        self._index_name = index_name

    @property
    def index_name(self) -> str:
        return self._index_name

    def index_all(self, *, cancel_event: Optional[Event] = None) -> StageResult:
        result = StageResult(stage="index")
        for key in self._cache.keys(DOCUMENT_SUFFIX):
            if cancel_event and cancel_event.is_set():
                break
            identifier = transcript_id(key)
            try:
                document = json.loads(self._cache.read(key))
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                LOGGER.error("index: cached document %s is not valid JSON: %s", key, exc)
                result.add_failure(identifier, exc)
                continue
            try:
                _check_document(document)
            except ParseError as exc:
                LOGGER.error("index: cached document %s has an unexpected shape: %s", key, exc)
                result.add_failure(identifier, exc)
                continue
            result.extend(self.index_document(document, identifier, cancel_event=cancel_event))
        return result

    def index_document(
        self,
        document: Dict[str, Any],
        transcript: str,
        *,
        cancel_event: Optional[Event] = None,
    ) -> StageResult:
        result = StageResult(stage="index")
        sections = document.get("sections") or []
        for position, section in enumerate(sections):
            if cancel_event and cancel_event.is_set():
                break
            identifier = record_id(transcript, position)
            try:
                self.upsert(identifier, build_index_record(document, section))
            except IndexingError as exc:
                LOGGER.error("index: record %s was rejected: %s", identifier, exc)
                result.add_failure(identifier, exc)
                continue
            result.processed += 1
        return result

    def upsert(self, identifier: str, record: Dict[str, Any]) -> str:
        try:
            response = self._client.index(index=self._index_name, id=identifier, document=record)
        except (ApiError, TransportError) as exc:
            raise IndexingError(str(exc)) from exc
        outcome = response["result"]
        LOGGER.info("%s: %s", identifier, outcome)
        return outcome


def _check_document(document: Any) -> None:
    if not isinstance(document, dict):
        raise ParseError(f"expected a JSON object, got {type(document).__name__}")
    sections = document.get("sections") or []
    if not isinstance(sections, list):
        raise ParseError("\"sections\" is not a list")
    if not all(isinstance(section, dict) for section in sections):
        raise ParseError("\"sections\" holds an entry that is not an object")


__all__ = ["DocumentIndexer"]
