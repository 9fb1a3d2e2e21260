"""Download stage: session listings and raw transcripts."""
from __future__ import annotations

from threading import Event
from typing import Iterable, List, Optional, Protocol
import json
import logging

from ..cache import CacheStore, raw_key, session_key
from ..core.errors import StortingTranscriptsError
from ..core.types import TranscriptRef
from .results import StageResult

LOGGER = logging.getLogger(__name__)


class TranscriptSource(Protocol):
    def list_transcripts(self, session: str) -> List[TranscriptRef]: ...

    def fetch_transcript(self, identifier: str) -> bytes: ...


class SessionFetcher:
    """Resolves sessions to transcripts and caches their raw documents."""

    def __init__(
        self,
        *,
        client: TranscriptSource,
        cache: CacheStore,
        force: bool = False,
        refresh_listings: bool = False,
    ) -> None:
        self._client = client
        self._cache = cache
        self._force = force
        self._refresh_listings = refresh_listings

    def list_transcripts(self, session: str) -> List[TranscriptRef]:
        """Return the transcripts of ``session``, from the cache when possible.

        ``refresh_listings`` asks the API again without discarding cached
        transcripts, which picks up new publications of an ongoing session.
        """

        key = session_key(session)
        if not (self._force or self._refresh_listings) and self._cache.exists(key):
            LOGGER.info("listing cached: %s", key)
            entries = json.loads(self._cache.read(key))
            return [TranscriptRef(id=entry["id"], source_url=entry["source_url"]) for entry in entries]
        refs = self._client.list_transcripts(session)
        LOGGER.info("session %s lists %s transcripts", session, len(refs))
        payload = [{"id": ref.id, "source_url": ref.source_url} for ref in refs]
        self._cache.write(key, json.dumps(payload).encode("utf8"))
        return refs

    def fetch_transcript(self, ref: TranscriptRef) -> bool:
        """Download ``ref`` unless it is cached. Returns whether it was fetched."""

        key = raw_key(ref.id)
        if not self._force and self._cache.exists(key):
            LOGGER.info("download cached: %s", key)
            return False
        LOGGER.info("fetching transcript: %s => %s", ref.id, key)
        self._cache.write(key, self._client.fetch_transcript(ref.id))
        return True

    def fetch_sessions(self, sessions: Iterable[str], *, cancel_event: Optional[Event] = None) -> StageResult:
        result = StageResult(stage="fetch")
        for session in sessions:
            if cancel_event and cancel_event.is_set():
                break
            try:
                refs = self.list_transcripts(session)
            except (StortingTranscriptsError, OSError, ValueError) as exc:
                LOGGER.error("fetch: could not list transcripts of session %s: %s", session, exc)
                result.add_failure(f"session:{session}", exc)
                continue
            for ref in refs:
                if cancel_event and cancel_event.is_set():
                    break
                try:
                    fetched = self.fetch_transcript(ref)
                except (StortingTranscriptsError, OSError, ValueError) as exc:
                    # ValueError: id unusable as a cache key
                    LOGGER.error("fetch: transcript %s of session %s failed: %s", ref.id, session, exc)
                    result.add_failure(ref.id, exc)
                    continue
                if fetched:
                    result.processed += 1
                else:
                    result.skipped += 1
        return result


__all__ = ["SessionFetcher", "TranscriptSource"]
