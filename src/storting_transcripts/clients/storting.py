"""HTTP client for the data.stortinget.no export API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

import httpx

from ..cache import is_valid_key, raw_key
from ..config import StortingAPIConfig
from ..core.errors import RequestTimeout, UpstreamError
from ..core.types import TranscriptRef

LOGGER = logging.getLogger(__name__)

LISTING_PATH = "/eksport/publikasjoner"
TRANSCRIPT_PATH = "/eksport/publikasjon"
LISTING_FIELD = "publikasjoner_liste"


class StortingClient:
    """Minimal client for listing and downloading session transcripts."""

    def __init__(
        self,
        config: StortingAPIConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or StortingAPIConfig()
        self._base_url = self._config.base_url.rstrip("/")
        self._max_retries = max(1, self._config.max_retries)
        self._client = httpx.Client(
            timeout=self._config.timeout,
            headers={"User-Agent": self._config.user_agent},
            transport=transport,
        )

    # --- public API -----------------------------------------------------
    def list_transcripts(self, session: str) -> List[TranscriptRef]:
        """Return the transcript publications of ``session``."""

        params = {"publikasjontype": "referat", "sesjonid": session, "format": "json"}
        response = self._request(LISTING_PATH, params=params)
        try:
            envelope = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Transcript listing for session {session} is not valid JSON") from exc
        if not isinstance(envelope, dict):
            raise UpstreamError(f"Transcript listing for session {session} is not a JSON object")
        entries = envelope.get(LISTING_FIELD)
        if not isinstance(entries, list):
            raise UpstreamError(f"Transcript listing for session {session} lacks {LISTING_FIELD!r}")

        refs: List[TranscriptRef] = []
        for entry in entries:
            raw_identifier = entry.get("id") if isinstance(entry, dict) else None
            if raw_identifier in (None, ""):
                raise UpstreamError(f"Transcript listing for session {session} has an entry without id")
            identifier = str(raw_identifier)
            if not is_valid_key(raw_key(identifier)):
                raise UpstreamError(f"Transcript listing for session {session} has an unusable id {identifier!r}")
            refs.append(TranscriptRef(id=identifier, source_url=self.transcript_url(identifier)))
        return refs

    def fetch_transcript(self, identifier: str) -> bytes:
        """Download the raw transcript document for ``identifier``."""

        response = self._request(TRANSCRIPT_PATH, params={"publikasjonid": identifier})
        return response.content

    def transcript_url(self, identifier: str) -> str:
        return str(httpx.URL(f"{self._base_url}{TRANSCRIPT_PATH}", params={"publikasjonid": identifier}))

    def close(self) -> None:
        """Close the underlying HTTP client."""

        self._client.close()

    def __enter__(self) -> "StortingClient":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()

    # --- helpers --------------------------------------------------------
    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        url = f"{self._base_url}{path}"
        last_exc: Optional[Exception] = None
        for attempt in range(1, self._max_retries + 1):
            try:
                response = self._client.get(url, params=params)
                response.raise_for_status()
                return response
            except httpx.TimeoutException as exc:
                last_exc = exc
                LOGGER.warning(
                    "Request to %s timed out after %ss (attempt %s/%s)",
                    url,
                    self._config.timeout,
                    attempt,
                    self._max_retries,
                )
            except httpx.HTTPStatusError as exc:
                last_exc = exc
                status = exc.response.status_code
                LOGGER.warning(
                    "Stortinget API returned status %s for %s (attempt %s/%s)",
                    status,
                    url,
                    attempt,
                    self._max_retries,
                )
                if 400 <= status < 500 and status != 429:
                    break
            except httpx.HTTPError as exc:
                last_exc = exc
                LOGGER.warning("HTTP error while requesting %s: %s", url, exc)
        if isinstance(last_exc, httpx.TimeoutException):
            raise RequestTimeout(f"Request to {url} timed out after {self._config.timeout}s") from last_exc
        raise UpstreamError(f"Failed to request {url}") from last_exc


__all__ = ["LISTING_FIELD", "StortingClient"]
