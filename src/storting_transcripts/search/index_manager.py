"""Lifecycle management of the Elasticsearch speech index."""
from __future__ import annotations

import logging

from elasticsearch import ApiError, Elasticsearch, TransportError

from ..core.errors import IndexingError
from .schema import INDEX_MAPPINGS, INDEX_SETTINGS

LOGGER = logging.getLogger(__name__)


class IndexManager:
    """Recreates the target index with the fixed speech schema."""

    def __init__(self, client: Elasticsearch) -> None:
        self._client = client

    def ensure_index(self, name: str, *, recreate: bool) -> bool:
        """Drop and create ``name`` when ``recreate`` is set.

        Recreation is destructive: every record stored in the index is lost.
        Without ``recreate`` the index is assumed to exist with the right
        schema and nothing is done. Returns whether the index was recreated.
        """

        if not recreate:
            LOGGER.debug("Keeping existing index %s", name)
            return False

        LOGGER.info("recreating index %s", name)
        try:
            if self._client.indices.exists(index=name):
                LOGGER.info("deleting index %s", name)
                self._client.indices.delete(index=name)
            self._client.indices.create(index=name, settings=INDEX_SETTINGS, mappings=INDEX_MAPPINGS)
        except (ApiError, TransportError) as exc:
            raise IndexingError(f"Failed to recreate index {name}: {exc}") from exc
        LOGGER.info("created index %s", name)
        return True


__all__ = ["IndexManager"]
