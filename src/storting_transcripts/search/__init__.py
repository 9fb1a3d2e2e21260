"""Elasticsearch index schema and administration."""
from __future__ import annotations

from .index_manager import IndexManager
from .schema import ANALYZER_NAME, INDEX_MAPPINGS, INDEX_SETTINGS, RECORD_TYPE

__all__ = ["ANALYZER_NAME", "INDEX_MAPPINGS", "INDEX_SETTINGS", "IndexManager", "RECORD_TYPE"]
