"""Settings and mappings of the speech index."""
from __future__ import annotations

from typing import Any, Dict

ANALYZER_NAME = "shingle-analyzer"
RECORD_TYPE = "speech"

# Shingles are built before stopwords are dropped so that phrases such as
# "møtte i" survive while the lone stopword "i" is removed.
INDEX_SETTINGS: Dict[str, Any] = {
    "analysis": {
        "analyzer": {
            ANALYZER_NAME: {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "norwegian-shingle", "norwegian-stop"],
            }
        },
        "filter": {
            "norwegian-shingle": {
                "type": "shingle",
                "min_shingle_size": 2,
                "max_shingle_size": 5,
                "output_unigrams": True,
            },
            "norwegian-stop": {
                "type": "stop",
                "stopwords": "_norwegian_",
            },
        },
    },
}

INDEX_MAPPINGS: Dict[str, Any] = {
    "_meta": {"record_type": RECORD_TYPE},
    "properties": {
        "time": {"type": "date", "format": "date_time_no_millis"},
        "text": {
            "type": "text",
            "analyzer": ANALYZER_NAME,
            "search_analyzer": ANALYZER_NAME,
        },
        "name": {"type": "keyword"},
        "party": {"type": "keyword"},
        "presidents": {"type": "keyword"},
        "title": {"type": "keyword"},
    },
}

__all__ = ["ANALYZER_NAME", "INDEX_MAPPINGS", "INDEX_SETTINGS", "RECORD_TYPE"]
