from __future__ import annotations

from typing import Dict, List, Set, Tuple

import pytest
from elasticsearch import ConnectionError as ESConnectionError

from storting_transcripts.core.errors import RequestTimeout
from storting_transcripts.core.types import TranscriptRef


SAMPLE_XML = """<?xml version="1.0" encoding="utf-8"?>
<referat>
  <dato>2024-01-15T10:00:00</dato>
  <presidentskap>
    <president>Masud Gharahkhani</president>
    <president>Svein Harberg</president>
  </presidentskap>
  <innlegg>
    <taler><navn>Presidenten</navn><tittel>President</tittel></taler>
    <a>Stortinget er lovleg sett.</a>
  </innlegg>
  <innlegg>
    <taler><navn>Jonas Gahr Støre</navn><parti>A</parti><tittel>Statsminister</tittel></taler>
    <a>Stortinget møtte i dag for å drøfte budsjettet.</a>
    <a>Takk, president.</a>
  </innlegg>
</referat>
""".encode("utf8")


class FakeIndices:
    def __init__(self) -> None:
        self.existing: Set[str] = set()
        self.calls: List[Tuple[str, str]] = []
        self.created: Dict[str, dict] = {}
        self.fail_create = False

    def exists(self, *, index: str) -> bool:
        self.calls.append(("exists", index))
        return index in self.existing

    def delete(self, *, index: str) -> dict:
        self.calls.append(("delete", index))
        self.existing.discard(index)
        return {"acknowledged": True}

    def create(self, *, index: str, settings: dict, mappings: dict) -> dict:
        self.calls.append(("create", index))
        if self.fail_create:
            raise ESConnectionError("cluster unavailable")
        self.existing.add(index)
        self.created[index] = {"settings": settings, "mappings": mappings}
        return {"acknowledged": True, "index": index}


class FakeElasticsearch:
    """In-memory stand-in for the parts of the Elasticsearch client we use."""

    def __init__(self) -> None:
        self.indices = FakeIndices()
        self.documents: Dict[Tuple[str, str], dict] = {}
        self.index_calls: List[str] = []
        self.rejected_ids: Set[str] = set()
        self.closed = False

    def index(self, *, index: str, id: str, document: dict) -> dict:
        self.index_calls.append(id)
        if id in self.rejected_ids:
            raise ESConnectionError(f"refused {id}")
        result = "updated" if (index, id) in self.documents else "created"
        self.documents[(index, id)] = dict(document)
        return {"_id": id, "result": result}

    def close(self) -> None:
        self.closed = True

    def ids(self, index: str) -> List[str]:
        return sorted(doc_id for (name, doc_id) in self.documents if name == index)


class DummyStortingClient:
    """Serves canned session listings and transcripts, counting requests."""

    def __init__(self, sessions: Dict[str, List[str]], documents: Dict[str, bytes] | None = None) -> None:
        self._sessions = sessions
        self._documents = documents or {}
        self.failing_ids: Set[str] = set()
        self.requests: List[str] = []

    def list_transcripts(self, session: str) -> List[TranscriptRef]:
        self.requests.append(f"list:{session}")
        return [
            TranscriptRef(id=identifier, source_url=f"https://example.invalid/{identifier}")
            for identifier in self._sessions[session]
        ]

    def fetch_transcript(self, identifier: str) -> bytes:
        self.requests.append(f"fetch:{identifier}")
        if identifier in self.failing_ids:
            raise RequestTimeout(f"transcript {identifier} timed out")
        return self._documents.get(identifier, SAMPLE_XML)


@pytest.fixture()
def sample_xml() -> bytes:
    return SAMPLE_XML


@pytest.fixture()
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture()
def make_storting_client():
    return DummyStortingClient
