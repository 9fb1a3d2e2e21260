from __future__ import annotations

import json

from storting_transcripts.cache import MemoryCache
from storting_transcripts.parsing import parse_transcript
from storting_transcripts.pipeline import DocumentTransformer


def test_convert_writes_canonical_json(sample_xml):
    cache = MemoryCache({"10.xml": sample_xml})

    result = DocumentTransformer(cache=cache).convert_all()

    data = json.loads(cache.read("10.json").decode("utf8"))
    assert result.processed == 1
    assert data["date"] == "2024-01-15T10:00:00+01:00"
    assert data["presidents"] == ["Masud Gharahkhani", "Svein Harberg"]
    assert [section["name"] for section in data["sections"]] == ["Presidenten", "Jonas Gahr Støre"]
    assert "Støre" in cache.read("10.json").decode("utf8")


def test_existing_conversion_is_skipped_unless_forced(sample_xml):
    calls = []

    def parser(raw):
        calls.append(raw)
        return parse_transcript(raw)

    cache = MemoryCache({"10.xml": sample_xml, "10.json": b"{}"})

    skipped = DocumentTransformer(cache=cache, parser=parser).convert_all()
    assert (skipped.processed, skipped.skipped) == (0, 1)
    assert calls == []
    assert cache.read("10.json") == b"{}"

    forced = DocumentTransformer(cache=cache, parser=parser, force=True).convert_all()
    assert forced.processed == 1
    assert len(calls) == 1
    assert json.loads(cache.read("10.json"))["sections"]


def test_parse_error_is_isolated(sample_xml):
    cache = MemoryCache({"10.xml": b"<referat><innlegg>", "11.xml": sample_xml})

    result = DocumentTransformer(cache=cache).convert_all()

    assert cache.keys(".json") == ["11.json"]
    assert result.processed == 1
    assert [(f.stage, f.identifier) for f in result.failures] == [("convert", "10")]
