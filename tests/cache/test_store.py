from __future__ import annotations

import pytest

from storting_transcripts.cache import (
    CacheStore,
    FileCache,
    MemoryCache,
    document_key,
    raw_key,
    transcript_id,
)


def test_keys_are_derived_from_transcript_id():
    assert raw_key("refs-202324-01-15") == "refs-202324-01-15.xml"
    assert document_key("refs-202324-01-15") == "refs-202324-01-15.json"
    assert transcript_id("refs-202324-01-15.json") == "refs-202324-01-15"
    assert transcript_id("10") == "10"


def test_file_cache_round_trip_and_listing(tmp_path):
    cache = FileCache(tmp_path / "data")

    assert not cache.exists("10.xml")
    cache.write("10.xml", b"<referat/>")
    cache.write("11.xml", b"<referat/>")
    cache.write("10.json", b"{}")

    assert cache.exists("10.xml")
    assert cache.read("10.xml") == b"<referat/>"
    assert cache.keys(".xml") == ["10.xml", "11.xml"]
    assert cache.keys(".json") == ["10.json"]
    assert sorted(p.name for p in (tmp_path / "data").iterdir()) == ["10.json", "10.xml", "11.xml"]


def test_file_cache_write_replaces_existing_content(tmp_path):
    cache = FileCache(tmp_path)
    cache.write("10.xml", b"old")
    cache.write("10.xml", b"new")

    assert cache.read("10.xml") == b"new"
    assert cache.keys() == ["10.xml"]


@pytest.mark.parametrize("key", ["", "../escape.xml", "nested/10.xml", ".hidden.xml"])
def test_file_cache_rejects_keys_outside_the_flat_directory(tmp_path, key):
    cache = FileCache(tmp_path)
    with pytest.raises(ValueError):
        cache.exists(key)


def test_both_backends_implement_the_cache_protocol(tmp_path):
    cache = MemoryCache({"10.xml": b"raw"})

    assert isinstance(cache, CacheStore)
    assert isinstance(FileCache(tmp_path), CacheStore)
    assert cache.exists("10.xml")
    assert cache.keys(".json") == []
    with pytest.raises(FileNotFoundError):
        cache.read("11.xml")
