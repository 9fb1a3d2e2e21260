from __future__ import annotations

import pytest

import storting_transcripts.cli as cli
import storting_transcripts.config.settings as config_settings
from storting_transcripts.runtime import create_pipeline


@pytest.fixture()
def wired(tmp_path, monkeypatch, fake_es, make_storting_client):
    monkeypatch.setattr(config_settings, "_DEFAULT_CONFIG_LOCATIONS", (tmp_path / "none.json",))
    client = make_storting_client({"2023-2024": ["10", "11"]})
    captured = {}

    def fake_create_pipeline(config, **_):
        captured["config"] = config
        return create_pipeline(config, storting_client=client, search_client=fake_es)

    monkeypatch.setattr(cli, "create_pipeline", fake_create_pipeline)
    return client, captured


def test_run_applies_overrides_and_exits_cleanly(tmp_path, fake_es, wired):
    client, captured = wired
    data_dir = tmp_path / "cache"

    code = cli.main(
        [
            "run",
            "--data-dir",
            str(data_dir),
            "--session",
            "2023-2024",
            "--index-name",
            "speeches",
            "--create-index",
        ]
    )

    assert code == cli.EXIT_OK
    config = captured["config"]
    assert config.pipeline.sessions == ["2023-2024"]
    assert config.search.create_index is True
    assert config.pipeline.force is False
    assert (data_dir / "11.json").exists()
    assert fake_es.ids("speeches") == ["10-0", "10-1", "11-0", "11-1"]


def test_unit_failure_gives_non_zero_exit(tmp_path, fake_es, wired):
    client, _ = wired
    client.failing_ids = {"11"}

    code = cli.main(["fetch", "--data-dir", str(tmp_path / "cache"), "--session", "2023-2024"])

    assert code == cli.EXIT_UNIT_FAILURES


def test_failed_index_recreation_is_fatal(tmp_path, fake_es, wired):
    fake_es.indices.fail_create = True

    code = cli.main(["index", "--data-dir", str(tmp_path / "cache"), "--create-index"])

    assert code == cli.EXIT_FATAL
    assert fake_es.index_calls == []


def test_refresh_listings_flag_reaches_the_fetcher(tmp_path, fake_es, wired):
    client, captured = wired
    data_dir = tmp_path / "cache"
    data_dir.mkdir()
    (data_dir / "2023-2024.session").write_text("[]", encoding="utf8")

    assert cli.main(["fetch", "--data-dir", str(data_dir), "--session", "2023-2024"]) == cli.EXIT_OK
    assert not (data_dir / "10.xml").exists()

    code = cli.main(["fetch", "--data-dir", str(data_dir), "--session", "2023-2024", "--refresh-listings"])

    assert code == cli.EXIT_OK
    assert captured["config"].pipeline.refresh_listings is True
    assert sorted(path.name for path in data_dir.glob("*.xml")) == ["10.xml", "11.xml"]
