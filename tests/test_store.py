"""Tests for core/store.py and core/fileio.py — JSON persistence."""

import pytest

from core.fileio import read_json, read_yaml, write_json_atomic
from core.store import FASTING_KEY, LEDGER_KEY, JsonFileStore, MemoryStore, open_store


def test_file_store_set_then_get(tmp_path):
    store = JsonFileStore(tmp_path / "data")
    store.set(LEDGER_KEY, {"2024-01-01": 100})
    assert store.get(LEDGER_KEY) == {"2024-01-01": 100}
    assert (tmp_path / "data" / "pushups-daily-v2.json").exists()


def test_file_store_missing_key_is_none(tmp_path):
    assert JsonFileStore(tmp_path).get(FASTING_KEY) is None


def test_file_store_malformed_json_is_none(tmp_path):
    (tmp_path / f"{FASTING_KEY}.json").write_text("{not json", encoding="utf-8")
    assert JsonFileStore(tmp_path).get(FASTING_KEY) is None


def test_file_store_rejects_path_like_keys(tmp_path):
    with pytest.raises(ValueError):
        JsonFileStore(tmp_path).set("../escape", {})


def test_atomic_write_leaves_no_temp_files(tmp_path):
    write_json_atomic(tmp_path / "doc.json", {"a": 1})
    assert [p.name for p in tmp_path.iterdir()] == ["doc.json"]
    assert read_json(tmp_path / "doc.json") == {"a": 1}


def test_read_yaml_malformed(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("key: [unclosed", encoding="utf-8")
    assert read_yaml(path) == {}
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert read_yaml(path) == {}


def test_memory_store_copies_values():
    store = MemoryStore()
    value = {"2024-01-01": 5}
    store.set(LEDGER_KEY, value)
    value["2024-01-01"] = 99
    assert store.get(LEDGER_KEY) == {"2024-01-01": 5}
    store.get(LEDGER_KEY)["2024-01-01"] = 77
    assert store.get(LEDGER_KEY) == {"2024-01-01": 5}


def test_open_store_uses_workspace_data_dir(workspace):
    store = open_store()
    assert store.directory == workspace / "data"


def test_file_store_undecodable_bytes_is_none(tmp_path):
    (tmp_path / f"{LEDGER_KEY}.json").write_bytes(b'{"2024-01-01": 5\xff}')
    assert JsonFileStore(tmp_path).get(LEDGER_KEY) is None


def test_read_yaml_undecodable_bytes(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_bytes(b"timezone: \xff\xfe\n")
    assert read_yaml(path) == {}
