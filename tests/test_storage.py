"""Tests for the file-backed storage tiers."""

import json
import os
import time

import pytest
from figma_bridge.models import TokenRecord, DebugRecord, RealTimeSnapshot
from figma_bridge.storage import DebugRecordStore, TOKENS_TIER
from figma_bridge.storage.files import read_json, write_json
from figma_bridge.utils.errors import StorageError


class TestJsonFiles:
    """Tests for JSON read/write helpers."""

    def test_missing_file_reads_none(self, tmp_path):
        assert read_json(tmp_path / "nope.json") is None

    def test_write_then_read(self, tmp_path):
        path = write_json(tmp_path / "sub" / "data.json", {"a": [1, 2]})
        assert read_json(path) == {"a": [1, 2]}
        assert not [p for p in path.parent.iterdir() if p.name.endswith(".tmp")]

    def test_invalid_json_raises_storage_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(StorageError) as exc_info:
            read_json(path, tier="tokensFile")
        assert exc_info.value.tier == "tokensFile"
        assert exc_info.value.path == path

    def test_write_into_file_parent_fails(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(StorageError):
            write_json(blocker / "data.json", {})


class TestDebugRecordStore:
    """Tests for per-token debug files."""

    def _record(self, token, name="Button"):
        return DebugRecord(token=token, timestamp="t", component={"id": token, "component": name})

    def test_file_naming(self, repository):
        path = repository.debug_records.put(self._record("figma_abc_123456"))
        assert path.name == "token-figma_abc_123456-debug.json"

    def test_get_put_delete(self, repository):
        store = repository.debug_records
        store.put(self._record("tok-1"))
        assert store.exists("tok-1")
        assert store.get("tok-1")["component"]["component"] == "Button"
        assert store.delete("tok-1")
        assert not store.exists("tok-1")
        assert store.get("tok-1") is None
        assert not store.delete("tok-1")

    def test_put_overwrites(self, repository):
        store = repository.debug_records
        store.put(self._record("tok-1", "Button"))
        store.put(self._record("tok-1", "Card"))
        assert store.get("tok-1")["component"]["component"] == "Card"

    def test_unsafe_token(self, repository):
        store = repository.debug_records
        with pytest.raises(ValueError):
            store.path_for("../escape")
        assert store.get("../escape") is None
        assert not store.exists("../escape")

    def test_token_from_filename(self):
        assert DebugRecordStore.token_from_filename("token-abc-debug.json") == "abc"
        assert DebugRecordStore.token_from_filename("tokens.json") is None
        assert DebugRecordStore.token_from_filename("token--debug.json") is None

    def test_list_newest_first(self, repository):
        store = repository.debug_records
        now = time.time()
        for i, token in enumerate(["old", "mid", "new"]):
            path = store.put(self._record(token))
            mtime = now - (3 - i) * 60
            os.utime(path, (mtime, mtime))
        (repository.export_dir / "tokens.json").write_text("{}")

        assert [info.token for info in store.list()] == ["new", "mid", "old"]

    def test_list_missing_directory(self, tmp_path):
        assert DebugRecordStore(tmp_path / "absent").list() == []


class TestTokenMapStore:
    """Tests for the aggregate token map."""

    def test_empty_when_missing(self, repository):
        assert repository.token_map.load() == {}
        assert repository.token_map.get("anything") is None

    def test_put_and_get(self, repository):
        record = TokenRecord.create("tok-1", {"id": "tok-1"})
        repository.token_map.put(record)
        loaded = repository.token_map.get("tok-1")
        assert loaded == record

    def test_put_same_token_overwrites(self, repository):
        store = repository.token_map
        store.put(TokenRecord.create("tok-1", {"v": 1}))
        store.put(TokenRecord.create("tok-1", {"v": 2}))
        assert len(store.load()) == 1
        assert store.get("tok-1").component == {"v": 2}

    def test_preserves_other_entries(self, repository):
        store = repository.token_map
        store.put(TokenRecord.create("a", {}))
        store.put(TokenRecord.create("b", {}))
        assert sorted(store.keys()) == ["a", "b"]

    def test_file_is_downstream_readable(self, repository):
        repository.token_map.put(TokenRecord.create("tok", {"id": "tok"}))
        data = json.loads((repository.export_dir / "tokens.json").read_text())
        assert set(data["tok"]) >= {"component", "created", "expires"}

    def test_delete(self, repository):
        store = repository.token_map
        store.put(TokenRecord.create("a", {}))
        assert store.delete("a")
        assert not store.delete("a")
        assert store.keys() == []

    def test_corrupt_map_raises(self, repository):
        repository.token_map.path.write_text("[1, 2")
        with pytest.raises(StorageError) as exc_info:
            repository.token_map.put(TokenRecord.create("a", {}))
        assert exc_info.value.tier == TOKENS_TIER

    def test_non_object_map_raises(self, repository):
        repository.token_map.path.write_text("[]")
        with pytest.raises(StorageError):
            repository.token_map.load()


class TestSnapshotStores:
    """Tests for the singleton snapshots."""

    def test_real_time_round_trip(self, repository):
        snapshot = RealTimeSnapshot(figment={"components": []}, token="tok", exportedAt="now")
        path = repository.real_time.put_snapshot(snapshot)
        assert path.name == "real-time-export.json"
        assert repository.real_time.get_snapshot() == snapshot

    def test_latest_overwritten(self, repository):
        repository.latest.put({"name": "first"})
        repository.latest.put({"name": "second"})
        assert repository.latest.get() == {"name": "second"}
        assert repository.latest.path.name == "latest-figment.json"

    def test_delete(self, repository):
        repository.latest.put({})
        assert repository.latest.delete()
        assert not repository.latest.exists

    def test_missing_snapshot(self, repository):
        assert repository.real_time.get_snapshot() is None
