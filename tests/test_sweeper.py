"""Tests for the debug record retention sweep."""

import os
import time
from datetime import timedelta

from fastapi.testclient import TestClient

from figma_bridge.bridge import sweep_debug_records
from figma_bridge.models import DebugRecord, TokenRecord
from figma_bridge.storage import DebugRecordStore
from figma_bridge.web.server import create_app


def _aged_record(repository, token, hours):
    path = repository.debug_records.put(DebugRecord(token=token, timestamp="t", component={}))
    mtime = time.time() - hours * 3600
    os.utime(path, (mtime, mtime))
    return path


class TestSweepDebugRecords:
    """Tests for sweep_debug_records."""

    def test_removes_only_expired(self, repository):
        old = _aged_record(repository, "old", 25)
        fresh = _aged_record(repository, "fresh", 23)

        result = sweep_debug_records(repository.debug_records)
        assert result.removed == ["old"]
        assert result.kept == 1
        assert not old.exists()
        assert fresh.exists()

    def test_leaves_other_tiers(self, repository):
        _aged_record(repository, "old", 48)
        repository.token_map.put(TokenRecord.create("old", {}))
        os.utime(repository.token_map.path, (0, 0))

        sweep_debug_records(repository.debug_records)
        assert repository.token_map.keys() == ["old"]

    def test_custom_max_age(self, repository):
        _aged_record(repository, "hour", 2)
        result = sweep_debug_records(repository.debug_records, max_age=timedelta(hours=1))
        assert result.removed == ["hour"]

    def test_missing_directory(self, tmp_path):
        result = sweep_debug_records(DebugRecordStore(tmp_path / "absent"))
        assert result.removed == []
        assert result.summary == "0 removed, 0 kept"


class TestStartupSweep:
    """Tests for the sweep run when the server starts."""

    def test_runs_on_startup(self, config, repository):
        old = _aged_record(repository, "old", 30)
        fresh = _aged_record(repository, "fresh", 1)

        with TestClient(create_app(config)) as client:
            assert client.get("/health").status_code == 200

        assert not old.exists()
        assert fresh.exists()

    def test_creates_missing_directory(self, config, export_dir):
        assert not export_dir.exists()
        with TestClient(create_app(config)):
            pass
        assert export_dir.is_dir()
