"""Tests for token resolution across tiers."""

import pytest
from figma_bridge.bridge import Resolver
from figma_bridge.models import TokenRecord, DebugRecord, RealTimeSnapshot


@pytest.fixture
def resolver(repository):
    return Resolver(repository)


def _debug(repository, token, name):
    repository.debug_records.put(DebugRecord(token=token, timestamp="t", component={"component": name}))


class TestResolverPriority:
    """Tests for tier ordering."""

    def test_debug_record_wins(self, resolver, repository):
        _debug(repository, "tok", "FromDebug")
        repository.token_map.put(TokenRecord.create("tok", {"component": "FromMap"}))

        resolution = resolver.resolve("tok")
        assert resolution.found
        assert resolution.source == "debugFile"
        assert resolution.data["component"]["component"] == "FromDebug"

    def test_token_map_when_no_debug_record(self, resolver, repository):
        repository.token_map.put(TokenRecord.create("tok", {"component": "FromMap"}))

        resolution = resolver.resolve("tok")
        assert resolution.source == "tokensFile"
        assert resolution.data["component"] == {"component": "FromMap"}
        assert {"created", "expires"} <= set(resolution.data)

    def test_real_time_only_when_token_matches(self, resolver, repository):
        repository.real_time.put_snapshot(RealTimeSnapshot(figment={"components": []}, token="rt", exportedAt="x"))

        hit = resolver.resolve("rt")
        assert hit.source == "realTimeFile"
        assert hit.data["token"] == "rt"

        assert not resolver.resolve("other").found


class TestResolverMiss:
    """Tests for diagnostic miss responses."""

    def test_miss_lists_available_tokens(self, resolver, repository):
        repository.token_map.put(TokenRecord.create("a", {}))
        repository.token_map.put(TokenRecord.create("b", {}))

        body = resolver.resolve("missing").to_response()
        assert body["success"] is False
        assert body["error"] == "Token not found: missing"
        assert sorted(body["availableTokens"]) == ["a", "b"]
        assert body["exportDir"] == str(repository.export_dir)

    def test_sources_report_every_tier(self, resolver, repository):
        _debug(repository, "tok", "Button")

        sources = resolver.resolve("tok").sources
        assert set(sources) == {"debugFile", "tokensFile", "realTimeFile"}
        assert sources["debugFile"]["exists"] is True
        assert sources["debugFile"]["path"].endswith("token-tok-debug.json")
        assert sources["tokensFile"]["exists"] is False
        assert sources["realTimeFile"]["exists"] is False

    def test_empty_directory(self, resolver):
        body = resolver.resolve("tok").to_response()
        assert body["availableTokens"] == []

    def test_unsafe_token_is_a_miss(self, resolver):
        resolution = resolver.resolve("../tokens")
        assert not resolution.found
        assert resolution.sources["debugFile"] == {"path": None, "exists": False}


class TestResolverCorruptTiers:
    """Tests for unreadable tiers."""

    def test_corrupt_debug_record_falls_through(self, resolver, repository):
        repository.debug_records.path_for("tok").write_text("{oops")
        repository.token_map.put(TokenRecord.create("tok", {"component": "FromMap"}))

        resolution = resolver.resolve("tok")
        assert resolution.source == "tokensFile"
        assert "error" in resolution.sources["debugFile"]

    def test_corrupt_token_map(self, resolver, repository):
        repository.token_map.path.write_text("not json")

        body = resolver.resolve("tok").to_response()
        assert body["success"] is False
        assert body["availableTokens"] == []
        assert "error" in body["sources"]["tokensFile"]
