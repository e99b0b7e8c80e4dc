"""Tests for bridge configuration."""

from pathlib import Path

import pytest
from figma_bridge.config import (
    BridgeConfig,
    DEFAULT_PORT,
    DEFAULT_HOST,
    DEFAULT_EXPORT_DIR,
    parse_port,
)
from figma_bridge.utils.errors import ConfigError


class TestBridgeConfig:
    """Tests for BridgeConfig."""

    def test_defaults(self):
        config = BridgeConfig.from_env({})
        assert config.port == DEFAULT_PORT == 8473
        assert config.host == DEFAULT_HOST
        assert config.export_dir == DEFAULT_EXPORT_DIR
        assert config.log_level == "INFO"

    def test_env_overrides(self, tmp_path):
        config = BridgeConfig.from_env(
            {
                "FIGMA_BRIDGE_PORT": "9000",
                "FIGMA_BRIDGE_HOST": "0.0.0.0",
                "FIGMA_EXPORT_DIR": str(tmp_path),
                "FIGMA_BRIDGE_LOG_LEVEL": "debug",
            }
        )
        assert config.port == 9000
        assert config.host == "0.0.0.0"
        assert config.export_dir == tmp_path
        assert config.log_level == "DEBUG"

    def test_export_dir_expands_user(self):
        config = BridgeConfig(export_dir=Path("~/exports"))
        assert "~" not in str(config.export_dir)

    def test_invalid_port_env(self):
        with pytest.raises(ConfigError) as exc_info:
            BridgeConfig.from_env({"FIGMA_BRIDGE_PORT": "http"})
        assert exc_info.value.setting == "port"


class TestParsePort:
    """Tests for port validation."""

    def test_accepts_string(self):
        assert parse_port("8080") == 8080

    @pytest.mark.parametrize("value", [0, 65536, -1, "abc", None])
    def test_rejects(self, value):
        with pytest.raises(ConfigError):
            parse_port(value)
