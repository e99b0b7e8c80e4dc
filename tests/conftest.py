"""Shared fixtures: every test gets its own export directory."""

import pytest
from fastapi.testclient import TestClient

from figma_bridge.config import BridgeConfig
from figma_bridge.storage import ExportRepository
from figma_bridge.web.server import create_app


@pytest.fixture
def export_dir(tmp_path):
    return tmp_path / "figma-exports"


@pytest.fixture
def config(export_dir):
    return BridgeConfig(port=8473, export_dir=export_dir)


@pytest.fixture
def repository(export_dir):
    repo = ExportRepository(export_dir)
    repo.ensure_directory()
    return repo


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def figment():
    return {
        "name": "Login Page",
        "components": [
            {
                "id": "12:34",
                "component": "PrimaryButton",
                "cleanName": "primary-button",
                "suggestedComponentType": "button",
                "children": [{"type": "TEXT", "characters": "Sign in"}],
                "enhancedVisuals": {"fills": [], "shadows": []},
                "semantic": {"role": "button", "isInteractive": True, "hasHoverState": True},
                "designTokens": {"color": "primary-500"},
                "lintingWarnings": ["hard-coded radius"],
            },
            {
                "id": "12:35",
                "component": "Card",
                "cleanName": "card",
            },
        ],
    }
