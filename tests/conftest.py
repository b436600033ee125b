"""Test fixtures for serverbrowser tests."""

import os
from pathlib import Path
from typing import Any

import pytest

# Run Qt headless so the suite works without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from serverbrowser.core.config import ConfigManager


def _server_record() -> dict[str, Any]:
    """Return a complete server record as sent by the master server."""
    return {
        "name": "Coaster Kingdom",
        "version": "0.4.5",
        "description": "Friendly park building",
        "requiresPassword": False,
        "players": 3,
        "maxPlayers": 16,
        "port": 11753,
        "ip": {"v4": ["203.0.113.7"], "v6": ["::1"]},
    }


@pytest.fixture
def server_record() -> dict[str, Any]:
    """Return a complete server record dict."""
    return _server_record()


@pytest.fixture
def favourites_path(tmp_path: Path) -> Path:
    """Return a servers.cfg path inside a temporary directory."""
    return tmp_path / "config" / "servers.cfg"


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid test interference
    config = ConfigManager("ServerBrowserTest", "TestConfig")
    config.clear()
    return config
