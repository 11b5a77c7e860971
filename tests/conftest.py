"""Shared fixtures: keep config writes and the live feed out of the repo state."""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logic.config import CONFIG_PATH_ENV  # noqa: E402
from server.feed import reset_feed  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    reset_feed()
    yield path
    reset_feed()
