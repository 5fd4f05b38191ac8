"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and makes fixtures
available to all test modules.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root and src/ to Python path so main and meeting_recorder import
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

from meeting_recorder.config import RelayConfig, reset_relay_config  # noqa: E402


class RecordingSleep:
    """Fake sleep that records requested delays and returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def count(self) -> int:
        return len(self.delays)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    """Sleep replacement that records delays instead of waiting."""
    return RecordingSleep()


@pytest.fixture
def relay_config() -> RelayConfig:
    """RelayConfig built from a known environment."""
    env = {
        "RECALL_API_KEY": "test-key",
        "RECALL_API_BASE_URL": "https://recall.example.com/api/v1",
        "MAX_RETRIES": "3",
        "RETRY_DELAY": "2000",
        "API_TIMEOUT": "30000",
    }
    with patch.dict(os.environ, env, clear=True):
        reset_relay_config()
        config = RelayConfig()
    reset_relay_config()
    return config
