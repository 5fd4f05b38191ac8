"""Tests for relay configuration."""

import os
from unittest.mock import patch

import pytest

from meeting_recorder.config import RelayConfig, get_relay_config, reset_relay_config
from meeting_recorder.errors import ConfigurationError


class TestRelayConfig:
    """Tests for RelayConfig."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RelayConfig()
            assert config.api_key == ""
            assert config.base_url == "https://us-west-2.recall.ai/api/v1"
            assert config.timeout_ms == 60000
            assert config.max_retries == 10
            assert config.retry_delay_ms == 5000
            assert config.port == 3000
            assert config.bot_name == "Recording Bot"
            assert config.normalize_responses is False
            assert config.rate_limit_storage_uri == "memory://"
            assert not config.is_configured

    def test_configured_from_env(self):
        env = {
            "RECALL_API_KEY": "secret",
            "RECALL_API_BASE_URL": "https://eu-central-1.recall.ai/api/v1",
            "API_TIMEOUT": "30000",
            "MAX_RETRIES": "3",
            "RETRY_DELAY": "2000",
            "PORT": "8080",
            "RELAY_NORMALIZE_RESPONSES": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = RelayConfig()
            assert config.is_configured
            assert config.base_url == "https://eu-central-1.recall.ai/api/v1"
            assert config.timeout_seconds == 30.0
            assert config.max_retries == 3
            assert config.retry_delay_ms == 2000
            assert config.port == 8080
            assert config.normalize_responses is True

    def test_unparseable_numbers_fall_back_to_defaults(self):
        with patch.dict(os.environ, {"MAX_RETRIES": "many", "PORT": ""}, clear=True):
            config = RelayConfig()
            assert config.max_retries == 10
            assert config.port == 3000

    def test_validate_missing_api_key(self):
        with patch.dict(os.environ, {}, clear=True):
            errors = RelayConfig().validate()
            assert any("RECALL_API_KEY" in e for e in errors)

    def test_validate_bad_retry_settings(self):
        env = {"RECALL_API_KEY": "k", "MAX_RETRIES": "0", "RETRY_DELAY": "-1"}
        with patch.dict(os.environ, env, clear=True):
            errors = RelayConfig().validate()
            assert any("MAX_RETRIES" in e for e in errors)
            assert any("RETRY_DELAY" in e for e in errors)

    def test_require_valid_fails_fast(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="RECALL_API_KEY") as exc_info:
                RelayConfig().require_valid()
            assert exc_info.value.errors

    def test_require_valid_returns_config(self, relay_config):
        assert relay_config.require_valid() is relay_config

    def test_readiness_wait(self):
        with patch.dict(os.environ, {"MAX_RETRIES": "4", "RETRY_DELAY": "500"}, clear=True):
            config = RelayConfig()
            assert config.readiness_wait_ms == 4 * 500 + 60000
            assert config.to_dict()["readiness_wait_ms"] == 62000

    def test_to_dict_no_secrets(self):
        with patch.dict(os.environ, {"RECALL_API_KEY": "secret-value"}, clear=True):
            d = RelayConfig().to_dict()
            assert "secret-value" not in str(d)
            assert d["configured"] is True

    def test_singleton(self):
        reset_relay_config()
        try:
            assert get_relay_config() is get_relay_config()
        finally:
            reset_relay_config()
