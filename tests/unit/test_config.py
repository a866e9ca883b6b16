"""
Unit tests for application settings.
"""

import pytest

from config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove story-trainer variables so defaults apply."""
    for name in ("STORY_WORKER_URL", "LOG_LEVEL", "LOG_FILE", "RETRY_ATTEMPTS", "REQUEST_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)


class TestSettingsDefaults:

    def test_log_level_defaults_to_warning(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.log_level == "WARNING"
        assert settings.log_file is None

    def test_story_client_config(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.has_ai_configured() is True
        assert settings.get_story_client_config() == {
            "api_url": settings.story_worker_url,
            "timeout_ms": 15000,
            "retry_attempts": 2,
            "backoff_seconds": 1.0,
        }

    def test_empty_worker_url_disables_ai(self, clean_env, monkeypatch):
        monkeypatch.setenv("STORY_WORKER_URL", "  ")

        assert Settings(_env_file=None).has_ai_configured() is False
