"""
Unit tests for application settings.
"""

import pytest

from jobboard.config import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("API_PORT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_port == 3000
        assert settings.default_queues == ["ExampleBullMQ", "ErrorExampleBullMQ"]
        assert settings.error_queue_name == "ErrorExampleBullMQ"

    @pytest.mark.parametrize("variable", ["PORT", "API_PORT"])
    def test_port_from_environment(self, monkeypatch: pytest.MonkeyPatch, variable: str):
        monkeypatch.setenv(variable, "4000")

        assert Settings(_env_file=None).api_port == 4000

    def test_queue_lists_from_json(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DEFAULT_QUEUES", '["Reports", "Emails"]')

        assert Settings(_env_file=None).default_queues == ["Reports", "Emails"]

    def test_redis_url(self):
        settings = Settings(_env_file=None, redis_host="cache", redis_port=6380, redis_db=2)

        assert settings.redis_url == "redis://cache:6380/2"
        assert settings.redis_url_masked == settings.redis_url

    def test_redis_url_with_password_and_tls(self):
        settings = Settings(
            _env_file=None,
            redis_host="cache",
            redis_password="s3cret",
            redis_tls=True,
        )

        assert settings.redis_url == "rediss://:s3cret@cache:6379/0"
        assert settings.redis_url_masked == "rediss://:***@cache:6379/0"
