"""Tests for the config module."""

import os

import pytest

from error_reporter.config import Config, DEFAULT_ENRICHMENT_URL, load_config, _parse_bool

ENV_VARS = [
    "HOST", "PORT", "GEMINI_API_URL", "GEMINI_API_KEY", "ENRICHMENT_TIMEOUT_SECONDS",
    "RECOMMENDATION_WORD_LIMIT", "LOG_DIR", "LOG_FILENAME", "FSYNC_WRITES",
    "RATE_LIMIT_ENABLED", "RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SECONDS",
    "CORS_ORIGINS", "APP_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestParseBool:
    def test_true_values(self):
        for val in ("true", "True", "TRUE", "1", "yes", "YES", " true "):
            assert _parse_bool(val) is True

    def test_false_values(self):
        for val in ("false", "False", "0", "no", "", "random"):
            assert _parse_bool(val) is False


class TestConfigDefaults:
    def test_default_port(self):
        assert Config().port == 3000

    def test_default_rate_limit(self):
        cfg = Config()
        assert cfg.rate_limit_enabled is True
        assert cfg.rate_limit_max_requests == 100
        assert cfg.rate_limit_window_seconds == 60

    def test_no_credential_by_default(self):
        assert Config().enrichment_api_key == ""

    def test_default_endpoint(self):
        assert Config().enrichment_url == DEFAULT_ENRICHMENT_URL

    def test_log_path_joins_dir_and_filename(self):
        cfg = Config(log_dir="/var/log/reporter", log_filename="errors.jsonl")
        assert cfg.log_path == os.path.join("/var/log/reporter", "errors.jsonl")

    def test_frozen(self):
        cfg = Config()
        with pytest.raises(AttributeError):
            cfg.port = 8080


class TestLoadConfig:
    def test_defaults(self, clean_env):
        cfg = load_config()
        assert cfg.host == "0.0.0.0"
        assert cfg.port == 3000
        assert cfg.enrichment_url == DEFAULT_ENRICHMENT_URL
        assert cfg.enrichment_api_key == ""
        assert cfg.enrichment_timeout_seconds == 30.0
        assert cfg.recommendation_word_limit == 60
        assert cfg.log_dir == "."
        assert cfg.log_filename == "error.log"
        assert cfg.fsync_writes is False
        assert cfg.rate_limit_enabled is True
        assert cfg.cors_origins == "*"
        assert cfg.app_log_level == "INFO"

    def test_env_overrides(self, clean_env):
        overrides = {
            "HOST": "127.0.0.1",
            "PORT": "8080",
            "GEMINI_API_URL": "http://localhost:9999/generate",
            "GEMINI_API_KEY": "  secret  ",
            "ENRICHMENT_TIMEOUT_SECONDS": "2.5",
            "RECOMMENDATION_WORD_LIMIT": "40",
            "LOG_DIR": "/tmp/reporter",
            "LOG_FILENAME": "custom.log",
            "FSYNC_WRITES": "yes",
            "RATE_LIMIT_ENABLED": "0",
            "RATE_LIMIT_MAX_REQUESTS": "50",
            "RATE_LIMIT_WINDOW_SECONDS": "30",
            "CORS_ORIGINS": "https://app.test",
            "APP_LOG_LEVEL": "debug",
        }
        for name, value in overrides.items():
            clean_env.setenv(name, value)

        cfg = load_config()
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8080
        assert cfg.enrichment_url == "http://localhost:9999/generate"
        assert cfg.enrichment_api_key == "secret"
        assert cfg.enrichment_timeout_seconds == 2.5
        assert cfg.recommendation_word_limit == 40
        assert cfg.log_path == os.path.join("/tmp/reporter", "custom.log")
        assert cfg.fsync_writes is True
        assert cfg.rate_limit_enabled is False
        assert cfg.rate_limit_max_requests == 50
        assert cfg.rate_limit_window_seconds == 30
        assert cfg.cors_origins == "https://app.test"
        assert cfg.app_log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["-1", "-0.5"])
    def test_negative_timeout_means_unbounded(self, clean_env, value):
        clean_env.setenv("ENRICHMENT_TIMEOUT_SECONDS", value)
        assert load_config().enrichment_timeout_seconds == 0.0
