"""Tests for environment-driven configuration."""

import pytest

from retry_kit.config import ConfigError, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("RETRYKIT_MAX_ATTEMPTS", "RETRYKIT_SUCCESS_RATE", "RETRYKIT_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    # Keep a stray .env in the working directory out of the picture
    monkeypatch.chdir(tmp_path)


class TestLoadConfig:

    def test_defaults(self):
        config = load_config()
        assert config.max_attempts == 10
        assert config.success_rate == 0.5
        assert config.log_level == "WARNING"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("RETRYKIT_MAX_ATTEMPTS", "3")
        monkeypatch.setenv("RETRYKIT_SUCCESS_RATE", "0.25")
        monkeypatch.setenv("RETRYKIT_LOG_LEVEL", "debug")
        config = load_config()
        assert config.max_attempts == 3
        assert config.success_rate == 0.25
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["zero", "0", "-4"])
    def test_bad_max_attempts(self, monkeypatch, value):
        monkeypatch.setenv("RETRYKIT_MAX_ATTEMPTS", value)
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert "RETRYKIT_MAX_ATTEMPTS" in str(exc_info.value)

    @pytest.mark.parametrize("value", ["often", "1.5", "-0.2"])
    def test_bad_success_rate(self, monkeypatch, value):
        monkeypatch.setenv("RETRYKIT_SUCCESS_RATE", value)
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert "RETRYKIT_SUCCESS_RATE" in str(exc_info.value)

    def test_all_errors_reported_together(self, monkeypatch):
        monkeypatch.setenv("RETRYKIT_MAX_ATTEMPTS", "x")
        monkeypatch.setenv("RETRYKIT_SUCCESS_RATE", "y")
        message = str(pytest.raises(ConfigError, load_config).value)
        assert "RETRYKIT_MAX_ATTEMPTS" in message
        assert "RETRYKIT_SUCCESS_RATE" in message

    @pytest.mark.parametrize("value", ["LOUD", "verbose", "10"])
    def test_bad_log_level(self, monkeypatch, value):
        """Unknown level names are a ConfigError, not a crash in logging setup."""
        monkeypatch.setenv("RETRYKIT_LOG_LEVEL", value)
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert "RETRYKIT_LOG_LEVEL" in str(exc_info.value)

    @pytest.mark.parametrize("value", ["info", "Error", "CRITICAL"])
    def test_log_level_is_case_insensitive(self, monkeypatch, value):
        monkeypatch.setenv("RETRYKIT_LOG_LEVEL", value)
        assert load_config().log_level == value.upper()
