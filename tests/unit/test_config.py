"""Tests for settings and logging setup."""

import pytest
from pydantic import ValidationError

from lineup_rotation.config import AppSettings, LogFormat, get_settings
from lineup_rotation.rotation_logging import configure_logging, get_logger, log_timing


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()

        assert settings.BALANCE_TOLERANCE == 0.05
        assert settings.ENABLE_BALANCING is True
        assert settings.DEFAULT_MINUTES_PER_HALF == 30
        assert settings.DEFAULT_MAX_SIMULTANEOUS_SUBS == 2

    def test_unknown_variables_are_ignored(self, monkeypatch):
        """Stray environment switches such as ENV have no setting to land in."""
        monkeypatch.setenv("ENV", "PROD")

        settings = AppSettings(ENV="staging")

        assert not hasattr(settings, "ENV")
        assert settings.LOG_LEVEL == "INFO"

    def test_log_level_normalized(self):
        assert AppSettings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(LOG_LEVEL="verbose")

    def test_log_format_case_insensitive(self):
        assert AppSettings(LOG_FORMAT="JSON").LOG_FORMAT == LogFormat.JSON

    def test_tolerance_bounds(self):
        with pytest.raises(ValidationError):
            AppSettings(BALANCE_TOLERANCE=0)
        with pytest.raises(ValidationError):
            AppSettings(BALANCE_TOLERANCE=1.5)

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("BALANCE_TOLERANCE", "0.1")
        monkeypatch.setenv("enable_balancing", "false")

        settings = get_settings()

        assert settings.BALANCE_TOLERANCE == 0.1
        assert settings.ENABLE_BALANCING is False

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    def test_configure_and_log(self):
        configure_logging(level="DEBUG", log_format=LogFormat.JSON)
        get_logger(__name__).debug("configured", check=True)
        configure_logging()

    def test_log_timing_returns_result(self):
        @log_timing("double")
        def double(x):
            return x * 2

        assert double(4) == 8
        assert double.__name__ == "double"

    def test_log_timing_reraises(self):
        @log_timing()
        def boom():
            raise ValueError("nope")

        with pytest.raises(ValueError, match="nope"):
            boom()
