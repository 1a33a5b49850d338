"""Tests for ServiceSettings — env-driven process settings."""

import logging

import pytest

from servicekit.config.settings import ServiceSettings, get_settings


class TestServiceSettingsDefaults:
    def test_all_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("VERBOSE", "LOG_JSON", "VALIDATION_MESSAGES"):
            monkeypatch.delenv(f"SERVICEKIT_{name}", raising=False)
        settings = ServiceSettings()
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.validation_messages == "first"

    def test_frozen(self) -> None:
        settings = ServiceSettings()
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestEnvSource:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICEKIT_VERBOSE", "1")
        monkeypatch.setenv("SERVICEKIT_VALIDATION_MESSAGES", "all")
        settings = ServiceSettings()
        assert settings.verbose is True
        assert settings.validation_messages == "all"

    def test_init_kwargs_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICEKIT_LOG_JSON", "true")
        assert ServiceSettings(log_json=False).log_json is False

    def test_invalid_mode_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICEKIT_VALIDATION_MESSAGES", "some")
        with pytest.raises(ValueError):
            ServiceSettings()


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SERVICEKIT_VALIDATION_MESSAGES", raising=False)
        assert get_settings().validation_messages == "first"
        monkeypatch.setenv("SERVICEKIT_VALIDATION_MESSAGES", "all")
        get_settings.cache_clear()
        assert get_settings().validation_messages == "all"


class TestConfigureLoggingFromSettings:
    def test_applies_verbosity(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        svc = logging.getLogger("servicekit")
        original_level = svc.level
        try:
            ServiceSettings(verbose=True).configure_logging()
            assert svc.level == logging.DEBUG
        finally:
            root.handlers = original_handlers
            svc.setLevel(original_level)
