"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from vola.config import (
    AppSettings,
    GeminiSettings,
    HistorySettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def clean_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGeminiSettings:
    """Tests for GeminiSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GEMINI_MODEL_NAME", raising=False)
        monkeypatch.delenv("GEMINI_TEMPERATURE", raising=False)
        settings = GeminiSettings()

        assert settings.model_name == "gemini-3-flash-preview"
        assert settings.temperature == 0.2

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-other")

        settings = GeminiSettings()

        assert settings.api_key == "secret"
        assert settings.model_name == "gemini-other"

    def test_temperature_range(self, monkeypatch):
        monkeypatch.setenv("GEMINI_TEMPERATURE", "1.5")

        with pytest.raises(ValidationError):
            GeminiSettings()


class TestHistorySettings:
    """Tests for HistorySettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HISTORY_STORAGE_KEY", raising=False)
        monkeypatch.delenv("HISTORY_MAX_ENTRIES", raising=False)
        settings = HistorySettings()

        assert settings.storage_key == "vola_audit_history"
        assert settings.max_entries == 50

    def test_data_dir_expands_home(self, monkeypatch):
        monkeypatch.setenv("HISTORY_DATA_DIR", "~/vola-data")

        settings = HistorySettings()

        assert settings.data_dir == Path.home() / "vola-data"

    def test_storage_key_rejects_separators(self, monkeypatch):
        monkeypatch.setenv("HISTORY_STORAGE_KEY", "../escape")

        with pytest.raises(ValidationError):
            HistorySettings()

    def test_max_entries_positive(self, monkeypatch):
        monkeypatch.setenv("HISTORY_MAX_ENTRIES", "0")

        with pytest.raises(ValidationError):
            HistorySettings()


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        with pytest.raises(ValidationError):
            AppSettings()

    def test_debug_mode_overrides_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("DEBUG_MODE", "true")

        assert AppSettings().effective_log_level == "DEBUG"

    def test_log_level_used_without_debug_mode(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("DEBUG_MODE", "false")

        assert AppSettings().effective_log_level == "WARNING"

    def test_upload_size_in_bytes(self, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "2")
        assert AppSettings().max_upload_size_bytes == 2 * 1024 * 1024


class TestValidateAllSettings:
    """Tests for validate_all_settings."""

    def test_missing_api_key_is_reported(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "")

        results = validate_all_settings()

        assert results["gemini"] is False
        assert results["gemini_error"] == "GEMINI_API_KEY is not set"
        assert results["history"] is True

    def test_all_valid(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")

        results = validate_all_settings()

        assert results == {"gemini": True, "history": True, "app": True}

    def test_invalid_group_is_reported(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        monkeypatch.setenv("HISTORY_MAX_ENTRIES", "-1")

        results = validate_all_settings()

        assert results["history"] is False
        assert "history_error" in results
