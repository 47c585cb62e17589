"""Configuration package."""

from vola.config.settings import (
    AppSettings,
    GeminiSettings,
    HistorySettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GeminiSettings",
    "HistorySettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
