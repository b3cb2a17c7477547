"""
Configuration package for the Grätzlmap backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    StorageSettings,
    I18nSettings,
    MapSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "StorageSettings",
    "I18nSettings",
    "MapSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
