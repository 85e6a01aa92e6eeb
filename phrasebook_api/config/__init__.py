"""
Configuration package for the Arabic Phrasebook Backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    StorageBackend,
    OpenAISettings,
    RedisSettings,
    SyncSettings,
    SecuritySettings,
    ImageSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "StorageBackend",
    "OpenAISettings",
    "RedisSettings",
    "SyncSettings",
    "SecuritySettings",
    "ImageSettings",
    "get_settings",
    "reload_settings",
]
