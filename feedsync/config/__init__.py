"""Configuration package exports."""

from .loader import DEFAULT_CONFIG_PATH, load_config, resolve_config_path
from .models import (
    CleanConfig,
    FeedConfig,
    FetchSettings,
    PropertyNames,
    StoreSettings,
    SyncConfig,
)

__all__ = [
    "CleanConfig",
    "DEFAULT_CONFIG_PATH",
    "FeedConfig",
    "FetchSettings",
    "PropertyNames",
    "StoreSettings",
    "SyncConfig",
    "load_config",
    "resolve_config_path",
]
