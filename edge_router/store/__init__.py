"""
Routing config stores.
"""
from .base import ConfigStore, ConfigUnavailableError, UnavailableConfigStore, decode_config
from .kv_store import SqliteConfigStore
from .file_store import FileConfigStore
from .cache import CachedConfigStore

__all__ = [
    "CachedConfigStore",
    "ConfigStore",
    "ConfigUnavailableError",
    "FileConfigStore",
    "SqliteConfigStore",
    "UnavailableConfigStore",
    "decode_config",
]
