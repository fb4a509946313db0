"""
Backend layer: named handles for deployed app builds.
"""
from .base import Backend, BackendUnavailableError
from .http_backend import HttpBackend
from .registry import BackendRegistry, binding_name, fallback_binding_name

__all__ = [
    "Backend",
    "BackendRegistry",
    "BackendUnavailableError",
    "HttpBackend",
    "binding_name",
    "fallback_binding_name",
]
