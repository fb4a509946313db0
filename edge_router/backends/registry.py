"""
Backend registry and binding-name derivation.
"""
import logging
from typing import Dict, List, Mapping, Optional, Union

from ..models import Tier
from .base import Backend
from .http_backend import HttpBackend

logger = logging.getLogger(__name__)


def _tier_value(tier: Union[Tier, str]) -> str:
    return tier.value if isinstance(tier, Tier) else str(tier)


def binding_name(build_id: str, tier: Union[Tier, str]) -> str:
    """
    Dispatch identifier for a (build, tier) pair.

    binding_name("0.1.0-27", "lite") -> "APP_V0_1_0_27_LITE"
    """
    slug = build_id.replace(".", "_").replace("-", "_")
    return f"APP_V{slug}_{_tier_value(tier)}".upper()


def fallback_binding_name(tier: Union[Tier, str]) -> str:
    """Tier-level backend used when routing config is unavailable."""
    return f"APP_{_tier_value(tier)}".upper()


class BackendRegistry:
    """Looks up backends by binding name."""

    def __init__(self, backends: Optional[Mapping[str, Backend]] = None):
        self.backends: Dict[str, Backend] = dict(backends or {})

    @classmethod
    def from_urls(cls, urls: Mapping[str, str], timeout: float = 30.0) -> "BackendRegistry":
        """Build a registry of HttpBackends from binding name -> base URL."""
        registry = cls()
        for name, base_url in urls.items():
            registry.register(HttpBackend(name=name, base_url=base_url, timeout=timeout))
        return registry

    def register(self, backend: Backend) -> None:
        self.backends[backend.name] = backend
        logger.info(f"Registered backend: {backend.name}")

    def resolve_backend(self, name: str) -> Optional[Backend]:
        """Return the backend bound to name, or None if it is not deployed."""
        return self.backends.get(name)

    def list_backends(self) -> List[str]:
        """List all registered binding names."""
        return list(self.backends.keys())

    async def close(self) -> None:
        for backend in self.backends.values():
            try:
                await backend.close()
            except Exception as exc:
                logger.error(f"Failed to close backend {backend.name}: {exc}", exc_info=True)
