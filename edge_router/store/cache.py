"""
Short-lived read cache in front of a config store.
"""
import asyncio
import logging
import time
from typing import Callable, Optional

from ..models import RoutingConfig

logger = logging.getLogger(__name__)


class CachedConfigStore:
    """
    Caches get_config() results (including "nothing stored") for ttl seconds.

    Errors are not cached: a failed read is retried on the next request.
    """

    def __init__(self, store, ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.store = store
        self.ttl = ttl
        self._clock = clock
        self._value: Optional[RoutingConfig] = None
        self._expires_at: Optional[float] = None

    def invalidate(self) -> None:
        self._expires_at = None
        self._value = None

    async def get_config(self) -> Optional[RoutingConfig]:
        now = self._clock()
        if self._expires_at is not None and now < self._expires_at:
            return self._value

        value = await self.store.get_config()
        self._value = value
        self._expires_at = now + self.ttl
        return value

    async def save_config(self, config: RoutingConfig) -> None:
        """Persist through to the underlying store and drop the cached copy."""
        await asyncio.to_thread(self.store.save_config, config)
        self.invalidate()
        logger.info(f"Routing config updated: default={config.default or '<none>'}")

    async def load_fresh(self) -> Optional[RoutingConfig]:
        """Read straight from the underlying store, bypassing the cache."""
        return await self.store.get_config()
