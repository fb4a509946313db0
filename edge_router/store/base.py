"""
Config store interface and payload decoding.
"""
import json
import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from ..models import RoutingConfig

logger = logging.getLogger(__name__)


class ConfigUnavailableError(Exception):
    """Raised when the backing store cannot be read or written."""


class ConfigStore(Protocol):
    """
    Read-only view of the routing config, as used by the router.

    Implementations may cache. None means "no config stored".
    """

    async def get_config(self) -> Optional[RoutingConfig]:
        """
        Fetch the current routing config.

        Raises:
            ConfigUnavailableError: if the store cannot be reached
        """
        ...


class UnavailableConfigStore:
    """Stand-in for a store that could not be built; every access fails."""

    def __init__(self, reason: str):
        self.reason = reason

    def save_config(self, config: RoutingConfig) -> None:
        raise ConfigUnavailableError(self.reason)

    async def get_config(self) -> Optional[RoutingConfig]:
        raise ConfigUnavailableError(self.reason)


def decode_config(raw: Optional[str]) -> Optional[RoutingConfig]:
    """
    Decode a stored JSON payload.

    A payload that is not JSON or not shaped like a routing config reads as
    absent; the caller falls back as if nothing were stored.
    """
    if raw is None:
        return None
    try:
        return RoutingConfig.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning(f"Ignoring invalid routing config payload: {exc}")
        return None


def encode_config(config: RoutingConfig) -> str:
    return json.dumps(config.to_wire(), separators=(",", ":"))
