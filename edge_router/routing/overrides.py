"""
Version-range overrides: force a specific build on versioned callers.
"""
import logging
from typing import Optional

from ..models import RoutingConfig
from .semver import semver_satisfies

logger = logging.getLogger(__name__)


def resolve_override(config: RoutingConfig, caller_version: Optional[str]) -> Optional[str]:
    """
    Return the target build of the first override whose range matches.

    Overrides are evaluated in declaration order; first match wins and later
    entries are never consulted.
    """
    if not caller_version or not config.overrides:
        return None

    for rule in config.overrides:
        if semver_satisfies(caller_version, rule.range):
            logger.debug(f"Override {rule.range!r} matched caller {caller_version} -> {rule.target_build_id}")
            return rule.target_build_id
    return None
