"""
Route resolution engine.

Precedence, first applicable rule wins:
    1. cookie    - non-navigation requests with a cookie for an active build
    2. pin       - ?pin=<buildId>; an unusable pin yields no route at all
    3. override  - ?build=<MAJOR.MINOR.PATCH> matched against config.overrides
    4. default   - config.default
"""
import logging
from typing import Any, Optional

from ..models import Route, RoutingConfig, StickyCookie, is_build_id
from .navigation import query_params, resolve_tier
from .overrides import resolve_override
from .semver import parse_version

logger = logging.getLogger(__name__)


def resolve_route(
    config: RoutingConfig,
    url: Any,
    cookie: Optional[StickyCookie],
    navigation: bool,
) -> Optional[Route]:
    """
    Decide which (build, tier) should serve a request.

    Returns None when no route can be produced: either an explicit pin
    names a build that is malformed or not active, or no usable default is
    configured. Never raises.
    """
    if not navigation and cookie is not None and cookie.build_id in config.active_versions:
        return Route(build_id=cookie.build_id, tier=cookie.tier, source="cookie")

    params = query_params(url)
    cookie_tier = cookie.tier if cookie is not None else None
    tier = resolve_tier(params.get("type"), cookie_tier)

    if "pin" in params:
        pin = params["pin"]
        if is_build_id(pin) and pin in config.active_versions:
            return Route(build_id=pin, tier=tier, source="pin")
        logger.info(f"Rejecting pin {pin!r}: not an active build")
        return None

    caller_version = params.get("build")
    if parse_version(caller_version) is None:
        caller_version = None
    target = resolve_override(config, caller_version)
    if target is not None:
        if is_build_id(target):
            return Route(build_id=target, tier=tier, source="override")
        logger.warning(f"Ignoring override target {target!r}: not a build id")

    if config.default and is_build_id(config.default):
        return Route(build_id=config.default, tier=tier, source="default")

    return None
