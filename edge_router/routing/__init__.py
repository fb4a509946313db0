"""
Routing module.

Pure, total functions that map (request, cookie, config) to a route.
None of them raise on malformed input; bad values read as absent.
"""
from .cookie import COOKIE_NAME, parse_cookie, set_cookie_header
from .semver import parse_version, semver_satisfies
from .overrides import resolve_override
from .navigation import ROUTING_PARAMS, is_navigation, resolve_tier
from .resolver import resolve_route

__all__ = [
    "COOKIE_NAME",
    "ROUTING_PARAMS",
    "is_navigation",
    "parse_cookie",
    "parse_version",
    "resolve_override",
    "resolve_route",
    "resolve_tier",
    "semver_satisfies",
    "set_cookie_header",
]
