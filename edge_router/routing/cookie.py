"""
Sticky routing cookie codec.

Wire format: app-version=<buildId>:<tier>
"""
from typing import Optional, Union

from ..models import StickyCookie, Tier, is_build_id

COOKIE_NAME = "app-version"
COOKIE_MAX_AGE = 7 * 24 * 60 * 60  # 604800 seconds


def parse_cookie(header: Optional[str]) -> Optional[StickyCookie]:
    """
    Extract the sticky routing cookie from a Cookie header.

    The value is split on its last colon. Anything that is not a valid
    build id plus a valid tier yields None; this never raises.
    """
    if not header:
        return None

    for pair in header.split(";"):
        name, sep, value = pair.strip().partition("=")
        if not sep or name.strip() != COOKIE_NAME:
            continue

        build_id, colon, tier_value = value.strip().rpartition(":")
        if not colon:
            return None
        tier = Tier.parse(tier_value)
        if tier is None or not is_build_id(build_id):
            return None
        return StickyCookie(build_id=build_id, tier=tier)

    return None


def set_cookie_header(build_id: str, tier: Union[Tier, str]) -> str:
    """Build the Set-Cookie value that pins a client to (build_id, tier)."""
    tier_value = tier.value if isinstance(tier, Tier) else tier
    return (
        f"{COOKIE_NAME}={build_id}:{tier_value}; Max-Age={COOKIE_MAX_AGE}; "
        "Path=/; HttpOnly; Secure; SameSite=Lax"
    )
