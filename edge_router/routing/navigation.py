"""
Tier resolution and navigation classification.
"""
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlsplit

from ..models import Tier

# Query parameters that (re)negotiate routing
ROUTING_PARAMS = ("build", "type", "pin")


def query_params(url: Any) -> Dict[str, str]:
    """Query parameters of url; the first occurrence of a name wins."""
    params: Dict[str, str] = {}
    for name, value in parse_qsl(urlsplit(str(url)).query, keep_blank_values=True):
        params.setdefault(name, value)
    return params


def url_path(url: Any) -> str:
    return urlsplit(str(url)).path or "/"


def resolve_tier(type_param: Optional[str], cookie_tier: Optional[Union[Tier, str]] = None) -> Tier:
    """
    Pick the tier for a request.

    An explicit valid ?type= wins, then the cookie's tier, then lite.
    Garbage values are ignored rather than rejected.
    """
    explicit = Tier.parse(type_param)
    if explicit is not None:
        return explicit
    from_cookie = Tier.parse(cookie_tier)
    if from_cookie is not None:
        return from_cookie
    return Tier.LITE


def _has_file_extension(path: str) -> bool:
    last_segment = path.rsplit("/", 1)[-1]
    return "." in last_segment


def is_navigation(headers: Mapping[str, str], url: Any) -> bool:
    """
    Classify a request as a top-level page load.

    Only navigations may renegotiate routing and refresh the sticky cookie;
    asset fetches stay on whatever served the enclosing page.
    """
    params = query_params(url)
    if any(name in params for name in ROUTING_PARAMS):
        return True

    path = url_path(url)
    if path == "/":
        return True

    accept = (headers.get("accept") or "").lower()
    return not _has_file_extension(path) and "text/html" in accept
