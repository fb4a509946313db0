"""
Request orchestration: config -> route -> backend -> response.

One call to handle() per inbound request. No state is carried between
requests other than what the config store itself caches.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .backends import BackendRegistry, BackendUnavailableError, binding_name, fallback_binding_name
from .models import ErrorBody, Route, StickyCookie
from .routing import is_navigation, parse_cookie, resolve_route, resolve_tier, set_cookie_header
from .routing.navigation import query_params
from .store import ConfigStore, ConfigUnavailableError

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("edge_router.access")

ROUTING_CONFIG_UNAVAILABLE = "routing_config_unavailable"
NO_DEFAULT_VERSION_CONFIGURED = "no_default_version_configured"
VERSION_NOT_AVAILABLE = "version_not_available"


def error_response(code: str, status: int) -> JSONResponse:
    """Uniform JSON error envelope."""
    return JSONResponse(ErrorBody(error=code).model_dump(), status_code=status)


def should_refresh_cookie(navigation: bool, cookie: Optional[StickyCookie], route: Route) -> bool:
    """A navigation, a missing cookie or a cookie for another (build, tier) gets a new cookie."""
    if navigation or cookie is None:
        return True
    return cookie.build_id != route.build_id or cookie.tier != route.tier


def _colo_from_ray(ray: Optional[str]) -> Optional[str]:
    # cf-ray looks like "8a1b2c3d4e5f6a7b-SJC"
    if not ray or "-" not in ray:
        return None
    return ray.rsplit("-", 1)[1] or None


class RequestOrchestrator:
    """Entry point that turns an inbound request into a backend response."""

    def __init__(self, config_store: ConfigStore, registry: BackendRegistry):
        self.config_store = config_store
        self.registry = registry

    async def handle(self, request: Request) -> Response:
        url = request.url
        params = query_params(url)
        cookie = parse_cookie(request.headers.get("cookie"))
        navigation = is_navigation(request.headers, url)
        record = self._base_record(request, params, navigation)

        try:
            config = await self.config_store.get_config()
        except ConfigUnavailableError as exc:
            logger.warning(f"Routing config unavailable, using tier fallback: {exc}")
            config = None

        if config is None:
            return await self._handle_fallback(request, params, cookie, record)

        route = resolve_route(config, url, cookie, navigation)
        if route is None:
            record["error"] = NO_DEFAULT_VERSION_CONFIGURED
            self._emit(record)
            return error_response(NO_DEFAULT_VERSION_CONFIGURED, 503)

        name = binding_name(route.build_id, route.tier)
        record.update(self._route_fields(route, name))
        backend = self.registry.resolve_backend(name)
        if backend is None:
            logger.error(f"No backend bound to {name} (source={route.source})")
            record["error"] = VERSION_NOT_AVAILABLE
            self._emit(record)
            return error_response(VERSION_NOT_AVAILABLE, 502)

        self._emit(record)
        try:
            response = await backend.forward(request)
        except BackendUnavailableError as exc:
            logger.error(f"Dispatch to {name} failed: {exc}")
            return error_response(VERSION_NOT_AVAILABLE, 502)

        if should_refresh_cookie(navigation, cookie, route):
            response.headers.append("set-cookie", set_cookie_header(route.build_id, route.tier))
        return response

    async def _handle_fallback(
        self,
        request: Request,
        params: Dict[str, str],
        cookie: Optional[StickyCookie],
        record: Dict[str, Any],
    ) -> Response:
        """No config: route by tier alone. Never sets the sticky cookie."""
        tier = resolve_tier(params.get("type"), cookie.tier if cookie else None)
        name = fallback_binding_name(tier)
        route = Route(build_id=None, tier=tier, source="fallback")
        record.update(self._route_fields(route, name))

        backend = self.registry.resolve_backend(name)
        if backend is None:
            logger.error(f"Routing config unavailable and no fallback backend {name}")
            record["error"] = ROUTING_CONFIG_UNAVAILABLE
            self._emit(record)
            return error_response(ROUTING_CONFIG_UNAVAILABLE, 503)

        self._emit(record)
        try:
            return await backend.forward(request)
        except BackendUnavailableError as exc:
            logger.error(f"Dispatch to fallback {name} failed: {exc}")
            return error_response(VERSION_NOT_AVAILABLE, 502)

    @staticmethod
    def _base_record(request: Request, params: Dict[str, str], navigation: bool) -> Dict[str, Any]:
        headers = request.headers
        return {
            "url": request.url.path,
            "method": request.method,
            "build": params.get("build"),
            "type": params.get("type"),
            "pin": params.get("pin"),
            "machineId": params.get("machineId"),
            "userAgent": headers.get("user-agent"),
            "country": headers.get("cf-ipcountry"),
            "colo": _colo_from_ray(headers.get("cf-ray")),
            "navigation": navigation,
            "source": None,
            "buildId": None,
            "tier": None,
            "binding": None,
            "ts": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def _route_fields(route: Route, name: str) -> Dict[str, Any]:
        return {
            "source": route.source,
            "buildId": route.build_id,
            "tier": route.tier.value,
            "binding": name,
        }

    @staticmethod
    def _emit(record: Dict[str, Any]) -> None:
        access_logger.info(json.dumps(record))
