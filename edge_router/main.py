"""
Edge Router - version-aware request routing
Main FastAPI application: every request is routed to a deployed build/tier.
"""
import hmac
import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .backends import BackendRegistry
from .config import settings
from .models import RoutingConfig, RoutingConfigUpdate, is_build_id, validate_for_write
from .orchestrator import ROUTING_CONFIG_UNAVAILABLE, RequestOrchestrator, error_response
from .store import (
    CachedConfigStore,
    ConfigUnavailableError,
    FileConfigStore,
    SqliteConfigStore,
    UnavailableConfigStore,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(settings.log_file) if settings.log_file else logging.StreamHandler(),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Global instances, built in lifespan
config_store: Optional[CachedConfigStore] = None
backend_registry: Optional[BackendRegistry] = None
orchestrator: Optional[RequestOrchestrator] = None


def build_config_store() -> CachedConfigStore:
    """Create the configured store behind a short read cache."""
    if settings.config_store == "file":
        store = FileConfigStore(settings.config_file_path)
    elif settings.config_store == "sqlite":
        store = SqliteConfigStore(db_path=settings.config_db_path, config_key=settings.config_key)
    else:
        raise ValueError(f"Unknown config store: {settings.config_store!r}")
    return CachedConfigStore(store, ttl=settings.config_cache_ttl_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global config_store, backend_registry, orchestrator

    # Startup
    logger.info("Starting Edge Router...")

    try:
        config_store = build_config_store()
        logger.info(f"Config store initialized: {settings.config_store}")
    except (ValueError, ConfigUnavailableError) as exc:
        # Requests still reach the tier fallback backends
        logger.error(f"Failed to initialize config store: {exc}", exc_info=True)
        config_store = CachedConfigStore(UnavailableConfigStore(str(exc)), ttl=0)

    backend_registry = BackendRegistry.from_urls(
        settings.backends, timeout=settings.upstream_timeout_seconds
    )
    logger.info(f"Registered {len(backend_registry.list_backends())} backends")

    orchestrator = RequestOrchestrator(config_store, backend_registry)

    yield

    # Shutdown
    logger.info("Shutting down Edge Router...")
    if backend_registry:
        await backend_registry.close()


app = FastAPI(
    title="Edge Router",
    description="Version-aware request router",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


# Admin Endpoints

admin = APIRouter(prefix=settings.admin_prefix)


def _authorized(request: Request) -> bool:
    """Bearer token check. Writes are refused when no token is configured."""
    if not settings.admin_token:
        return False
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), settings.admin_token.encode("utf-8"))


@admin.get("/health")
async def health_check():
    """Health check: can the config store be read?"""
    if not config_store:
        return JSONResponse({"status": "degraded"}, status_code=503)
    try:
        await config_store.load_fresh()
    except ConfigUnavailableError as exc:
        logger.warning(f"Health check failed: {exc}")
        return JSONResponse({"status": "degraded"}, status_code=503)
    return {"status": "ok", "backends": len(backend_registry.list_backends()) if backend_registry else 0}


@admin.get("/config")
async def get_config():
    """Current stored routing config, or the empty config."""
    if not config_store:
        return error_response(ROUTING_CONFIG_UNAVAILABLE, 503)
    try:
        config = await config_store.load_fresh()
    except ConfigUnavailableError as exc:
        logger.error(f"Failed to read routing config: {exc}")
        return error_response(ROUTING_CONFIG_UNAVAILABLE, 503)
    return (config or RoutingConfig.empty()).to_wire()


@admin.put("/config")
async def put_config(request: Request):
    """
    Replace the routing config.

    - Requires a bearer token matching EDGE_ROUTER_ADMIN_TOKEN.
    - Requires default and activeVersions; rejects malformed build ids or overrides.
    - When the default changes, the old default is kept as previousDefault.
    """
    if not _authorized(request):
        return error_response("unauthorized", 401)
    if not config_store:
        return error_response(ROUTING_CONFIG_UNAVAILABLE, 503)

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response("invalid_json", 400)

    try:
        submitted = RoutingConfigUpdate.model_validate(body)
    except ValidationError:
        return error_response("invalid_config", 400)

    problems = validate_for_write(submitted)
    if problems:
        logger.warning(f"Rejected routing config: {problems}")
        return JSONResponse({"error": "invalid_config", "details": problems}, status_code=400)

    try:
        previous = await config_store.load_fresh()
        previous_default = submitted.previous_default
        if previous and is_build_id(previous.default) and previous.default != submitted.default:
            previous_default = previous.default

        config = RoutingConfig(
            default=submitted.default,
            previous_default=previous_default,
            overrides=submitted.overrides or [],
            active_versions=submitted.active_versions,
        )
        await config_store.save_config(config)
    except ConfigUnavailableError as exc:
        logger.error(f"Failed to write routing config: {exc}", exc_info=True)
        return error_response(ROUTING_CONFIG_UNAVAILABLE, 503)

    return config.to_wire()


if settings.admin_enabled:
    app.include_router(admin)


# Routed traffic

@app.api_route("/{full_path:path}", methods=PROXY_METHODS)
async def route_request(request: Request, full_path: str):
    """Route any other request to the build/tier chosen for it."""
    if not orchestrator:
        return error_response(ROUTING_CONFIG_UNAVAILABLE, 503)
    return await orchestrator.handle(request)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "edge_router.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload
    )
