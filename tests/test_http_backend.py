"""
Integration tests for HttpBackend against a local aiohttp upstream.
"""
import gzip
import pytest
import pytest_asyncio
from unittest.mock import patch
from aiohttp import web
from httpx import AsyncClient, ASGITransport

from edge_router.backends import BackendRegistry, HttpBackend
from edge_router.main import app
from edge_router.orchestrator import RequestOrchestrator


@pytest_asyncio.fixture
async def upstream_url():
    """Run a small upstream app on an ephemeral port."""

    async def echo(request: web.Request) -> web.Response:
        body = await request.read()
        return web.json_response(
            {
                "method": request.method,
                "path": request.path,
                "query": request.query_string,
                "body": body.decode("utf-8"),
                "x_test": request.headers.get("x-test"),
                "forwarded_for": request.headers.getall("x-forwarded-for", []),
                "host": request.headers.get("host"),
            },
            headers={"x-upstream": "yes"},
        )

    async def sized(request: web.Request) -> web.Response:
        return web.Response(text="x" * 42)

    async def boom(request: web.Request) -> web.Response:
        return web.Response(status=500, text="boom")

    async def compressed(request: web.Request) -> web.Response:
        return web.Response(
            body=gzip.compress(b"packed"),
            headers={"content-encoding": "gzip", "content-type": "text/plain"},
        )

    upstream = web.Application()
    upstream.router.add_route("*", "/boom", boom)
    upstream.router.add_route("GET", "/packed.txt", compressed)
    upstream.router.add_get("/sized.txt", sized)
    upstream.router.add_route("*", "/{tail:.*}", echo)

    runner = web.AppRunner(upstream)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]

    yield f"http://{host}:{port}"

    await runner.cleanup()


@pytest_asyncio.fixture
async def routed(upstream_url, make_store, base_config):
    """Orchestrator whose default build is served by the local upstream."""
    registry = BackendRegistry.from_urls({"APP_V0_1_0_27_LITE": upstream_url}, timeout=5)
    yield RequestOrchestrator(make_store(base_config), registry)
    await registry.close()


async def _send(orchestrator, method, path, **kwargs):
    with patch("edge_router.main.orchestrator", orchestrator):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="https://example.com") as client:
            return await client.request(method, path, **kwargs)


@pytest.mark.asyncio
async def test_forwards_method_path_query_headers_and_body(routed):
    response = await _send(
        routed, "POST", "/api/items?page=2", content=b'{"a": 1}', headers={"x-test": "1"}
    )

    assert response.status_code == 200
    assert response.headers["x-upstream"] == "yes"
    data = response.json()
    assert data["method"] == "POST"
    assert data["path"] == "/api/items"
    assert data["query"] == "page=2"
    assert data["body"] == '{"a": 1}'
    assert data["x_test"] == "1"
    # Host header is rewritten for the upstream
    assert data["host"] != "example.com"
    assert "app-version=0.1.0-27:lite" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_upstream_error_status_passes_through(routed):
    response = await _send(routed, "GET", "/boom")

    assert response.status_code == 500
    assert response.text == "boom"


@pytest.mark.asyncio
async def test_encoded_body_relayed_unchanged(routed):
    response = await _send(routed, "GET", "/packed.txt")

    assert response.headers["content-encoding"] == "gzip"
    # httpx decodes gzip transparently
    assert response.text == "packed"


@pytest.mark.asyncio
async def test_unreachable_upstream_is_502(make_store):
    # Nothing listens on port 1
    registry = BackendRegistry({"APP_LITE": HttpBackend("APP_LITE", "http://127.0.0.1:1", timeout=2)})
    orchestrator = RequestOrchestrator(make_store(None), registry)
    try:
        response = await _send(orchestrator, "GET", "/")
    finally:
        await registry.close()

    assert response.status_code == 502
    assert response.json() == {"error": "version_not_available"}


@pytest.mark.asyncio
async def test_repeated_request_headers_keep_every_value(routed):
    response = await _send(
        routed,
        "GET",
        "/api/items",
        headers=[("x-forwarded-for", "1.1.1.1"), ("x-forwarded-for", "2.2.2.2")],
    )

    assert response.json()["forwarded_for"] == ["1.1.1.1", "2.2.2.2"]


@pytest.mark.asyncio
async def test_head_keeps_upstream_content_length(routed):
    response = await _send(routed, "HEAD", "/sized.txt")

    assert response.status_code == 200
    assert response.headers["content-length"] == "42"
    assert response.content == b""
