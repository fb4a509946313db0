"""
HTTP backend: forwards requests to an upstream base URL.
"""
import asyncio
import logging
from typing import Optional

import aiohttp
from multidict import CIMultiDict
from starlette.requests import Request
from starlette.responses import Response

from .base import Backend, BackendUnavailableError

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
})

# Recomputed by the server for the body we relay
_RESPONSE_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"content-length"}


class HttpBackend(Backend):
    """Backend reached over HTTP via a shared aiohttp session."""

    def __init__(self, name: str, base_url: str, timeout: float = 30.0):
        super().__init__(name)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                base_url=self.base_url,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                auto_decompress=False,
            )
        return self.session

    async def close(self) -> None:
        """Close aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def forward(self, request: Request) -> Response:
        """Replay the request against the upstream and relay its response."""
        # Repeated headers keep every value
        headers = CIMultiDict(
            (key, value)
            for key, value in request.headers.items()
            if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() != "host"
        )
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        body = await request.body()

        try:
            session = await self._get_session()
            async with session.request(
                request.method,
                target,
                headers=headers,
                data=body or None,
                allow_redirects=False,
            ) as upstream:
                content = await upstream.read()
                response = Response(content=content, status_code=upstream.status)
                for key, value in upstream.headers.items():
                    if key.lower() not in _RESPONSE_SKIP_HEADERS:
                        response.headers.append(key, value)
                # HEAD has no body to measure; report the upstream's length
                if request.method == "HEAD" and "content-length" in upstream.headers:
                    response.headers["content-length"] = upstream.headers["content-length"]
                return response
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Forwarding to {self.name} ({self.base_url}) failed: {e}")
            raise BackendUnavailableError(self.name, str(e)) from e
