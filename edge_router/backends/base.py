"""
Base backend layer.
All backends that can serve a routed request should inherit from Backend.
"""
from abc import ABC, abstractmethod

from starlette.requests import Request
from starlette.responses import Response


class BackendUnavailableError(Exception):
    """Raised when a backend cannot be reached at all (no response)."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Backend {name} unavailable: {reason}")


class Backend(ABC):
    """Abstract base class for routed backends."""

    def __init__(self, name: str):
        """Initialize backend with its binding name."""
        self.name = name

    @abstractmethod
    async def forward(self, request: Request) -> Response:
        """
        Forward a request verbatim and return the backend's response.

        Upstream error statuses are returned as-is, not raised.

        Raises:
            BackendUnavailableError: if no response could be obtained
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
