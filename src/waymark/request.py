"""
Request data read from the host environment.

The router itself never looks at ambient request state; these helpers
supply the method and path from an ASGI scope when a caller leaves them
out of ``Router.dispatch``.
"""

from collections.abc import Mapping
from functools import cached_property

from waymark.types import RequestSource, Scope


class Request:
    """Read-only view of the parts of an ASGI scope the router needs."""

    def __init__(self, scope: Scope) -> None:
        self._scope = scope

    @property
    def method(self) -> str:
        """HTTP method (GET, POST, etc.)."""
        return self._scope.get("method", "GET").upper()

    @property
    def path(self) -> str:
        """Request path, as decoded by the server."""
        return self._scope.get("path", "/")

    @cached_property
    def headers(self) -> Mapping[str, str]:
        """Request headers as a dictionary."""
        headers: dict[str, str] = {}
        for name, value in self._scope.get("headers", []):
            headers[name.decode("latin-1").lower()] = value.decode("latin-1")
        return headers

    @property
    def client(self) -> tuple[str, int] | None:
        client = self._scope.get("client")
        return tuple(client) if client else None  # type: ignore[return-value]


def scope_request_source(scope: Scope) -> RequestSource:
    """Build a ``Router(request_source=...)`` collaborator for one scope."""
    request = Request(scope)

    def source() -> tuple[str, str]:
        return request.method, request.path

    return source
