"""
Response types returned by route callbacks and the router's fallbacks.

Responses are plain values until an ASGI adapter sends them.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from waymark.types import Send


class Response(ABC):
    """Abstract base response class."""

    media_type: str = "text/plain"
    charset: str = "utf-8"

    def __init__(
        self,
        content: Any = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._headers: dict[str, str] = dict(headers or {})
        self._content = content

    @property
    def content(self) -> Any:
        return self._content

    @property
    def headers(self) -> dict[str, str]:
        return self._headers

    @property
    def content_type(self) -> str:
        """Full content type with charset."""
        if self.media_type.startswith("text/") or "json" in self.media_type:
            return f"{self.media_type}; charset={self.charset}"
        return self.media_type

    @abstractmethod
    def render(self) -> bytes:
        """Render the response body. Must be implemented by subclasses."""
        ...

    def set_header(self, name: str, value: str) -> "Response":
        """Set a response header. Returns self for chaining."""
        self._headers[name] = value
        return self

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        headers: list[tuple[bytes, bytes]] = [
            (b"content-type", self.content_type.encode("latin-1")),
        ]
        for name, value in self._headers.items():
            headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
        return headers

    async def __call__(self, send: Send, body: bytes | None = None) -> None:
        """Send the response via ASGI, rendering the body unless one is given."""
        if body is None:
            body = self.render()

        await send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": self._build_headers(),
        })

        await send({
            "type": "http.response.body",
            "body": body,
        })

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, content={self._content!r})"


class TextResponse(Response):
    """Plain text response."""

    media_type = "text/plain"

    def render(self) -> bytes:
        if self._content is None:
            return b""
        if isinstance(self._content, bytes):
            return self._content
        return str(self._content).encode(self.charset)

    def __str__(self) -> str:
        return self.render().decode(self.charset)


class JSONResponse(Response):
    """JSON response with automatic serialization."""

    media_type = "application/json"

    def render(self) -> bytes:
        if self._content is None:
            return b"null"
        return json.dumps(
            self._content,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode(self.charset)


class RedirectResponse(Response):
    """HTTP redirect response."""

    def __init__(
        self,
        url: str,
        status_code: int = 307,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(None, status_code, headers)
        self._headers["location"] = url

    @property
    def url(self) -> str:
        return self._headers["location"]

    def render(self) -> bytes:
        return b""
