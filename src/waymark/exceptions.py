"""
Waymark exceptions.

Routing outcomes (``NotFound``, ``MethodNotAllowed``) are HTTP exceptions that
the dispatcher turns into fallback responses. Everything under
``RoutingError`` is a registration mistake and always reaches the caller.
"""


class WaymarkException(Exception):
    """Base exception for all Waymark errors."""

    def __init__(self, message: str = "An error occurred") -> None:
        self.message = message
        super().__init__(self.message)


class HTTPException(WaymarkException):
    """HTTP-related exceptions with status codes."""

    def __init__(
        self,
        status_code: int = 500,
        detail: str = "Internal Server Error",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.headers = headers or {}
        super().__init__(detail)


class NotFound(HTTPException):
    """404 Not Found."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(404, detail)


class MethodNotAllowed(HTTPException):
    """405 Method Not Allowed."""

    def __init__(self, detail: str = "Method Not Allowed") -> None:
        super().__init__(405, detail)


class RoutingError(WaymarkException):
    """Routing-related errors."""
    pass


class ControllerNotFound(RoutingError):
    """A callback descriptor names a target that cannot be resolved."""
    pass


class UndefinedFilter(RoutingError):
    """A route references a before-filter that was never registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Undefined filter '{name}'")


class MissingRouteParameter(RoutingError):
    """Reverse routing ran out of arguments for a required placeholder."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing route parameters for route '{name}'")


class InvalidConfiguration(WaymarkException, TypeError):
    """A config setter received neither a string key nor a mapping."""
    pass
