"""
Before-filter registry and routing fallbacks.
"""

from waymark.response import TextResponse
from waymark.types import CallbackSpec


def default_not_found() -> TextResponse:
    return TextResponse("404 - Page not found", status_code=404)


def default_method_not_allowed() -> TextResponse:
    return TextResponse("405 - Method not allowed", status_code=405)


class FilterCollection:
    """
    Named before-filters plus the not-found and method-not-allowed callbacks.

    Callbacks are stored as registered; the router resolves them when they
    are about to run.
    """

    def __init__(self) -> None:
        self._filters: dict[str, CallbackSpec] = {}
        self._on_not_found: CallbackSpec | None = None
        self._on_method_not_allowed: CallbackSpec | None = None

    def add(self, name: str, callback: CallbackSpec) -> "FilterCollection":
        self._filters[name] = callback
        return self

    def has(self, name: str) -> bool:
        return name in self._filters

    def get(self, name: str) -> CallbackSpec | None:
        """Get a filter, or None if it wasn't registered."""
        return self._filters.get(name)

    def set_not_found_callback(self, callback: CallbackSpec) -> "FilterCollection":
        self._on_not_found = callback
        return self

    def set_method_not_allowed_callback(self, callback: CallbackSpec) -> "FilterCollection":
        self._on_method_not_allowed = callback
        return self

    @property
    def not_found_callback(self) -> CallbackSpec:
        return self._on_not_found or default_not_found

    @property
    def method_not_allowed_callback(self) -> CallbackSpec:
        return self._on_method_not_allowed or default_method_not_allowed
