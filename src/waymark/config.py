"""
Router configuration store.
"""

from collections.abc import Mapping
from typing import Any

from waymark.exceptions import InvalidConfiguration

CONF_BASE_URL: str = "base_url"
CONF_PREPEND_BASE_URL: str = "prepend_base_url"

DEFAULTS: dict[str, Any] = {
    CONF_BASE_URL: None,
    CONF_PREPEND_BASE_URL: False,
}


def _merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    """Recursively merge ``source`` into ``target``."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge(current, value)
        else:
            target[key] = dict(value) if isinstance(value, Mapping) else value


class Config:
    """
    Key/value settings consumed by the router.

    Usage:
        config = Config({"base_url": "https://example.com"})
        config.set("prepend_base_url", True)
        config.get("base_url")
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(DEFAULTS)
        if values:
            _merge(self._values, values)

    def set(self, name: str | Mapping[str, Any], value: Any = None) -> "Config":
        """Set one key, or merge a mapping of keys. Returns self for chaining."""
        if isinstance(name, Mapping):
            _merge(self._values, name)
            return self

        if isinstance(name, str):
            self._values[name] = value
            return self

        raise InvalidConfiguration(
            "The first argument to set() must be a string or a mapping. "
            f"Got {type(name).__name__}"
        )

    def get(self, name: str) -> Any:
        """Get a config value, or None if it isn't set."""
        return self._values.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._values
