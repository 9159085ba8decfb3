"""Tests for waymark.config."""

import pytest

from waymark.config import CONF_BASE_URL, CONF_PREPEND_BASE_URL, Config
from waymark.exceptions import InvalidConfiguration


class TestConfig:
    def test_defaults(self) -> None:
        config = Config()
        assert config.get(CONF_BASE_URL) is None
        assert config.get(CONF_PREPEND_BASE_URL) is False

    def test_unknown_key_is_none(self) -> None:
        assert Config().get("missing") is None

    def test_set_string_key(self) -> None:
        config = Config().set("base_url", "https://example.com")
        assert config.get("base_url") == "https://example.com"

    def test_set_mapping_merges(self) -> None:
        config = Config({"extra": {"a": 1}})
        config.set({"extra": {"b": 2}, "prepend_base_url": True})
        assert config.get("extra") == {"a": 1, "b": 2}
        assert config.get("prepend_base_url") is True

    def test_invalid_key_type(self) -> None:
        with pytest.raises(InvalidConfiguration, match="int"):
            Config().set(42, "value")  # type: ignore[arg-type]

    def test_invalid_configuration_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            Config().set(None)  # type: ignore[arg-type]
