"""
Route pattern compilation.

A route pattern is a literal path with placeholders in it::

    /users/(:num)            required placeholder
    /archive/(:int)?         optional placeholder
    /files/(:all)            everything, slashes included

Each placeholder token maps to a regex fragment in a :class:`PlaceholderTable`.
Patterns compile in two directions: to an anchored regex for matching
incoming paths, and to a fragment template for building paths back from
positional arguments.
"""

import logging
import re
from dataclasses import dataclass
from typing import TypeAlias

logger = logging.getLogger("waymark.routing")

# An optional leading slash, "(:token)" and an optional "?"
PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(r"(/?)\(:([^)]*)\)(\??)")

DEFAULT_PLACEHOLDERS: dict[str, str] = {
    "any": r"[^/]+",
    "num": r"-?[\d,.]+",
    "int": r"[0-9]+",
    "alpha": r"[a-zA-Z]+",
    "alphanum": r"[a-zA-Z0-9]+",
    "word": r"\w+",
    "all": r".*",
}


@dataclass(frozen=True, slots=True)
class LiteralFragment:
    """Text copied verbatim into a generated path."""

    text: str


@dataclass(frozen=True, slots=True)
class RequiredFragment:
    """A placeholder that must consume an argument."""

    separator: str = ""


@dataclass(frozen=True, slots=True)
class OptionalFragment:
    """A placeholder that consumes an argument if one is left, else vanishes."""

    separator: str = ""


Fragment: TypeAlias = LiteralFragment | RequiredFragment | OptionalFragment


def has_placeholders(pattern: str) -> bool:
    """Check whether a pattern contains any ``(:token)`` markers."""
    return PLACEHOLDER_PATTERN.search(pattern) is not None


def compile_reverse_template(pattern: str) -> list[Fragment]:
    """
    Split a pattern into literal and placeholder fragments.

    The concrete token doesn't matter here, only whether the placeholder
    is required or optional. A slash directly in front of a placeholder
    belongs to it, so a skipped optional placeholder leaves no dangling
    separator behind.

    Example:
        >>> compile_reverse_template("/foo/(:alpha)/(:int)?")
        [LiteralFragment(text='/foo'), RequiredFragment(separator='/'),
         OptionalFragment(separator='/')]
    """
    fragments: list[Fragment] = []
    position = 0

    for match in PLACEHOLDER_PATTERN.finditer(pattern):
        if match.start() > position:
            fragments.append(LiteralFragment(pattern[position:match.start()]))

        separator, _token, optional = match.groups()
        if optional:
            fragments.append(OptionalFragment(separator))
        else:
            fragments.append(RequiredFragment(separator))
        position = match.end()

    if position < len(pattern):
        fragments.append(LiteralFragment(pattern[position:]))

    return fragments


class PlaceholderTable:
    """
    Token to regex-fragment mapping used to compile route patterns.

    Compiled matchers are cached per pattern; registering a placeholder
    drops the cache since it can change how existing patterns compile.
    """

    def __init__(self, placeholders: dict[str, str] | None = None) -> None:
        self._placeholders: dict[str, str] = dict(DEFAULT_PLACEHOLDERS)
        if placeholders:
            self._placeholders.update(placeholders)
        self._cache: dict[str, re.Pattern[str]] = {}

    def add(self, token: str, regex: str) -> "PlaceholderTable":
        """Register (or overwrite) a placeholder token."""
        self._placeholders[token] = regex
        self._cache.clear()
        logger.debug("Placeholder (:%s) -> %s", token, regex)
        return self

    def get(self, token: str) -> str | None:
        return self._placeholders.get(token)

    def __contains__(self, token: object) -> bool:
        return token in self._placeholders

    def compile_matcher(self, pattern: str) -> re.Pattern[str]:
        """
        Convert a route pattern to an anchored regex.

        Known placeholders become capturing groups. A slash in front of a
        placeholder moves into its group, so ``/(:int)?`` matches either
        ``/123`` or nothing at all. Unknown tokens are kept as literal text.
        Everything else is escaped.
        """
        compiled = self._cache.get(pattern)
        if compiled is not None:
            return compiled

        parts: list[str] = []
        position = 0

        for match in PLACEHOLDER_PATTERN.finditer(pattern):
            parts.append(re.escape(pattern[position:match.start()]))

            separator, token, optional = match.groups()
            fragment = self._placeholders.get(token)
            if fragment:
                parts.append(f"({re.escape(separator)}{fragment}){optional}")
            else:
                parts.append(re.escape(match.group(0)))
            position = match.end()

        parts.append(re.escape(pattern[position:]))

        compiled = re.compile(f"^{''.join(parts)}$")
        self._cache[pattern] = compiled
        return compiled
