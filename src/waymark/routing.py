"""
Route table for the Waymark router.

Routes are stored by pattern, in registration order, with one entry per
HTTP method. Matching is a linear, first-match-wins scan: the first pattern
that matches the path *and* has an entry for the method is selected.
There is no ranking by specificity.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from waymark.callbacks import Callback
from waymark.config import CONF_BASE_URL, CONF_PREPEND_BASE_URL, Config
from waymark.exceptions import MethodNotAllowed, MissingRouteParameter, NotFound
from waymark.patterns import (
    LiteralFragment,
    OptionalFragment,
    PlaceholderTable,
    compile_reverse_template,
    has_placeholders,
)

logger = logging.getLogger("waymark.routing")

ANY_METHOD: str = "ANY"


def normalize_path(path: str | None) -> str:
    """Leading slash, no trailing slash, root stays ``/``."""
    return "/" + (path or "").strip("/")


@dataclass(frozen=True, slots=True)
class Route:
    """
    A single method + pattern registration.

    ``pattern`` is fully decorated: group prefixes applied, leading slash,
    no trailing slash (except for the root).
    """

    method: str
    pattern: str
    callback: Callback
    name: str | None = None
    before: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful match: the route and its positional arguments."""

    route: Route
    arguments: tuple[str | None, ...] = field(default_factory=tuple)


def _match_arguments(groups: tuple[str | None, ...]) -> tuple[str | None, ...]:
    """
    Clean captured groups up for use as callback arguments.

    Trailing optional groups that did not participate are dropped so the
    callback's own defaults apply. Slashes carried by a group are trimmed.
    """
    arguments = list(groups)
    while arguments and arguments[-1] is None:
        arguments.pop()
    return tuple(arg.strip("/") if arg is not None else None for arg in arguments)


class RouteCollection:
    """
    Ordered collection of routes with name-based reverse lookup.

    Usage:
        routes = RouteCollection(Config())
        routes.add(Route("GET", "/users/(:num)", Direct(show_user), name="user"))
        match = routes.find_match("GET", "/users/42")
        routes.get_route("user", [42])   # "/users/42"
    """

    def __init__(
        self,
        config: Config | None = None,
        placeholders: PlaceholderTable | None = None,
    ) -> None:
        self.config = config or Config()
        self.placeholders = placeholders or PlaceholderTable()
        self._routes: dict[str, dict[str, Route]] = {}
        self._names: dict[str, str] = {}

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return [route for methods in self._routes.values() for route in methods.values()]

    def add(self, route: Route) -> Route:
        """Add a route. A later (pattern, method) or name registration wins."""
        self._routes.setdefault(route.pattern, {})[route.method] = route
        if route.name:
            self._names[route.name] = route.pattern

        logger.debug(
            "Registered %s %s%s",
            route.method,
            route.pattern,
            f" as '{route.name}'" if route.name else "",
        )
        return route

    def add_placeholder(self, token: str, regex: str) -> "RouteCollection":
        self.placeholders.add(token, regex)
        return self

    def find_match(self, method: str, path: str) -> RouteMatch:
        """
        Find the first route matching both path and method.

        Raises ``MethodNotAllowed`` if some pattern matched the path but no
        pattern anywhere had an entry for the method, and ``NotFound`` if no
        pattern matched the path at all.
        """
        method = method.upper()
        path = normalize_path(path)
        method_mismatch = False

        for pattern, methods in self._routes.items():
            match = self.placeholders.compile_matcher(pattern).fullmatch(path)
            if match is None:
                continue

            route = methods.get(method) or methods.get(ANY_METHOD)
            if route is None:
                logger.debug("Pattern %s matched %s but not method %s", pattern, path, method)
                method_mismatch = True
                continue

            arguments = _match_arguments(match.groups())
            logger.debug("Matched %s %s -> %s %s", method, path, route.method, pattern)
            return RouteMatch(route, arguments)

        if method_mismatch:
            logger.debug("Method %s not allowed for %s", method, path)
            raise MethodNotAllowed(f"Method {method} not allowed for {path}")

        logger.debug("No route found for %s %s", method, path)
        raise NotFound(f"No route found for {path}")

    def get_route(
        self,
        name: str,
        args: list[Any] | tuple[Any, ...] | None = None,
        use_base_url: bool = False,
    ) -> str | None:
        """
        Build the path of a named route.

        Required placeholders consume arguments from the front of ``args``;
        optional ones consume an argument only if one is left, otherwise
        they are dropped together with their separator.

        Returns:
            The path, or None if no route has that name.

        Raises:
            MissingRouteParameter: If a required placeholder has no argument.
        """
        pattern = self._names.get(name)
        if pattern is None:
            return None

        if has_placeholders(pattern):
            remaining = list(args or [])
            parts: list[str] = []

            for fragment in compile_reverse_template(pattern):
                if isinstance(fragment, LiteralFragment):
                    parts.append(fragment.text)
                elif remaining:
                    parts.append(f"{fragment.separator}{remaining.pop(0)}")
                elif isinstance(fragment, OptionalFragment):
                    continue
                else:
                    raise MissingRouteParameter(name)

            path = normalize_path("".join(parts))
        else:
            path = pattern

        return self._with_base_url(path, use_base_url)

    def _with_base_url(self, path: str, use_base_url: bool) -> str:
        base_url = self.config.get(CONF_BASE_URL)
        prepend = use_base_url or self.config.get(CONF_PREPEND_BASE_URL) is True

        if base_url and prepend:
            return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        return path
