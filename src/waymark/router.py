"""
The Waymark router.

Ties the route table, groups, filters and callback resolution together:

    router = Router()
    router.add_filter("auth", require_login)

    router.get("/", home, {"name": "home"})
    router.group({"prefix": "/admin", "before": "auth"}, lambda r: (
        r.get("/users/(:num)", "UserController@show", {"name": "admin.user"}),
    ))

    router.dispatch("GET", "/admin/users/7")
    router.get_route("admin.user", [7])    # "/admin/users/7"
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from waymark.callbacks import (
    Callback,
    CallbackResolver,
    DefaultResolver,
    Descriptor,
    parse_callback,
)
from waymark.config import Config
from waymark.exceptions import (
    ControllerNotFound,
    MethodNotAllowed,
    NotFound,
    RoutingError,
    UndefinedFilter,
)
from waymark.filters import FilterCollection
from waymark.groups import Group, GroupStack
from waymark.patterns import PlaceholderTable
from waymark.response import RedirectResponse
from waymark.routing import ANY_METHOD, Route, RouteCollection, RouteMatch
from waymark.types import CallbackSpec, Invocable, RequestSource, RouteSettings

logger = logging.getLogger("waymark.dispatch")

# action name -> (method, takes an id segment)
CRUD_ACTIONS: dict[str, tuple[str, bool]] = {
    "many": ("GET", False),
    "one": ("GET", True),
    "create": ("POST", False),
    "update": ("PUT", True),
    "delete": ("DELETE", True),
}


def _is_empty(result: Any) -> bool:
    """A filter result that lets dispatch continue: None, False, zero or an empty str/bytes/collection."""
    if isinstance(result, (bool, int, float, str, bytes, list, tuple, dict)):
        return not result
    return result is None


class Router:
    """
    Request router with named routes, groups and before-filters.

    Registration methods return the router so calls can be chained.
    """

    def __init__(
        self,
        config: Config | Mapping[str, Any] | None = None,
        request_source: RequestSource | None = None,
        resolver: CallbackResolver | None = None,
    ) -> None:
        self._config = config if isinstance(config, Config) else Config(config)
        self._placeholders = PlaceholderTable()
        self._routes = RouteCollection(self._config, self._placeholders)
        self._groups = GroupStack()
        self._filters = FilterCollection()
        self._resolver: CallbackResolver = resolver or DefaultResolver()
        self._request_source = request_source
        self._last_matched: Route | None = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def config(self) -> Config:
        return self._config

    def set_config(self, name: str | Mapping[str, Any], value: Any = None) -> "Router":
        """Set a config key, or merge a mapping of keys."""
        self._config.set(name, value)
        return self

    def get_config(self, name: str) -> Any:
        """Get a config value, or None if it isn't set."""
        return self._config.get(name)

    def set_callback_resolver(self, resolver: CallbackResolver) -> "Router":
        """Replace the collaborator that turns callback descriptors into invocables."""
        self._resolver = resolver
        return self

    def set_request_source(self, source: RequestSource | None) -> "Router":
        """Set the collaborator that supplies method and path to ``dispatch()``."""
        self._request_source = source
        return self

    def add_placeholder(self, token: str, regex: str) -> "Router":
        """Register a ``(:token)`` placeholder, or override a built-in one."""
        self._placeholders.add(token, regex)
        return self

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return self._routes.routes

    def add(
        self,
        method: str,
        pattern: str,
        callback: CallbackSpec | Callback,
        settings: RouteSettings | None = None,
    ) -> "Router":
        """
        Add a route.

        Args:
            method: HTTP method, or ``ANY`` to match every method.
            pattern: Route pattern, e.g. ``/users/(:num)``.
            callback: A callable, ``"Controller@method"``, ``(Controller, "method")``
                or ``"package.module:function"``.
            settings: Optional ``name`` and ``before`` (filter name or names).
        """
        pattern, decorated = self._groups.decorate(pattern, settings or {})

        route = Route(
            method=method.upper(),
            pattern=pattern,
            callback=parse_callback(callback),
            name=decorated.get("name") or None,
            before=decorated["before"],
        )
        self._routes.add(route)
        return self

    def get(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        return self.add("GET", pattern, callback, settings)

    def post(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        return self.add("POST", pattern, callback, settings)

    def put(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        return self.add("PUT", pattern, callback, settings)

    def patch(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        return self.add("PATCH", pattern, callback, settings)

    def delete(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        return self.add("DELETE", pattern, callback, settings)

    def options(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        return self.add("OPTIONS", pattern, callback, settings)

    def any(self, pattern: str, callback: CallbackSpec, settings: RouteSettings | None = None) -> "Router":
        """Add a route that matches every method without its own entry."""
        return self.add(ANY_METHOD, pattern, callback, settings)

    def group(self, settings: RouteSettings, builder: Callable[["Router"], Any]) -> "Router":
        """
        Register the routes added by ``builder`` under a prefix and/or filters.

        Groups nest; the group is removed again even if ``builder`` raises.
        """
        with self._groups.enter(Group.from_settings(settings)):
            builder(self)
        return self

    def crud(self, pattern: str, controller: Any, settings: RouteSettings | None = None) -> "Router":
        """
        Add the five CRUD routes for a controller.

        ``GET pattern`` -> many, ``GET pattern/(:any)`` -> one,
        ``POST pattern`` -> create, ``PUT pattern/(:any)`` -> update,
        ``DELETE pattern/(:any)`` -> delete. A ``name`` setting names the
        routes ``<name>.<action>``.
        """
        settings = dict(settings or {})
        name = settings.pop("name", None)
        base = pattern.rstrip("/")

        for action, (method, with_id) in CRUD_ACTIONS.items():
            route_settings = dict(settings)
            if name:
                route_settings["name"] = f"{name}.{action}"
            path = f"{base}/(:any)" if with_id else pattern
            self.add(method, path, Descriptor(controller, action), route_settings)
        return self

    def redirect(self, pattern: str, to: str, settings: RouteSettings | None = None) -> "Router":
        """Add a GET route that redirects to a fixed URL (``status`` defaults to 307)."""
        settings = dict(settings or {})
        status = settings.pop("status", 307)

        def redirect_callback(*_arguments: Any) -> RedirectResponse:
            return RedirectResponse(to, status_code=status)

        return self.get(pattern, redirect_callback, settings)

    def redirect_to_route(
        self,
        name: str,
        args: list[Any] | None = None,
        status: int = 307,
        use_base_url: bool = False,
    ) -> RedirectResponse:
        """Build a redirect response to a named route."""
        url = self.get_route(name, args, use_base_url)
        if url is None:
            raise RoutingError(f"No route named '{name}'")
        return RedirectResponse(url, status_code=status)

    # -------------------------------------------------------------------------
    # Filters and fallbacks
    # -------------------------------------------------------------------------

    def add_filter(self, name: str, callback: CallbackSpec) -> "Router":
        """Register a before-filter. A filter returning a value ends dispatch with it."""
        self._filters.add(name, callback)
        return self

    def on_not_found(self, callback: CallbackSpec) -> "Router":
        self._filters.set_not_found_callback(callback)
        return self

    def on_method_not_allowed(self, callback: CallbackSpec) -> "Router":
        self._filters.set_method_not_allowed_callback(callback)
        return self

    def trigger_not_found(self) -> Any:
        """Run the not-found (404) callback and return its result."""
        return self._resolve(self._filters.not_found_callback)()

    def trigger_method_not_allowed(self) -> Any:
        """Run the method-not-allowed (405) callback and return its result."""
        return self._resolve(self._filters.method_not_allowed_callback)()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def match(self, method: str, path: str) -> RouteMatch:
        """
        Find the route for a method and path.

        Raises NotFound or MethodNotAllowed if there is no match.
        """
        return self._routes.find_match(method, path)

    def dispatch(self, method: str | None = None, path: str | None = None) -> Any:
        """
        Route a request and return the callback's (or a filter's) result.

        Missing method/path are read from the request source. Not-found and
        method-not-allowed outcomes return the fallback callbacks' results.
        """
        if method is None or path is None:
            source_method, source_path = self._read_request()
            method = method or source_method
            path = source_path if path is None else path

        try:
            match = self._routes.find_match(method, path)
        except MethodNotAllowed:
            return self.trigger_method_not_allowed()
        except NotFound:
            return self.trigger_not_found()

        self._last_matched = match.route
        return self.execute(match)

    def execute(self, match: RouteMatch) -> Any:
        """Run a match's before-filters, then its callback."""
        route = match.route

        for name in route.before:
            callback = self._filters.get(name)
            if callback is None:
                raise UndefinedFilter(name)

            result = self._resolve(callback)(*match.arguments)
            if not _is_empty(result):
                logger.debug("Filter '%s' stopped %s %s", name, route.method, route.pattern)
                return result

        return self._resolve(route.callback)(*match.arguments)

    def get_route(
        self,
        name: str,
        args: list[Any] | tuple[Any, ...] | None = None,
        use_base_url: bool = False,
    ) -> str | None:
        """
        Build the URL of a named route.

        Returns None for unknown names and raises MissingRouteParameter when
        a required placeholder has no argument left.
        """
        return self._routes.get_route(name, args, use_base_url)

    @property
    def last_matched_route(self) -> Route | None:
        """The route selected by the most recent successful dispatch."""
        return self._last_matched

    def get_last_matched_route(self) -> Route | None:
        return self._last_matched

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve(self, callback: CallbackSpec | Callback) -> Invocable:
        invocable = self._resolver(parse_callback(callback))
        if not callable(invocable):
            raise ControllerNotFound(f"Callback {callback!r} did not resolve to a callable")
        return invocable

    def _read_request(self) -> tuple[str, str]:
        if self._request_source is None:
            raise RoutingError(
                "dispatch() needs a method and a path when no request source is set"
            )
        return self._request_source()
