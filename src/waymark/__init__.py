"""
Waymark - a pattern-based request router

Ordered regex route matching with placeholders, route groups,
before-filters and reverse routing by name.
"""

from waymark.asgi import RouterApp
from waymark.callbacks import DefaultResolver, Descriptor, Direct, StaticDescriptor
from waymark.config import Config
from waymark.exceptions import (
    ControllerNotFound,
    InvalidConfiguration,
    MethodNotAllowed,
    MissingRouteParameter,
    NotFound,
    RoutingError,
    UndefinedFilter,
)
from waymark.response import JSONResponse, RedirectResponse, Response, TextResponse
from waymark.router import Router
from waymark.routing import Route, RouteCollection, RouteMatch

__version__ = "0.1.0"
__all__ = [
    "Router",
    "RouterApp",
    "Route",
    "RouteCollection",
    "RouteMatch",
    "Config",
    "DefaultResolver",
    "Direct",
    "Descriptor",
    "StaticDescriptor",
    "Response",
    "TextResponse",
    "JSONResponse",
    "RedirectResponse",
    "RoutingError",
    "NotFound",
    "MethodNotAllowed",
    "ControllerNotFound",
    "UndefinedFilter",
    "MissingRouteParameter",
    "InvalidConfiguration",
]
