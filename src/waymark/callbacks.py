"""
Route callback descriptors and their resolution.

A callback can be registered in several shapes:

    router.get("/", home)                              # Direct
    router.get("/users", "UserController@index")       # Descriptor
    router.get("/users", (UserController, "index"))    # Descriptor
    router.get("/health", "myapp.views:health")        # StaticDescriptor

Descriptors are resolved lazily, at dispatch time, through a resolver.
Applications can swap the resolver with ``Router.set_callback_resolver``.
"""

import importlib
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from waymark.exceptions import ControllerNotFound
from waymark.types import CallbackSpec, Invocable


@dataclass(frozen=True, slots=True)
class Direct:
    """An already invocable callback."""

    target: Invocable


@dataclass(frozen=True, slots=True)
class Descriptor:
    """A controller (class, instance or class name) plus a method name."""

    controller: Any
    method: str


@dataclass(frozen=True, slots=True)
class StaticDescriptor:
    """A qualified name of a module-level callable, e.g. ``pkg.mod:func``."""

    qualified_name: str


Callback: TypeAlias = Direct | Descriptor | StaticDescriptor
CallbackResolver: TypeAlias = Callable[[Callback], Invocable]


def parse_callback(spec: "CallbackSpec | Callback") -> Callback:
    """
    Normalize a registered callback into one of the tagged variants.

    Raises:
        ControllerNotFound: If the value is not a recognised callback shape.
    """
    if isinstance(spec, (Direct, Descriptor, StaticDescriptor)):
        return spec

    if isinstance(spec, str):
        if "@" in spec:
            controller, _, method = spec.partition("@")
            return Descriptor(controller, method)
        return StaticDescriptor(spec)

    if isinstance(spec, (tuple, list)) and len(spec) == 2 and isinstance(spec[1], str):
        return Descriptor(spec[0], spec[1])

    if callable(spec):
        return Direct(spec)

    raise ControllerNotFound(f"Invalid callback: {spec!r}")


def import_string(qualified_name: str) -> Any:
    """
    Import an object from ``module:attr.path`` or ``module.attr`` notation.

    Raises:
        ControllerNotFound: If the module or attribute does not exist.
    """
    if ":" in qualified_name:
        module_name, _, attr_path = qualified_name.partition(":")
    else:
        module_name, _, attr_path = qualified_name.rpartition(".")

    if not module_name or not attr_path:
        raise ControllerNotFound(f"Cannot import '{qualified_name}'")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ControllerNotFound(f"Cannot import '{qualified_name}': {exc}") from exc

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise ControllerNotFound(f"Cannot import '{qualified_name}'") from exc

    return target


class DefaultResolver:
    """
    Resolves callback descriptors into invocables.

    Controller names are looked up in ``controllers`` first, then imported.
    Controller classes are instantiated without arguments, once per class,
    so a controller keeps its state between dispatches.
    """

    def __init__(self, controllers: Mapping[str, Any] | None = None) -> None:
        self._controllers: dict[str, Any] = dict(controllers or {})
        self._instances: dict[type, Any] = {}

    def register(self, name: str, controller: Any) -> "DefaultResolver":
        """Make a controller resolvable by a short name."""
        self._controllers[name] = controller
        return self

    def __call__(self, callback: Callback) -> Invocable:
        if isinstance(callback, Direct):
            return callback.target

        if isinstance(callback, StaticDescriptor):
            target = import_string(callback.qualified_name)
            if not callable(target):
                raise ControllerNotFound(f"'{callback.qualified_name}' is not callable")
            return target

        controller = self._load_controller(callback.controller)
        # Static and class methods are called on the class itself
        if inspect.isclass(controller):
            attr = inspect.getattr_static(controller, callback.method, None)
            if not isinstance(attr, (staticmethod, classmethod)):
                controller = self._instantiate(controller)

        method = getattr(controller, callback.method, None)
        if method is None or not callable(method):
            name = getattr(controller, "__name__", type(controller).__name__)
            raise ControllerNotFound(f"Controller '{name}' has no method '{callback.method}'")
        return method

    def _load_controller(self, controller: Any) -> Any:
        if not isinstance(controller, str):
            return controller
        if controller in self._controllers:
            return self._controllers[controller]
        return import_string(controller)

    def _instantiate(self, controller: type) -> Any:
        instance = self._instances.get(controller)
        if instance is None:
            try:
                instance = controller()
            except TypeError as exc:
                raise ControllerNotFound(
                    f"Controller '{controller.__name__}' cannot be instantiated: {exc}"
                ) from exc
            self._instances[controller] = instance
        return instance
