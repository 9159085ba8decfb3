"""
Type definitions for the Waymark router.
"""

from collections.abc import Awaitable, Callable, Mapping, MutableMapping, Sequence
from typing import Any, TypeAlias

# ASGI Types
Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]

# Routing Types
Invocable: TypeAlias = Callable[..., Any]
CallbackSpec: TypeAlias = Invocable | str | tuple[Any, str] | list[Any]
RouteSettings: TypeAlias = Mapping[str, Any]
FilterNames: TypeAlias = str | Sequence[str]
RequestSource: TypeAlias = Callable[[], tuple[str, str]]
