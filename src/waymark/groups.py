"""
Route groups.

A group contributes a path prefix and before-filters to every route
registered inside it. Active groups are kept as an immutable tuple of
frames; entering a group swaps in a longer tuple and leaving it restores
the parent tuple, whether the nested block returned or raised.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from waymark.types import FilterNames


def filter_names(value: FilterNames | None) -> tuple[str, ...]:
    """Accept a single filter name or a sequence of names."""
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True, slots=True)
class Group:
    """One group frame: a prefix (without surrounding slashes) and filters."""

    prefix: str = ""
    before: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "Group":
        prefix = (settings.get("prefix") or "").strip("/")
        return cls(prefix=prefix, before=filter_names(settings.get("before")))


class GroupStack:
    """The groups active while routes are being registered."""

    def __init__(self) -> None:
        self._frames: tuple[Group, ...] = ()

    @property
    def frames(self) -> tuple[Group, ...]:
        return self._frames

    @property
    def depth(self) -> int:
        return len(self._frames)

    @contextmanager
    def enter(self, group: Group) -> Iterator[Group]:
        """Make ``group`` the innermost frame for the duration of the block."""
        parent = self._frames
        self._frames = parent + (group,)
        try:
            yield group
        finally:
            self._frames = parent

    def decorate(
        self,
        pattern: str,
        settings: Mapping[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        """
        Apply every active frame to a route's pattern and settings.

        Prefixes join outermost first and the route's own pattern comes
        last. Group filters, also outermost first, run before the route's
        own filters.
        """
        decorated = dict(settings)
        before = filter_names(settings.get("before"))

        prefixes = [frame.prefix for frame in self._frames if frame.prefix]
        group_before = [name for frame in self._frames for name in frame.before]

        path = "/".join(prefixes + [pattern.strip("/")])
        decorated["before"] = tuple(group_before) + before

        return "/" + path.strip("/"), decorated
