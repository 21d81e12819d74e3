"""Variable scope for a view.

A ``Scope`` maps names to template values. Pages write into it while their
logic runs; every rendered resource and component receives a *copy* of the
bindings, so nothing an included unit does flows back unless it calls
``set`` on the view explicitly.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, TypeAlias

ScopeValue: TypeAlias = str | int | float | bool | None | list[Any] | dict[str, Any]
"""Values a scope holds: the JSON data model (string, number, boolean, list, mapping, null)."""


class Scope:
    """Name to value bindings. Last write wins; unknown names read as ``None``.

    Usage::

        scope = Scope()
        scope.set("user", {"name": "Ada"})
        scope.get("user")      # {"name": "Ada"}
        scope.get("missing")   # None
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, ScopeValue] | None = None) -> None:
        self._values: dict[str, ScopeValue] = dict(values) if values else {}

    def set(self, name: str, value: ScopeValue) -> None:
        """Bind *name* to *value*, replacing any previous binding."""
        self._values[name] = value

    def get(self, name: str, default: ScopeValue = None) -> ScopeValue:
        """Return the value bound to *name*, or *default* (``None``)."""
        return self._values.get(name, default)

    def update(self, values: Mapping[str, ScopeValue]) -> None:
        self._values.update(values)

    def merged(self, extra: Mapping[str, ScopeValue] | None = None) -> Mapping[str, ScopeValue]:
        """Return a read-only snapshot with *extra* overlaid on top.

        The snapshot is detached: later writes to this scope, or to the
        snapshot's source dict, do not change it, and *extra* never writes
        into this scope.
        """
        snapshot = dict(self._values)
        if extra:
            snapshot.update(extra)
        return MappingProxyType(snapshot)

    def as_dict(self) -> dict[str, ScopeValue]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"<Scope {self._values!r}>"
