"""The context object handed to every rendered resource.

Included units never see ambient bindings. They receive a ``RenderContext``
carrying a read-only snapshot of the view's scope (with any component scope
overlaid), the unit's own name and path, and a handle to the view for
writing output or, deliberately, setting view variables.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from perch.scope import ScopeValue

if TYPE_CHECKING:
    from perch.view import View

logger = logging.getLogger("perch.view")


def bind_helpers(context: dict[str, Any], helpers: Mapping[str, Any]) -> dict[str, Any]:
    """Add *helpers* to a template context, replacing variables of the same name."""
    for name, value in helpers.items():
        if name in context:
            logger.debug("Variable %r is replaced by the template helper of that name", name)
        context[name] = value
    return context


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Everything an included resource may use.

    Attributes:
        name: Resource or component base name (``content``, ``card``).
        path: Resolved resource path including extension.
        vars: Read-only merged bindings visible to the unit.
        view: The rendering view. ``ctx.view.set(...)`` is the only way
            for a unit to change the view's scope.
    """

    name: str
    path: str
    vars: Mapping[str, ScopeValue]
    view: "View"

    @property
    def extension(self) -> str:
        return self.path.rsplit(".", 1)[-1]

    def write(self, text: str) -> None:
        self.view.write(text)

    def include_component(self, name: str, scope: Mapping[str, ScopeValue] | None = None) -> None:
        self.view.include_component(name, scope)

    def embed_script(
        self,
        name: str,
        variables: Mapping[str, ScopeValue] | None = None,
        **flags: bool,
    ) -> None:
        self.view.embed_script(name, variables, **flags)

    def template_context(self) -> dict[str, Any]:
        """Bindings for a template render: the vars, ``view``, ``ctx`` and helpers."""
        return bind_helpers(
            dict(self.vars),
            {
                "view": self.view,
                "ctx": self,
                "component": self.view.component,
                "script": self.view.script,
            },
        )

    # -- Mapping-style reads --

    def __getitem__(self, name: str) -> ScopeValue:
        return self.vars[name]

    def get(self, name: str, default: ScopeValue = None) -> ScopeValue:
        return self.vars.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)
