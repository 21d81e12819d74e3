"""Renderers for resolved resources, chosen by file extension.

Resource files are opaque to the view: it resolves a name to a path and
hands a ``RenderContext`` to whatever renderer owns the extension.

Built-in renderers:

- ``html``, ``htm``, ``kida``, ``xml``, ``svg``: kida templates, rendered
  with the context's vars plus ``view`` and ``ctx``
- ``py``: Python units exposing ``render(ctx)``; a returned string is
  written, ``None`` means the unit wrote through ``ctx.write``
- anything else: emitted verbatim
"""

from collections.abc import Callable
from types import ModuleType

from perch.errors import InvalidResource
from perch.rendering.context import RenderContext

Renderer = Callable[[RenderContext], str | None]


def render_template(ctx: RenderContext) -> str:
    """Render a kida template resource."""
    template = ctx.view.environment.get_template(ctx.path)
    return template.render(ctx.template_context())


def render_python(ctx: RenderContext) -> str | None:
    """Execute a Python unit and call its ``render(ctx)``."""
    source = ctx.view.store.read_all(ctx.path)
    module = ModuleType(f"perch_unit_{ctx.name}")
    module.__file__ = ctx.path
    code = compile(source, ctx.path, "exec")
    exec(code, module.__dict__)  # noqa: S102 — page units are trusted code

    func = getattr(module, "render", None)
    if func is None or not callable(func):
        raise InvalidResource(f"Python resource {ctx.path!r} defines no render(ctx) function")
    return func(ctx)


def render_text(ctx: RenderContext) -> str:
    """Emit the resource unchanged."""
    return ctx.view.store.read_all(ctx.path).decode(ctx.view.config.encoding)


_RENDERERS: dict[str, Renderer] = {
    "html": render_template,
    "htm": render_template,
    "kida": render_template,
    "xml": render_template,
    "svg": render_template,
    "py": render_python,
}


def register_renderer(extension: str, renderer: Renderer) -> None:
    """Route resources with *extension* (no dot) to *renderer*.

    Replaces any existing renderer for the extension.
    """
    _RENDERERS[extension.lower().lstrip(".")] = renderer


def get_renderer(extension: str) -> Renderer:
    return _RENDERERS.get(extension.lower(), render_text)
