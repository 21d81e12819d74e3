"""Perch — server-side page composition with early header flushing.

A page is a directory of resources found by base name (``content.html``,
``head.html``, ``scripts.js``, ...). A ``View`` composes them into one
HTML document inside a fixed shell and writes it to the active output
session, optionally sending the document head before the body is ready.

Basic usage::

    from pathlib import Path

    from perch import MemorySink, OutputSession, View, use_session

    with use_session(OutputSession(MemorySink())) as session:
        view = View("Home", Path(__file__).parent)
        view.user = {"name": "Ada"}
        view.render()

Static rendering::

    from perch import StaticRenderer
    StaticRenderer.render_to_file("pages/home/page.py", "public/index.html")
"""

__version__ = "0.1.0"
__all__ = [
    "AmbiguousResource",
    "ConfigurationError",
    "DictStore",
    "FileSystemStore",
    "InvalidResource",
    "MemorySink",
    "NotFound",
    "OutputSession",
    "PerchError",
    "RenderContext",
    "Scope",
    "StaticRenderer",
    "StreamSink",
    "View",
    "ViewConfig",
    "ViewState",
    "WriteFailure",
    "get_session",
    "page_app",
    "use_session",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast (kida is only loaded with the view).
    """
    if name in ("View", "ViewState"):
        from perch import view as _view

        return getattr(_view, name)

    if name == "ViewConfig":
        from perch.config import ViewConfig

        return ViewConfig

    if name == "StaticRenderer":
        from perch.static import StaticRenderer

        return StaticRenderer

    if name == "Scope":
        from perch.scope import Scope

        return Scope

    if name == "RenderContext":
        from perch.rendering.context import RenderContext

        return RenderContext

    if name in ("DictStore", "FileSystemStore"):
        from perch.resources import store as _store

        return getattr(_store, name)

    if name in ("MemorySink", "OutputSession", "StreamSink"):
        from perch import output as _output

        return getattr(_output, name)

    if name in ("get_session", "use_session"):
        from perch import context as _ctx

        return getattr(_ctx, name)

    if name == "page_app":
        from perch.server.sender import page_app

        return page_app

    if name in (
        "AmbiguousResource",
        "ConfigurationError",
        "InvalidResource",
        "NotFound",
        "PerchError",
        "WriteFailure",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
