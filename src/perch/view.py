"""View — composes a page directory into one HTML document.

Page directory structure (unique to each page):

Required
    page.py          page logic — the ``View`` instance lives here
    content.*        body content, rendered with the view's scope

Optional
    head.*           document head resources
    libraries.*      front-end libraries and what they need (after content)
    scripts.*        inline scripts at the end of the document

The shell renders, in order: document boilerplate and title, ``head``, the
document-header fragment, then ``content``, ``libraries``, ``scripts`` and
the closing boilerplate. Each resource is found by base name with any
extension and skipped when absent.

Two ways to send a page::

    view = View("Dashboard", Path(__file__).parent)
    view.stats = load_stats()
    view.render()                 # whole document in one pass

    view = View("Dashboard", Path(__file__).parent)
    view.render_page_header()     # head + header reach the client now
    view.stats = load_stats()     # slow work happens after first paint
    view.render()                 # body, appended on the same connection

``render_page_header()`` holds the rest of the page in an output buffer
that ``render()`` releases. Using the view as a context manager releases
that buffer even when page logic raises.
"""

import logging
from collections.abc import Mapping, Sequence
from contextlib import ExitStack
from enum import Enum
from pathlib import Path
from typing import Any

from kida import Environment, Markup

from perch.config import ViewConfig
from perch.context import get_session
from perch.output.session import OutputSession
from perch.rendering.context import RenderContext, bind_helpers
from perch.rendering.environment import create_environment
from perch.rendering.renderers import get_renderer
from perch.rendering.scripts import ScriptEmbedder
from perch.resources.resolver import Resolver
from perch.resources.store import FileSystemStore, ResourceStore
from perch.scope import Scope, ScopeValue

logger = logging.getLogger("perch.view")

# Page resources, in the order the shell renders them
HEAD = "head"
CONTENT = "content"
LIBRARIES = "libraries"
SCRIPTS = "scripts"
BODY_RESOURCES = (CONTENT, LIBRARIES, SCRIPTS)


class ViewState(Enum):
    """Where a view is in its render lifecycle."""

    FRESH = "fresh"
    HEADER_STREAMING = "header_streaming"
    HEADER_SENT = "header_sent"
    COMPLETE = "complete"


class View:
    """One page render. Create per request, render once, discard.

    Unknown attributes read and write the view's variable scope::

        view.user = {"name": "Ada"}   # same as view.set("user", ...)
        view.user                     # {"name": "Ada"}
        view.missing                  # None

    Templates always see ``title``, ``view``, ``component`` and ``script``
    (resources also get ``ctx``). A variable with one of these names is
    hidden from templates; Python units still read it via ``ctx["name"]``.
    """

    __slots__ = (
        "_complete",
        "_config",
        "_environment",
        "_exits",
        "_header_sent",
        "_page_directory",
        "_required",
        "_resolver",
        "_scope",
        "_scripts",
        "_sending_header",
        "_session",
        "_store",
        "_title",
    )

    def __init__(
        self,
        title: str,
        page_directory: str | Path,
        *,
        config: ViewConfig | None = None,
        store: ResourceStore | None = None,
        session: OutputSession | None = None,
    ) -> None:
        config = config or ViewConfig()
        store = store or FileSystemStore()
        self._title = title
        self._page_directory = Path(page_directory).as_posix()
        self._config = config
        self._store = store
        self._session = session or get_session()
        self._resolver = Resolver(store, config.resolve_policy)
        self._environment = create_environment(config, store)
        self._scripts = ScriptEmbedder(
            self._resolver, config.scripts_path, encoding=config.encoding
        )
        self._scope = Scope()
        self._required: set[str] = set()
        self._exits = ExitStack()
        self._header_sent = False
        self._sending_header = False
        self._complete = False

    # -- Read-only state --

    @property
    def title(self) -> str:
        return self._title

    @property
    def page_directory(self) -> str:
        return self._page_directory

    @property
    def config(self) -> ViewConfig:
        return self._config

    @property
    def store(self) -> ResourceStore:
        return self._store

    @property
    def session(self) -> OutputSession:
        return self._session

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def header_sent(self) -> bool:
        return self._header_sent

    @property
    def sending_header(self) -> bool:
        return self._sending_header

    @property
    def state(self) -> ViewState:
        if self._complete:
            return ViewState.COMPLETE
        if self._sending_header:
            return ViewState.HEADER_STREAMING
        if self._header_sent:
            return ViewState.HEADER_SENT
        return ViewState.FRESH

    # -- Variable scope --

    def set(self, name: str, value: ScopeValue) -> None:
        """Set a template variable, visible to every resource and component."""
        self._scope.set(name, value)

    def get(self, name: str) -> ScopeValue:
        """Return a template variable, or ``None`` if it was never set."""
        return self._scope.get(name)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not slots, properties, or methods
        if name.startswith("_"):
            raise AttributeError(name)
        return self._scope.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        elif hasattr(type(self), name):
            raise AttributeError(f"View attribute {name!r} is read-only; use view.set()")
        else:
            self._scope.set(name, value)

    def template_context(self) -> dict[str, Any]:
        """Bindings for the shell and header: the scope plus ``title`` and ``view``."""
        return bind_helpers(
            self._scope.as_dict(),
            {
                "title": self._title,
                "view": self,
                "component": self.component,
                "script": self.script,
            },
        )

    # -- Rendering --

    def render(self) -> None:
        """Render the page with the current variables.

        After ``render_page_header()``, renders only the body and releases
        the buffer the header left open.
        """
        self._run_shell()

        if self._header_sent:
            self._exits.close()

        if not self._sending_header:
            self._complete = True

    def render_page_header(self) -> None:
        """Render up to the document header and send it to the client now.

        Useful for returning immediate content to the user while slow work
        for the body runs. Output shorter than ``flush_threshold`` bytes is
        padded and marked so intermediaries do not hold it back.
        """
        self._exits.enter_context(self._session.buffers.buffer())

        self._sending_header = True
        try:
            self.render()
        finally:
            self._sending_header = False
        self._header_sent = True

        size = self._session.buffered_size()
        if size < self._config.flush_threshold:
            padding = self._config.flush_threshold - size
            logger.debug("Padding page header of %d bytes with %d filler bytes", size, padding)
            self.write(self._config.flush_filler * padding + self._config.flush_marker)

        self._session.flush_to_sink()

    def _run_shell(self) -> None:
        shell = self._environment.get_template(self._config.shell_template)
        context = self.template_context()

        if not self._header_sent:
            self.write(shell.render_block("open", context))
            self.require_resource(HEAD)
            self.write(shell.render_block("head_close", context))
            if self._config.header_template:
                header = self._environment.get_template(self._config.header_template)
                self.write(header.render(context))

            if self._sending_header:
                return

        for name in BODY_RESOURCES:
            self.require_resource(name)

        self.write(shell.render_block("close", context))

    def write(self, text: str) -> None:
        self._session.write(text)

    def close(self) -> None:
        """Release a header buffer still held open, flushing its contents."""
        self._exits.close()

    def __enter__(self) -> "View":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Headers --

    def set_header(self, name: str, value: str | Sequence[str]) -> None:
        """Set a response header. Several values are joined with ``"; "``.

        Does nothing once the response headers have been sent.
        """
        if not isinstance(value, str):
            value = "; ".join(value)
        self._session.set_header(name, value)

    # -- Resources --

    def include_component(
        self,
        name: str,
        scope: Mapping[str, ScopeValue] | None = None,
    ) -> None:
        """Render a shared component by name, if one exists.

        Components live in the global components directory. They see the
        view's variables with *scope* overlaid; the view's own scope is
        never changed by *scope*.
        """
        path = self._resolver.resolve(self._config.components_path, name)
        if path is None:
            logger.debug("Component %r not found, skipping", name)
            return
        self._render_unit(RenderContext(name, path, self._scope.merged(scope), self))

    def require_resource(self, name: str) -> None:
        """Render a page resource by name, if available. At most once per view."""
        if name in self._required:
            return
        path = self._resolver.resolve(self._page_directory, name)
        if path is None:
            logger.debug("Page resource %r not found in %s, skipping", name, self._page_directory)
            return
        self._required.add(name)
        self._render_unit(RenderContext(name, path, self._scope.merged(), self))

    def embed_script(
        self,
        name: str,
        variables: Mapping[str, ScopeValue] | None = None,
        *,
        path: bool = False,
        anonymous: bool = False,
        compressed: bool = False,
    ) -> None:
        """Write a script resource as an inline ``<script>`` element.

        See ``ScriptEmbedder.embed`` for the flags.
        """
        self.write(
            self._scripts.embed(
                name, variables, path=path, anonymous=anonymous, compressed=compressed
            )
        )

    # -- Template helpers --
    # Templates build their output as a string, so they take markup back
    # instead of writing around it.

    def component(self, name: str, scope: Mapping[str, ScopeValue] | None = None) -> Markup:
        """Return a component's output as markup (``{{ component("card") }}``)."""
        with self._session.buffers.capture() as captured:
            self.include_component(name, scope)
        return Markup(captured.value)

    def script(
        self,
        name: str,
        variables: Mapping[str, ScopeValue] | None = None,
        *,
        path: bool = False,
        anonymous: bool = False,
        compressed: bool = False,
    ) -> Markup:
        """Return a script element as markup (``{{ script("app", anonymous=true) }}``)."""
        return Markup(
            self._scripts.embed(
                name, variables, path=path, anonymous=anonymous, compressed=compressed
            )
        )

    def _render_unit(self, ctx: RenderContext) -> None:
        output = get_renderer(ctx.extension)(ctx)
        if output:
            self.write(output)

    def __repr__(self) -> str:
        return f"<View {self._title!r} {self._page_directory} {self.state.value}>"
