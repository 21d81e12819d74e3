"""Static site generation.

Runs a page's entry logic once with its output captured, then writes the
captured document to a file::

    StaticRenderer.render_to_file("pages/home/page.py", "public/index.html")

Entry logic is a Python file that builds a ``View`` and renders it, either
at import time or from a ``main()`` function, which is called if present.
"""

import importlib.util
import logging
from pathlib import Path

from perch.context import get_session, use_session
from perch.errors import NotFound, WriteFailure
from perch.output.session import OutputSession
from perch.output.sink import MemorySink

logger = logging.getLogger("perch.static")


def run_entry_logic(path: str | Path) -> None:
    """Execute a page entry file as a fresh module and call its ``main()``."""
    source = Path(path)
    spec = importlib.util.spec_from_file_location(f"perch_page_{source.stem}", source)
    if spec is None or spec.loader is None:
        raise NotFound(source, f"Cannot load page entry logic from {str(source)!r}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    main = getattr(module, "main", None)
    if main is not None and callable(main):
        main()


class StaticRenderer:
    """Render a page to a static output file."""

    @staticmethod
    def render_to_file(
        in_path: str | Path = "page.py",
        out_path: str | Path = "index.html",
        *,
        encoding: str = "utf-8",
    ) -> int:
        """Render *in_path* and write the result to *out_path*.

        Anything held by the active session's top buffer is discarded first.

        Returns:
            Number of bytes written. Zero is a successful empty page.

        Raises:
            NotFound: *in_path* does not exist. Nothing is written.
            WriteFailure: The output file could not be written.
        """
        try:
            get_session().clean()
        except LookupError:
            pass

        source = Path(in_path)
        if not source.is_file():
            raise NotFound(source)

        session = OutputSession(MemorySink(), encoding=encoding)
        with use_session(session), session.buffers.capture() as captured:
            run_entry_logic(source)

        data = captured.value.encode(encoding)
        target = Path(out_path)
        try:
            written = target.write_bytes(data)
        except OSError as exc:
            raise WriteFailure(target, exc.strerror or str(exc)) from exc

        if written != len(data):
            raise WriteFailure(target, f"wrote {written} of {len(data)} bytes")

        logger.info("Rendered %s to %s (%d bytes)", source, target, written)
        return written
