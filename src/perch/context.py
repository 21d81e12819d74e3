"""Session-scoped output context via ContextVar.

Provides:
- ``session_var``: The ``OutputSession`` receiving page output for this
  task/thread.
- ``use_session()``: Bind a session for the duration of a ``with`` block.

Views pick up the active session at construction time. Accessing it
outside a ``use_session()`` block raises ``LookupError``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local for worker
    threads. No locks needed.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from perch.output.session import OutputSession

session_var: ContextVar[OutputSession] = ContextVar("perch_session")
"""The active output session. Set by ``use_session()``."""


def get_session() -> OutputSession:
    """Return the active output session.

    Raises ``LookupError`` if called outside a session context.
    """
    return session_var.get()


@contextmanager
def use_session(session: OutputSession) -> Iterator[OutputSession]:
    """Make *session* the active session inside the block."""
    token = session_var.set(session)
    try:
        yield session
    finally:
        session_var.reset(token)
