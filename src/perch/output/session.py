"""Output session — one response's buffer stack bound to its sink.

Every View writes through the session that was active when it was built
(see ``perch.context``). Text written while a buffer is open stays in the
process until the buffer is flushed or closed; with no buffer open it is
encoded and handed to the sink immediately.
"""

import logging

from perch.output.buffer import BufferStack
from perch.output.sink import OutputSink

logger = logging.getLogger("perch.view")


class OutputSession:
    """A buffer stack draining into an ``OutputSink``.

    Usage::

        session = OutputSession(MemorySink())
        with session.buffers.buffer():
            session.write("<p>held</p>")
        session.finish()
    """

    __slots__ = ("buffers", "encoding", "sink")

    def __init__(self, sink: OutputSink, *, encoding: str = "utf-8") -> None:
        self.sink = sink
        self.encoding = encoding
        self.buffers = BufferStack(self._emit)

    def _emit(self, text: str) -> None:
        self.sink.write(text.encode(self.encoding))

    def write(self, text: str) -> None:
        self.buffers.write(text)

    def buffered_size(self) -> int:
        """Size in bytes of the text held by the top buffer."""
        return len(self.buffers.contents().encode(self.encoding))

    def flush_to_sink(self) -> None:
        """Flush the top buffer one level down, then push the sink to the client."""
        if self.buffers.depth:
            self.buffers.flush()
        self.sink.flush_buffer()
        self.sink.flush_connection()

    def set_header(self, name: str, value: str) -> bool:
        """Set a response header unless the sink already committed them.

        Returns ``False`` (and does nothing) once headers are sent.
        """
        if self.sink.headers_already_sent():
            logger.debug("Ignoring header %s: headers already sent", name)
            return False
        self.sink.set_header(name, value)
        return True

    def clean(self) -> None:
        """Discard whatever the top buffer holds."""
        self.buffers.clean()

    def finish(self) -> None:
        """Close every open buffer (flushing it) and flush the connection."""
        self.buffers.unwind(0)
        self.sink.flush_buffer()
        self.sink.flush_connection()
