"""ASGI response sending for page logic.

Page logic is synchronous and writes through an ``OutputSession``. To serve
it over ASGI, the logic runs in a worker thread whose session drains into
an ``ASGISink``; every connection flush becomes one chunk of a chunked
response, so ``render_page_header()`` reaches the client before the body
is computed.

    app = page_app(home_page)          # plain ASGI app, no routing
"""

import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

import anyio
import anyio.from_thread
import anyio.to_thread

from perch.context import use_session
from perch.output.session import OutputSession

logger = logging.getLogger("perch.server")

Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]
PageLogic: TypeAlias = Callable[[], None]

RENDER_ERROR_CHUNK = b"<!-- perch: render error -->"


class ASGISink:
    """An ``OutputSink`` that forwards connection flushes to ASGI ``send``.

    Writes accumulate until ``flush_connection()``, which sends the response
    start (once) and the accumulated bytes as one body chunk. Sync methods
    must be called from an anyio worker thread; ``aclose()`` runs on the
    event loop.
    """

    __slots__ = ("_pending", "_send", "_started", "headers", "status")

    def __init__(
        self,
        send: Send,
        *,
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        self._send = send
        self._pending = bytearray()
        self._started = False
        self.status = status
        self.headers: list[tuple[str, str]] = [("content-type", content_type)]

    @property
    def started(self) -> bool:
        return self._started

    def write(self, data: bytes) -> None:
        self._pending.extend(data)

    def headers_already_sent(self) -> bool:
        return self._started

    def set_header(self, name: str, value: str) -> None:
        lowered = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n != lowered]
        self.headers.append((lowered, value))

    def flush_buffer(self) -> None:
        """Bytes are held until the connection flush; nothing to do here."""

    def flush_connection(self) -> None:
        for message in self._drain(more_body=True):
            anyio.from_thread.run(self._send, message)

    def discard(self) -> None:
        """Drop output not yet sent to the client."""
        self._pending.clear()

    async def aclose(self) -> None:
        """Send whatever is pending, then the final empty body."""
        for message in self._drain(more_body=True):
            await self._send(message)
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})

    def _drain(self, *, more_body: bool) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if not self._started:
            self._started = True
            raw_headers = [
                (name.encode("latin-1"), value.encode("latin-1")) for name, value in self.headers
            ]
            # No content-length — chunked transfer encoding signals body boundaries
            raw_headers.append((b"transfer-encoding", b"chunked"))
            messages.append(
                {"type": "http.response.start", "status": self.status, "headers": raw_headers}
            )
        if self._pending:
            messages.append(
                {"type": "http.response.body", "body": bytes(self._pending), "more_body": more_body}
            )
            self._pending.clear()
        return messages


async def serve_page(logic: PageLogic, send: Send) -> None:
    """Run *logic* in a worker thread and stream its output to *send*.

    A failure before anything was sent becomes a 500 response; a failure
    after the page header was flushed ends the stream with an HTML comment.
    """
    sink = ASGISink(send)

    def run() -> None:
        session = OutputSession(sink)
        with use_session(session):
            try:
                logic()
            finally:
                session.buffers.unwind(0)

    try:
        await anyio.to_thread.run_sync(run)
    except Exception:
        logger.exception("Page render failed")
        if not sink.started:
            sink.status = 500
            sink.discard()
        sink.write(RENDER_ERROR_CHUNK)

    await sink.aclose()


def page_app(logic: PageLogic) -> Callable[[Scope, Receive, Send], Awaitable[None]]:
    """Wrap page logic as an ASGI application serving every HTTP request."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return
        await serve_page(logic, send)

    return app
