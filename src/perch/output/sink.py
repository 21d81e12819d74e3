"""Output sinks — the connection side of a render.

A sink receives encoded bytes and response headers. The engine never
assumes a transport; it only uses the ``OutputSink`` capabilities:

- ``write(data)``: append body bytes
- ``headers_already_sent()``: whether the response head is committed
- ``set_header(name, value)``: set (replace) a response header
- ``flush_buffer()``: hand sink-side buffered bytes to the transport
- ``flush_connection()``: push everything handed over to the client
"""

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """Where a session's unbuffered output goes."""

    def write(self, data: bytes) -> None: ...

    def headers_already_sent(self) -> bool: ...

    def set_header(self, name: str, value: str) -> None: ...

    def flush_buffer(self) -> None: ...

    def flush_connection(self) -> None: ...


def _replace_header(headers: list[tuple[str, str]], name: str, value: str) -> None:
    lowered = name.lower()
    headers[:] = [(n, v) for n, v in headers if n.lower() != lowered]
    headers.append((name, value))


class MemorySink:
    """Records a response in memory.

    ``flush_points`` holds the body length at every connection flush, so the
    chunks a client would have received can be reconstructed with
    ``chunks``. Headers count as sent once any byte is written or the
    connection is flushed.
    """

    __slots__ = ("_sent", "body", "flush_points", "headers")

    def __init__(self) -> None:
        self.body = bytearray()
        self.headers: list[tuple[str, str]] = []
        self.flush_points: list[int] = []
        self._sent = False

    def write(self, data: bytes) -> None:
        if data:
            self.body.extend(data)
            self._sent = True

    def headers_already_sent(self) -> bool:
        return self._sent

    def set_header(self, name: str, value: str) -> None:
        _replace_header(self.headers, name, value)

    def flush_buffer(self) -> None:
        """Nothing is held back; bytes are recorded as soon as they arrive."""

    def flush_connection(self) -> None:
        self._sent = True
        self.flush_points.append(len(self.body))

    # -- Inspection --

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @property
    def chunks(self) -> list[bytes]:
        """Body split at each connection flush (the tail after the last one included)."""
        parts: list[bytes] = []
        start = 0
        for point in self.flush_points:
            if point > start:
                parts.append(bytes(self.body[start:point]))
                start = point
        if start < len(self.body):
            parts.append(bytes(self.body[start:]))
        return parts

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for n, v in self.headers:
            if n.lower() == lowered:
                return v
        return None


class StreamSink:
    """Writes a CGI-style response to a binary stream.

    The header block (``Name: value`` lines and a blank line) precedes the
    first body byte. Pass ``send_headers=False`` to write the body only.
    """

    __slots__ = ("_headers", "_send_headers", "_sent", "_stream")

    def __init__(
        self,
        stream: BinaryIO,
        *,
        content_type: str = "text/html; charset=utf-8",
        send_headers: bool = True,
    ) -> None:
        self._stream = stream
        self._headers: list[tuple[str, str]] = [("Content-Type", content_type)]
        self._send_headers = send_headers
        self._sent = False

    def write(self, data: bytes) -> None:
        if not data:
            return
        self._commit()
        self._stream.write(data)

    def headers_already_sent(self) -> bool:
        return self._sent

    def set_header(self, name: str, value: str) -> None:
        _replace_header(self._headers, name, value)

    def flush_buffer(self) -> None:
        self._commit()

    def flush_connection(self) -> None:
        self._commit()
        self._stream.flush()

    def _commit(self) -> None:
        if self._sent:
            return
        self._sent = True
        if self._send_headers:
            head = "".join(f"{name}: {value}\r\n" for name, value in self._headers)
            self._stream.write(f"{head}\r\n".encode("latin-1"))
