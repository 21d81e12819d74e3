"""Nested output buffers.

A ``BufferStack`` collects rendered text in levels. Writes land in the top
level; with no level open they go straight downstream. Each level uses the
StringBuilder pattern (list of parts, joined on demand).

Levels are meant to be acquired with ``buffer()`` or ``capture()`` so that
every push has a matching pop even when rendering raises. Code running
inside a level may open its own levels; on exit, anything it left open is
flushed and closed before the outer level is released.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager


class Capture:
    """Result holder for ``BufferStack.capture()``.

    ``value`` is empty while the block runs and holds the captured text
    after it exits.
    """

    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value = ""

    def __str__(self) -> str:
        return self.value


class BufferStack:
    """A stack of text buffers draining into *downstream*."""

    __slots__ = ("_downstream", "_levels")

    def __init__(self, downstream: Callable[[str], None]) -> None:
        self._downstream = downstream
        self._levels: list[list[str]] = []

    @property
    def depth(self) -> int:
        return len(self._levels)

    def write(self, text: str) -> None:
        if not text:
            return
        if self._levels:
            self._levels[-1].append(text)
        else:
            self._downstream(text)

    def contents(self) -> str:
        """Return the text held by the top level (empty with no level open)."""
        if not self._levels:
            return ""
        parts = self._levels[-1]
        if len(parts) > 1:
            # Collapse so repeated reads stay cheap
            parts[:] = ["".join(parts)]
        return parts[0] if parts else ""

    def length(self) -> int:
        """Number of characters held by the top level."""
        return sum(len(part) for part in self._levels[-1]) if self._levels else 0

    # -- Level management --

    def push(self) -> None:
        self._levels.append([])

    def pop(self) -> str:
        """Close the top level and return its contents."""
        text = self._top_contents("pop")
        self._levels.pop()
        return text

    def end_flush(self) -> None:
        """Close the top level, passing its contents one level down."""
        text = self.pop()
        self.write(text)

    def flush(self) -> None:
        """Pass the top level's contents one level down; the level stays open."""
        text = self._top_contents("flush")
        self._levels[-1].clear()
        if not text:
            return
        if self.depth > 1:
            self._levels[-2].append(text)
        else:
            self._downstream(text)

    def clean(self) -> None:
        """Discard the top level's contents; the level stays open."""
        if self._levels:
            self._levels[-1].clear()

    def unwind(self, depth: int) -> None:
        """Flush and close levels until only *depth* remain."""
        while self.depth > depth:
            self.end_flush()

    def _top_contents(self, action: str) -> str:
        if not self._levels:
            raise RuntimeError(f"Cannot {action}: no output buffer is open")
        return self.contents()

    # -- Scoped acquisition --

    @contextmanager
    def buffer(self, *, discard: bool = False) -> Iterator["BufferStack"]:
        """Open a level for the block; flush it down (or discard it) on exit."""
        base = self.depth
        self.push()
        try:
            yield self
        finally:
            self.unwind(base + 1)
            if discard:
                self.pop()
            else:
                self.end_flush()

    @contextmanager
    def capture(self) -> Iterator[Capture]:
        """Open a level for the block and keep its contents instead of flushing."""
        base = self.depth
        result = Capture()
        self.push()
        try:
            yield result
        finally:
            self.unwind(base + 1)
            result.value = self.pop()
