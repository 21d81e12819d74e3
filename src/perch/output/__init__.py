"""Output buffering, sessions, and sinks."""

from perch.output.buffer import BufferStack, Capture
from perch.output.session import OutputSession
from perch.output.sink import MemorySink, OutputSink, StreamSink

__all__ = [
    "BufferStack",
    "Capture",
    "MemorySink",
    "OutputSession",
    "OutputSink",
    "StreamSink",
]
