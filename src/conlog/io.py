"""
Standard stream interception.
"""

from __future__ import annotations

from typing import Any

from .sinks import ConsoleSink


class ChannelStream:
    """Text stream that feeds a sink; stands in for ``sys.stdout`` / ``sys.stderr``."""

    def __init__(self, sink: ConsoleSink, original_stream: Any = None):
        self.sink = sink
        self.original_stream = original_stream
        self.buffer = BinaryChannel(sink)

    def write(self, buf: str | bytes) -> int:
        return self.sink.write(buf)

    def writelines(self, lines: Any) -> None:
        for line in lines:
            self.sink.write(line)

    def flush(self) -> None:
        # A partial line stays buffered until its newline arrives.
        flush = getattr(self.original_stream, "flush", None)
        if flush is not None:
            flush()

    def isatty(self) -> bool:
        return self.sink.use_color

    def writable(self) -> bool:
        return True

    @property
    def encoding(self) -> str:
        return self.sink.generation_encoding

    @property
    def errors(self) -> str:
        return "replace"

    # Proxy all other methods to original stream
    def __getattr__(self, name: str) -> Any:
        original = self.__dict__.get("original_stream")
        if original is None:
            raise AttributeError(name)
        return getattr(original, name)


class BinaryChannel:
    """Byte-level view of a channel, exposed as ``ChannelStream.buffer``."""

    def __init__(self, sink: ConsoleSink):
        self.sink = sink

    def write(self, buf: bytes) -> int:
        return self.sink.write(bytes(buf))

    def flush(self) -> None:
        pass

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return self.sink.use_color
