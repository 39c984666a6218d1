"""
Per-thread line buffer.

A ``LineBuffer`` belongs to exactly one thread and one sink. It collects the
pieces of a line, prefixes a timestamp, splits overlong lines at the sink's
limit and writes each finished line with a single colored, locked sequence.
"""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from typing import TYPE_CHECKING

from .colors import NO_COLOR
from .encoding import convert_line

if TYPE_CHECKING:
    from .sinks import ConsoleSink

LINE_LIMIT = 1000

_IS_WINDOWS = sys.platform.startswith("win")


def thread_tag() -> str:
    if _IS_WINDOWS:
        return f"{threading.get_native_id():04d}"
    return f"{threading.get_ident() & 0xFFFFFFFF:08x}"


def format_prefix(now: datetime | None = None, tag: str | None = None) -> str:
    """Render the ``HH:MM:SS.mmm [thread-id] `` line prefix."""
    now = now or datetime.now()
    return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d} [{tag or thread_tag()}] "


class LineBuffer:
    """Accumulates one line for the owning sink on the current thread."""

    def __init__(self, owner: ConsoleSink):
        self._owner = owner
        self._text = bytearray()
        self._prefix_length = 0
        self._line_color = NO_COLOR
        self._convert = False

    @property
    def text(self) -> bytes:
        return bytes(self._text)

    @property
    def content_length(self) -> int:
        """Bytes buffered for the current line, timestamp excluded."""
        return len(self._text) - self._prefix_length

    @property
    def line_color(self) -> int:
        return self._line_color

    def __len__(self) -> int:
        return len(self._text)

    def append(self, data: bytes) -> None:
        if not data:
            return
        limit = self._owner.line_limit
        if not self._text:
            self._begin_line()
        view = memoryview(data)
        while len(view) + self.content_length > limit:
            chunk = limit - self.content_length
            self._text += view[:chunk]
            self.flush()
            view = view[chunk:]
            if view:
                self._begin_line()
        if view:
            self._text += view

    def flush(self) -> None:
        """Write the buffered line plus terminator and reset.

        The buffer is cleared even when the write raises.
        """
        owner = self._owner
        text = bytes(self._text)
        if self._convert and text:
            text = convert_line(text, owner.generation_encoding, owner.display_encoding)
        try:
            if owner.use_color:
                self._write_colored(text)
            else:
                owner.handle.write(text + owner.terminator)
        finally:
            self._text.clear()
            self._prefix_length = 0
            self._line_color = NO_COLOR

    def _write_colored(self, text: bytes) -> None:
        owner = self._owner
        with owner.mutex:
            handle = owner.handle
            colorizer = owner.colorizer
            token = None
            prefix = b""
            if text:
                prefix, token = colorizer.begin(handle, self._line_color)
            try:
                if text:
                    handle.write(prefix + text)
            finally:
                suffix = colorizer.end(handle, token) if token is not None else b""
            # inside the lock so no colored line lands between text and terminator
            handle.write(suffix + owner.terminator)

    def _begin_line(self) -> None:
        owner = self._owner
        self._line_color = owner.color
        self._convert = owner.needs_conversion
        self._prefix_length = 0
        if owner.prepend_time:
            prefix = format_prefix().encode("ascii")
            self._text += prefix
            self._prefix_length = len(prefix)
