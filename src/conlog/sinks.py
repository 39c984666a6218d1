"""
Log sink abstractions and the console sink.
"""

from __future__ import annotations

import os
import threading
import weakref
from abc import ABC, abstractmethod
from typing import Union

from .buffer import LINE_LIMIT, LineBuffer
from .colors import NO_COLOR, Colorizer, select_colorizer
from .diagnostics import get_logger
from .encoding import needs_conversion
from .handles import HandleLike, OutputHandle, as_handle, generation_encoding, open_append
from .mutex import ConsoleMutex, console_mutex

logger = get_logger(__name__)

PathLike = Union[str, bytes, "os.PathLike[str]"]

# =============================================================================
# Sink Abstraction
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for line sinks."""

    @abstractmethod
    def write(self, data: str | bytes) -> int:
        """Accept bytes for the calling thread's current line."""
        ...

    @abstractmethod
    def flush_line(self) -> None:
        """Emit the calling thread's accumulated line."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class ConsoleSink(BaseSink):
    """Thread-aware line sink writing to one output handle.

    Args:
        handle: Initial output target, borrowed (never closed by the sink)
        color: Custom color for lines written to a terminal
        prepend_time: Prefix each line with ``HH:MM:SS.mmm [thread-id]``
        line_limit: Content bytes per line before a forced flush
        encoding: Generation encoding used for ``str`` writes (default: locale)
        mutex: Lock serializing colored writes (default: process-wide mutex)
        terminator: Line terminator (default: ``os.linesep``)
    """

    def __init__(
        self,
        handle: HandleLike,
        color: int = NO_COLOR,
        *,
        prepend_time: bool = True,
        line_limit: int = LINE_LIMIT,
        encoding: str | None = None,
        mutex: ConsoleMutex | None = None,
        terminator: str = os.linesep,
    ):
        if line_limit <= 0:
            raise ValueError(f"line_limit must be positive, got {line_limit}")
        self._handle = as_handle(handle)
        self._owns_handle = False
        self._file_backed = False
        self._color = color
        self._prepend_time = prepend_time
        self._line_limit = line_limit
        self._generation_encoding = encoding or generation_encoding()
        self._mutex = mutex or console_mutex
        self._terminator = terminator.encode("ascii")
        self._local = threading.local()
        self._buffers: weakref.WeakSet[LineBuffer] = weakref.WeakSet()
        self._closed = False
        self._adopt_terminal_state()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def handle(self) -> OutputHandle:
        return self._handle

    @property
    def owns_handle(self) -> bool:
        return self._owns_handle

    @property
    def file_backed(self) -> bool:
        return self._file_backed

    @property
    def use_color(self) -> bool:
        return self._use_color

    @property
    def colorizer(self) -> Colorizer:
        return self._colorizer

    @property
    def mutex(self) -> ConsoleMutex:
        return self._mutex

    @property
    def terminator(self) -> bytes:
        return self._terminator

    @property
    def line_limit(self) -> int:
        return self._line_limit

    @property
    def prepend_time(self) -> bool:
        return self._prepend_time

    @prepend_time.setter
    def prepend_time(self, value: bool) -> None:
        self._prepend_time = value

    @property
    def generation_encoding(self) -> str:
        return self._generation_encoding

    @property
    def display_encoding(self) -> str | None:
        return self._display_encoding

    @property
    def needs_conversion(self) -> bool:
        return needs_conversion(self._generation_encoding, self._display_encoding)

    @property
    def live_buffers(self) -> int:
        return len(self._buffers)

    @property
    def closed(self) -> bool:
        return self._closed

    def get_color(self) -> int:
        return self._color

    def set_color(self, color: int) -> None:
        self._color = color

    color = property(get_color, set_color)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def buffer(self) -> LineBuffer:
        """The calling thread's line buffer, created on first use."""
        bufptr = getattr(self._local, "buffer", None)
        if bufptr is None:
            bufptr = LineBuffer(self)
            self._local.buffer = bufptr
            self._buffers.add(bufptr)
        return bufptr

    def write(self, data: str | bytes) -> int:
        if isinstance(data, str):
            raw = data.encode(self._generation_encoding, errors="replace")
        else:
            raw = bytes(data)
        bufptr = self.buffer()
        start = 0
        while True:
            nl = raw.find(b"\n", start)
            if nl < 0:
                bufptr.append(raw[start:])
                break
            if nl != start:
                bufptr.append(raw[start:nl])
            bufptr.flush()
            start = nl + 1
        return len(data)

    def flush_line(self) -> None:
        self.buffer().flush()

    # -------------------------------------------------------------------------
    # Redirection
    # -------------------------------------------------------------------------

    def redirect(self, target: PathLike | HandleLike) -> bool:
        """Send subsequent lines to ``target``.

        Paths are opened for appending and owned by the sink; handles,
        descriptors and file objects are borrowed. Returns False, leaving the
        sink unchanged, when a path cannot be opened.
        """
        if isinstance(target, (str, bytes, os.PathLike)):
            return self._redirect_path(target)
        self._redirect_handle(as_handle(target))
        return True

    def _redirect_path(self, path: PathLike) -> bool:
        try:
            handle = open_append(path)
        except OSError as exc:
            logger.warning("redirect failed", path=os.fsdecode(path), error=str(exc))
            return False
        try:
            with self._mutex:
                self._flush_pending()
                self._release_handle()
                self._handle = handle
                self._owns_handle = True
                self._file_backed = True
                self._use_color = False
                self._colorizer = select_colorizer(handle)
                self._display_encoding = None
        except BaseException:
            handle.close()
            raise
        logger.debug("redirected to file", path=handle.name)
        return True

    def _redirect_handle(self, handle: OutputHandle) -> None:
        with self._mutex:
            self._flush_pending()
            if handle is not self._handle:
                self._release_handle()
                self._handle = handle
                self._owns_handle = False
                self._file_backed = False
            self._adopt_terminal_state()
            if not self._use_color and handle.is_regular_file():
                handle.seek_end()
        logger.debug("redirected to handle", handle=repr(handle), use_color=self._use_color)

    def _adopt_terminal_state(self) -> None:
        self._use_color = self._handle.isatty()
        self._colorizer = select_colorizer(self._handle)
        self._display_encoding = self._handle.console_encoding()

    def _flush_pending(self) -> None:
        bufptr = getattr(self._local, "buffer", None)
        if bufptr is not None and len(bufptr):
            bufptr.flush()

    def _release_handle(self) -> None:
        if self._owns_handle:
            self._handle.close()
            self._owns_handle = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the handle if the sink owns it. Partial lines are dropped."""
        if self._closed:
            return
        with self._mutex:
            self._release_handle()
            self._closed = True

    def __enter__(self) -> ConsoleSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ConsoleSink(handle={self._handle!r}, color={self._color:#06x}, use_color={self._use_color})"
