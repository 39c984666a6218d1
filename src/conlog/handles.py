"""
Output handle capability.

Sinks never touch file descriptors directly; they go through ``OutputHandle``
so tests and callers can supply in-memory or wrapped targets.
"""

from __future__ import annotations

import io
import os
import stat
import sys
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, TextIO, Union

_IS_WINDOWS = sys.platform.startswith("win")

# =============================================================================
# Handle Abstraction
# =============================================================================


class OutputHandle(ABC):
    """Abstract output handle."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write all of ``data``; raise ``OSError`` on failure."""
        ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def isatty(self) -> bool: ...

    @abstractmethod
    def seek_end(self) -> None: ...

    @abstractmethod
    def is_regular_file(self) -> bool: ...

    def text_attribute(self) -> int | None:
        """Current console attribute word, None where attributes are not supported."""
        return None

    def set_text_attribute(self, attribute: int) -> bool:
        return False

    def console_encoding(self) -> str | None:
        """Encoding the console expects, None when the handle is not a console."""
        return None


class FileDescriptorHandle(OutputHandle):
    """Raw OS file descriptor.

    Args:
        fd: Open descriptor
        name: Display name used in diagnostics
    """

    def __init__(self, fd: int, name: str | None = None):
        self._fd = fd
        self.name = name or f"<fd {fd}>"

    @property
    def fd(self) -> int:
        return self._fd

    def fileno(self) -> int:
        return self._fd

    def write(self, data: bytes) -> int:
        view = memoryview(data)
        while view:
            written = os.write(self._fd, view)
            view = view[written:]
        return len(data)

    def close(self) -> None:
        os.close(self._fd)

    def isatty(self) -> bool:
        try:
            return os.isatty(self._fd)
        except OSError:
            return False

    def seek_end(self) -> None:
        try:
            os.lseek(self._fd, 0, os.SEEK_END)
        except OSError:
            pass  # pipes and terminals are not seekable

    def is_regular_file(self) -> bool:
        try:
            return stat.S_ISREG(os.fstat(self._fd).st_mode)
        except OSError:
            return False

    def text_attribute(self) -> int | None:
        if not _IS_WINDOWS:
            return None
        return _win32_get_attribute(self._fd)

    def set_text_attribute(self, attribute: int) -> bool:
        if not _IS_WINDOWS:
            return False
        return _win32_set_attribute(self._fd, attribute)

    def console_encoding(self) -> str | None:
        if not _IS_WINDOWS or not self.isatty():
            return None
        return _win32_console_encoding()

    def __repr__(self) -> str:
        return f"FileDescriptorHandle({self.name})"


class StreamHandle(OutputHandle):
    """Python file object (text or binary).

    Text streams receive the bytes decoded with their own encoding. Every write
    is followed by a flush of the stream.
    """

    def __init__(self, stream: Union[BinaryIO, TextIO, Any]):
        self._stream = stream
        self.name = getattr(stream, "name", repr(stream))

    @property
    def stream(self) -> Any:
        return self._stream

    def write(self, data: bytes) -> int:
        if isinstance(self._stream, io.TextIOBase):
            encoding = getattr(self._stream, "encoding", None) or "utf-8"
            self._stream.write(data.decode(encoding, errors="replace"))
        else:
            self._stream.write(data)
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()
        return len(data)

    def close(self) -> None:
        self._stream.close()

    def isatty(self) -> bool:
        return bool(getattr(self._stream, "isatty", lambda: False)())

    def seek_end(self) -> None:
        seekable = getattr(self._stream, "seekable", lambda: False)
        if seekable():
            self._stream.seek(0, io.SEEK_END)

    def is_regular_file(self) -> bool:
        try:
            return stat.S_ISREG(os.fstat(self._stream.fileno()).st_mode)
        except (AttributeError, OSError, ValueError):
            return bool(getattr(self._stream, "seekable", lambda: False)())

    def __repr__(self) -> str:
        return f"StreamHandle({self.name})"


HandleLike = Union[OutputHandle, int, BinaryIO, TextIO]

# =============================================================================
# Factories
# =============================================================================


def open_append(path: str | bytes | os.PathLike[str]) -> FileDescriptorHandle:
    """Open ``path`` for appending, creating it if missing.

    Other processes keep full read and append access. Raises ``OSError``.
    """
    flags = os.O_WRONLY | os.O_APPEND | os.O_CREAT | getattr(os, "O_BINARY", 0)
    fd = os.open(path, flags, 0o666)
    handle = FileDescriptorHandle(fd, name=os.fsdecode(path))
    handle.seek_end()
    return handle


def as_handle(target: HandleLike) -> OutputHandle:
    """Coerce a handle, descriptor or file object into an ``OutputHandle``."""
    if isinstance(target, OutputHandle):
        return target
    if isinstance(target, bool):
        raise TypeError(f"not an output handle: {target!r}")
    if isinstance(target, int):
        return FileDescriptorHandle(target)
    if hasattr(target, "write"):
        return StreamHandle(target)
    raise TypeError(f"not an output handle: {target!r}")


def is_valid_descriptor(fd: int) -> bool:
    """True when ``fd`` refers to an open, real file or console."""
    try:
        os.fstat(fd)
    except (OSError, ValueError):
        return False
    return True


def error_output_handle() -> FileDescriptorHandle | None:
    """The process's error-output descriptor, or None when it is unusable."""
    stream = sys.__stderr__
    if stream is None:
        return None
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    if fd < 0 or not is_valid_descriptor(fd):
        return None
    return FileDescriptorHandle(fd, name="<stderr>")


def generation_encoding() -> str:
    """Encoding text is produced in before it reaches a handle."""
    if _IS_WINDOWS:
        import ctypes

        return f"cp{ctypes.windll.kernel32.GetACP()}"
    import locale

    return locale.getpreferredencoding(False)


# =============================================================================
# Win32 Console
# =============================================================================


def _win32_console_handle(fd: int) -> Any:
    import msvcrt

    try:
        return msvcrt.get_osfhandle(fd)
    except OSError:
        return None


def _win32_get_attribute(fd: int) -> int | None:
    import ctypes
    from ctypes import wintypes

    class COORD(ctypes.Structure):
        _fields_ = [("X", wintypes.SHORT), ("Y", wintypes.SHORT)]

    class CONSOLE_SCREEN_BUFFER_INFO(ctypes.Structure):
        _fields_ = [
            ("dwSize", COORD),
            ("dwCursorPosition", COORD),
            ("wAttributes", wintypes.WORD),
            ("srWindow", wintypes.SMALL_RECT),
            ("dwMaximumWindowSize", COORD),
        ]

    console = _win32_console_handle(fd)
    if console is None:
        return None
    info = CONSOLE_SCREEN_BUFFER_INFO()
    if not ctypes.windll.kernel32.GetConsoleScreenBufferInfo(console, ctypes.byref(info)):
        return None
    return int(info.wAttributes)


def _win32_set_attribute(fd: int, attribute: int) -> bool:
    import ctypes

    console = _win32_console_handle(fd)
    if console is None:
        return False
    return bool(ctypes.windll.kernel32.SetConsoleTextAttribute(console, attribute))


def _win32_console_encoding() -> str | None:
    import ctypes

    codepage = ctypes.windll.kernel32.GetConsoleOutputCP()
    if not codepage:
        return None
    return f"cp{codepage}"
