import io
import os
import sys
import threading
import typing as t

import pytest

from conlog import registry as registry_module
from conlog.handles import OutputHandle
from conlog.mutex import ConsoleMutex
from conlog.sinks import ConsoleSink


class RecordingHandle(OutputHandle):
    """In-memory handle recording every write (and attribute change) in order."""

    def __init__(
        self,
        *,
        tty: bool = False,
        regular: bool = False,
        attribute: int | None = None,
        console_encoding: str | None = None,
        fail_writes: bool = False,
    ):
        self.tty = tty
        self.regular = regular
        self.attribute = attribute
        self.encoding = console_encoding
        self.fail_writes = fail_writes
        self.writes: list[bytes] = []
        self.events: list[tuple[str, t.Any]] = []
        self.closed = False
        self.seeks = 0
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        if self.fail_writes:
            raise OSError(28, "No space left on device")
        with self._lock:
            self.writes.append(bytes(data))
            self.events.append(("write", bytes(data)))
        return len(data)

    def close(self) -> None:
        self.closed = True

    def isatty(self) -> bool:
        return self.tty

    def seek_end(self) -> None:
        self.seeks += 1

    def is_regular_file(self) -> bool:
        return self.regular

    def text_attribute(self) -> int | None:
        return self.attribute

    def set_text_attribute(self, attribute: int) -> bool:
        self.events.append(("attr", attribute))
        self.attribute = attribute
        return True

    def console_encoding(self) -> str | None:
        return self.encoding

    @property
    def output(self) -> bytes:
        return b"".join(self.writes)


@pytest.fixture
def make_handle() -> t.Callable[..., RecordingHandle]:
    return RecordingHandle


@pytest.fixture
def make_sink() -> t.Iterator[t.Callable[..., ConsoleSink]]:
    """Sink factory; defaults to "\\n" terminators, utf-8 and a private mutex."""
    sinks: list[ConsoleSink] = []

    def factory(handle: t.Any = None, color: int = 0xFFFF, **kwargs: t.Any) -> ConsoleSink:
        kwargs.setdefault("terminator", "\n")
        kwargs.setdefault("encoding", "utf-8")
        kwargs.setdefault("mutex", ConsoleMutex())
        sink = ConsoleSink(handle if handle is not None else RecordingHandle(), color, **kwargs)
        sinks.append(sink)
        return sink

    yield factory

    for sink in sinks:
        sink.close()


@pytest.fixture
def std_streams(monkeypatch: pytest.MonkeyPatch) -> tuple[io.StringIO, io.StringIO]:
    """Replace sys.stdout / sys.stderr with plain buffers the registry can splice over."""
    out, err = io.StringIO(), io.StringIO()
    monkeypatch.setattr(sys, "stdout", out)
    monkeypatch.setattr(sys, "stderr", err)
    return out, err


@pytest.fixture
def default_registry_cleanup() -> t.Iterator[None]:
    yield
    registry_module.uninstall()


@pytest.fixture
def closed_fd() -> int:
    read_fd, write_fd = os.pipe()
    os.close(read_fd)
    os.close(write_fd)
    return write_fd
