"""
Output handle tests against real descriptors and file objects.
"""

from __future__ import annotations

import io
import os

import pytest

from conlog.handles import (
    FileDescriptorHandle,
    StreamHandle,
    as_handle,
    error_output_handle,
    is_valid_descriptor,
    open_append,
)


class TestOpenAppend:
    def test_creates_and_appends(self, tmp_path) -> None:
        path = tmp_path / "out.log"
        path.write_bytes(b"old\n")
        handle = open_append(path)
        try:
            assert handle.write(b"new\n") == 4
            assert handle.is_regular_file()
            assert not handle.isatty()
        finally:
            handle.close()
        assert path.read_bytes() == b"old\nnew\n"

    def test_missing_directory_raises(self, tmp_path) -> None:
        with pytest.raises(OSError):
            open_append(tmp_path / "nope" / "out.log")


class TestFileDescriptorHandle:
    def test_pipe_is_not_regular_and_seek_is_harmless(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            handle = FileDescriptorHandle(write_fd)
            assert not handle.is_regular_file()
            handle.seek_end()
            handle.write(b"ping")
            assert os.read(read_fd, 4) == b"ping"
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_no_attributes_off_windows(self, tmp_path) -> None:
        handle = open_append(tmp_path / "out.log")
        try:
            if os.name != "nt":
                assert handle.text_attribute() is None
                assert handle.set_text_attribute(0x07) is False
            assert handle.console_encoding() is None
        finally:
            handle.close()


class TestStreamHandle:
    def test_text_stream_receives_decoded_text(self) -> None:
        stream = io.StringIO()
        StreamHandle(stream).write("héllo".encode("utf-8"))
        assert stream.getvalue() == "héllo"

    def test_binary_stream_receives_bytes(self) -> None:
        stream = io.BytesIO(b"abc")
        handle = StreamHandle(stream)
        handle.seek_end()
        handle.write(b"def")
        assert stream.getvalue() == b"abcdef"
        assert not handle.isatty()


class TestCoercion:
    def test_as_handle(self) -> None:
        assert isinstance(as_handle(2), FileDescriptorHandle)
        assert isinstance(as_handle(io.BytesIO()), StreamHandle)
        handle = StreamHandle(io.BytesIO())
        assert as_handle(handle) is handle

    @pytest.mark.parametrize("target", [object(), True, "path.log"])
    def test_rejects_non_handles(self, target: object) -> None:
        with pytest.raises(TypeError):
            as_handle(target)

    def test_closed_descriptor_is_invalid(self, closed_fd: int) -> None:
        assert not is_valid_descriptor(closed_fd)

    def test_error_output_handle_without_stderr(self, monkeypatch) -> None:
        monkeypatch.setattr("sys.__stderr__", None)
        assert error_output_handle() is None
