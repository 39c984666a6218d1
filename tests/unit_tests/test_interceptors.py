"""
Standard library logging bridge and channel stream tests.
"""

from __future__ import annotations

import io
import logging
import os
import sys

import pytest

from conlog.config import LoggingSettings
from conlog.interceptors import ChannelHandler
from conlog.io import ChannelStream
from conlog.registry import Registry

TERMINATOR = os.linesep.encode()


@pytest.fixture
def quiet_registry(std_streams, make_handle):
    handle = make_handle()
    config = LoggingSettings(_env_file=None, level="info", prepend_time=False)
    with Registry(config, handle=handle) as registry:
        yield registry, handle


class TestChannelHandler:
    def test_records_routed_by_level(self, quiet_registry) -> None:
        registry, handle = quiet_registry
        logger = logging.getLogger("conlog.tests.bridge")
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        handler = ChannelHandler(registry)
        logger.addHandler(handler)
        try:
            logger.debug("below threshold")
            logger.info("hello %s", "world")
            logger.error("broken")
        finally:
            logger.removeHandler(handler)

        assert handle.writes == [
            b"conlog.tests.bridge: hello world" + TERMINATOR,
            b"conlog.tests.bridge: broken" + TERMINATOR,
        ]

    def test_capture_stdlib_attaches_and_restores_root(self, std_streams, make_handle) -> None:
        root = logging.getLogger()
        previous_level = root.level
        handle = make_handle()
        config = LoggingSettings(_env_file=None, level="warn", prepend_time=False, capture_stdlib=True)

        with Registry(config, handle=handle):
            assert any(isinstance(h, ChannelHandler) for h in root.handlers)
            logging.getLogger("app").info("ignored")
            logging.getLogger("app").warning("careful")

        assert not any(isinstance(h, ChannelHandler) for h in root.handlers)
        assert root.level == previous_level
        assert handle.writes == [b"app: careful" + TERMINATOR]


class TestChannelStream:
    def test_flush_keeps_partial_line(self, quiet_registry) -> None:
        registry, handle = quiet_registry
        sys.stdout.write("partial")
        sys.stdout.flush()
        assert handle.writes == []
        sys.stdout.write(" done\n")
        assert handle.writes == [b"partial done" + TERMINATOR]

    def test_binary_buffer_and_writelines(self, quiet_registry) -> None:
        registry, handle = quiet_registry
        sys.stdout.buffer.write(b"raw bytes\n")
        sys.stdout.writelines(["a", "b\n"])
        assert handle.writes == [b"raw bytes" + TERMINATOR, b"ab" + TERMINATOR]

    def test_stream_reports_sink_state(self, quiet_registry) -> None:
        registry, _ = quiet_registry
        stream = sys.stderr
        assert isinstance(stream, ChannelStream)
        assert stream.isatty() is False
        assert stream.writable()
        assert stream.encoding == registry.cerr.generation_encoding

    def test_unknown_attributes_proxy_to_original(self, make_sink) -> None:
        original = io.StringIO()
        stream = ChannelStream(make_sink(), original)
        assert stream.getvalue() == ""

    def test_no_original_stream(self, make_sink) -> None:
        stream = ChannelStream(make_sink())
        with pytest.raises(AttributeError):
            stream.fileno
