"""
Process-wide registry of the two channel sinks.

Lifecycle: build a ``Registry``, ``install()`` it before user code runs,
``uninstall()`` it after user code completes. While installed, ``sys.stdout``
feeds the low-severity sink and ``sys.stderr`` the high-severity sink; both
sinks write to the process's error-output handle. ``install``/``uninstall``
at module level manage one default registry for the whole process.
"""

from __future__ import annotations

import sys
from typing import Any

from .colors import NO_COLOR
from .config import LoggingSettings, settings
from .diagnostics import configure_diagnostics, get_logger
from .exceptions import RegistryStateError
from .handles import FileDescriptorHandle, HandleLike, OutputHandle, as_handle, error_output_handle, is_valid_descriptor
from .interceptors import ChannelHandler, attach_root_handler, detach_root_handler
from .io import ChannelStream
from .levels import Channel, Level, channel_for, is_active
from .mutex import ConsoleMutex, console_mutex
from .sinks import ConsoleSink

logger = get_logger(__name__)


class Registry:
    """Owns the low/high severity sinks and the streams they replace.

    Args:
        config: Logging settings (default: ``conlog.config.settings.logging``)
        handle: Output target for both sinks (default: the error-output descriptor)
        mutex: Console mutex shared by both sinks (default: process-wide mutex)
    """

    def __init__(
        self,
        config: LoggingSettings | None = None,
        *,
        handle: HandleLike | None = None,
        mutex: ConsoleMutex | None = None,
    ):
        self.config = config or settings.logging
        self.threshold: Level = self.config.level
        self.mutex = mutex or console_mutex
        self.clog: ConsoleSink | None = None
        self.cerr: ConsoleSink | None = None
        self._handle = handle
        self._stdout_native: Any = None
        self._stderr_native: Any = None
        self._stdlib_handler: ChannelHandler | None = None
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def install(self) -> bool:
        """Build both sinks and splice them into ``sys.stdout`` / ``sys.stderr``.

        Returns False, leaving the standard streams untouched, when the output
        handle is not a real file or console.
        Raises RegistryStateError when this registry, or another one, already
        holds the standard streams.
        """
        if self._installed:
            raise RegistryStateError("registry is already installed", installed=True)
        if isinstance(sys.stdout, ChannelStream) or isinstance(sys.stderr, ChannelStream):
            raise RegistryStateError("standard streams are already intercepted by another registry", installed=False)

        configure_diagnostics(self.config.diagnostics_level.value)

        handle = self._resolve_handle()
        if handle is None:
            logger.info("error output unavailable, channels left untouched")
            return False

        self.clog = self._build_sink(handle, self.config.clog_color)
        self.cerr = self._build_sink(handle, self.config.cerr_color)

        self._stdout_native = sys.stdout
        self._stderr_native = sys.stderr
        sys.stdout = ChannelStream(self.clog, self._stdout_native)  # type: ignore
        sys.stderr = ChannelStream(self.cerr, self._stderr_native)  # type: ignore

        if self.config.capture_stdlib:
            self._stdlib_handler = attach_root_handler(self)

        self._installed = True
        logger.debug("channels installed", handle=repr(handle), threshold=self.threshold.name)
        return True

    def uninstall(self) -> None:
        """Restore the original streams, then close the sinks in reverse order."""
        if not self._installed:
            raise RegistryStateError("registry is not installed", installed=False)

        logger.debug("channels uninstalling")
        if self._stdlib_handler is not None:
            detach_root_handler(self._stdlib_handler)
            self._stdlib_handler = None

        sys.stderr = self._stderr_native
        sys.stdout = self._stdout_native
        self._stderr_native = None
        self._stdout_native = None

        if self.cerr is not None:
            self.cerr.close()
        if self.clog is not None:
            self.clog.close()
        self._installed = False

    def _resolve_handle(self) -> OutputHandle | None:
        if self._handle is None:
            return error_output_handle()
        handle = as_handle(self._handle)
        if isinstance(handle, FileDescriptorHandle) and not is_valid_descriptor(handle.fd):
            return None
        return handle

    def _build_sink(self, handle: OutputHandle, color: int) -> ConsoleSink:
        return ConsoleSink(
            handle,
            color,
            prepend_time=self.config.prepend_time,
            line_limit=self.config.line_limit,
            encoding=self.config.generation_encoding,
            mutex=self.mutex,
        )

    def __enter__(self) -> Registry:
        self.install()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._installed:
            self.uninstall()

    # =========================================================================
    # Severity Front-End
    # =========================================================================

    def is_active(self, level: Level | int | str) -> bool:
        return is_active(Level.parse(level), self.threshold)

    def sink(self, channel: Channel) -> ConsoleSink | None:
        return self.cerr if channel is Channel.HIGH else self.clog

    def stream(self, level: Level | int | str) -> ConsoleSink | None:
        """The sink serving ``level``'s channel, None while not installed."""
        return self.sink(channel_for(Level.parse(level)))

    def log(self, level: Level | int | str, message: str) -> bool:
        """Write ``message`` as one line when ``level`` is active. Returns whether it was written."""
        level = Level.parse(level)
        if not self.is_active(level):
            return False
        sink = self.stream(level)
        if sink is None:
            return False
        sink.write(message + "\n")
        return True

    def set_clog_color(self, color: int) -> None:
        if self.clog is not None:
            self.clog.set_color(color)

    def set_cerr_color(self, color: int) -> None:
        if self.cerr is not None:
            self.cerr.set_color(color)

    def get_clog_color(self) -> int:
        return self.clog.get_color() if self.clog is not None else NO_COLOR

    def get_cerr_color(self) -> int:
        return self.cerr.get_color() if self.cerr is not None else NO_COLOR


# =============================================================================
# Default Registry
# =============================================================================

_registry: Registry | None = None


def get_registry() -> Registry | None:
    return _registry


def install(config: LoggingSettings | None = None, *, handle: HandleLike | None = None) -> Registry:
    """Install the default registry, or return it when already installed."""
    global _registry

    if _registry is not None and _registry.installed:
        return _registry
    registry = Registry(config, handle=handle)
    registry.install()
    _registry = registry
    return registry


def uninstall() -> None:
    global _registry

    if _registry is not None and _registry.installed:
        _registry.uninstall()
    _registry = None


def _threshold() -> Level:
    if _registry is not None:
        return _registry.threshold
    return settings.logging.level


def is_clog_active(level: Level | int | str) -> bool:
    return is_active(Level.parse(level), _threshold())


def is_cerr_active(level: Level | int | str) -> bool:
    return is_active(Level.parse(level), _threshold())


def set_clog_color(color: int) -> None:
    if _registry is not None:
        _registry.set_clog_color(color)


def set_cerr_color(color: int) -> None:
    if _registry is not None:
        _registry.set_cerr_color(color)


def log(level: Level | int | str, message: str) -> bool:
    if _registry is None:
        return False
    return _registry.log(level, message)


def trace(message: str) -> bool:
    return log(Level.TRACE, message)


def debug(message: str) -> bool:
    return log(Level.DEBUG, message)


def info(message: str) -> bool:
    return log(Level.INFO, message)


def warn(message: str) -> bool:
    return log(Level.WARN, message)


def error(message: str) -> bool:
    return log(Level.ERROR, message)


def crit(message: str) -> bool:
    return log(Level.CRIT, message)
