"""
Diagnostics for conlog itself.

conlog reports its own lifecycle events (installation skipped, redirect
failed) through locally wrapped structlog loggers, filtered at WARNING until
:func:`configure_diagnostics` says otherwise. Nothing here is called from the
write path, so a diagnostic may safely travel through an installed sink.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger


def get_logger(name: str | None = None) -> DiagnosticsLogger:
    """Get a structured logger instance.

    The logger is bound on every call to the level and stream last given to
    :func:`configure_diagnostics`, and never reads structlog's global
    configuration, so host applications keep their own structlog setup.
    """
    return DiagnosticsLogger(name or "conlog")


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add a local ``HH:MM:SS.mmm`` timestamp, matching the sink's line prefix."""
    now = datetime.now()
    event_dict["timestamp"] = f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "conlog")
    return event_dict


_PROCESSORS = [
    structlog.stdlib.add_log_level,
    add_timestamp,
    add_logger_name,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.dev.ConsoleRenderer(colors=False),
]


# =============================================================================
# Configuration Logic
# =============================================================================

_DEFAULT_LEVEL = logging.WARNING

_level: int = _DEFAULT_LEVEL
_stream: Any = None


def configure_diagnostics(level: str = "WARNING", *, stream: Any = None) -> None:
    """
    Configure conlog's own messages.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, resolved lazily to ``sys.stdout`` when omitted
    """
    global _level, _stream
    _level = getattr(logging, level.upper(), _DEFAULT_LEVEL)
    _stream = stream


class NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = NopFile()


class DiagnosticsLogger:
    """Named logger resolving level and ``sys.stdout`` at call time.

    Falls back to a no-op file when the process has no stdout (pythonw, daemons).
    """

    def __init__(self, name: str):
        self.name = name

    def _bind(self) -> Any:
        return structlog.wrap_logger(
            structlog.PrintLogger(file=_stream or sys.stdout or _NOP_FILE),
            processors=_PROCESSORS,
            wrapper_class=structlog.make_filtering_bound_logger(_level),
            context_class=dict,
            cache_logger_on_first_use=False,
            _name=self.name,
        )

    def __getattr__(self, method: str) -> Any:
        return getattr(self._bind(), method)
