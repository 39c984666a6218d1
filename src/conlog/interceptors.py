"""
Interceptors for routing standard library logging into the channels.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .levels import from_stdlib

if TYPE_CHECKING:
    from .registry import Registry


class ChannelHandler(logging.Handler):
    """
    Redirect standard library logging records to the registry's channels.

    Records map onto severity levels by number; WARNING and above go to the
    high-severity channel. The sink adds time and thread, so the default
    format is just ``name: message``.
    """

    def __init__(self, registry: Registry, level: int = logging.NOTSET):
        super().__init__(level)
        self.registry = registry
        self.previous_root_level: int | None = None
        self.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = from_stdlib(record.levelno)
            if not self.registry.is_active(level):
                return
            msg = self.format(record)
            self.registry.stream(level).write(msg + "\n")
        except Exception:
            self.handleError(record)


def attach_root_handler(registry: Registry) -> ChannelHandler:
    """Add a ``ChannelHandler`` to the root logger and return it."""
    handler = ChannelHandler(registry)
    root_logger = logging.getLogger()
    handler.previous_root_level = root_logger.level
    root_logger.addHandler(handler)
    # the registry threshold does the filtering
    root_logger.setLevel(1)
    return handler


def detach_root_handler(handler: ChannelHandler) -> None:
    root_logger = logging.getLogger()
    root_logger.removeHandler(handler)
    previous = getattr(handler, "previous_root_level", None)
    if previous is not None:
        root_logger.setLevel(previous)
