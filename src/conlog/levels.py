"""
Severity levels and channel routing.
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Any


class Level(IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    CRIT = 5

    @classmethod
    def parse(cls, value: Any) -> Level:
        """Accept a Level, its number or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            name = _LEVEL_ALIASES.get(name, name)
            if name.isdigit():
                return cls(int(name))
            try:
                return cls[name]
            except KeyError:
                raise ValueError(f"unknown level: {value!r}") from None
        raise ValueError(f"unknown level: {value!r}")


_LEVEL_ALIASES = {
    "WARNING": "WARN",
    "ERR": "ERROR",
    "CRITICAL": "CRIT",
    "EVERYTHING": "TRACE",
}


class Channel(str, Enum):
    LOW = "clog"
    HIGH = "cerr"


def channel_for(level: Level) -> Channel:
    """Low channel for trace/debug/info, high channel for warn/error/crit."""
    return Channel.HIGH if level >= Level.WARN else Channel.LOW


def is_active(level: Level, threshold: Level) -> bool:
    return level >= threshold


def from_stdlib(levelno: int) -> Level:
    """Map a :mod:`logging` level number onto a severity level."""
    if levelno >= logging.CRITICAL:
        return Level.CRIT
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    if levelno >= logging.DEBUG:
        return Level.DEBUG
    return Level.TRACE
