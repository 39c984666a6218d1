"""
Thread-safe console logging channels.

Two channels replace ``sys.stdout`` (low severity: trace/debug/info) and
``sys.stderr`` (high severity: warn/error/crit). Each thread assembles its own
lines, every line gets a ``HH:MM:SS.mmm [thread-id]`` prefix, terminals get
per-channel colors, and either channel can be redirected to a file at runtime.

Design Pattern: Strategy Pattern for sinks, handles and colorizers.
Library: structlog for conlog's own diagnostics, pydantic-settings for configuration.
"""

from .colors import (
    BG_BLACK,
    BG_BLUE,
    BG_BRIGHT,
    BG_CYAN,
    BG_GREEN,
    BG_MAGENTA,
    BG_RED,
    BG_WHITE,
    BG_YELLOW,
    DEFAULT_CERR_COLOR,
    DEFAULT_CLOG_COLOR,
    FG_BLACK,
    FG_BLUE,
    FG_BRIGHT,
    FG_CYAN,
    FG_GREEN,
    FG_MAGENTA,
    FG_RED,
    FG_WHITE,
    FG_YELLOW,
    NO_COLOR,
)
from .levels import Level
from .registry import (
    Registry,
    crit,
    debug,
    error,
    get_registry,
    info,
    install,
    is_cerr_active,
    is_clog_active,
    log,
    set_cerr_color,
    set_clog_color,
    trace,
    uninstall,
    warn,
)
from .sinks import BaseSink, ConsoleSink

__all__ = [
    "BG_BLACK",
    "BG_BLUE",
    "BG_BRIGHT",
    "BG_CYAN",
    "BG_GREEN",
    "BG_MAGENTA",
    "BG_RED",
    "BG_WHITE",
    "BG_YELLOW",
    "DEFAULT_CERR_COLOR",
    "DEFAULT_CLOG_COLOR",
    "FG_BLACK",
    "FG_BLUE",
    "FG_BRIGHT",
    "FG_CYAN",
    "FG_GREEN",
    "FG_MAGENTA",
    "FG_RED",
    "FG_WHITE",
    "FG_YELLOW",
    "NO_COLOR",
    "BaseSink",
    "ConsoleSink",
    "Level",
    "Registry",
    "crit",
    "debug",
    "error",
    "get_registry",
    "info",
    "install",
    "is_cerr_active",
    "is_clog_active",
    "log",
    "set_cerr_color",
    "set_clog_color",
    "trace",
    "uninstall",
    "warn",
]
