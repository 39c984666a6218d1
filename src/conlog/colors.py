"""
Color model and colorizer strategies.

A color is a 16-bit mask laid out like the Windows console attribute word:
foreground in bits 0-2, foreground intensity in bit 3, background in bits 4-6,
background intensity in bit 7. ``NO_COLOR`` leaves the terminal untouched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .handles import OutputHandle

# =============================================================================
# Color Bits
# =============================================================================

FG_BLACK = 0x0000
FG_BLUE = 0x0001
FG_GREEN = 0x0002
FG_CYAN = FG_GREEN | FG_BLUE
FG_RED = 0x0004
FG_MAGENTA = FG_RED | FG_BLUE
FG_YELLOW = FG_RED | FG_GREEN
FG_WHITE = FG_RED | FG_GREEN | FG_BLUE
FG_BRIGHT = 0x0008
FG_MASK = FG_WHITE

BG_BLACK = 0x0000
BG_BLUE = 0x0010
BG_GREEN = 0x0020
BG_CYAN = BG_GREEN | BG_BLUE
BG_RED = 0x0040
BG_MAGENTA = BG_RED | BG_BLUE
BG_YELLOW = BG_RED | BG_GREEN
BG_WHITE = BG_RED | BG_GREEN | BG_BLUE
BG_BRIGHT = 0x0080
BG_MASK = BG_WHITE

NO_COLOR = 0xFFFF

DEFAULT_CLOG_COLOR = FG_WHITE | FG_BRIGHT
DEFAULT_CERR_COLOR = BG_RED | FG_WHITE | FG_BRIGHT

COLOR_NAMES = {
    "fg_black": FG_BLACK,
    "fg_blue": FG_BLUE,
    "fg_green": FG_GREEN,
    "fg_cyan": FG_CYAN,
    "fg_red": FG_RED,
    "fg_magenta": FG_MAGENTA,
    "fg_yellow": FG_YELLOW,
    "fg_white": FG_WHITE,
    "fg_bright": FG_BRIGHT,
    "bg_black": BG_BLACK,
    "bg_blue": BG_BLUE,
    "bg_green": BG_GREEN,
    "bg_cyan": BG_CYAN,
    "bg_red": BG_RED,
    "bg_magenta": BG_MAGENTA,
    "bg_yellow": BG_YELLOW,
    "bg_white": BG_WHITE,
    "bg_bright": BG_BRIGHT,
}

# =============================================================================
# ANSI Rendering
# =============================================================================

ANSI_RESET = "\033[0m"

# Keyed by the masked bits; ANSI numbers colors red=1, green=2, blue=4.
_ANSI_FOREGROUND = {
    FG_RED: "31",
    FG_GREEN: "32",
    FG_YELLOW: "33",
    FG_BLUE: "34",
    FG_MAGENTA: "35",
    FG_CYAN: "36",
    FG_WHITE: "37",
}

_ANSI_BACKGROUND = {
    BG_RED: "41",
    BG_GREEN: "42",
    BG_YELLOW: "43",
    BG_BLUE: "44",
    BG_MAGENTA: "45",
    BG_CYAN: "46",
    BG_WHITE: "47",
}


def parse_color(value: Any) -> int:
    """Parse an integer or a ``|``-joined list of color names into a color mask.

    ``"none"`` (or an empty string) stands for ``NO_COLOR``; integer strings
    such as ``"0x4f"`` are accepted too.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid color: {value!r}")
    if isinstance(value, int):
        if value == -1:
            return NO_COLOR
        if not 0 <= value <= NO_COLOR:
            raise ValueError(f"color out of range: {value!r}")
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid color: {value!r}")

    text = value.strip().lower()
    if text in ("", "none", "default"):
        return NO_COLOR
    try:
        return parse_color(int(text, 0))
    except ValueError:
        pass

    color = 0
    for name in text.split("|"):
        name = name.strip()
        if name not in COLOR_NAMES:
            raise ValueError(f"unknown color name: {name!r}")
        color |= COLOR_NAMES[name]
    return color


def render_ansi(color: int) -> str | None:
    """Render a color mask as an ANSI SGR sequence, or None when nothing would change.

    A foreground code is always emitted once any bit is set, so black text
    stays black on a colored background.
    """
    if color == NO_COLOR or not color & 0x00FF:
        return None
    codes = [_ANSI_FOREGROUND.get(color & FG_MASK, "30")]
    background = _ANSI_BACKGROUND.get(color & BG_MASK)
    if background:
        codes.append(background)
    if color & (FG_BRIGHT | BG_BRIGHT):
        codes.append("1")
    return f"\033[{';'.join(codes)}m"


def render_attribute(color: int) -> int | None:
    """Render a color mask as a console attribute word."""
    if color == NO_COLOR:
        return None
    return color & 0x00FF


# =============================================================================
# Colorizer Abstraction (Strategy Pattern)
# =============================================================================


class Colorizer(ABC):
    """Applies a color around one line written to a handle.

    Both calls happen while the console mutex is held, so implementations may
    touch global terminal state.
    """

    @abstractmethod
    def begin(self, handle: OutputHandle, color: int) -> tuple[bytes, Any]:
        """Apply ``color``.

        Returns the bytes to emit ahead of the line and a restore token, the
        token is None when no color was applied.
        """
        ...

    @abstractmethod
    def end(self, handle: OutputHandle, token: Any) -> bytes:
        """Undo ``begin`` and return the bytes to emit ahead of the terminator."""
        ...


class AnsiColorizer(Colorizer):
    """In-band escape sequences for ANSI terminals."""

    def __init__(self, encoding: str = "ascii"):
        self._encoding = encoding

    def begin(self, handle: OutputHandle, color: int) -> tuple[bytes, Any]:
        sequence = render_ansi(color)
        if sequence is None:
            return b"", None
        return sequence.encode(self._encoding), ANSI_RESET

    def end(self, handle: OutputHandle, token: Any) -> bytes:
        return token.encode(self._encoding)


class ConsoleAttributeColorizer(Colorizer):
    """Out-of-band attribute words for Windows consoles."""

    def begin(self, handle: OutputHandle, color: int) -> tuple[bytes, Any]:
        attribute = render_attribute(color)
        if attribute is None:
            return b"", None
        previous = handle.text_attribute()
        if previous is None:
            return b"", None
        handle.set_text_attribute(attribute)
        return b"", previous

    def end(self, handle: OutputHandle, token: Any) -> bytes:
        handle.set_text_attribute(token)
        return b""


def select_colorizer(handle: OutputHandle) -> Colorizer:
    """Pick the colorizer matching what the handle supports."""
    if handle.text_attribute() is not None:
        return ConsoleAttributeColorizer()
    return AnsiColorizer()
