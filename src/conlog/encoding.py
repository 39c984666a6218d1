"""
Conversion from the generation encoding to the display encoding.
"""

from __future__ import annotations

import codecs


def canonical_name(encoding: str) -> str:
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        return encoding.lower()


def needs_conversion(source: str | None, target: str | None) -> bool:
    """True when text produced in ``source`` must be re-encoded for ``target``."""
    if not source or not target:
        return False
    return canonical_name(source) != canonical_name(target)


def convert_line(data: bytes, source: str, target: str) -> bytes:
    """Re-encode one line from ``source`` to ``target``.

    Pure 7-bit text is returned as is. Any decode or encode failure returns the
    original bytes, a line in the wrong encoding beats a lost line.
    """
    if data.isascii():
        return data
    try:
        return data.decode(source).encode(target)
    except (UnicodeError, LookupError):
        return data
