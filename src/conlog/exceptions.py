"""
Exception hierarchy for conlog.

Ordinary failures (an unopenable redirect target, an encoding that does not
convert) are reported through return values; exceptions are kept for misuse
of the process-wide lifecycle.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ConlogError(Exception):
    """Root of all conlog exceptions."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class RegistryStateError(ConlogError):
    """Raised on a second install, an install over another registry, or an uninstall while not installed."""

    def __init__(self, message: str, *, installed: bool) -> None:
        super().__init__(
            message,
            code="REGISTRY_STATE",
            details={"installed": installed},
        )
        self.installed = installed
