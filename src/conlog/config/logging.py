"""
Logging Configuration.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..colors import DEFAULT_CERR_COLOR, DEFAULT_CLOG_COLOR, parse_color
from ..levels import Level


class DiagnosticsLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingSettings(BaseSettings):
    """Console sink configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CONLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: Level = Field(default=Level.INFO, description="Threshold level (trace, debug, info, warn, error, crit)")
    clog_color: int = Field(default=DEFAULT_CLOG_COLOR, description="Color of the low-severity channel")
    cerr_color: int = Field(default=DEFAULT_CERR_COLOR, description="Color of the high-severity channel")
    prepend_time: bool = Field(default=True, description="Prefix lines with time and thread id")
    line_limit: int = Field(default=1000, gt=0, description="Content bytes per line before a forced flush")
    generation_encoding: Optional[str] = Field(
        default=None,
        description="Encoding of produced text (default: locale preferred encoding)",
    )
    capture_stdlib: bool = Field(default=False, description="Route the root stdlib logger into the channels")
    diagnostics_level: DiagnosticsLevel = Field(
        default=DiagnosticsLevel.WARNING,
        description="Level of conlog's own diagnostics",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)

    @field_validator("clog_color", "cerr_color", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> int:
        return parse_color(value)

    @field_validator("diagnostics_level", mode="before")
    @classmethod
    def _upper_diagnostics_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value
