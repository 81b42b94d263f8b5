"""
Logging Configuration.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rotation import RotationPolicy


class RunMode(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @classmethod
    def from_runmode(cls, runmode: str) -> RunMode:
        """``release`` selects production; anything else is development."""
        if runmode.strip().lower() == "release":
            return cls.PRODUCTION
        return cls.DEVELOPMENT


class LoggingSettings(BaseSettings):
    """Log routing and rotation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOGROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    runmode: str = Field(default="debug", description="'release' for production, anything else for development")
    max_size: int = Field(default=100, ge=0, description="Megabytes before a log file rotates")
    max_backups: int = Field(default=5, ge=0, description="Rotated files to retain")
    max_age: int = Field(default=30, ge=0, description="Days a rotated file is retained")
    file_info: str = Field(default="logs/info.log", description="Info-stream log file")
    file_error: str = Field(default="logs/error.log", description="Error-stream log file")
    name: Optional[str] = Field(default=None, description="Root logger name")
    caller: bool = Field(default=True, description="Attach caller location to records")
    console_color: Optional[bool] = Field(default=None, description="Force console colors; unset means TTY detection")

    @property
    def mode(self) -> RunMode:
        return RunMode.from_runmode(self.runmode)

    def rotation(self) -> RotationPolicy:
        return RotationPolicy(max_size=self.max_size, max_backups=self.max_backups, max_age=self.max_age)
