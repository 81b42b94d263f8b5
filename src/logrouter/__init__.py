"""
Dual-mode structured log router.

Routes records by severity to sinks, each with its own encoding:
- production: one JSON file sink for error and above
- development: JSON info/error files plus stdout/stderr console sinks

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson for high-performance JSON serialization.
"""

from .config import LoggingSettings, RunMode
from .core import (
    build_router,
    debug,
    debugf,
    dpanic,
    dpanicf,
    error,
    errorf,
    fatal,
    fatalf,
    get_logger,
    info,
    infof,
    init_logger,
    panic,
    panicf,
    shutdown,
    sync,
    warn,
    warnf,
)
from .exceptions import (
    InvalidFieldError,
    LogConfigError,
    LoggerNotInitializedError,
    LoggerPanic,
    LogRouterError,
)
from .levels import Level
from .logger import Logger, make_logger
from .records import LogRecord
from .rotation import RotationPolicy
from .router import Escalation, Router

__all__ = [
    "Escalation",
    "InvalidFieldError",
    "Level",
    "LogConfigError",
    "LogRecord",
    "LogRouterError",
    "Logger",
    "LoggerNotInitializedError",
    "LoggerPanic",
    "LoggingSettings",
    "RotationPolicy",
    "Router",
    "RunMode",
    "build_router",
    "debug",
    "debugf",
    "dpanic",
    "dpanicf",
    "error",
    "errorf",
    "fatal",
    "fatalf",
    "get_logger",
    "info",
    "infof",
    "init_logger",
    "make_logger",
    "panic",
    "panicf",
    "shutdown",
    "sync",
    "warn",
    "warnf",
]
