"""
Process-wide logger: initialization, accessor and module-level emission functions.
"""

from __future__ import annotations

import atexit
from typing import Any, Optional

from .config import LoggingSettings, RunMode
from .exceptions import LoggerNotInitializedError
from .logger import Logger, make_logger
from .router import Router

# =============================================================================
# Global State
# =============================================================================

_logger: Optional[Logger] = None
_atexit_registered = False


def build_router(settings: LoggingSettings, mode: Optional[RunMode] = None, **overrides: Any) -> Router:
    """Construct the pipeline for ``mode`` (default: the settings' run mode).

    Extra keyword arguments (``stdout``, ``stderr``, ``exit_func``) pass
    through to the Router factory.
    """
    mode = mode or settings.mode
    rotation = settings.rotation()
    if mode is RunMode.PRODUCTION:
        overrides.pop("stdout", None)
        overrides.pop("stderr", None)
        return Router.production(error_file=settings.file_error, rotation=rotation, **overrides)
    return Router.development(
        info_file=settings.file_info,
        error_file=settings.file_error,
        rotation=rotation,
        console_color=settings.console_color,
        **overrides,
    )


def init_logger(runmode: Optional[str] = None, settings: Optional[LoggingSettings] = None, **overrides: Any) -> None:
    """Build and install the process-wide logger.

    Args:
        runmode: "release" for the production pipeline, anything else for
            development. Defaults to ``settings.runmode``.
        settings: Rotation and path configuration. Defaults to
            ``LoggingSettings()`` read from the environment.

    Raises:
        LogConfigError: a log file could not be opened. The previous logger,
            if any, stays installed.
    """
    global _logger, _atexit_registered

    settings = settings or LoggingSettings()
    mode = RunMode.from_runmode(runmode) if runmode is not None else settings.mode
    router = build_router(settings, mode, **overrides)

    shutdown()
    _logger = make_logger(router, name=settings.name, caller=settings.caller)

    if not _atexit_registered:
        atexit.register(shutdown)
        _atexit_registered = True


def get_logger(name: Optional[str] = None) -> Logger:
    """Return the installed logger, optionally as a named child."""
    if _logger is None:
        raise LoggerNotInitializedError()
    return _logger.named(name) if name else _logger


def shutdown() -> None:
    """Flush and close the installed logger's sinks."""
    global _logger
    if _logger is None:
        return
    _logger.router.close()
    _logger = None


def sync() -> None:
    get_logger().sync()


# =============================================================================
# Emission API
# =============================================================================


def debug(message: str, /, **fields: Any) -> None:
    get_logger().debug(message, **fields)


def debugf(template: str, /, *args: Any) -> None:
    get_logger().debugf(template, *args)


def info(message: str, /, **fields: Any) -> None:
    """Log a message at INFO with any structured fields."""
    get_logger().info(message, **fields)


def infof(template: str, /, *args: Any) -> None:
    """Log a %-formatted message at INFO."""
    get_logger().infof(template, *args)


def warn(message: str, /, **fields: Any) -> None:
    get_logger().warn(message, **fields)


def warnf(template: str, /, *args: Any) -> None:
    get_logger().warnf(template, *args)


def error(message: str, /, **fields: Any) -> None:
    get_logger().error(message, **fields)


def errorf(template: str, /, *args: Any) -> None:
    get_logger().errorf(template, *args)


def dpanic(message: str, /, **fields: Any) -> None:
    """DPanic means "development panic": it raises LoggerPanic only in development."""
    get_logger().dpanic(message, **fields)


def dpanicf(template: str, /, *args: Any) -> None:
    get_logger().dpanicf(template, *args)


def panic(message: str, /, **fields: Any) -> None:
    get_logger().panic(message, **fields)


def panicf(template: str, /, *args: Any) -> None:
    get_logger().panicf(template, *args)


def fatal(message: str, /, **fields: Any) -> None:
    """Log at FATAL, flush every sink, then exit with status 1."""
    get_logger().fatal(message, **fields)


def fatalf(template: str, /, *args: Any) -> None:
    get_logger().fatalf(template, *args)
