"""
logrouter exception hierarchy.

Three kinds of failure reach callers:
- configuration errors while building the router (fatal to startup)
- invalid structured fields passed at a call site (programming errors)
- intentional escalation raised by ``panic`` and development ``dpanic``

Per-write I/O errors on a sink never surface here.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogRouterError(Exception):
    """Root of every logrouter exception."""


class LogConfigError(LogRouterError):
    """The router could not be constructed.

    Raised for unwritable log paths or an unusable configuration. No
    fallback sink is created; the caller decides whether to abort.
    """

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidFieldError(LogRouterError, TypeError):
    """A structured field has an unsupported kind or a reserved key."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"invalid log field {key!r}: {reason}")
        self.key = key


class LoggerNotInitializedError(LogRouterError, RuntimeError):
    """Module-level emission was used before ``init_logger``."""

    def __init__(self) -> None:
        super().__init__("logger is not initialized; call init_logger() first")


class LoggerPanic(LogRouterError):
    """Control-flow signal raised after a ``panic`` (or development ``dpanic``) record.

    The record has already been written and the sinks flushed when this
    is raised.
    """

    def __init__(self, message: str, *, fields: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or {}
