"""
The bound logger exposing the emission API.
"""

from __future__ import annotations

from typing import Any, Optional

from structlog import BoundLoggerBase

from .config import RunMode
from .exceptions import LoggerPanic
from .fields import validate_fields
from .levels import Level
from .processors import (
    CallerAdder,
    StacktraceAdder,
    add_level,
    add_logger_name,
    add_timestamp,
    build_record,
    rename_event_key,
)
from .router import Escalation, Router


def interpolate(template: str, args: tuple) -> str:
    """%-format ``template`` with ``args``.

    A template that does not match its arguments is not an error: the raw
    template is kept and the arguments are appended, so the record is still
    written.
    """
    if not args:
        return template
    try:
        return template % args
    except (TypeError, ValueError, KeyError):
        return f"{template} {args!r}"


class Logger(BoundLoggerBase):
    """Structured logger bound to a Router.

    ``log`` writes the record and returns the Escalation its level calls
    for; it never raises for I/O problems. The severity-named methods act
    on that escalation: ``panic`` (and ``dpanic`` in development) raise
    LoggerPanic, ``fatal`` ends the process.
    """

    _logger: Router

    @property
    def router(self) -> Router:
        return self._logger

    @property
    def name(self) -> Optional[str]:
        return self._context.get("_name")

    def bind(self, **new_values: Any) -> Logger:
        validate_fields(new_values)
        return super().bind(**new_values)

    def named(self, name: str) -> Logger:
        """Child logger whose records carry ``name``; nested names join with '.'."""
        current = self.name
        if current and name:
            name = f"{current}.{name}"
        return super().bind(_name=name or current)

    def enabled(self, level: Level | str) -> bool:
        return self._logger.enabled(Level.parse(level))

    def sync(self) -> None:
        self._logger.sync()

    def log(self, level: Level | str, message: str, /, **fields: Any) -> Escalation:
        level = Level.parse(level)
        validate_fields(fields)
        if self._logger.enabled(level):
            self._proxy_to_logger(level.label, message, **fields)
        return self._logger.escalation(level)

    def logf(self, level: Level | str, template: str, /, *args: Any) -> Escalation:
        return self.log(level, interpolate(template, args))

    def _escalate(self, outcome: Escalation, message: str, fields: dict) -> None:
        if outcome is Escalation.NONE:
            return
        self._logger.sync()
        if outcome is Escalation.EXIT:
            self._logger.exit(1)
        raise LoggerPanic(message, fields=fields)

    # Emission API -------------------------------------------------------

    def debug(self, message: str, /, **fields: Any) -> None:
        self.log(Level.DEBUG, message, **fields)

    def debugf(self, template: str, /, *args: Any) -> None:
        self.logf(Level.DEBUG, template, *args)

    def info(self, message: str, /, **fields: Any) -> None:
        self.log(Level.INFO, message, **fields)

    def infof(self, template: str, /, *args: Any) -> None:
        self.logf(Level.INFO, template, *args)

    def warn(self, message: str, /, **fields: Any) -> None:
        self.log(Level.WARN, message, **fields)

    def warnf(self, template: str, /, *args: Any) -> None:
        self.logf(Level.WARN, template, *args)

    warning = warn

    def error(self, message: str, /, **fields: Any) -> None:
        self.log(Level.ERROR, message, **fields)

    def errorf(self, template: str, /, *args: Any) -> None:
        self.logf(Level.ERROR, template, *args)

    def dpanic(self, message: str, /, **fields: Any) -> None:
        """Log at DPANIC; raises LoggerPanic in development only."""
        self._escalate(self.log(Level.DPANIC, message, **fields), message, fields)

    def dpanicf(self, template: str, /, *args: Any) -> None:
        message = interpolate(template, args)
        self._escalate(self.log(Level.DPANIC, message), message, {})

    def panic(self, message: str, /, **fields: Any) -> None:
        """Log at PANIC, flush, then raise LoggerPanic."""
        self._escalate(self.log(Level.PANIC, message, **fields), message, fields)

    def panicf(self, template: str, /, *args: Any) -> None:
        message = interpolate(template, args)
        self._escalate(self.log(Level.PANIC, message), message, {})

    def fatal(self, message: str, /, **fields: Any) -> None:
        """Log at FATAL, flush, then exit the process with status 1."""
        self._escalate(self.log(Level.FATAL, message, **fields), message, fields)

    def fatalf(self, template: str, /, *args: Any) -> None:
        message = interpolate(template, args)
        self._escalate(self.log(Level.FATAL, message), message, {})


def make_logger(
    router: Router,
    *,
    name: Optional[str] = None,
    caller: bool = True,
    caller_skip: int = 0,
    stacktrace_level: Optional[Level] = None,
) -> Logger:
    """Wrap a router in a Logger with the standard processor chain.

    Stack traces default to dpanic and above in production and to error and
    above in development.
    """
    if stacktrace_level is None:
        stacktrace_level = Level.DPANIC if router.mode is RunMode.PRODUCTION else Level.ERROR

    processors: list = [add_level, add_timestamp, add_logger_name, rename_event_key]
    if caller:
        processors.append(CallerAdder(skip=caller_skip))
    processors.append(StacktraceAdder(stacktrace_level, skip=caller_skip))
    processors.append(build_record)

    logger = Logger(router, processors, {})
    return logger.named(name) if name else logger
