"""
The log router: owns the sinks and fans every record out to those that accept it.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .config import RunMode
from .levels import Level
from .records import LogRecord
from .rotation import RotationPolicy
from .sinks import BaseSink, FileSink, StdioSink, at_least, below


class Escalation(Enum):
    """What the caller must do after a record has been logged."""

    NONE = "none"
    PANIC = "panic"
    EXIT = "exit"


class Router:
    """Routes records by severity to a fixed set of sinks.

    A write failure on one sink is counted on that sink and does not stop
    delivery to the others.
    """

    def __init__(
        self,
        sinks: Iterable[BaseSink],
        *,
        mode: RunMode = RunMode.DEVELOPMENT,
        exit_func: Callable[[int], Any] = os._exit,
    ) -> None:
        self._sinks: Tuple[BaseSink, ...] = tuple(sinks)
        self.mode = mode
        self.exit = exit_func
        self._closed = False

    @property
    def sinks(self) -> Tuple[BaseSink, ...]:
        return self._sinks

    @property
    def closed(self) -> bool:
        return self._closed

    def enabled(self, level: Level) -> bool:
        return any(sink.accepts(level) for sink in self._sinks)

    def escalation(self, level: Level) -> Escalation:
        if level >= Level.FATAL:
            return Escalation.EXIT
        if level >= Level.PANIC:
            return Escalation.PANIC
        if level == Level.DPANIC and self.mode is RunMode.DEVELOPMENT:
            return Escalation.PANIC
        return Escalation.NONE

    def emit(self, record: LogRecord) -> None:
        for sink in self._sinks:
            if not sink.accepts(record.level):
                continue
            try:
                sink.emit(record)
            except Exception:
                sink.write_errors += 1

    # structlog proxies each level method to the wrapped logger
    debug = info = warn = error = dpanic = panic = fatal = emit

    def sync(self) -> None:
        """Flush every sink, waiting for in-flight writes."""
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception:
                sink.write_errors += 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.sync()
        for sink in self._sinks:
            try:
                sink.close()
            except Exception:
                sink.write_errors += 1

    # =========================================================================
    # Pipelines
    # =========================================================================

    @classmethod
    def production(
        cls,
        *,
        error_file: str | Path,
        rotation: Optional[RotationPolicy] = None,
        exit_func: Callable[[int], Any] = os._exit,
    ) -> Router:
        """Single JSON file sink for severity >= error."""
        sink = FileSink(error_file, at_least(Level.ERROR), rotation)
        return cls([sink], mode=RunMode.PRODUCTION, exit_func=exit_func)

    @classmethod
    def development(
        cls,
        *,
        info_file: str | Path,
        error_file: str | Path,
        rotation: Optional[RotationPolicy] = None,
        stdout: Any = None,
        stderr: Any = None,
        console_color: Optional[bool] = None,
        exit_func: Callable[[int], Any] = os._exit,
    ) -> Router:
        """JSON info/error files plus stdout/stderr console sinks, split at error."""
        low, high = below(Level.ERROR), at_least(Level.ERROR)
        sinks: List[BaseSink] = []
        try:
            sinks.append(FileSink(info_file, low, rotation))
            sinks.append(FileSink(error_file, high, rotation))
        except Exception:
            for sink in sinks:
                sink.close()
            raise
        sinks.append(StdioSink(low, stdout if stdout is not None else sys.stdout, use_color=console_color))
        sinks.append(StdioSink(high, stderr if stderr is not None else sys.stderr, use_color=console_color))
        return cls(sinks, mode=RunMode.DEVELOPMENT, exit_func=exit_func)
