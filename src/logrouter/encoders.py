"""
Record encoders: line-delimited JSON and human-readable console text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .fields import orjson_dumps, render_value
from .levels import Level
from .records import LogRecord

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "key": "\033[34m",
    "caller": "\033[90m",
    "name": "\033[35m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class Encoder(ABC):
    """Turns a record into one newline-terminated chunk of text."""

    @abstractmethod
    def encode(self, record: LogRecord) -> str:
        ...


class JSONEncoder(Encoder):
    """One JSON object per line."""

    def encode(self, record: LogRecord) -> str:
        return orjson_dumps(record.to_dict()) + "\n"


class ConsoleEncoder(Encoder):
    """Compact console rendering.

    Format: time <TAB> level <TAB> [name <TAB>] [caller <TAB>] message [<TAB> key=value ...]
    A stack trace, when present, follows on its own lines.
    """

    _LEVEL_COLORS = {
        Level.DEBUG: "\033[36m",
        Level.INFO: "\033[32m",
        Level.WARN: "\033[33m",
        Level.ERROR: "\033[31m",
        Level.DPANIC: "\033[1;31m",
        Level.PANIC: "\033[1;31m",
        Level.FATAL: "\033[1;31m",
    }

    SEPARATOR = "\t"

    def __init__(self, *, use_color: bool = False) -> None:
        self.use_color = use_color

    def _maybe_color(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return colorize(text, color)

    def _level_text(self, level: Level) -> str:
        if not self.use_color:
            return level.label
        return f"{self._LEVEL_COLORS[level]}{level.label}{COLORS['reset']}"

    def encode(self, record: LogRecord) -> str:
        columns = [record.time, self._level_text(record.level)]
        if record.name is not None:
            columns.append(self._maybe_color(record.name, "name"))
        if record.caller is not None:
            columns.append(self._maybe_color(record.caller, "caller"))
        columns.append(record.message)

        extras = [
            f"{self._maybe_color(key, 'key')}={self._maybe_color(render_value(value), 'dim')}"
            for key, value in record.fields
        ]
        if extras:
            columns.append(" ".join(extras))

        line = self.SEPARATOR.join(columns)
        if record.stacktrace:
            line = f"{line}\n{record.stacktrace}"
        return line + "\n"
