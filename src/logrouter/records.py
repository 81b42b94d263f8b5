"""
The immutable log record handed from the processor chain to the sinks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .levels import Level


@dataclass(frozen=True)
class LogRecord:
    """A single emitted log entry.

    ``fields`` keeps the structured key-value pairs in call order, bound
    context first.
    """

    time: str
    level: Level
    message: str
    name: Optional[str] = None
    caller: Optional[str] = None
    stacktrace: Optional[str] = None
    fields: Tuple[Tuple[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"time": self.time, "level": self.level.label}
        if self.name is not None:
            data["name"] = self.name
        if self.caller is not None:
            data["caller"] = self.caller
        data["message"] = self.message
        if self.stacktrace is not None:
            data["stacktrace"] = self.stacktrace
        data.update(self.fields)
        return data
