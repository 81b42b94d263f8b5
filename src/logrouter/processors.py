"""
structlog processors that turn a call into a LogRecord.
"""

from __future__ import annotations

import inspect
import traceback
from pathlib import Path
from types import FrameType
from typing import Any, Optional, Sequence, Tuple

import structlog
from structlog.typing import EventDict, WrappedLogger

from .levels import Level
from .records import LogRecord

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Frames from these modules are never reported as the caller.
INTERNAL_MODULES: Tuple[str, ...] = ("structlog", "logrouter")


def add_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Derive the level from the proxied method name."""
    event_dict["level"] = Level.parse(method_name)
    return event_dict


add_timestamp = structlog.processors.TimeStamper(fmt=TIME_FORMAT, utc=False, key="time")


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Move the bound ``_name`` into the ``name`` key."""
    name = event_dict.pop("_name", None)
    if name:
        event_dict["name"] = name
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def short_caller(filename: str, lineno: int) -> str:
    """``/srv/app/handlers/user.py`` line 12 -> ``handlers/user.py:12``."""
    path = Path(filename)
    if path.parent.name:
        return f"{path.parent.name}/{path.name}:{lineno}"
    return f"{path.name}:{lineno}"


def find_caller_frame(skip: int = 0, ignore: Sequence[str] = INTERNAL_MODULES) -> Optional[FrameType]:
    """First frame outside the logging machinery, then ``skip`` frames further out."""
    frame = inspect.currentframe()
    while frame is not None:
        module = frame.f_globals.get("__name__", "")
        if not any(module == prefix or module.startswith(prefix + ".") for prefix in ignore):
            break
        frame = frame.f_back
    for _ in range(skip):
        if frame is None:
            break
        frame = frame.f_back
    return frame


class CallerAdder:
    """Attach the emission call site as ``caller``.

    ``skip`` counts extra wrapper frames the application puts around the
    logger, the same way zap's AddCallerSkip does.
    """

    def __init__(self, skip: int = 0) -> None:
        self.skip = skip

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        frame = find_caller_frame(self.skip)
        if frame is not None:
            event_dict["caller"] = short_caller(frame.f_code.co_filename, frame.f_lineno)
        return event_dict


class StacktraceAdder:
    """Attach the caller's stack for records at or above ``min_level``."""

    def __init__(self, min_level: Level, skip: int = 0) -> None:
        self.min_level = min_level
        self.skip = skip

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if event_dict["level"] < self.min_level:
            return event_dict
        frame = find_caller_frame(self.skip)
        if frame is not None:
            event_dict["stacktrace"] = "".join(traceback.format_stack(frame)).rstrip("\n")
        return event_dict


def build_record(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> Tuple[Tuple[Any, ...], dict]:
    """Final processor: freeze the event into a LogRecord for the router."""
    record = LogRecord(
        time=event_dict.pop("time"),
        level=event_dict.pop("level"),
        message=str(event_dict.pop("message", "")),
        name=event_dict.pop("name", None),
        caller=event_dict.pop("caller", None),
        stacktrace=event_dict.pop("stacktrace", None),
        fields=tuple(event_dict.items()),
    )
    return (record,), {}
