"""
Severity levels.
"""

from __future__ import annotations

from enum import IntEnum


class Level(IntEnum):
    """Ordered log severity.

    Values follow the debug < info < warn < error < dpanic < panic < fatal
    ordering; the names render in lowercase.
    """

    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    DPANIC = 3
    PANIC = 4
    FATAL = 5

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: "str | int | Level") -> Level:
        """Parse a level from its name, an alias, or its integer value."""
        if isinstance(value, Level):
            return value
        if isinstance(value, int):
            return cls(value)
        key = str(value).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"unknown log level: {value!r}") from None


_ALIASES = {
    "warning": "warn",
    "critical": "fatal",
}
