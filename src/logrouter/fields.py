"""
Structured field validation and value rendering.

Fields are keyword arguments at the call site. Their values must belong to
a closed set of kinds so every encoder can render them without reflection:
str, int, float, bool, None, timedelta (duration), BaseException (error),
datetime/date, and mappings or lists built from those kinds.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any

import orjson

from .exceptions import InvalidFieldError

# Keys the record itself owns; structlog reserves ``event`` and ``method_name``.
FIXED_KEYS = frozenset({"time", "level", "name", "caller", "message", "stacktrace"})
RESERVED_KEYS = FIXED_KEYS | {"event", "method_name", "_name"}

_SCALAR_KINDS = (str, int, float, bool, type(None), timedelta, datetime, date, BaseException)

# orjson integer range: i64 min to u64 max
_JSON_INT_MIN = -(2**63)
_JSON_INT_MAX = 2**64 - 1


def validate_fields(fields: Mapping[str, Any]) -> None:
    """Raise InvalidFieldError if any field has a reserved key or unsupported kind."""
    for key, value in fields.items():
        if key in RESERVED_KEYS:
            raise InvalidFieldError(key, "reserved key")
        _check_value(key, value)


def _check_value(path: str, value: Any) -> None:
    if isinstance(value, _SCALAR_KINDS):
        return
    if isinstance(value, Mapping):
        for k, v in value.items():
            if not isinstance(k, str):
                raise InvalidFieldError(path, f"nested keys must be str, got {type(k).__name__}")
            _check_value(f"{path}.{k}", v)
        return
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_value(f"{path}[{i}]", item)
        return
    raise InvalidFieldError(path, f"unsupported kind {type(value).__name__}")


def format_duration(value: timedelta) -> str:
    """Render a duration as e.g. ``1h2m3.5s``, ``1.5s``, ``250ms`` or ``0s``."""
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim(micros / 1_000)}ms"
    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _trim(rest / 1_000_000)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _trim(number: float) -> str:
    return f"{number:.6f}".rstrip("0").rstrip(".")


def format_error(value: BaseException) -> str:
    return str(value) or type(value).__name__


def format_float(value: float) -> str:
    """Render a float, spelling non-finite values ``NaN``, ``+Inf`` and ``-Inf``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(value)


def utf8_safe(value: str) -> str:
    """Escape lone surrogates (e.g. from surrogateescape-decoded paths)."""
    if value.isascii():
        return value
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return value.encode("utf-8", "backslashreplace").decode("utf-8")
    return value


def json_safe(value: Any) -> Any:
    """Replace values orjson would reject or render lossily with string forms.

    Integers beyond 64 bits become decimal strings, non-finite floats become
    ``NaN`` / ``+Inf`` / ``-Inf`` and strings with lone surrogates are escaped.
    """
    if isinstance(value, str):
        return utf8_safe(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value if _JSON_INT_MIN <= value <= _JSON_INT_MAX else str(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else format_float(value)
    if isinstance(value, BaseException):
        return utf8_safe(format_error(value))
    if isinstance(value, Mapping):
        return {utf8_safe(str(k)): json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value


def json_default(value: Any) -> Any:
    """orjson ``default`` hook for the kinds orjson does not know natively."""
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, BaseException):
        return format_error(value)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def orjson_dumps(v: Any) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(json_safe(v), default=json_default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


def render_value(value: Any) -> str:
    """Human-readable rendering of a field value for console output."""
    if isinstance(value, str):
        return value
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, BaseException):
        return format_error(value)
    if isinstance(value, (Mapping, list, tuple)):
        return orjson_dumps(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float):
        return format_float(value)
    return str(value)
