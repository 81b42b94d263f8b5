"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional

from .encoders import ConsoleEncoder, Encoder, JSONEncoder
from .exceptions import LogConfigError
from .levels import Level
from .records import LogRecord
from .rotation import RotatingFile, RotationPolicy

LevelFilter = Callable[[Level], bool]


def at_least(threshold: Level) -> LevelFilter:
    """Filter accepting severities >= threshold."""
    return lambda level: level >= threshold


def below(threshold: Level) -> LevelFilter:
    """Filter accepting severities < threshold."""
    return lambda level: level < threshold


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """A destination paired with an encoder and a level filter.

    Writes are serialized by a per-sink lock, so one record is always
    written in a single piece.
    """

    def __init__(self, encoder: Encoder, accepts: LevelFilter) -> None:
        self.encoder = encoder
        self._accepts = accepts
        self._lock = threading.Lock()
        self.write_errors = 0

    def accepts(self, level: Level) -> bool:
        return self._accepts(level)

    def emit(self, record: LogRecord) -> None:
        """Encode and write one record."""
        data = self.encoder.encode(record)
        with self._lock:
            self._write(data)

    def flush(self) -> None:
        """Flush buffered output, waiting for in-flight writes."""
        with self._lock:
            self._flush()

    def close(self) -> None:
        with self._lock:
            self._close()

    @abstractmethod
    def _write(self, data: str) -> None:
        ...

    @abstractmethod
    def _flush(self) -> None:
        ...

    def _close(self) -> None:
        self._flush()


class StdioSink(BaseSink):
    """Console sink writing human-readable lines to a stream.

    Args:
        stream: Output stream (default: stderr)
        accepts: Level filter
        use_color: Colorize levels; ``None`` enables color on a TTY
    """

    def __init__(self, accepts: LevelFilter, stream: Any = None, *, use_color: Optional[bool] = None) -> None:
        self._stream = stream if stream is not None else sys.stderr
        if use_color is None:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
        super().__init__(ConsoleEncoder(use_color=use_color), accepts)

    @property
    def stream(self) -> Any:
        return self._stream

    def _write(self, data: str) -> None:
        self._stream.write(data)
        self._stream.flush()

    def _flush(self) -> None:
        self._stream.flush()


class FileSink(BaseSink):
    """Local file sink with rotation (JSON format)."""

    def __init__(
        self,
        path: str | Path,
        accepts: LevelFilter,
        policy: Optional[RotationPolicy] = None,
        *,
        encoder: Optional[Encoder] = None,
        max_bytes: Optional[int] = None,
    ) -> None:
        super().__init__(encoder or JSONEncoder(), accepts)
        self.path = Path(path)
        try:
            self._file = RotatingFile(self.path, policy or RotationPolicy(), max_bytes=max_bytes)
        except OSError as exc:
            raise LogConfigError(f"cannot open log file {self.path}: {exc}", path=str(self.path)) from exc

    @property
    def file(self) -> RotatingFile:
        return self._file

    def _write(self, data: str) -> None:
        self._file.write(data.encode("utf-8"))

    def _flush(self) -> None:
        self._file.sync()

    def _close(self) -> None:
        self._file.close()
