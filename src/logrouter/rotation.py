"""
Size-based file rotation with backup-count and age pruning.

Backups sit beside the active file as ``<stem>.<n><suffix>``; ``.1`` is the
most recent.
"""

from __future__ import annotations

import os
import re
import time
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

MEGABYTE = 1024 * 1024
DAY_SECONDS = 24 * 60 * 60
DEFAULT_MAX_SIZE_MB = 100


class RotationPolicy(BaseModel):
    """Rotation limits for one log file.

    A zero ``max_size`` falls back to 100 MB, zero ``max_backups`` keeps
    every backup, and zero ``max_age`` disables age pruning.
    """

    model_config = ConfigDict(frozen=True)

    max_size: int = Field(default=DEFAULT_MAX_SIZE_MB, ge=0, description="Megabytes before rotation")
    max_backups: int = Field(default=0, ge=0, description="Backups to retain")
    max_age: int = Field(default=0, ge=0, description="Days a backup is retained")

    @property
    def max_bytes(self) -> int:
        return (self.max_size or DEFAULT_MAX_SIZE_MB) * MEGABYTE


class RotatingFile:
    """Append-only binary file that rotates itself before it grows past the limit.

    Not thread-safe; the owning sink serializes access.
    """

    def __init__(
        self,
        path: str | Path,
        policy: RotationPolicy,
        *,
        clock: Callable[[], float] = time.time,
        max_bytes: Optional[int] = None,
    ) -> None:
        self.path = Path(path)
        self.policy = policy
        self._clock = clock
        self._max_bytes = max_bytes if max_bytes is not None else policy.max_bytes
        self._file: Optional[BinaryIO] = None
        self._size = 0
        self._backup_pattern = re.compile(
            rf"^{re.escape(self.path.stem)}\.(\d+){re.escape(self.path.suffix)}$"
        )
        self._open()
        self.prune()

    @property
    def size(self) -> int:
        return self._size

    def _open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "ab")
        self._size = os.fstat(self._file.fileno()).st_size

    def write(self, data: bytes) -> int:
        if self._file is None:
            raise ValueError(f"write to closed log file {self.path}")
        if self._size > 0 and self._size + len(data) > self._max_bytes:
            self.rotate()
        written = self._file.write(data)
        self._file.flush()
        self._size += written
        return written

    def backup_path(self, index: int) -> Path:
        return self.path.with_name(f"{self.path.stem}.{index}{self.path.suffix}")

    def backups(self) -> List[Tuple[int, Path]]:
        """Existing backups as (index, path), oldest index last."""
        found = []
        for entry in self.path.parent.iterdir():
            match = self._backup_pattern.match(entry.name)
            if match and entry.is_file():
                found.append((int(match.group(1)), entry))
        return sorted(found)

    def rotate(self) -> None:
        """Move the active file to ``.1`` and open a fresh one."""
        if self._file is not None:
            self._file.close()
            self._file = None
        try:
            limit = self.policy.max_backups
            for index, backup in reversed(self.backups()):
                if limit and index >= limit:
                    backup.unlink(missing_ok=True)
                else:
                    backup.rename(self.backup_path(index + 1))
            if self.path.exists():
                self.path.rename(self.backup_path(1))
        finally:
            self._open()
        self.prune()

    def prune(self) -> None:
        """Drop backups past the count limit or older than the age limit."""
        limit = self.policy.max_backups
        cutoff = self._clock() - self.policy.max_age * DAY_SECONDS if self.policy.max_age else None
        for index, backup in self.backups():
            try:
                if limit and index > limit:
                    backup.unlink()
                elif cutoff is not None and backup.stat().st_mtime < cutoff:
                    backup.unlink()
            except FileNotFoundError:
                continue

    def sync(self) -> None:
        if self._file is None:
            return
        self._file.flush()
        os.fsync(self._file.fileno())

    def close(self) -> None:
        if self._file is None:
            return
        self._file.flush()
        self._file.close()
        self._file = None
