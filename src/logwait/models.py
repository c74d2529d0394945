"""Data models for the log wait system.

This module defines the core data structures shared by the position tracker,
rotation detector, line matcher and poll loop: the per-wait mutable state,
file snapshots used as rotation fingerprints, and the terminal outcome of a
wait.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class RotationKind(Enum):
    """Classification of what happened to the watched file between polls.

    Attributes:
        NONE: Same file instance, only appended to (or untouched).
        TRUNCATED: Same file instance, shrunk below the read offset.
        REPLACED: A different file instance now lives at the watched path.
    """

    NONE = "none"
    TRUNCATED = "truncated"
    REPLACED = "replaced"


class WaitStatus(Enum):
    """Terminal state of a wait call."""

    MATCHED = "matched"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class WaitSignal(Enum):
    """Distinguished non-match values returned by ``wait_for_content``."""

    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


TIMED_OUT = WaitSignal.TIMED_OUT
CANCELLED = WaitSignal.CANCELLED


@dataclass(frozen=True)
class FileSnapshot:
    """Point-in-time view of a file, taken from ``os.stat``.

    The identity triple (device, inode, birth time) is the rotation
    fingerprint: it stays the same while a file is appended to and changes
    when the file at the path is replaced. Size and mtime change on append.

    Attributes:
        path: Path the snapshot was taken from.
        device: ``st_dev`` of the file.
        inode: ``st_ino`` of the file.
        birth_time_ns: Creation time where the platform reports one, else None.
        size: File length in bytes.
        mtime_ns: Last modification time in nanoseconds.
    """

    path: Path
    device: int
    inode: int
    birth_time_ns: int | None
    size: int
    mtime_ns: int

    @property
    def identity(self) -> tuple[int, int, int | None]:
        return (self.device, self.inode, self.birth_time_ns)


@dataclass
class ReadResult:
    """Lines produced by one read of a file.

    Attributes:
        lines: Lazy, single-use iterator over decoded lines.
        new_offset: Byte offset just past the last complete line read.
        vanished: True if the file disappeared or failed mid-read.
    """

    lines: Iterator[str]
    new_offset: int
    vanished: bool = False


@dataclass
class WatchState:
    """Mutable state owned by one wait call.

    Attributes:
        path: File being watched.
        read_offset: Bytes of the current file already scanned.
        fingerprint: Snapshot of the file instance the offset refers to, or
            None when the file did not exist yet.
        rotation_watermark: mtime (ns) boundary for rotated sibling discovery.
        pending_rotation: Rotation detected but the live file not yet rescanned.
    """

    path: Path
    read_offset: int = 0
    fingerprint: FileSnapshot | None = None
    rotation_watermark: int = 0
    pending_rotation: bool = False


@dataclass
class WaitOutcome:
    """Terminal value of a wait.

    Attributes:
        status: How the wait ended.
        result: Value mapped to the matching pattern (None unless matched).
        pattern: The pattern that matched.
        line: The line that matched.
        source: File the matching line was read from (live file or sibling).
        elapsed: Seconds spent waiting.
    """

    status: WaitStatus
    result: Any = None
    pattern: Any = None
    line: str | None = None
    source: Path | None = None
    elapsed: float = field(default=0.0, compare=False)

    @property
    def matched(self) -> bool:
        return self.status is WaitStatus.MATCHED

    def value(self) -> Any:
        """Return the mapped result, or the signal for a non-match."""
        if self.status is WaitStatus.MATCHED:
            return self.result
        if self.status is WaitStatus.CANCELLED:
            return CANCELLED
        return TIMED_OUT
