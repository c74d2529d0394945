"""Rotation detection for a watched log file.

Rotation is inferred by comparing the identity of the file currently at the
watched path with the identity recorded at the previous read, and its size
with the read offset. Lines that were written to the old file between the
last read and the rotation are recovered from a rotated sibling, a file in
the same directory named like the watched one with an inserted segment
before the extension (``app.log`` -> ``app-1.log``, ``app.2024-01-01.log``).
"""

from __future__ import annotations

import glob
import logging
import os
import re
from pathlib import Path

from .models import FileSnapshot, RotationKind

logger = logging.getLogger(__name__)

# Segment a rotation tool inserts between stem and extension: an optional
# separator followed by a counter or date, e.g. "-1", ".2", "_20240101",
# ".2024-01-01".
ROTATION_SEGMENT = re.compile(r"[-._]?\d[\w.-]*")


def snapshot(path: str | Path) -> FileSnapshot | None:
    """Stat ``path``, returning None if it does not exist."""
    file_path = Path(path)
    try:
        st = os.stat(file_path)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.debug(f"Failed to stat {file_path}: {e}")
        return None

    birth = getattr(st, "st_birthtime", None)
    return FileSnapshot(
        path=file_path,
        device=st.st_dev,
        inode=st.st_ino,
        birth_time_ns=int(birth * 1_000_000_000) if birth is not None else None,
        size=st.st_size,
        mtime_ns=st.st_mtime_ns,
    )


def classify(
    previous: FileSnapshot | None,
    read_offset: int,
    current: FileSnapshot,
) -> RotationKind:
    """Decide whether the file was rotated since the previous read.

    Args:
        previous: Snapshot recorded at the previous read, or None if the
            file did not exist when the wait started.
        read_offset: Bytes of the previous file instance already scanned.
        current: Snapshot of the file now at the watched path.

    Returns:
        REPLACED if a different file instance is at the path (or the file
        appeared after being absent), TRUNCATED if the same instance shrank
        below the read offset, NONE otherwise.
    """
    if previous is None or previous.identity != current.identity:
        return RotationKind.REPLACED
    if current.size < read_offset:
        return RotationKind.TRUNCATED
    return RotationKind.NONE


def sibling_pattern(path: str | Path) -> str:
    """Glob pattern matching rotated siblings of ``path``.

    The wildcard goes between the stem and the extension, so ``app.log``
    gives ``app*.log`` and an extensionless ``app`` gives ``app*``.
    """
    file_path = Path(path)
    return f"{glob.escape(file_path.stem)}*{glob.escape(file_path.suffix)}"


def is_rotated_name(path: str | Path, candidate: str | Path) -> bool:
    """Whether ``candidate`` is named like a rotated copy of ``path``.

    ``app-1.log`` and ``app.2024-01-01.log`` qualify for ``app.log``;
    ``app-debug.log`` and ``application.log`` do not.
    """
    base, name = Path(path), Path(candidate).name
    if name == base.name or not name.startswith(base.stem) or not name.endswith(base.suffix):
        return False
    segment = name[len(base.stem) : len(name) - len(base.suffix)]
    return ROTATION_SEGMENT.fullmatch(segment) is not None


def list_siblings(path: str | Path) -> list[FileSnapshot]:
    """Snapshots of every existing rotated sibling of ``path``."""
    file_path = Path(path)
    directory = file_path.parent
    if not directory.is_dir():
        return []

    siblings = []
    for candidate in directory.glob(sibling_pattern(file_path)):
        if not is_rotated_name(file_path, candidate):
            continue
        snap = snapshot(candidate)
        if snap is not None and os.path.isfile(candidate):
            siblings.append(snap)
    return siblings


def initial_watermark(path: str | Path) -> int:
    """Watermark to start a wait with: newest mtime among existing siblings.

    Any sibling produced after this point has a strictly newer mtime. The
    boundary is read from the filesystem rather than the wall clock so both
    sides of the comparison come from the same clock.
    """
    return max((s.mtime_ns for s in list_siblings(path)), default=0)


def find_rotated_sibling(path: str | Path, watermark: int) -> FileSnapshot | None:
    """Return the rotated sibling produced since ``watermark``, if any.

    When several siblings qualify, the most recently modified one wins and
    equal modification times are broken by file name, so repeated calls
    over the same directory pick the same file.
    """
    fresh = [s for s in list_siblings(path) if s.mtime_ns > watermark]
    if not fresh:
        return None

    fresh.sort(key=lambda s: (s.mtime_ns, s.path.name), reverse=True)
    if len(fresh) > 1:
        logger.debug(
            f"{len(fresh)} rotated siblings of {path} are newer than the watermark, "
            f"using {fresh[0].path.name}"
        )
    return fresh[0]
