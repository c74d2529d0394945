"""Offset-based reading of a growing log file.

The tracker reads whatever was appended to a file since a given byte offset
and reports how far it got. It never raises for a file that is missing or
disappears while being read; that condition is reported back so the poll
loop can treat it as a rotation in progress.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from .models import ReadResult

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class PositionTracker:
    """Reads new content from a file starting at a byte offset.

    Files are opened read-only for the duration of a single read and closed
    before returning, so writers, renames and deletions of the file are never
    blocked between polls.

    Attributes:
        encoding: Text encoding used to decode lines.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def read_from(self, path: str | Path, offset: int) -> ReadResult:
        """Read every line between ``offset`` and the current end of file.

        Only newline-terminated lines are produced. A trailing partial line
        is left unread: ``new_offset`` stops before it, so the line is
        scanned once, in full, after the writer terminates it.

        Args:
            path: File to read.
            offset: Byte offset to start from.

        Returns:
            ReadResult with a single-use line iterator, the offset just past
            the last complete line, and whether the file vanished.
        """
        file_path = Path(path)
        chunks: list[bytes] = []
        vanished = False

        try:
            with file_path.open("rb") as f:
                f.seek(offset)
                while True:
                    chunk = f.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
        except FileNotFoundError:
            logger.debug(f"Log file vanished before it could be read: {file_path}")
            vanished = True
        except OSError as e:
            logger.debug(f"Read of {file_path} failed at offset {offset}: {e}")
            vanished = True

        data = b"".join(chunks)
        consumed = data.rfind(b"\n") + 1
        if data:
            logger.debug(
                f"Read {len(data)} bytes from {file_path} "
                f"(offset {offset} -> {offset + consumed})"
            )

        return ReadResult(
            lines=self._iter_lines(data[:consumed]),
            new_offset=offset + consumed,
            vanished=vanished,
        )

    def _iter_lines(self, data: bytes) -> Iterator[str]:
        for raw in data.splitlines():
            yield raw.decode(self.encoding, errors="replace")
