"""Wait for text to appear in a rotating log file.

This package blocks until one of a set of patterns shows up in a growing log
file, for automation that starts an action and then has to tell from the log
whether it completed, failed or needed nothing done. Content that existed
before the wait started is never scanned, and lines are not lost when the
file is truncated, renamed or replaced while waiting.

Key Components:
    - models: Wait state, file snapshots and wait outcomes
    - config: Configuration dataclass and YAML loading
    - position_tracker: Offset-based reading of new lines
    - rotation: Rotation classification and rotated sibling discovery
    - matcher: Ordered pattern table and line matching
    - waiter: The poll loop and the ``wait_for_content`` entry point

Example:
    >>> from logwait import wait_for_content, TIMED_OUT
    >>> result = wait_for_content(
    ...     "/var/log/release/release.log",
    ...     {"Completed": "Completed", "Not required": "Not required"},
    ...     trigger_action=start_final_release,
    ... )
    >>> if result is TIMED_OUT:
    ...     raise RuntimeError("release did not finish")
"""

from __future__ import annotations

from .config import ConfigurationError, WaitConfig, load_wait_config
from .matcher import Match, PatternTable, match_line
from .models import (
    CANCELLED,
    TIMED_OUT,
    FileSnapshot,
    ReadResult,
    RotationKind,
    WaitOutcome,
    WaitSignal,
    WaitStatus,
    WatchState,
)
from .position_tracker import PositionTracker
from .waiter import LogWaiter, wait_for_content

__all__ = [
    "wait_for_content",
    "LogWaiter",
    "WaitConfig",
    "ConfigurationError",
    "load_wait_config",
    "PatternTable",
    "Match",
    "match_line",
    "PositionTracker",
    "FileSnapshot",
    "ReadResult",
    "RotationKind",
    "WaitOutcome",
    "WaitSignal",
    "WaitStatus",
    "WatchState",
    "TIMED_OUT",
    "CANCELLED",
]

__version__ = "0.1.0"
