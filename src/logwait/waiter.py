"""Blocking wait for content to appear in a log file.

``LogWaiter`` drives a synchronous poll loop over a single log file: it
records where the file ends, runs a trigger action, then repeatedly reads
whatever was appended and matches it against a pattern table until a line
matches or the timeout elapses. Rotation of the file while waiting
(truncation, rename, replacement) is detected on every poll, and lines
written to the old file just before a rename are recovered from the rotated
sibling.

Example:
    >>> from logwait import wait_for_content, TIMED_OUT
    >>> result = wait_for_content(
    ...     "/var/log/app/app.log",
    ...     {"Completed": "ok", "Failed": "error"},
    ...     timeout=60,
    ...     trigger_action=start_release,
    ... )
    >>> if result is TIMED_OUT:
    ...     ...
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any

from . import rotation
from .config import (
    DEFAULT_SCAN_INTERVAL_MS,
    DEFAULT_TIMEOUT_SECONDS,
    ConfigurationError,
    WaitConfig,
)
from .matcher import Match, PatternTable, scan_lines
from .models import RotationKind, WaitOutcome, WaitStatus, WatchState
from .position_tracker import PositionTracker

logger = logging.getLogger(__name__)


class LogWaiter:
    """Waits for one of a set of patterns to appear in a log file.

    A waiter is configured once and may be used for several consecutive
    waits; no scan state is carried from one wait to the next.

    Attributes:
        path: Log file to watch.
        table: Patterns to look for, tried in declaration order.
        config: Timeout, scan interval and encoding.
        cancel_event: Optional event that ends a wait early when set.
    """

    def __init__(
        self,
        path: str | Path,
        patterns: PatternTable | Mapping[Any, Any],
        config: WaitConfig | None = None,
        cancel_event: threading.Event | None = None,
    ):
        """Initialize the waiter, validating its configuration.

        Raises:
            ConfigurationError: If the pattern table is empty or invalid, or
                the timeout or scan interval is not positive.
        """
        self.path = Path(path)
        self.config = (config or WaitConfig()).validate()
        if isinstance(patterns, PatternTable):
            self.table = patterns
        else:
            try:
                self.table = PatternTable(patterns)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        self.cancel_event = cancel_event
        self.tracker = PositionTracker(encoding=self.config.encoding)

    def wait(self, trigger_action: Callable[[], Any] | None = None) -> WaitOutcome:
        """Run the trigger action and block until a pattern matches.

        Args:
            trigger_action: Zero-argument callable invoked exactly once,
                after the starting position is recorded and before polling.
                Exceptions it raises propagate to the caller.

        Returns:
            WaitOutcome with status MATCHED, TIMED_OUT or CANCELLED.
        """
        if trigger_action is not None and not callable(trigger_action):
            raise ConfigurationError("trigger_action must be callable")

        state = self._initialize()
        started = time.monotonic()

        if trigger_action is not None:
            logger.debug(f"Invoking trigger action for {self.path}")
            trigger_action()

        timeout = self.config.timeout_seconds
        while True:
            elapsed = time.monotonic() - started
            if elapsed >= timeout:
                logger.warning(
                    f"Timed out after {elapsed:.1f}s waiting for {self.table!r} in {self.path}"
                )
                return WaitOutcome(status=WaitStatus.TIMED_OUT, elapsed=elapsed)

            if self._sleep():
                elapsed = time.monotonic() - started
                logger.info(f"Wait on {self.path} cancelled after {elapsed:.1f}s")
                return WaitOutcome(status=WaitStatus.CANCELLED, elapsed=elapsed)

            found = self._poll(state)
            if found is not None:
                hit, source = found
                elapsed = time.monotonic() - started
                logger.info(
                    f"Matched {hit.result!r} in {source} after {elapsed:.1f}s: {hit.line}"
                )
                return WaitOutcome(
                    status=WaitStatus.MATCHED,
                    result=hit.result,
                    pattern=hit.pattern,
                    line=hit.line,
                    source=source,
                    elapsed=elapsed,
                )

    def _initialize(self) -> WatchState:
        """Record the starting point so only content written from now on is scanned."""
        state = WatchState(path=self.path)
        current = rotation.snapshot(self.path)
        if current is not None:
            state.read_offset = current.size
            state.fingerprint = current
            logger.debug(f"Watching {self.path} from offset {current.size}")
        else:
            logger.debug(f"{self.path} does not exist yet, waiting for it to appear")
        state.rotation_watermark = rotation.initial_watermark(self.path)
        return state

    def _sleep(self) -> bool:
        """Sleep one scan interval. Returns True if the wait was cancelled."""
        interval = self.config.scan_interval_seconds
        if self.cancel_event is None:
            time.sleep(interval)
            return False
        return self.cancel_event.wait(interval)

    def _poll(self, state: WatchState) -> tuple[Match, Path] | None:
        """Scan whatever is new since the previous poll.

        Returns:
            The first match and the file it was read from, or None to keep
            polling.
        """
        current = rotation.snapshot(self.path)
        if current is None:
            logger.debug(f"{self.path} is missing, retrying on next poll")
            return None

        kind = rotation.classify(state.fingerprint, state.read_offset, current)
        if kind is not RotationKind.NONE and not state.pending_rotation:
            if state.fingerprint is not None:
                logger.info(f"Log rotation detected for {self.path} ({kind.value})")
            state.pending_rotation = True

        if current.size == state.read_offset and not state.pending_rotation:
            return None

        found, deferred = self._scan_rotated_sibling(state)
        if found is not None or deferred:
            return found

        live_offset = 0 if state.pending_rotation else state.read_offset
        result = self.tracker.read_from(self.path, live_offset)
        hit = scan_lines(result.lines, self.table)
        if hit is not None:
            return hit, self.path

        if result.vanished:
            # Offset, fingerprint and pending flag still describe the old
            # file; the next poll classifies whatever appears at the path
            # against them.
            return None

        state.read_offset = result.new_offset
        state.pending_rotation = False
        state.fingerprint = current
        return None

    def _scan_rotated_sibling(
        self, state: WatchState
    ) -> tuple[tuple[Match, Path] | None, bool]:
        """Recover lines written to the pre-rotation file, if one was produced.

        Runs on every poll that has something to read, so a copy-and-truncate
        rotation that leaves the live file's identity and size unsuspicious
        is still caught. Once a sibling has been fully read the live file is
        rescanned from its start.

        Returns:
            Tuple of (match, deferred) where deferred is True if the sibling
            vanished mid-read and the rest of this poll should be skipped.
        """
        sibling = rotation.find_rotated_sibling(self.path, state.rotation_watermark)
        if sibling is None:
            return None, False

        logger.info(
            f"Scanning rotated file {sibling.path.name} from offset {state.read_offset}"
        )
        result = self.tracker.read_from(sibling.path, state.read_offset)
        hit = scan_lines(result.lines, self.table)
        if hit is not None:
            return (hit, sibling.path), False

        if result.vanished:
            logger.debug(f"Rotated file {sibling.path} vanished, retrying on next poll")
            return None, True

        state.rotation_watermark = sibling.mtime_ns
        state.read_offset = 0
        state.pending_rotation = False
        return None, False


def wait_for_content(
    path: str | Path,
    patterns: PatternTable | Mapping[Any, Any],
    timeout: float | timedelta = DEFAULT_TIMEOUT_SECONDS,
    trigger_action: Callable[[], Any] | None = None,
    scan_interval_ms: int = DEFAULT_SCAN_INTERVAL_MS,
    cancel_event: threading.Event | None = None,
    encoding: str = "utf-8",
) -> Any:
    """Block until one of ``patterns`` appears in ``path``.

    Args:
        path: Log file to monitor. It may not exist yet if the trigger
            action creates it.
        patterns: Mapping of pattern (substring or compiled regex) to the
            value to return when it matches. Tried in declaration order.
        timeout: Maximum time to wait, in seconds or as a timedelta.
        trigger_action: Zero-argument callable run once before polling.
        scan_interval_ms: Delay between polls in milliseconds.
        cancel_event: Optional event that ends the wait early when set.
        encoding: Encoding of the log file.

    Returns:
        The value mapped to the first matching pattern, ``TIMED_OUT`` if
        nothing matched in time, or ``CANCELLED`` if ``cancel_event`` was set.

    Raises:
        ConfigurationError: If the patterns are empty or the timeout or scan
            interval is not positive.
    """
    config = WaitConfig(
        timeout_seconds=timeout,
        scan_interval_ms=scan_interval_ms,
        encoding=encoding,
    )
    waiter = LogWaiter(path, patterns, config, cancel_event=cancel_event)
    outcome = waiter.wait(trigger_action)
    return outcome.value()

