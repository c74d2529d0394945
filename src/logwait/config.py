"""Configuration for log waits.

``WaitConfig`` carries the tunables of the poll loop. It can be built in code
or loaded from a YAML file, which may also declare the pattern table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15 * 60
DEFAULT_SCAN_INTERVAL_MS = 500


class ConfigurationError(ValueError):
    """Raised before polling starts when a wait is misconfigured."""


def _is_positive(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


@dataclass
class WaitConfig:
    """Tunables for a single wait.

    Attributes:
        timeout_seconds: Maximum wall-clock time to wait (default: 900).
        scan_interval_ms: Delay between polls in milliseconds (default: 500).
        encoding: Encoding used to decode log lines (default: utf-8).
    """

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    scan_interval_ms: int = DEFAULT_SCAN_INTERVAL_MS
    encoding: str = "utf-8"

    @property
    def scan_interval_seconds(self) -> float:
        return self.scan_interval_ms / 1000

    def validate(self) -> WaitConfig:
        """Check the tunables, returning self.

        Raises:
            ConfigurationError: If the timeout or interval is not positive,
                or the encoding is unknown.
        """
        if isinstance(self.timeout_seconds, timedelta):
            self.timeout_seconds = self.timeout_seconds.total_seconds()
        if not _is_positive(self.timeout_seconds):
            raise ConfigurationError(f"timeout must be positive, got {self.timeout_seconds}")
        if not _is_positive(self.scan_interval_ms):
            raise ConfigurationError(
                f"scan interval must be positive, got {self.scan_interval_ms}ms"
            )
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding: {self.encoding}") from e
        return self


@dataclass
class LoadedConfig:
    """Result of reading a YAML config file."""

    wait: WaitConfig
    patterns: dict[str, Any]


def load_wait_config(config_path: str | Path) -> LoadedConfig:
    """Load wait settings and optional patterns from a YAML file.

    Recognized keys are the ``WaitConfig`` fields plus ``patterns``, a
    mapping of pattern text to result value.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or contains
            unknown keys or invalid values.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse configuration YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")

    patterns = data.pop("patterns", None) or {}
    if not isinstance(patterns, dict):
        raise ConfigurationError("'patterns' must be a mapping of pattern to result")

    known = {f.name for f in fields(WaitConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    wait = WaitConfig(**data).validate()
    logger.debug(f"Loaded wait configuration from {path}")
    return LoadedConfig(wait=wait, patterns={str(k): v for k, v in patterns.items()})
