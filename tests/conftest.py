"""Shared fixtures for logwait tests."""

from pathlib import Path

import pytest

from logwait.matcher import PatternTable


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Create an empty log file."""
    log_file = tmp_path / "app.log"
    log_file.write_text("")
    return log_file


@pytest.fixture
def populated_log_file(tmp_path: Path) -> Path:
    """Create a log file with existing content."""
    log_file = tmp_path / "app.log"
    log_file.write_text("Line 1\nLine 2\nLine 3\n")
    return log_file


@pytest.fixture
def release_patterns() -> dict[str, str]:
    """Patterns used by release automation."""
    return {"Completed": "Completed", "Not required": "Not required"}


@pytest.fixture
def release_table(release_patterns: dict[str, str]) -> PatternTable:
    return PatternTable(release_patterns)


def append(path: Path, text: str) -> None:
    """Append text to a file the way a log writer would."""
    with path.open("a") as f:
        f.write(text)
