"""Matching log lines against a table of patterns.

A pattern is either a plain string, matched as a substring, or a compiled
regular expression, matched with ``search``. Each pattern maps to the value
a wait returns when a line matches it. Patterns are tried in the order they
were declared and the first match wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)

Pattern = Union[str, re.Pattern]


@dataclass(frozen=True)
class Match:
    """A pattern hit on a single line."""

    pattern: Pattern
    result: Any
    line: str


class PatternTable:
    """Immutable, ordered mapping of pattern to result.

    Iteration follows the declaration order of the mapping the table was
    built from, which is the order ``match_line`` tries patterns in.

    Raises:
        ValueError: If the table would be empty or a key is neither a string
            nor a compiled regular expression.
    """

    def __init__(self, patterns: Mapping[Pattern, Any] | Iterable[tuple[Pattern, Any]]):
        items = list(patterns.items() if isinstance(patterns, Mapping) else patterns)
        if not items:
            raise ValueError("At least one pattern is required")

        for pattern, _ in items:
            if isinstance(pattern, str):
                if not pattern:
                    raise ValueError("Empty string patterns match every line")
            elif not isinstance(pattern, re.Pattern):
                raise ValueError(
                    f"Pattern must be a string or compiled regex, got {type(pattern).__name__}"
                )

        self._items: tuple[tuple[Pattern, Any], ...] = tuple(items)

    @classmethod
    def from_regex(cls, patterns: Mapping[str, Any], flags: int = 0) -> PatternTable:
        """Build a table whose string keys are compiled as regular expressions."""
        return cls([(re.compile(p, flags), result) for p, result in patterns.items()])

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        keys = [p.pattern if isinstance(p, re.Pattern) else p for p, _ in self._items]
        return f"PatternTable({keys!r})"


def _matches(pattern: Pattern, line: str) -> bool:
    if isinstance(pattern, str):
        return pattern in line
    return pattern.search(line) is not None


def match_line(line: str, table: PatternTable) -> Match | None:
    """Test ``line`` against every pattern in ``table``.

    Args:
        line: Log line without its terminator.
        table: Patterns to try, in declaration order.

    Returns:
        Match for the first pattern found in the line, or None.
    """
    logger.debug(f"Scanning line: {line}")
    for pattern, result in table:
        if _matches(pattern, line):
            return Match(pattern=pattern, result=result, line=line)
    return None


def scan_lines(lines: Iterable[str], table: PatternTable) -> Match | None:
    """Return the first match across ``lines``, stopping as soon as one hits."""
    for line in lines:
        hit = match_line(line, table)
        if hit is not None:
            return hit
    return None
