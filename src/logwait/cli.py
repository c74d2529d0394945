"""Command line entry point for logwait.

Examples:
    logwait /var/log/app/app.log -p Completed -m "Not required" skipped \\
        --timeout 600 -- ./deploy.sh --release final

    logwait app.log --config release-wait.yaml

Exit status is 0 when a pattern matched (the mapped result is printed on
stdout), 1 when the trigger command fails, 2 on timeout, 64 for configuration
errors and 130 when interrupted. Pattern text is taken literally; use
``-m PATTERN RESULT`` to map a pattern to a different result.
"""

import argparse
import logging
import re
import subprocess
import sys
from typing import Any

from .config import ConfigurationError, WaitConfig, load_wait_config
from .logging_manager import setup_logging
from .matcher import PatternTable
from .models import WaitStatus
from .waiter import LogWaiter

logger = logging.getLogger(__name__)

EXIT_MATCHED = 0
EXIT_TRIGGER_FAILED = 1
EXIT_TIMED_OUT = 2
EXIT_CONFIG_ERROR = 64
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logwait",
        description="Wait until one of a set of patterns appears in a log file.",
        epilog="Anything after -- is run as the trigger command once watching has started.",
    )
    parser.add_argument("path", help="Log file to watch")
    parser.add_argument(
        "-p",
        "--pattern",
        dest="patterns",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Pattern that maps to itself (repeatable)",
    )
    parser.add_argument(
        "-m",
        "--map",
        dest="patterns",
        action="append",
        nargs=2,
        metavar=("PATTERN", "RESULT"),
        help="Pattern and the result to print when it matches (repeatable)",
    )
    parser.add_argument(
        "--regex", action="store_true", help="Treat patterns as regular expressions"
    )
    parser.add_argument(
        "-i", "--ignore-case", action="store_true", help="Case-insensitive regex matching"
    )
    parser.add_argument("--timeout", type=float, help="Seconds to wait (default: 900)")
    parser.add_argument(
        "--interval", type=int, dest="scan_interval_ms", help="Milliseconds between polls"
    )
    parser.add_argument("--encoding", help="Encoding of the log file (default: utf-8)")
    parser.add_argument("-c", "--config", help="YAML file with settings and patterns")
    parser.add_argument("--log-level", default="WARNING", help="Console log level")
    parser.add_argument("--log-file", help="Also write debug logs to this file")
    return parser


def resolve_settings(args: argparse.Namespace) -> tuple[WaitConfig, PatternTable]:
    """Merge the config file and command line into a config and pattern table.

    Command line values win over the config file.

    Raises:
        ConfigurationError: If the result is invalid or has no patterns.
    """
    if args.config:
        loaded = load_wait_config(args.config)
        config, patterns = loaded.wait, dict(loaded.patterns)
    else:
        config, patterns = WaitConfig(), {}

    for entry in args.patterns:
        if isinstance(entry, str):
            patterns[entry] = entry
        else:
            pattern, result = entry
            patterns[pattern] = result

    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    if args.scan_interval_ms is not None:
        config.scan_interval_ms = args.scan_interval_ms
    if args.encoding:
        config.encoding = args.encoding
    config.validate()

    if not patterns:
        raise ConfigurationError("No patterns given; use -p, -m or a config file")

    try:
        if args.regex:
            flags = re.IGNORECASE if args.ignore_case else 0
            table = PatternTable.from_regex(patterns, flags)
        else:
            table = PatternTable(patterns)
    except re.error as e:
        raise ConfigurationError(f"Invalid regular expression: {e}") from e
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return config, table


def split_command(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split ``argv`` into logwait arguments and the trigger command after ``--``."""
    if "--" not in argv:
        return argv, []
    index = argv.index("--")
    return argv[:index], argv[index + 1 :]


def make_trigger(command: list[str]):
    """Build a trigger that runs ``command``, or None if there is no command."""
    if not command:
        return None

    def trigger() -> None:
        logger.info(f"Running trigger command: {' '.join(command)}")
        subprocess.run(command, check=True)

    return trigger


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    own_args, command = split_command(sys.argv[1:] if argv is None else list(argv))
    args = parser.parse_args(own_args)

    try:
        manager = setup_logging(args.log_level, args.log_file)
    except ValueError as e:
        parser.error(str(e))

    try:
        config, table = resolve_settings(args)
        waiter = LogWaiter(args.path, table, config)
    except ConfigurationError as e:
        manager.close()
        print(f"logwait: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        outcome = waiter.wait(make_trigger(command))
    except (subprocess.CalledProcessError, OSError) as e:
        logger.error(f"Trigger command failed: {e}")
        return EXIT_TRIGGER_FAILED
    except KeyboardInterrupt:
        return EXIT_CANCELLED
    finally:
        manager.close()

    if outcome.status is WaitStatus.MATCHED:
        print(_format_result(outcome.result))
        return EXIT_MATCHED
    if outcome.status is WaitStatus.CANCELLED:
        return EXIT_CANCELLED
    print(f"logwait: timed out after {outcome.elapsed:.0f}s", file=sys.stderr)
    return EXIT_TIMED_OUT


def _format_result(result: Any) -> str:
    return result if isinstance(result, str) else repr(result)
