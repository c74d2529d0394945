"""Tests for the logwait command line."""

import sys
from pathlib import Path

import pytest
import yaml

from logwait import cli

FAST = ["--interval", "20", "--timeout", "5"]


def append_command(path: Path, text: str) -> list[str]:
    """Trigger command that appends ``text`` to ``path``."""
    return [sys.executable, "-c", f"open({str(path)!r}, 'a').write({text!r})"]


class TestArgumentParsing:
    """Tests for argument handling."""

    def test_split_command(self) -> None:
        own, command = cli.split_command(["app.log", "-p", "x", "--", "deploy", "--now"])

        assert own == ["app.log", "-p", "x"]
        assert command == ["deploy", "--now"]

    def test_split_without_command(self) -> None:
        assert cli.split_command(["app.log", "-p", "x"]) == (["app.log", "-p", "x"], [])

    def test_patterns_keep_command_line_order(self) -> None:
        args = cli.build_parser().parse_args(
            ["app.log", "-p", "Completed", "-m", "Not required", "skipped", "-p", "Failed"]
        )

        _, table = cli.resolve_settings(args)

        assert list(table) == [
            ("Completed", "Completed"),
            ("Not required", "skipped"),
            ("Failed", "Failed"),
        ]

    def test_pattern_text_is_literal(self) -> None:
        """Test an equals sign in a pattern is part of the pattern."""
        args = cli.build_parser().parse_args(["app.log", "-p", "status=done"])

        _, table = cli.resolve_settings(args)

        assert list(table) == [("status=done", "status=done")]

    def test_command_line_overrides_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "wait.yaml"
        config_file.write_text(
            yaml.dump({"timeout_seconds": 60, "patterns": {"Completed": "done"}})
        )
        args = cli.build_parser().parse_args(
            ["app.log", "-c", str(config_file), "--timeout", "5", "-m", "Completed", "ok"]
        )

        config, table = cli.resolve_settings(args)

        assert config.timeout_seconds == 5
        assert list(table) == [("Completed", "ok")]

    def test_make_trigger_without_command(self) -> None:
        assert cli.make_trigger([]) is None


class TestMain:
    """Tests for running the command line end to end."""

    def test_match_prints_result(
        self, log_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = cli.main(
            [str(log_file), "-p", "Completed", "-m", "Not required", "skipped", *FAST, "--"]
            + append_command(log_file, "Step Not required\n")
        )

        assert code == cli.EXIT_MATCHED
        assert capsys.readouterr().out.strip() == "skipped"

    def test_regex_match(self, log_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = cli.main(
            [str(log_file), "--regex", "-i", "-m", r"exit code \d+", "exited", *FAST, "--"]
            + append_command(log_file, "EXIT CODE 3\n")
        )

        assert code == cli.EXIT_MATCHED
        assert capsys.readouterr().out.strip() == "exited"

    def test_timeout_exit_code(self, log_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = cli.main([str(log_file), "-p", "Completed", "--interval", "20", "--timeout", "0.2"])

        assert code == cli.EXIT_TIMED_OUT
        assert "timed out" in capsys.readouterr().err

    def test_missing_patterns(self, log_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = cli.main([str(log_file)])

        assert code == cli.EXIT_CONFIG_ERROR
        assert "No patterns" in capsys.readouterr().err

    def test_invalid_regex(self, log_file: Path) -> None:
        code = cli.main([str(log_file), "--regex", "-p", "(unclosed"])
        assert code == cli.EXIT_CONFIG_ERROR

    def test_invalid_interval(self, log_file: Path) -> None:
        code = cli.main([str(log_file), "-p", "x", "--interval", "0"])
        assert code == cli.EXIT_CONFIG_ERROR

    def test_failing_trigger(self, log_file: Path) -> None:
        code = cli.main(
            [str(log_file), "-p", "Completed", *FAST, "--", sys.executable, "-c", "raise SystemExit(3)"]
        )

        assert code == cli.EXIT_TRIGGER_FAILED

    def test_unknown_log_level(self, log_file: Path) -> None:
        with pytest.raises(SystemExit):
            cli.main([str(log_file), "-p", "x", "--log-level", "LOUD"])
