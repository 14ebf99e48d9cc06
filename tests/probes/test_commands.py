"""Tests for the bounded command runner."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

from seatbelt.probes.commands import NOT_RUN, CommandResult, CommandRunner


class TestCommandResult:

    def test_ok_only_on_zero_exit(self) -> None:
        assert CommandResult(returncode=0).ok
        assert not CommandResult(returncode=1).ok
        assert not NOT_RUN.ok


class TestCommandRunner:

    def test_missing_tool_is_not_run(self) -> None:
        runner = CommandRunner()
        with patch.object(runner, "which", return_value=None):
            assert runner.run(["definitely-not-a-tool"]) is NOT_RUN

    def test_empty_argv_is_not_run(self) -> None:
        assert CommandRunner().run([]) is NOT_RUN

    def test_captures_stripped_stdout(self) -> None:
        runner = CommandRunner(timeout=2.0)
        completed = subprocess.CompletedProcess(["gh"], 0, stdout="  hello\n", stderr="")
        with patch.object(runner, "which", return_value="/usr/bin/gh"), \
                patch("seatbelt.probes.commands.subprocess.run", return_value=completed) as run:
            result = runner.run(["gh", "auth", "status"])
        assert result == CommandResult(returncode=0, stdout="hello")
        assert run.call_args.kwargs["timeout"] == 2.0
        assert run.call_args.kwargs["stdin"] is subprocess.DEVNULL

    def test_timeout_is_reported_not_raised(self) -> None:
        runner = CommandRunner(timeout=0.5)
        with patch.object(runner, "which", return_value="/usr/bin/gh"), \
                patch(
                    "seatbelt.probes.commands.subprocess.run",
                    side_effect=subprocess.TimeoutExpired(["gh"], 0.5),
                ):
            result = runner.run(["gh", "auth", "status"])
        assert result.timed_out
        assert result.returncode is None
        assert not result.ok

    def test_per_call_timeout_overrides_default(self) -> None:
        runner = CommandRunner(timeout=3.0)
        completed = subprocess.CompletedProcess(["x"], 0, stdout="", stderr="")
        with patch.object(runner, "which", return_value="/usr/bin/x"), \
                patch("seatbelt.probes.commands.subprocess.run", return_value=completed) as run:
            runner.run(["x"], timeout=0.2)
        assert run.call_args.kwargs["timeout"] == 0.2

    def test_start_failure_is_not_run(self) -> None:
        runner = CommandRunner()
        with patch.object(runner, "which", return_value="/usr/bin/x"), \
                patch("seatbelt.probes.commands.subprocess.run", side_effect=OSError("boom")):
            assert runner.run(["x"]) is NOT_RUN

    def test_output_is_empty_on_failure(self) -> None:
        runner = CommandRunner()
        completed = subprocess.CompletedProcess(["x"], 1, stdout="error text", stderr="")
        with patch.object(runner, "which", return_value="/usr/bin/x"), \
                patch("seatbelt.probes.commands.subprocess.run", return_value=completed):
            assert runner.output(["x"]) == ""
