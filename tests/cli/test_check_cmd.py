"""Tests for ``seatbelt check``: output modes, exit codes and config handling."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from seatbelt.cli.check_cmd import exit_code_for
from seatbelt.cli.main import cli
from seatbelt.core.scoring import Verdict


class TestExitCodes:

    def test_mapping(self) -> None:
        assert exit_code_for(Verdict.READY, strict=False) == 0
        assert exit_code_for(Verdict.READY, strict=True) == 0
        assert exit_code_for(Verdict.WARNING, strict=False) == 0
        assert exit_code_for(Verdict.WARNING, strict=True) == 2
        assert exit_code_for(Verdict.BLOCKED, strict=False) == 1
        assert exit_code_for(Verdict.BLOCKED, strict=True) == 1


class TestOutputModes:

    def test_full_report(self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path) -> None:
        use_facts(ready_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path)])
        assert result.exit_code == 0
        assert "SEATBELT Intelligence Report" in result.output
        assert "CONFIGURATION HEALTH" in result.output
        assert "VERDICT: Ready to Develop" in result.output

    def test_quick(self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path) -> None:
        use_facts(ready_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path), "--quick"])
        assert result.exit_code == 0
        assert result.output.strip() == "SEATBELT: 100/100 (A) - Ready"

    def test_ci(self, runner: CliRunner, use_facts, blocked_facts, tmp_path: Path) -> None:
        use_facts(blocked_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path), "--ci"])
        assert result.exit_code == 1
        lines = result.output.strip().splitlines()
        assert lines[0].endswith("| Verdict: blocked")
        assert lines[1] == "STATUS: BLOCKED"

    def test_json(self, runner: CliRunner, use_facts, warning_facts, tmp_path: Path) -> None:
        use_facts(warning_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["health"]["score"] == 75
        assert data["health"]["verdict"] == "warning"
        assert data["categories"]["mcp_health"] == 80
        titles = [r["title"] for r in data["recommendations"]]
        assert "Reduce MCP servers" in titles

    def test_json_wins_over_quick(
        self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path
    ) -> None:
        use_facts(ready_facts)
        result = runner.invoke(
            cli, ["check", "--project", str(tmp_path), "--quick", "--format", "json"]
        )
        assert json.loads(result.output)["health"]["grade"] == "A"


class TestVerdictExitCodes:

    def test_warning_passes_without_strict(
        self, runner: CliRunner, use_facts, warning_facts, tmp_path: Path
    ) -> None:
        use_facts(warning_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path), "--ci"])
        assert result.exit_code == 0
        assert "STATUS: WARNING" in result.output

    def test_warning_fails_with_strict(
        self, runner: CliRunner, use_facts, warning_facts, tmp_path: Path
    ) -> None:
        use_facts(warning_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path), "--ci", "--strict"])
        assert result.exit_code == 2

    def test_blocked_full_report(
        self, runner: CliRunner, use_facts, blocked_facts, tmp_path: Path
    ) -> None:
        use_facts(blocked_facts)
        result = runner.invoke(cli, ["check", "--project", str(tmp_path)])
        assert result.exit_code == 1
        assert "Development Blocked" in result.output


class TestConfigHandling:

    def test_config_file_overrides_weights(
        self, runner: CliRunner, use_facts, warning_facts, tmp_path: Path
    ) -> None:
        calls = use_facts(warning_facts)
        cfg = tmp_path / "seatbelt.yaml"
        cfg.write_text("verdict:\n  ready_floor: 70\n")
        result = runner.invoke(
            cli, ["check", "--project", str(tmp_path), "--config", str(cfg), "--ci", "--strict"]
        )
        assert result.exit_code == 0
        assert "STATUS: OK" in result.output
        assert calls[0][1].verdict.ready_floor == 70

    def test_project_config_file_is_picked_up(
        self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path
    ) -> None:
        calls = use_facts(ready_facts)
        (tmp_path / ".seatbelt.yaml").write_text("mcp:\n  soft_limit: 12\n")
        runner.invoke(cli, ["check", "--project", str(tmp_path), "--quick"])
        assert calls[0][1].mcp.soft_limit == 12

    def test_invalid_config_is_usage_error(
        self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path
    ) -> None:
        use_facts(ready_facts)
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("wieghts:\n  security: 1.0\n")
        result = runner.invoke(cli, ["check", "--project", str(tmp_path), "--config", str(cfg)])
        assert result.exit_code == 2
        assert "Unknown config section" in result.output

    def test_timeout_reaches_probes(
        self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path
    ) -> None:
        calls = use_facts(ready_facts)
        runner.invoke(cli, ["check", "--project", str(tmp_path), "--timeout", "1.5", "--quick"])
        assert calls[0][1].probes.command_timeout == 1.5

    def test_missing_project_directory(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["check", "--project", str(tmp_path / "nope")])
        assert result.exit_code == 2

    def test_verbose_flag(self, runner: CliRunner, use_facts, ready_facts, tmp_path: Path) -> None:
        use_facts(ready_facts)
        result = runner.invoke(cli, ["-v", "check", "--project", str(tmp_path), "--quick"])
        assert result.exit_code == 0
