"""``seatbelt check`` -- Run the configuration health check.

Runs every probe against the project, scores and aggregates the results,
and prints the full report, a one-line summary (``--quick``), CI status
lines (``--ci``) or JSON (``--format json``).

Exit Codes:
    0 -- Ready, or warnings without ``--strict``.
    1 -- Blocked.
    2 -- Warnings with ``--strict``, or an invalid configuration file.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from pathlib import Path

import click

from seatbelt.config import load_config
from seatbelt.core.report import build_report
from seatbelt.core.scoring import Verdict
from seatbelt.exceptions import ConfigError

logger = logging.getLogger(__name__)

EXIT_READY = 0
EXIT_BLOCKED = 1
EXIT_WARNING_STRICT = 2


def exit_code_for(verdict: Verdict, strict: bool) -> int:
    if verdict is Verdict.BLOCKED:
        return EXIT_BLOCKED
    if verdict is Verdict.WARNING and strict:
        return EXIT_WARNING_STRICT
    return EXIT_READY


@click.command("check")
@click.option(
    "--project", "project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project directory to inspect.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file overriding weights, thresholds and penalties.",
)
@click.option("--quick", is_flag=True, default=False,
              help="One-line summary (for pre-commit hooks).")
@click.option("--ci", is_flag=True, default=False,
              help="Two-line status output for CI logs.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0.1),
    default=None,
    help="Seconds allowed for each external status command (default: 3).",
)
@click.option("--strict", is_flag=True, default=False,
              help="Exit 2 when the verdict is a warning.")
def check_command(
    project: Path,
    config_path: Path | None,
    quick: bool,
    ci: bool,
    output_format: str,
    timeout: float | None,
    strict: bool,
) -> None:
    """Check the development environment and project configuration.

    Exit code 1 when the verdict is blocked, 0 otherwise.
    """
    from seatbelt.cli import output

    try:
        config = load_config(config_path, project_root=project.resolve())
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    if timeout is not None:
        config = dataclasses.replace(
            config, probes=dataclasses.replace(config.probes, command_timeout=timeout)
        )

    report = build_report(project, config)
    result = report.result

    if output_format == "json":
        click.echo(json.dumps(output.report_to_dict(report), indent=2))
    elif quick:
        output.console.print(output.quick_summary(result))
    elif ci:
        for line in output.ci_lines(result):
            click.echo(line)
    else:
        output.print_report(report, mcp=config.mcp)

    sys.exit(exit_code_for(result.verdict, strict))
