"""``seatbelt keys`` -- Validate API keys against their providers.

Loads the project's secrets file and sends one lightweight read-only
request per configured key. This is the only command that uses the
network, and it requires the ``keys`` extra::

    pip install seatbelt[keys]
    seatbelt keys --project ./my-app

Exit Codes:
    0 -- No key failed.
    1 -- At least one key failed, or httpx is not installed.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from seatbelt.config import load_config
from seatbelt.exceptions import ConfigError, KeyCheckError
from seatbelt.keys import KeyOutcome, load_key_values, run_key_checks
from seatbelt.keys.http_client import DEFAULT_TIMEOUT


@click.command("keys")
@click.option(
    "--project", "project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project directory holding the secrets file.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0.1),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Seconds allowed for each validation request.",
)
def keys_command(project: Path, output_format: str, timeout: float) -> None:
    """Check that configured API keys are alive and accepted.

    Exit code 1 if any key is rejected, 0 otherwise.
    """
    from seatbelt.cli import output

    root = project.resolve()
    try:
        config = load_config(project_root=root)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    values = load_key_values(root / config.probes.secrets_file)
    try:
        results = run_key_checks(values, timeout=timeout)
    except KeyCheckError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(output.key_results_to_dict(results), indent=2))
    else:
        output.print_key_results(results)

    failed = any(r.outcome is KeyOutcome.FAIL for r in results)
    sys.exit(1 if failed else 0)
