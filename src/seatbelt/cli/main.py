"""seatbelt CLI -- Configuration health checks for local development.

Entry point for the ``seatbelt`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    check -- Score the environment and project, print a report and verdict.
    keys  -- Validate API keys from the secrets file (network, opt-in).

Usage::

    seatbelt check                      # Full report for the current project
    seatbelt check --quick              # One line, for pre-commit hooks
    seatbelt check --ci --strict        # CI gate: exit 1 blocked, 2 warning
    seatbelt check --format json
    seatbelt keys --project ./my-app
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from seatbelt import __version__
from seatbelt.cli.check_cmd import check_command
from seatbelt.cli.keys_cmd import keys_command


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr: DEBUG when verbose, WARNING otherwise.

    httpx logs request URLs at INFO, and some providers take the key as a
    query parameter, so its logger is held at WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__, prog_name="seatbelt")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Show debug logging on stderr.")
def cli(verbose: bool) -> None:
    """seatbelt: Is this machine and project ready for development?

    Probes authentication, secrets protection, MCP server configuration,
    project structure and recency, then prints a weighted health score,
    a letter grade and a ready / warning / blocked verdict.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(check_command)
cli.add_command(keys_command)
