"""Allow ``python -m seatbelt``."""

from seatbelt.cli.main import cli

cli()
