"""Opt-in live validation of API keys declared in the local secrets file.

This is the only part of seatbelt that touches the network. It requires
the ``keys`` extra (``pip install seatbelt[keys]``).

Submodules:
    http_client  -- lazy httpx import, async client factory, status fetch
    checks       -- provider table, offline checks, concurrent runner
"""

from seatbelt.keys.checks import (
    KEY_SPECS,
    KeyOutcome,
    KeyResult,
    KeySpec,
    check_keys,
    load_key_values,
    run_key_checks,
)

__all__ = [
    "KEY_SPECS",
    "KeyOutcome",
    "KeyResult",
    "KeySpec",
    "check_keys",
    "load_key_values",
    "run_key_checks",
]
