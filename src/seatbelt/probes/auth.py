"""Authentication probe: one tri-state per integrated service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from seatbelt.probes.commands import CommandRunner
from seatbelt.probes.models import AuthFacts
from seatbelt.probes.services import StatusCheck, default_auth_checks

logger = logging.getLogger(__name__)


def probe_auth(
    runner: CommandRunner,
    project_root: Path,
    checks: Iterable[StatusCheck] | None = None,
) -> AuthFacts:
    """Run every service status check and collect the results.

    Args:
        runner: Command runner carrying the status-check timeout.
        project_root: Project directory holding link files.
        checks: Checks to run. Defaults to ``default_auth_checks()``.
            Each check's ``name`` must be a field of ``AuthFacts``.

    Returns:
        Authentication facts. Services without a check stay UNAVAILABLE.
    """
    states = {}
    for check in checks if checks is not None else default_auth_checks():
        state = check.status(runner, project_root)
        logger.debug("%s: %s (%s)", check.label, state.status.value, state.detail)
        states[check.name] = state
    return AuthFacts(**states)
