"""Run every probe once and bundle the results into a ``FactSet``.

Probes are independent and side-effect free, so they run sequentially in a
fixed order. Every input (home directory, environment, command runner,
clock) can be injected so that the whole pipeline runs against fakes.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from seatbelt.config import DEFAULT_CONFIG, SeatbeltConfig
from seatbelt.probes.auth import probe_auth
from seatbelt.probes.commands import CommandRunner
from seatbelt.probes.mcp import probe_mcp
from seatbelt.probes.models import FactSet, SystemFacts
from seatbelt.probes.security import probe_security
from seatbelt.probes.structure import probe_structure
from seatbelt.probes.system import probe_dev_env, probe_system, probe_user_settings

logger = logging.getLogger(__name__)


def collect_facts(
    project_root: Path,
    config: SeatbeltConfig = DEFAULT_CONFIG,
    *,
    runner: CommandRunner | None = None,
    home: Path | None = None,
    env: Mapping[str, str] | None = None,
    platform_id: str | None = None,
    now: float | None = None,
    system: SystemFacts | None = None,
) -> FactSet:
    """Collect all facts for one run.

    Args:
        project_root: Project directory to inspect.
        config: Effective configuration (timeouts, secrets file, MCP model).
        runner: Command runner. Defaults to one using the configured timeout.
        home: Home directory override (for testing).
        env: Environment mapping override (for testing).
        platform_id: Platform override for MCP host selection.
        now: Reference epoch seconds for recency facts.
        system: Pre-collected system facts, skipping the hardware probe.

    Returns:
        The complete fact set.
    """
    runner = runner or CommandRunner(timeout=config.probes.command_timeout)
    home = home if home is not None else Path.home()
    env = env if env is not None else os.environ
    project_root = project_root.resolve()
    logger.debug("Collecting facts for %s", project_root)

    return FactSet(
        system=system or probe_system(),
        dev_env=probe_dev_env(runner, env, home),
        user=probe_user_settings(runner, env, home, project_root),
        auth=probe_auth(runner, project_root),
        mcp=probe_mcp(home, project_root, config.mcp, platform_id),
        security=probe_security(project_root, config.probes),
        structure=probe_structure(runner, project_root, now),
    )
