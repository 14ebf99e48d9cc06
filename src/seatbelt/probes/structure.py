"""Structure probe: tracked migrations, assistant settings, recency.

Recency signals feed the freshness category:

- Age of the last commit, from ``git log -1 --format=%ct``.
- Lockfile state: ``missing`` when ``package.json`` exists without any
  lockfile, ``stale`` when every lockfile is older than the manifest.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from seatbelt.probes.commands import CommandRunner
from seatbelt.probes.models import LockfileState, StructureFacts

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path("supabase") / "migrations"
ASSISTANT_SETTINGS = Path(".claude") / "settings.local.json"
PACKAGE_MANIFEST = "package.json"
LOCKFILES: tuple[str, ...] = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
)

_SECONDS_PER_DAY = 86400


def count_migrations(project_root: Path) -> int:
    try:
        return sum(1 for p in (project_root / MIGRATIONS_DIR).glob("*.sql") if p.is_file())
    except OSError:
        return 0


def lockfile_state(project_root: Path) -> LockfileState:
    manifest = project_root / PACKAGE_MANIFEST
    if not manifest.is_file():
        return LockfileState.NO_MANIFEST
    locks = [project_root / name for name in LOCKFILES if (project_root / name).is_file()]
    if not locks:
        return LockfileState.MISSING
    manifest_mtime = manifest.stat().st_mtime
    if max(lock.stat().st_mtime for lock in locks) < manifest_mtime:
        return LockfileState.STALE
    return LockfileState.CURRENT


def last_commit_age_days(
    runner: CommandRunner,
    project_root: Path,
    now: float,
) -> int | None:
    out = runner.output(["git", "log", "-1", "--format=%ct"], cwd=project_root)
    try:
        committed = int(out)
    except ValueError:
        return None
    return max(0, int((now - committed) // _SECONDS_PER_DAY))


def probe_structure(
    runner: CommandRunner,
    project_root: Path,
    now: float | None = None,
) -> StructureFacts:
    """Collect structure and recency facts for the project.

    Args:
        runner: Command runner used for the git history query.
        project_root: Project directory.
        now: Reference epoch seconds for age computations.
    """
    reference = time.time() if now is None else now
    facts = StructureFacts(
        migrations_count=count_migrations(project_root),
        has_assistant_settings=(project_root / ASSISTANT_SETTINGS).is_file(),
        last_commit_age_days=last_commit_age_days(runner, project_root, reference),
        lockfile_state=lockfile_state(project_root),
    )
    logger.debug("Structure facts: %s", facts)
    return facts
