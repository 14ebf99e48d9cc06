"""Recommendation rules.

Each rule inspects the fact set (and, where useful, the category scores)
and yields at most one ``Optimization``. Rules are independent and are
evaluated in the order of ``RULES``; the result is then stable-sorted by
priority so rules of equal priority keep their declaration order.
"""

from __future__ import annotations

from typing import Callable, Optional

from seatbelt.config import SeatbeltConfig
from seatbelt.core.recommend.models import Optimization, Priority
from seatbelt.core.scoring.models import CategoryScores
from seatbelt.probes.models import FactSet, LockfileState
from seatbelt.probes.services import VERCEL_NEEDS_LOGIN

Rule = Callable[[FactSet, CategoryScores, SeatbeltConfig], Optional[Optimization]]


# ---------------------------------------------------------------------------
# HIGH
# ---------------------------------------------------------------------------


def unprotected_secrets_file(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    sec = facts.security
    if not sec.secrets_file_exists or sec.secrets_file_protected:
        return None
    return Optimization(
        Priority.HIGH, "Security",
        f"Protect {sec.secrets_file}",
        f"{sec.secrets_file} is not covered by .gitignore and could be committed.",
        f"Add {sec.secrets_file} to .gitignore to keep secrets out of version control",
    )


def client_exposure(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    violations = facts.security.exposure_violations
    if not violations:
        return None
    names = ", ".join(violations)
    return Optimization(
        Priority.HIGH, "Security",
        "Server secrets exposed to client code",
        f"{len(violations)} public-prefixed variable(s) look server-only: {names}.",
        "Move these keys to server-side code so bundlers never inline them",
    )


def github_not_authenticated(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.auth.github.is_authenticated:
        return None
    return Optimization(
        Priority.HIGH, "Authentication",
        "Authenticate GitHub CLI",
        "GitHub CLI is not authenticated.",
        "Run 'gh auth login' to enable PRs, issues and releases from the terminal",
    )


def supabase_not_linked(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.auth.supabase.is_authenticated:
        return None
    return Optimization(
        Priority.HIGH, "Authentication",
        "Link Supabase project",
        "No linked Supabase project was found.",
        "Run 'supabase link' to enable migrations and type generation",
    )


def low_disk(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    disk = facts.system.disk_free_gb
    if disk is None or disk >= config.system.min_disk_free_gb:
        return None
    return Optimization(
        Priority.HIGH, "System",
        "Low disk space",
        f"Only {disk}GB free. May impact builds and node_modules.",
        "Free up disk space to prevent build failures",
    )


# ---------------------------------------------------------------------------
# MEDIUM
# ---------------------------------------------------------------------------


def mcp_over_limit(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    mcp = facts.mcp
    limit = config.mcp.soft_limit
    if mcp.peak_count <= limit:
        return None
    return Optimization(
        Priority.MEDIUM, "MCP",
        "Reduce MCP servers",
        f"{mcp.peak_host} runs {mcp.peak_count} MCP servers "
        f"(recommended {limit} or fewer).",
        f"Faster assistant startup, about {mcp.startup_delay_ms}ms of launch "
        "delay across all hosts today",
    )


def low_mcp_parity(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    mcp = facts.mcp
    if mcp.configured_hosts < 2 or mcp.parity_score >= config.mcp.low_parity:
        return None
    return Optimization(
        Priority.MEDIUM, "MCP",
        "Align MCP servers across assistants",
        f"MCP parity is {mcp.parity_score}% across {mcp.configured_hosts} hosts.",
        "The same tools are available whichever assistant you use",
    )


def malformed_mcp_configs(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    hosts = facts.mcp.malformed_hosts
    if not hosts:
        return None
    return Optimization(
        Priority.MEDIUM, "MCP",
        "Fix malformed MCP configuration",
        f"Could not parse the MCP config of: {', '.join(hosts)}.",
        "Servers declared in these files are currently ignored",
    )


def limited_memory(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    memory = facts.system.memory_gb
    minimum = config.system.min_memory_gb
    if memory is None or memory >= minimum:
        return None
    return Optimization(
        Priority.MEDIUM, "System",
        "Limited system memory",
        f"Only {memory}GB RAM available. {minimum}GB+ recommended for development.",
        "Close unused applications or consider upgrading hardware",
    )


def git_identity_missing(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.user.git_identity_configured:
        return None
    return Optimization(
        Priority.MEDIUM, "System",
        "Configure git identity",
        "user.name or user.email is not set globally.",
        "Commits are attributed correctly",
    )


def assistant_settings_missing(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.structure.has_assistant_settings:
        return None
    return Optimization(
        Priority.MEDIUM, "Structure",
        "Add assistant project settings",
        "Missing .claude/settings.local.json.",
        "Project-specific permissions and context for the assistant",
    )


def stale_lockfile(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.structure.lockfile_state is not LockfileState.STALE:
        return None
    return Optimization(
        Priority.MEDIUM, "Freshness",
        "Refresh the package lockfile",
        "package.json changed after the lockfile was last written.",
        "Reproducible installs across machines and CI",
    )


# ---------------------------------------------------------------------------
# LOW
# ---------------------------------------------------------------------------


def no_migrations(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.structure.migrations_count > 0:
        return None
    return Optimization(
        Priority.LOW, "Structure",
        "Track database migrations",
        "No migrations found under supabase/migrations.",
        "Schema changes become reviewable and reproducible",
    )


def no_nvmrc(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.user.has_nvmrc:
        return None
    return Optimization(
        Priority.LOW, "System",
        "Pin Node.js version",
        "No .nvmrc file found. Node version may vary between developers.",
        "Add .nvmrc with Node version to ensure consistency",
    )


def docker_stopped(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    env = facts.dev_env
    if not env.docker_installed or env.docker_running:
        return None
    return Optimization(
        Priority.LOW, "System",
        "Docker installed but not running",
        "Docker is available but the daemon is not running.",
        "Start Docker if you need local database or containerized services",
    )


def vercel_needs_login(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    vercel = facts.auth.vercel
    if vercel.detail != VERCEL_NEEDS_LOGIN:
        return None
    return Optimization(
        Priority.LOW, "Authentication",
        "Log in to Vercel CLI",
        "The project is linked to Vercel but the CLI is logged out.",
        "Deploy previews and environment pulls from the terminal",
    )


def no_ssh_keys(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    if facts.user.ssh_keys_count > 0:
        return None
    return Optimization(
        Priority.LOW, "System",
        "Create an SSH key",
        "No public keys found in ~/.ssh.",
        "Passwordless git over SSH",
    )


def old_last_commit(
    facts: FactSet, scores: CategoryScores, config: SeatbeltConfig
) -> Optimization | None:
    age = facts.structure.last_commit_age_days
    limit = config.freshness.stale_commit_days
    if age is None or age <= limit:
        return None
    return Optimization(
        Priority.LOW, "Freshness",
        "Stale repository",
        f"The last commit is {age} days old.",
        "Check that you are on the right branch and pull recent changes",
    )


RULES: tuple[Rule, ...] = (
    unprotected_secrets_file,
    client_exposure,
    github_not_authenticated,
    supabase_not_linked,
    low_disk,
    mcp_over_limit,
    low_mcp_parity,
    malformed_mcp_configs,
    limited_memory,
    git_identity_missing,
    assistant_settings_missing,
    stale_lockfile,
    no_migrations,
    no_nvmrc,
    docker_stopped,
    vercel_needs_login,
    no_ssh_keys,
    old_last_commit,
)


def recommend(
    facts: FactSet,
    scores: CategoryScores,
    config: SeatbeltConfig,
    rules: tuple[Rule, ...] = RULES,
) -> list[Optimization]:
    """Evaluate every rule and return the triggered recommendations.

    Args:
        facts: Facts collected in this run.
        scores: Category scores for this run.
        config: Effective configuration (thresholds used by the rules).
        rules: Rules to evaluate, in order.

    Returns:
        All triggered recommendations, HIGH first, then MEDIUM, then LOW.
        Within a priority, rule order is preserved.
    """
    found: list[Optimization] = []
    for rule in rules:
        opt = rule(facts, scores, config)
        if opt is not None:
            found.append(opt)
    return sorted(found, key=lambda opt: opt.priority, reverse=True)
