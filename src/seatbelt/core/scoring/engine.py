"""Category scoring engine.

Each category has one pure scoring function mapping the relevant facts and
the injected configuration to an integer in ``[0, 100]``. No function reads
global state, performs I/O, or depends on another category's score.

Rule tables (defaults in ``seatbelt.config``):

- **Authentication**: authenticated service weights / total weight.
  Core services (GitHub 30, Supabase 25, Git 25) outweigh optional ones
  (Vercel 10, AWS 10). With no core service authenticated the category
  scores its minimum, whatever the optional services report.
- **Security**: 100 - 40 (unprotected secrets file) - 25 per client
  exposure violation - 10 (no secrets file at all), floored at 0.
- **MCP Health**: blend of the performance score (degrades by 7 per server
  beyond 8 on the heaviest host) and the cross-host parity score. No
  servers at all scores 100.
- **Structure**: 60 for tracked migrations plus 40 for the assistant
  settings file.
- **Freshness**: 70 (neutral) with no measurable recency signal; otherwise
  100 minus stale-commit and lockfile penalties.

``score_system`` computes the informational system readiness score shown in
the system section; it is not part of the weighted overall.
"""

from __future__ import annotations

from seatbelt.config import SeatbeltConfig
from seatbelt.core.scoring.models import Category, CategoryScores
from seatbelt.probes.models import (
    AuthFacts,
    FactSet,
    LockfileState,
    McpFacts,
    SecurityFacts,
    ServiceStatus,
    StructureFacts,
)


def _clamp(score: float) -> int:
    return max(0, min(100, round(score)))


def score_authentication(auth: AuthFacts, config: SeatbeltConfig) -> int:
    if auth.core_authenticated == 0:
        return 0
    weights = config.services
    earned = 0.0
    total = 0
    for service in ("github", "supabase", "git", "vercel", "aws"):
        weight = getattr(weights, service)
        total += weight
        status = auth.get(service).status
        if status is ServiceStatus.AUTHENTICATED:
            earned += weight
        elif status is ServiceStatus.NOT_AUTHENTICATED:
            earned += weight * weights.partial_credit
    if total == 0:
        return 0
    return _clamp(100 * earned / total)


def score_security(security: SecurityFacts, config: SeatbeltConfig) -> int:
    penalties = config.security
    score = 100
    if not security.secrets_file_exists:
        score -= penalties.missing_secrets_file
    elif not security.secrets_file_protected:
        score -= penalties.unprotected_secrets_file
    score -= penalties.exposure_violation * security.violation_count
    return _clamp(score)


def score_mcp_health(mcp: McpFacts, config: SeatbeltConfig) -> int:
    if mcp.total_servers == 0:
        return 100
    w = config.mcp.parity_weight
    return _clamp(mcp.performance_score * (1 - w) + mcp.parity_score * w)


def score_structure(structure: StructureFacts, config: SeatbeltConfig) -> int:
    points = config.structure
    score = 0
    if structure.migrations_count > 0:
        score += points.migrations_points
    if structure.has_assistant_settings:
        score += points.assistant_config_points
    return _clamp(score)


def score_freshness(structure: StructureFacts, config: SeatbeltConfig) -> int:
    rules = config.freshness
    age = structure.last_commit_age_days
    lock = structure.lockfile_state
    if age is None and lock is LockfileState.NO_MANIFEST:
        return rules.neutral_score

    score = 100
    if age is not None and age > rules.stale_commit_days:
        score -= rules.stale_commit
    if lock is LockfileState.MISSING:
        score -= rules.missing_lockfile
    elif lock is LockfileState.STALE:
        score -= rules.stale_lockfile
    return _clamp(score)


def score_category(category: Category, facts: FactSet, config: SeatbeltConfig) -> int:
    """Score one category from the full fact set.

    Args:
        category: The category to score.
        facts: Facts collected in this run.
        config: Effective configuration.

    Returns:
        The category score in ``[0, 100]``.
    """
    if category is Category.AUTHENTICATION:
        return score_authentication(facts.auth, config)
    if category is Category.SECURITY:
        return score_security(facts.security, config)
    if category is Category.MCP_HEALTH:
        return score_mcp_health(facts.mcp, config)
    if category is Category.STRUCTURE:
        return score_structure(facts.structure, config)
    if category is Category.FRESHNESS:
        return score_freshness(facts.structure, config)
    raise ValueError(f"Unknown category: {category}")


def score_all(facts: FactSet, config: SeatbeltConfig) -> CategoryScores:
    """Score every category."""
    return CategoryScores.from_mapping(
        {category: score_category(category, facts, config) for category in Category}
    )


def score_system(facts: FactSet, config: SeatbeltConfig) -> int:
    """Informational readiness score for the machine and user settings.

    Unknown memory or disk figures are not penalized.
    """
    rules = config.system
    score = 100
    memory = facts.system.memory_gb
    disk = facts.system.disk_free_gb
    if memory is not None and memory < rules.min_memory_gb:
        score -= rules.low_memory
    if disk is not None and disk < rules.min_disk_free_gb:
        score -= rules.low_disk
    if not facts.user.git_identity_configured:
        score -= rules.missing_git_identity
    if facts.user.ssh_keys_count == 0:
        score -= rules.no_ssh_keys
    if not facts.dev_env.nvm_installed:
        score -= rules.no_nvm
    if not facts.user.has_nvmrc:
        score -= rules.no_nvmrc
    return _clamp(score)
