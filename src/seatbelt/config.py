"""Tunable constants for scoring, aggregation and probing.

Every weight, penalty, threshold and band used by the scoring engine and
the aggregator is enumerated exactly once here, as a tree of frozen
dataclasses rooted at ``SeatbeltConfig``. The scoring and aggregation
functions receive the config explicitly; nothing reads module globals.

Overrides:
    A YAML file (``--config`` on the CLI, or ``.seatbelt.yaml`` in the
    project root) may override any leaf value, one section at a time::

        weights:
          security: 0.4
          freshness: 0.0
        mcp:
          soft_limit: 10
        grade_bands:
          - {minimum: 95, grade: A, descriptor: Excellent}
          - {minimum: 0, grade: F, descriptor: Critical}

    Unknown sections or keys are rejected with ``ConfigError`` so that a
    typo never silently falls back to a default.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from seatbelt.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Name of the per-project override file looked up when no --config is given.
PROJECT_CONFIG_FILENAME = ".seatbelt.yaml"

WEIGHT_SUM_EPSILON: float = 1e-6


# ---------------------------------------------------------------------------
# Aggregation: category weights, grade bands, verdict thresholds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryWeights:
    """Weights combining category scores into the overall score.

    Weights must be non-negative and sum to 1.0 (within epsilon).
    """

    authentication: float = 0.25
    security: float = 0.30
    mcp_health: float = 0.20
    structure: float = 0.15
    freshness: float = 0.10

    def as_dict(self) -> dict[str, float]:
        """Return weights keyed by category value, in declaration order."""
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}

    def validate(self) -> None:
        """Raise ConfigError if any weight is negative or the sum is not 1.0."""
        total = 0.0
        for name, value in self.as_dict().items():
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigError(
                    f"Weight '{name}' must be numeric, got {type(value).__name__}"
                )
            if value < 0.0:
                raise ConfigError(f"Weight '{name}' must be non-negative, got {value}")
            total += value
        if abs(total - 1.0) > WEIGHT_SUM_EPSILON:
            raise ConfigError(
                f"Category weights must sum to 1.0 (within epsilon="
                f"{WEIGHT_SUM_EPSILON}), got sum={total}"
            )


@dataclass(frozen=True)
class GradeBand:
    """A letter grade awarded to overall scores at or above ``minimum``."""

    minimum: int
    grade: str
    descriptor: str


DEFAULT_GRADE_BANDS: tuple[GradeBand, ...] = (
    GradeBand(90, "A", "Excellent"),
    GradeBand(80, "B", "Good"),
    GradeBand(60, "C", "Fair"),
    GradeBand(40, "D", "Poor"),
    GradeBand(0, "F", "Critical"),
)


@dataclass(frozen=True)
class VerdictThresholds:
    """Score thresholds behind the ready / warning / blocked verdict.

    Attributes:
        ready_floor: Overall scores at or above this are ``ready``.
        warning_floor: Overall scores below this are ``blocked``; scores
            between the two floors are ``warning``.
        security_minimum: A security score below this blocks regardless
            of the overall score.
    """

    ready_floor: int = 80
    warning_floor: int = 60
    security_minimum: int = 40


# ---------------------------------------------------------------------------
# Category scoring rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServiceWeights:
    """Relative weight of each service in the authentication score.

    Core services (GitHub, Supabase, Git) weigh more than the optional
    deployment and cloud services.
    """

    github: int = 30
    supabase: int = 25
    git: int = 25
    vercel: int = 10
    aws: int = 10
    # Fraction of a service's weight earned when its CLI is installed but
    # not logged in.
    partial_credit: float = 0.0


@dataclass(frozen=True)
class SecurityPenalties:
    unprotected_secrets_file: int = 40
    exposure_violation: int = 25
    missing_secrets_file: int = 10


@dataclass(frozen=True)
class McpCostModel:
    """Per-server cost model and scoring for the MCP inventory.

    Attributes:
        soft_limit: Servers a single host can run before the performance
            score starts to degrade.
        per_server_penalty: Performance points lost per server beyond
            ``soft_limit`` on the heaviest host.
        advisory_threshold: Performance scores below this emit the
            performance advisory in the report.
        parity_weight: Share of the MCP health score taken by parity.
        low_parity: Parity below this (with two or more hosts) triggers
            a recommendation.
        memory_mb_per_server: Estimated resident memory per server.
        startup_ms_per_server: Estimated startup delay per server.
        failure_rate_per_server: Probability a single server fails to start.
    """

    soft_limit: int = 8
    per_server_penalty: int = 7
    advisory_threshold: int = 80
    parity_weight: float = 0.3
    low_parity: int = 70
    memory_mb_per_server: int = 50
    startup_ms_per_server: int = 250
    failure_rate_per_server: float = 0.02


@dataclass(frozen=True)
class StructurePoints:
    migrations_points: int = 60
    assistant_config_points: int = 40


@dataclass(frozen=True)
class FreshnessRules:
    """Recency rules for the freshness category.

    ``neutral_score`` is used when no recency signal is measurable, so an
    absent signal is never scored as a penalty.
    """

    neutral_score: int = 70
    stale_commit_days: int = 30
    stale_commit: int = 30
    missing_lockfile: int = 20
    stale_lockfile: int = 30


@dataclass(frozen=True)
class SystemRules:
    """Deductions for the informational system readiness score."""

    min_memory_gb: int = 8
    low_memory: int = 10
    min_disk_free_gb: int = 10
    low_disk: int = 15
    missing_git_identity: int = 10
    no_ssh_keys: int = 5
    no_nvm: int = 5
    no_nvmrc: int = 5


@dataclass(frozen=True)
class ProbeSettings:
    """Inputs for the probe layer.

    Attributes:
        command_timeout: Seconds allowed for any external status command.
        secrets_file: Project-relative path of the local secrets file.
        public_prefixes: Env var prefixes that bundlers expose to clients.
        server_secret_markers: Substrings marking a name as server-only.
    """

    command_timeout: float = 3.0
    secrets_file: str = ".env.local"
    public_prefixes: tuple[str, ...] = (
        "VITE_",
        "NEXT_PUBLIC_",
        "REACT_APP_",
        "EXPO_PUBLIC_",
    )
    server_secret_markers: tuple[str, ...] = (
        "SERVICE_ROLE",
        "SECRET",
        "PRIVATE",
        "PASSWORD",
        "OPENAI",
        "ANTHROPIC",
        "HIVE",
        "PINECONE",
        "DATADOG",
        "SLACK_BOT",
        "DATABASE_URL",
    )


# ---------------------------------------------------------------------------
# Root configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeatbeltConfig:
    """Immutable root of all tunable constants."""

    weights: CategoryWeights = field(default_factory=CategoryWeights)
    grade_bands: tuple[GradeBand, ...] = DEFAULT_GRADE_BANDS
    verdict: VerdictThresholds = field(default_factory=VerdictThresholds)
    services: ServiceWeights = field(default_factory=ServiceWeights)
    security: SecurityPenalties = field(default_factory=SecurityPenalties)
    mcp: McpCostModel = field(default_factory=McpCostModel)
    structure: StructurePoints = field(default_factory=StructurePoints)
    freshness: FreshnessRules = field(default_factory=FreshnessRules)
    system: SystemRules = field(default_factory=SystemRules)
    probes: ProbeSettings = field(default_factory=ProbeSettings)

    def validate(self) -> None:
        """Raise ConfigError if weights or grade bands are inconsistent.

        Grade bands must be strictly descending by ``minimum`` and the last
        band must start at 0 so that every score maps to a grade.
        """
        self.weights.validate()
        if not self.grade_bands:
            raise ConfigError("At least one grade band is required")
        minimums = [band.minimum for band in self.grade_bands]
        if any(a <= b for a, b in zip(minimums, minimums[1:])):
            raise ConfigError(
                f"Grade band minimums must be strictly descending, got {minimums}"
            )
        if minimums[-1] != 0:
            raise ConfigError(
                f"The lowest grade band must start at 0, got {minimums[-1]}"
            )
        v = self.verdict
        if not 0 <= v.warning_floor <= v.ready_floor <= 100:
            raise ConfigError(
                "Verdict floors must satisfy 0 <= warning_floor <= ready_floor "
                f"<= 100, got {v.warning_floor} and {v.ready_floor}"
            )


DEFAULT_CONFIG = SeatbeltConfig()


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def _coerce(current: Any, value: Any, where: str) -> Any:
    """Convert a YAML scalar or list to the type of the default value."""
    if isinstance(current, tuple):
        if not isinstance(value, list):
            raise ConfigError(f"'{where}' must be a list")
        return tuple(str(item) for item in value)
    if isinstance(current, bool) or not isinstance(current, (int, float)):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{where}' must be numeric, got {value!r}")
    return type(current)(value) if isinstance(current, float) else value


def _merge_section(section: Any, overrides: Any, name: str) -> Any:
    """Return a copy of a config section with overrides applied."""
    if not isinstance(overrides, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = {f.name for f in dataclasses.fields(section)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"Unknown key(s) in '{name}': {', '.join(unknown)}")
    changes = {
        key: _coerce(getattr(section, key), value, f"{name}.{key}")
        for key, value in overrides.items()
    }
    return dataclasses.replace(section, **changes)


def _parse_grade_bands(raw: Any) -> tuple[GradeBand, ...]:
    if not isinstance(raw, list):
        raise ConfigError("'grade_bands' must be a list")
    bands: list[GradeBand] = []
    for entry in raw:
        try:
            bands.append(GradeBand(
                minimum=int(entry["minimum"]),
                grade=str(entry["grade"]),
                descriptor=str(entry.get("descriptor", "")),
            ))
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid grade band {entry!r}: {exc}") from exc
    return tuple(bands)


def config_from_mapping(data: dict[str, Any]) -> SeatbeltConfig:
    """Build a validated config from a parsed override mapping.

    Args:
        data: Mapping of section name to overrides, as loaded from YAML.

    Returns:
        The default config with the overrides applied.

    Raises:
        ConfigError: On unknown sections, unknown keys, wrong value types,
            or an inconsistent result.
    """
    config = DEFAULT_CONFIG
    changes: dict[str, Any] = {}
    for name, overrides in data.items():
        if name == "grade_bands":
            changes[name] = _parse_grade_bands(overrides)
            continue
        if name not in {f.name for f in dataclasses.fields(config)}:
            raise ConfigError(f"Unknown config section: '{name}'")
        changes[name] = _merge_section(getattr(config, name), overrides, name)
    config = dataclasses.replace(config, **changes)
    config.validate()
    return config


def load_config(
    path: Path | None = None,
    project_root: Path | None = None,
) -> SeatbeltConfig:
    """Load the effective configuration.

    Resolution order: an explicit ``path``, then ``.seatbelt.yaml`` in the
    project root, then the built-in defaults.

    Args:
        path: Explicit config file. Must exist when given.
        project_root: Project directory searched for the override file.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file cannot be read or parsed, or is invalid.
    """
    if path is None and project_root is not None:
        candidate = project_root / PROJECT_CONFIG_FILENAME
        if candidate.is_file():
            path = candidate
    if path is None:
        return DEFAULT_CONFIG

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc

    if raw is None:
        logger.debug("Config file %s is empty; using defaults", path)
        return DEFAULT_CONFIG
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded config overrides from %s", path)
    return config_from_mapping(raw)
