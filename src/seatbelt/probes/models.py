"""Fact models produced by the probe layer.

Each probe returns one frozen dataclass of named facts. Absent signals are
represented explicitly: ``None`` for an unknown value (tool not installed,
size not measurable), ``0`` for counts, ``ServiceStatus.UNAVAILABLE`` for a
service whose CLI or link file is missing. Facts are never mutated after a
probe returns, and each fact belongs to exactly one probe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Service status (tri-state)
# ---------------------------------------------------------------------------


class ServiceStatus(Enum):
    """Authentication state of an integrated service."""

    AUTHENTICATED = "authenticated"
    NOT_AUTHENTICATED = "not_authenticated"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ServiceState:
    """Status of one service plus a non-secret detail for display.

    Attributes:
        status: The tri-state authentication status.
        detail: Account name, linked project ref, or a short reason.
            Never a credential.
    """

    status: ServiceStatus
    detail: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.status is ServiceStatus.AUTHENTICATED


UNAVAILABLE = ServiceState(ServiceStatus.UNAVAILABLE)


# ---------------------------------------------------------------------------
# Machine facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SystemFacts:
    os_name: str
    os_version: str
    os_codename: str = ""
    arch: str = ""
    chip_type: str = ""
    cpu_cores: int | None = None
    memory_gb: int | None = None
    disk_free_gb: int | None = None


@dataclass(frozen=True)
class DevEnvFacts:
    """Developer tool inventory. A version of ``None`` means not on PATH."""

    shell: str = ""
    terminal: str = "unknown"
    node_version: str | None = None
    npm_version: str | None = None
    git_version: str | None = None
    python_version: str | None = None
    rust_version: str | None = None
    nvm_installed: bool = False
    homebrew_installed: bool = False
    docker_installed: bool = False
    docker_running: bool = False


@dataclass(frozen=True)
class UserSettingsFacts:
    git_name: str = ""
    git_email: str = ""
    default_branch: str = "master"
    ssh_keys_count: int = 0
    signing_configured: bool = False
    editor: str = "not set"
    shell_config: str = ""
    has_nvmrc: bool = False

    @property
    def git_identity_configured(self) -> bool:
        return bool(self.git_name and self.git_email)


# ---------------------------------------------------------------------------
# Project facts
# ---------------------------------------------------------------------------

CORE_SERVICES: tuple[str, ...] = ("github", "supabase", "git")
OPTIONAL_SERVICES: tuple[str, ...] = ("vercel", "aws")


@dataclass(frozen=True)
class AuthFacts:
    """Per-service authentication states.

    Core services (``github``, ``supabase``, ``git``) gate development;
    optional services (``vercel``, ``aws``) only contribute to the score.
    """

    github: ServiceState = UNAVAILABLE
    supabase: ServiceState = UNAVAILABLE
    git: ServiceState = UNAVAILABLE
    vercel: ServiceState = UNAVAILABLE
    aws: ServiceState = UNAVAILABLE

    def get(self, service: str) -> ServiceState:
        return getattr(self, service)

    @property
    def core_authenticated(self) -> int:
        """Number of core services currently authenticated."""
        return sum(1 for name in CORE_SERVICES if self.get(name).is_authenticated)


@dataclass(frozen=True)
class McpHostStats:
    """Tool-server inventory for one assistant host.

    Attributes:
        name: Display name of the host (e.g. "Cursor").
        servers: Sorted names of servers declared across the host's files.
        config_found: Whether any of the host's config files exists.
        malformed: Whether any existing config file failed to parse.
    """

    name: str
    servers: tuple[str, ...] = ()
    config_found: bool = False
    malformed: bool = False

    @property
    def count(self) -> int:
        return len(self.servers)


@dataclass(frozen=True)
class McpFacts:
    """Aggregated MCP inventory and the per-server cost estimates."""

    hosts: tuple[McpHostStats, ...] = ()
    unique_servers: int = 0
    total_servers: int = 0
    peak_host: str = ""
    peak_count: int = 0
    parity_score: int = 100
    performance_score: int = 100
    memory_estimate_mb: int = 0
    startup_delay_ms: int = 0
    failure_probability: int = 0

    @property
    def configured_hosts(self) -> int:
        return sum(1 for h in self.hosts if h.count > 0)

    @property
    def malformed_hosts(self) -> list[str]:
        return [h.name for h in self.hosts if h.malformed]


@dataclass(frozen=True)
class SecurityFacts:
    """Secrets-file checks. Only variable names are ever recorded."""

    secrets_file: str = ".env.local"
    secrets_file_exists: bool = False
    secrets_file_protected: bool = False
    secrets_count: int = 0
    exposure_violations: tuple[str, ...] = ()

    @property
    def violation_count(self) -> int:
        return len(self.exposure_violations)


class LockfileState(Enum):
    """Relationship between the package manifest and its lockfile."""

    NO_MANIFEST = "no_manifest"
    MISSING = "missing"
    STALE = "stale"
    CURRENT = "current"


@dataclass(frozen=True)
class StructureFacts:
    """Project layout and recency signals.

    Attributes:
        migrations_count: ``*.sql`` files under ``supabase/migrations``.
        has_assistant_settings: ``.claude/settings.local.json`` exists.
        last_commit_age_days: Whole days since the last commit, or None
            when the project is not a repository or git is unavailable.
        lockfile_state: Package lockfile freshness.
    """

    migrations_count: int = 0
    has_assistant_settings: bool = False
    last_commit_age_days: int | None = None
    lockfile_state: LockfileState = LockfileState.NO_MANIFEST


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FactSet:
    """All facts collected in one run, grouped by category."""

    system: SystemFacts
    dev_env: DevEnvFacts = field(default_factory=DevEnvFacts)
    user: UserSettingsFacts = field(default_factory=UserSettingsFacts)
    auth: AuthFacts = field(default_factory=AuthFacts)
    mcp: McpFacts = field(default_factory=McpFacts)
    security: SecurityFacts = field(default_factory=SecurityFacts)
    structure: StructureFacts = field(default_factory=StructureFacts)
