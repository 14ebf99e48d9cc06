"""Status checks for integrated services.

Each service is wrapped in a small ``StatusCheck`` that answers one
question, "is this service usable from here?", as a tri-state
``ServiceState``. The check invokes the service's own CLI through a
``CommandRunner`` (so timeouts apply) or inspects a local link file written
by that CLI. Credentials are never read.

Status mapping:
    AUTHENTICATED      status command succeeded, or link file present.
    NOT_AUTHENTICATED  CLI installed but the status command failed or
                       timed out.
    UNAVAILABLE        CLI not installed and no link file.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from seatbelt.probes.commands import CommandRunner
from seatbelt.probes.models import ServiceState, ServiceStatus

logger = logging.getLogger(__name__)

# Project-relative files written by service CLIs when a project is linked.
SUPABASE_REF_FILE = Path("supabase") / ".temp" / "project-ref"
VERCEL_PROJECT_FILE = Path(".vercel") / "project.json"

VERCEL_NEEDS_LOGIN = "Project linked, CLI needs login"


class StatusCheck(ABC):
    """Capability interface: report the status of one service."""

    #: Attribute name on ``AuthFacts`` this check fills in.
    name: str = ""
    #: Human-readable service name.
    label: str = ""
    #: The CLI executable backing this service.
    executable: str = ""

    @abstractmethod
    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        """Return the service's current state. Must not raise."""

    def _installed(self, runner: CommandRunner) -> bool:
        return runner.which(self.executable) is not None


class GitHubCliCheck(StatusCheck):
    name = "github"
    label = "GitHub CLI"
    executable = "gh"

    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        if not self._installed(runner):
            return ServiceState(ServiceStatus.UNAVAILABLE, "CLI not installed")
        result = runner.run(["gh", "auth", "status"])
        if result.ok:
            return ServiceState(ServiceStatus.AUTHENTICATED, "Authenticated")
        reason = "status check timed out" if result.timed_out else "Not authenticated"
        return ServiceState(ServiceStatus.NOT_AUTHENTICATED, reason)


class SupabaseLinkCheck(StatusCheck):
    """Supabase is considered authenticated once the project is linked."""

    name = "supabase"
    label = "Supabase"
    executable = "supabase"

    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        ref_file = project_root / SUPABASE_REF_FILE
        try:
            ref = ref_file.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError):
            ref = ""
        if ref:
            return ServiceState(ServiceStatus.AUTHENTICATED, f"Linked to {ref}")
        if self._installed(runner):
            return ServiceState(ServiceStatus.NOT_AUTHENTICATED, "Not linked")
        return ServiceState(ServiceStatus.UNAVAILABLE, "Not linked")


class GitRepoCheck(StatusCheck):
    name = "git"
    label = "Git"
    executable = "git"

    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        if not self._installed(runner):
            return ServiceState(ServiceStatus.UNAVAILABLE, "git not installed")
        if (project_root / ".git").exists():
            return ServiceState(ServiceStatus.AUTHENTICATED, "Repository initialized")
        return ServiceState(ServiceStatus.NOT_AUTHENTICATED, "Not a repository")


class VercelCheck(StatusCheck):
    name = "vercel"
    label = "Vercel"
    executable = "vercel"

    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        if not self._installed(runner):
            return ServiceState(ServiceStatus.UNAVAILABLE, "CLI not installed")
        result = runner.run(["vercel", "whoami"])
        user = result.stdout.splitlines()[-1].strip() if result.ok and result.stdout else ""
        if user:
            return ServiceState(ServiceStatus.AUTHENTICATED, f"Authenticated as {user}")
        if _linked_vercel_project(project_root):
            return ServiceState(ServiceStatus.NOT_AUTHENTICATED, VERCEL_NEEDS_LOGIN)
        return ServiceState(ServiceStatus.NOT_AUTHENTICATED, "Not configured")


def _linked_vercel_project(project_root: Path) -> bool:
    """Return True if ``.vercel/project.json`` names a project."""
    path = project_root / VERCEL_PROJECT_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return False
    except (OSError, ValueError):
        logger.warning("Unreadable Vercel link file: %s", path)
        return False
    return isinstance(data, dict) and bool(data.get("projectId"))


class AwsCheck(StatusCheck):
    name = "aws"
    label = "AWS"
    executable = "aws"

    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        if not self._installed(runner):
            return ServiceState(ServiceStatus.UNAVAILABLE, "Not configured (optional)")
        result = runner.run(["aws", "sts", "get-caller-identity"])
        if result.ok:
            return ServiceState(ServiceStatus.AUTHENTICATED, "Authenticated")
        return ServiceState(ServiceStatus.NOT_AUTHENTICATED, "Not configured (optional)")


class DockerCheck(StatusCheck):
    """Container runtime: "authenticated" means the daemon is running."""

    name = "docker"
    label = "Docker"
    executable = "docker"

    def status(self, runner: CommandRunner, project_root: Path) -> ServiceState:
        if not self._installed(runner):
            return ServiceState(ServiceStatus.UNAVAILABLE, "not installed")
        if runner.run(["docker", "info"]).ok:
            return ServiceState(ServiceStatus.AUTHENTICATED, "running")
        return ServiceState(ServiceStatus.NOT_AUTHENTICATED, "installed, not running")


def default_auth_checks() -> list[StatusCheck]:
    """Return the auth checks in report order: core first, then optional."""
    return [
        GitHubCliCheck(),
        SupabaseLinkCheck(),
        GitRepoCheck(),
        VercelCheck(),
        AwsCheck(),
    ]
