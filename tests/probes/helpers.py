"""Shared test helpers: a scripted command runner and project builders.

``FakeRunner`` replaces every external command with a canned
``CommandResult`` so probe tests never touch the real PATH. The builders
create minimal but realistic project and home directory layouts under
``tmp_path``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from seatbelt.probes.commands import NOT_RUN, CommandResult, CommandRunner
from seatbelt.probes.models import (
    AuthFacts,
    DevEnvFacts,
    FactSet,
    LockfileState,
    McpFacts,
    SecurityFacts,
    ServiceState,
    ServiceStatus,
    StructureFacts,
    SystemFacts,
    UserSettingsFacts,
)


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(returncode=0, stdout=stdout)


def failed(stdout: str = "") -> CommandResult:
    return CommandResult(returncode=1, stdout=stdout)


TIMED_OUT = CommandResult(returncode=None, timed_out=True)


class FakeRunner(CommandRunner):
    """Command runner answering from a table instead of spawning processes.

    Args:
        responses: Map of argv tuple to result. Unlisted commands of an
            available tool fail with return code 1.
        available: Extra executables reported as installed. Every
            executable named in ``responses`` is installed too.
    """

    def __init__(
        self,
        responses: Mapping[Sequence[str], CommandResult] | None = None,
        available: Iterable[str] = (),
    ) -> None:
        super().__init__(timeout=1.0)
        self.responses = {tuple(argv): res for argv, res in (responses or {}).items()}
        self.available = set(available) | {argv[0] for argv in self.responses}
        self.calls: list[tuple[str, ...]] = []

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.available else None

    def run(self, argv, *, timeout=None, cwd=None) -> CommandResult:
        self.calls.append(tuple(argv))
        if not argv or self.which(argv[0]) is None:
            return NOT_RUN
        return self.responses.get(tuple(argv), failed())


def healthy_runner() -> FakeRunner:
    """A machine where every CLI is installed and logged in."""
    return FakeRunner(
        {
            ("gh", "auth", "status"): ok("Logged in to github.com"),
            ("vercel", "whoami"): ok("alice"),
            ("aws", "sts", "get-caller-identity"): ok('{"Account": "123"}'),
            ("docker", "info"): ok("Server: running"),
            ("git", "config", "--global", "user.name"): ok("Alice Example"),
            ("git", "config", "--global", "user.email"): ok("alice@example.com"),
            ("git", "config", "--global", "init.defaultBranch"): ok("main"),
            ("node", "--version"): ok("v20.11.0"),
            ("npm", "--version"): ok("10.2.4"),
            ("git", "--version"): ok("git version 2.43.0"),
            ("git", "log", "-1", "--format=%ct"): ok("1700000000"),
        },
        available={"supabase"},
    )


def bare_runner() -> FakeRunner:
    """A machine with no developer tools at all."""
    return FakeRunner()


def fixed_system(memory_gb: int | None = 16, disk_free_gb: int | None = 200) -> SystemFacts:
    return SystemFacts(
        os_name="Linux",
        os_version="6.8.0",
        arch="x86_64",
        chip_type="x86_64",
        cpu_cores=8,
        memory_gb=memory_gb,
        disk_free_gb=disk_free_gb,
    )


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def mcp_servers(names: Iterable[str]) -> dict:
    return {"mcpServers": {n: {"command": "npx", "args": [n]} for n in names}}


def make_project(
    root: Path,
    *,
    gitignore: str | None = None,
    env_local: str | None = None,
    migrations: int = 0,
    assistant_settings: bool = False,
    git: bool = False,
    supabase_ref: str | None = None,
    vercel_project_id: str | None = None,
    nvmrc: bool = False,
) -> Path:
    """Create a project directory with the requested features."""
    root.mkdir(parents=True, exist_ok=True)
    if gitignore is not None:
        (root / ".gitignore").write_text(gitignore, encoding="utf-8")
    if env_local is not None:
        (root / ".env.local").write_text(env_local, encoding="utf-8")
    if migrations:
        mig = root / "supabase" / "migrations"
        mig.mkdir(parents=True, exist_ok=True)
        for i in range(migrations):
            (mig / f"2024010{i}_init.sql").write_text("select 1;\n", encoding="utf-8")
    if assistant_settings:
        write_json(root / ".claude" / "settings.local.json", {"permissions": {}})
    if git:
        (root / ".git").mkdir(exist_ok=True)
    if supabase_ref is not None:
        ref = root / "supabase" / ".temp" / "project-ref"
        ref.parent.mkdir(parents=True, exist_ok=True)
        ref.write_text(supabase_ref + "\n", encoding="utf-8")
    if vercel_project_id is not None:
        write_json(root / ".vercel" / "project.json", {"projectId": vercel_project_id})
    if nvmrc:
        (root / ".nvmrc").write_text("20\n", encoding="utf-8")
    return root


def make_home(root: Path, *, ssh_keys: int = 0, nvm: bool = False) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    if ssh_keys:
        ssh = root / ".ssh"
        ssh.mkdir(exist_ok=True)
        for i in range(ssh_keys):
            (ssh / f"id_{i}.pub").write_text("ssh-ed25519 AAAA test\n", encoding="utf-8")
    if nvm:
        (root / ".nvm").mkdir(exist_ok=True)
    return root


def healthy_facts(**overrides) -> FactSet:
    """A fact set on which every check passes. Keyword args replace groups."""
    authed = ServiceState(ServiceStatus.AUTHENTICATED, "Authenticated")
    defaults = dict(
        system=fixed_system(),
        dev_env=DevEnvFacts(
            shell="zsh", node_version="20.11.0", npm_version="10.2.4",
            git_version="2.43.0", nvm_installed=True,
        ),
        user=UserSettingsFacts(
            git_name="Alice Example", git_email="alice@example.com",
            default_branch="main", ssh_keys_count=2, has_nvmrc=True,
        ),
        auth=AuthFacts(github=authed, supabase=authed, git=authed, vercel=authed, aws=authed),
        mcp=McpFacts(),
        security=SecurityFacts(
            secrets_file_exists=True, secrets_file_protected=True, secrets_count=4,
        ),
        structure=StructureFacts(
            migrations_count=3, has_assistant_settings=True,
            last_commit_age_days=1, lockfile_state=LockfileState.CURRENT,
        ),
    )
    defaults.update(overrides)
    return FactSet(**defaults)
