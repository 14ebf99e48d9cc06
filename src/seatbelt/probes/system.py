"""Machine, developer tool and user settings probes.

Three independent probes describing the local development machine:

- ``probe_system``: OS, architecture, CPU, memory and free disk.
- ``probe_dev_env``: shell, terminal and tool versions on PATH.
- ``probe_user_settings``: git identity, SSH keys, signing, editor.

Hardware figures come from ``psutil``; anything that cannot be measured is
reported as None rather than guessed.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Mapping, Sequence

import psutil

from seatbelt.probes.commands import CommandRunner
from seatbelt.probes.models import DevEnvFacts, SystemFacts, UserSettingsFacts
from seatbelt.probes.services import DockerCheck

logger = logging.getLogger(__name__)

_GIB = 1024 ** 3

_MACOS_CODENAMES: dict[str, str] = {
    "15": "Sequoia",
    "14": "Sonoma",
    "13": "Ventura",
    "12": "Monterey",
    "11": "Big Sur",
}

# Shell name -> candidate rc files under $HOME, in preference order.
_SHELL_CONFIGS: dict[str, tuple[str, ...]] = {
    "zsh": (".zshrc",),
    "bash": (".bashrc", ".bash_profile"),
    "fish": (".config/fish/config.fish",),
}


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


def _chip_type(system: str, arch: str) -> str:
    if system == "Darwin":
        return "Apple Silicon" if arch == "arm64" else "Intel"
    return arch


def probe_system(root: Path = Path("/")) -> SystemFacts:
    """Collect OS and hardware facts for the local machine.

    Args:
        root: Filesystem whose free space is reported.

    Returns:
        System facts. Hardware values are None when psutil cannot read them.
    """
    system = platform.system()
    arch = platform.machine()
    if system == "Darwin":
        os_name = "macOS"
        os_version = platform.mac_ver()[0] or "unknown"
        codename = _MACOS_CODENAMES.get(os_version.split(".")[0], "")
    else:
        os_name = system or "unknown"
        os_version = platform.release()
        codename = ""

    cpu_cores = psutil.cpu_count(logical=True)
    try:
        memory_gb: int | None = psutil.virtual_memory().total // _GIB
    except (OSError, psutil.Error):
        logger.debug("Memory size unavailable", exc_info=True)
        memory_gb = None
    try:
        disk_free_gb: int | None = psutil.disk_usage(str(root)).free // _GIB
    except (OSError, psutil.Error):
        logger.debug("Disk usage unavailable for %s", root, exc_info=True)
        disk_free_gb = None

    return SystemFacts(
        os_name=os_name,
        os_version=os_version,
        os_codename=codename,
        arch=arch,
        chip_type=_chip_type(system, arch),
        cpu_cores=cpu_cores,
        memory_gb=memory_gb,
        disk_free_gb=disk_free_gb,
    )


# ---------------------------------------------------------------------------
# Developer environment
# ---------------------------------------------------------------------------


def _version(runner: CommandRunner, argv: Sequence[str], token: int) -> str | None:
    """Return one whitespace token of a ``--version`` output line.

    Returns None when the tool is absent; "unknown" when it ran but the
    output did not have the expected shape.
    """
    if runner.which(argv[0]) is None:
        return None
    out = runner.output(argv)
    parts = out.splitlines()[0].split() if out else []
    if len(parts) <= token:
        return "unknown"
    return parts[token].lstrip("v")


def probe_dev_env(
    runner: CommandRunner,
    env: Mapping[str, str],
    home: Path,
) -> DevEnvFacts:
    """Collect shell, terminal and developer tool versions."""
    shell = Path(env.get("SHELL", "")).name
    terminal = env.get("TERM_PROGRAM") or env.get("TERMINAL_EMULATOR") or "unknown"
    docker = DockerCheck().status(runner, home)

    return DevEnvFacts(
        shell=shell,
        terminal=terminal,
        node_version=_version(runner, ["node", "--version"], 0),
        npm_version=_version(runner, ["npm", "--version"], 0),
        git_version=_version(runner, ["git", "--version"], 2),
        python_version=_version(runner, ["python3", "--version"], 1),
        rust_version=_version(runner, ["rustc", "--version"], 1),
        nvm_installed=(home / ".nvm").is_dir() or runner.which("nvm") is not None,
        homebrew_installed=runner.which("brew") is not None,
        docker_installed=runner.which("docker") is not None,
        docker_running=docker.is_authenticated,
    )


# ---------------------------------------------------------------------------
# User settings
# ---------------------------------------------------------------------------


def _git_config(runner: CommandRunner, key: str) -> str:
    return runner.output(["git", "config", "--global", key])


def _count_ssh_keys(home: Path) -> int:
    try:
        return sum(1 for _ in (home / ".ssh").glob("*.pub"))
    except OSError:
        return 0


def _shell_config(shell: str, home: Path) -> str:
    for candidate in _SHELL_CONFIGS.get(shell, ()):
        if (home / candidate).is_file():
            return candidate
    return ""


def probe_user_settings(
    runner: CommandRunner,
    env: Mapping[str, str],
    home: Path,
    project_root: Path,
) -> UserSettingsFacts:
    """Collect git identity, SSH, signing and editor settings."""
    signing_key = _git_config(runner, "user.signingkey")
    return UserSettingsFacts(
        git_name=_git_config(runner, "user.name"),
        git_email=_git_config(runner, "user.email"),
        default_branch=_git_config(runner, "init.defaultBranch") or "master",
        ssh_keys_count=_count_ssh_keys(home),
        signing_configured=bool(signing_key) and runner.which("gpg") is not None,
        editor=env.get("EDITOR") or env.get("VISUAL") or "not set",
        shell_config=_shell_config(Path(env.get("SHELL", "")).name, home),
        has_nvmrc=(project_root / ".nvmrc").is_file(),
    )
