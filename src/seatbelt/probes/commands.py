"""Bounded, read-only execution of external commands.

Probes never call ``subprocess`` directly. They go through a
``CommandRunner`` so that every external status or version query carries an
explicit timeout, never raises for a missing tool, and can be replaced by a
fake in tests.

A command that is not on PATH, fails to start, or exceeds its timeout yields
a ``CommandResult`` with ``returncode`` set to None. Callers treat that the
same way as a failing status check.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 3.0


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command.

    Attributes:
        returncode: Process exit status, or None if it never completed.
        stdout: Captured standard output, stripped.
        timed_out: True when the command was killed at the timeout.
    """

    returncode: int | None
    stdout: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0


NOT_RUN = CommandResult(returncode=None)


class CommandRunner:
    """Runs external commands with a bounded timeout.

    Args:
        timeout: Default timeout in seconds for every command.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def which(self, name: str) -> str | None:
        """Return the resolved path of ``name`` on PATH, or None."""
        return shutil.which(name)

    def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
        cwd: Path | None = None,
    ) -> CommandResult:
        """Run ``argv`` without a shell and capture its output.

        Args:
            argv: Command and arguments. The executable is resolved on PATH.
            timeout: Override of the default timeout, in seconds.
            cwd: Working directory for the command.

        Returns:
            The command result. Never raises for missing tools, start
            failures or timeouts.
        """
        if not argv or self.which(argv[0]) is None:
            return NOT_RUN
        limit = self.timeout if timeout is None else timeout
        try:
            proc = subprocess.run(
                list(argv),
                capture_output=True,
                text=True,
                timeout=limit,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Timed out after %ss: %s", limit, " ".join(argv))
            return CommandResult(returncode=None, timed_out=True)
        except OSError as exc:
            logger.debug("Could not run %s: %s", argv[0], exc)
            return NOT_RUN
        return CommandResult(returncode=proc.returncode, stdout=proc.stdout.strip())

    def output(self, argv: Sequence[str], *, cwd: Path | None = None) -> str:
        """Return stdout of a successful command, or an empty string."""
        result = self.run(argv, cwd=cwd)
        return result.stdout if result.ok else ""
