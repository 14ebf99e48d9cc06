"""Security probe: local secrets file protection and client exposure.

Checks performed:

1. **Protection**: the secrets file (``.env.local`` by default) must be
   excluded from version control. ``.gitignore`` patterns are applied with
   git's rules (last match wins, ``!`` re-includes, a leading ``**/``
   matches at any depth) using ``fnmatch`` for the globbing.
2. **Client exposure**: bundlers inline variables with a public prefix
   (``VITE_``, ``NEXT_PUBLIC_``, ...) into client code. A public-prefixed
   name containing a server-secret marker (``SERVICE_ROLE``, ``SECRET``,
   ``OPENAI``, ...) is a violation.
3. **Inventory**: the number of declared variables.

Only variable *names* are kept. Values are parsed by python-dotenv and
dropped immediately; they are never logged, stored or compared.
"""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from seatbelt.config import ProbeSettings
from seatbelt.probes.models import SecurityFacts

logger = logging.getLogger(__name__)


def ignore_patterns(gitignore: Path) -> list[str]:
    """Return the patterns of an ignore-rules file in file order.

    Comments and blank lines are skipped. Negations keep their ``!`` prefix.
    A missing or unreadable file yields no patterns.
    """
    try:
        lines = gitignore.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return []
    patterns: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("\\#"):
            stripped = stripped[1:]
        patterns.append(stripped)
    return patterns


def _matches(path: str, is_dir: bool, pattern: str) -> bool:
    if pattern.endswith("/"):
        if not is_dir:
            return False
        pattern = pattern.rstrip("/")
    if pattern.startswith("**/"):
        # a leading "**/" matches in any directory, including the root
        rest = pattern[3:]
        parts = path.split("/")
        return any(
            fnmatch.fnmatchcase("/".join(parts[i:]), rest) for i in range(len(parts))
        )
    if "/" in pattern:
        return fnmatch.fnmatchcase(path, pattern.lstrip("/"))
    return fnmatch.fnmatchcase(path.rsplit("/", 1)[-1], pattern)


def _last_match(path: str, is_dir: bool, patterns: list[str]) -> bool:
    ignored = False
    for pattern in patterns:
        negated = pattern.startswith("!")
        body = pattern[1:] if negated else pattern
        if body.strip("/") and _matches(path, is_dir, body):
            ignored = not negated
    return ignored


def is_ignored(relative_path: str, patterns: Iterable[str]) -> bool:
    """Return True if git would ignore the project-relative file path.

    Patterns are applied in order and the last match wins, so ``!pattern``
    re-includes a file excluded earlier. A file inside an ignored directory
    stays ignored whatever later negations say.
    """
    rules = list(patterns)
    parts = relative_path.strip("/").split("/")
    for depth in range(1, len(parts)):
        if _last_match("/".join(parts[:depth]), True, rules):
            return True
    return _last_match("/".join(parts), False, rules)


def declared_names(secrets_file: Path) -> list[str]:
    """Return the variable names declared in a dotenv file."""
    try:
        return [name for name in dotenv_values(secrets_file) if name]
    except (OSError, UnicodeDecodeError):
        logger.warning("Could not read secrets file %s", secrets_file)
        return []


def exposure_violations(names: Iterable[str], settings: ProbeSettings) -> list[str]:
    """Return public-prefixed names that look server-only, sorted."""
    violations: list[str] = []
    for name in names:
        upper = name.upper()
        prefix = next((p for p in settings.public_prefixes if upper.startswith(p)), None)
        if prefix is None:
            continue
        remainder = upper[len(prefix):]
        if any(marker in remainder for marker in settings.server_secret_markers):
            violations.append(name)
    return sorted(violations)


def probe_security(project_root: Path, settings: ProbeSettings) -> SecurityFacts:
    """Inspect the project's secrets file without reading secret values."""
    rel = settings.secrets_file
    secrets_file = project_root / rel
    if not secrets_file.is_file():
        return SecurityFacts(secrets_file=rel)

    protected = is_ignored(rel, ignore_patterns(project_root / ".gitignore"))
    names = declared_names(secrets_file)
    violations = exposure_violations(names, settings)
    if not protected:
        logger.debug("%s is not covered by .gitignore", rel)
    return SecurityFacts(
        secrets_file=rel,
        secrets_file_exists=True,
        secrets_file_protected=protected,
        secrets_count=len(names),
        exposure_violations=tuple(violations),
    )
