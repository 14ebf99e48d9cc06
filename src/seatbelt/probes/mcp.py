"""MCP probe: tool-server inventory across assistant hosts.

For each known host (see ``mcp_hosts``) the probe reads every config file
that exists, collects the declared server names, and derives:

- ``unique_servers``: size of the union of names across hosts.
- ``total_servers``: sum of per-host counts (what actually gets launched).
- ``parity_score``: how consistently the same servers appear on every
  configured host. With ``U`` unique servers and ``H`` configured hosts,
  parity is the share of the ``U * H`` (server, host) slots that are filled,
  as a percentage. Fewer than two configured hosts means full parity.
- Cost estimates from a fixed per-server model: memory, startup delay and
  the probability that at least one server fails, ``1 - (1 - p) ** n``.
- ``performance_score``: 100 minus a fixed penalty for every server on the
  heaviest host beyond the soft limit.

A malformed or unreadable config file contributes zero servers and flags the
host; it never aborts the probe.
"""

from __future__ import annotations

import json
import logging
import platform
from pathlib import Path
from typing import Any

from seatbelt.config import McpCostModel
from seatbelt.probes.mcp_hosts import MCP_SERVER_KEYS, McpHost, hosts_for_platform
from seatbelt.probes.models import McpFacts, McpHostStats

logger = logging.getLogger(__name__)


def current_platform() -> str:
    """Return the current platform identifier."""
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    return "windows" if system == "windows" else "linux"


def _names_from_map(server_map: Any) -> set[str]:
    """Extract server names from a ``{name: cfg}`` map or a list of entries."""
    if isinstance(server_map, dict):
        return {
            str(name) for name, cfg in server_map.items()
            if isinstance(cfg, dict) and not str(name).strip().startswith("//")
        }
    if isinstance(server_map, list):
        return {
            str(entry["name"]) for entry in server_map
            if isinstance(entry, dict) and entry.get("name")
        }
    return set()


def extract_server_names(data: Any, project_root: Path | None = None) -> set[str]:
    """Collect server names from a parsed host config document.

    Reads every top-level server key, plus the per-project section that
    Claude Code keeps in ``~/.claude.json`` under ``projects``.
    """
    if not isinstance(data, dict):
        return set()
    names: set[str] = set()
    for key in MCP_SERVER_KEYS:
        names |= _names_from_map(data.get(key))
    projects = data.get("projects")
    if project_root is not None and isinstance(projects, dict):
        entry = projects.get(str(project_root))
        if isinstance(entry, dict):
            names |= _names_from_map(entry.get("mcpServers"))
    return names


def read_host_config(path: Path, project_root: Path | None = None) -> set[str] | None:
    """Parse one config file.

    Returns:
        The declared server names, or None if the file is malformed or
        unreadable. A missing file must be filtered out by the caller.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.warning("Ignoring malformed MCP config %s: %s", path, exc)
        return None
    return extract_server_names(data, project_root)


def _host_files(host: McpHost, home: Path, project_root: Path) -> list[Path]:
    files = [home / rel for rel in host.home_paths]
    files.extend(project_root / rel for rel in host.project_paths)
    return list(dict.fromkeys(files))


def probe_host(host: McpHost, home: Path, project_root: Path) -> McpHostStats:
    """Inventory one host across all of its config files."""
    servers: set[str] = set()
    found = False
    malformed = False
    for path in _host_files(host, home, project_root):
        try:
            if not path.is_file():
                continue
        except OSError:
            continue
        found = True
        names = read_host_config(path, project_root)
        if names is None:
            malformed = True
            continue
        servers |= names
    return McpHostStats(
        name=host.name,
        servers=tuple(sorted(servers)),
        config_found=found,
        malformed=malformed,
    )


def parity_score(hosts: list[McpHostStats]) -> int:
    """Percentage of (server, host) slots filled across configured hosts."""
    configured = [h for h in hosts if h.count > 0]
    if len(configured) < 2:
        return 100
    unique = set().union(*(h.servers for h in configured))
    filled = sum(h.count for h in configured)
    return round(100 * filled / (len(unique) * len(configured)))


def performance_score(peak_count: int, model: McpCostModel) -> int:
    excess = max(0, peak_count - model.soft_limit)
    return max(0, 100 - excess * model.per_server_penalty)


def summarize_hosts(hosts: list[McpHostStats], model: McpCostModel) -> McpFacts:
    """Derive aggregate MCP facts from per-host inventories."""
    unique = set().union(*(h.servers for h in hosts)) if hosts else set()
    total = sum(h.count for h in hosts)
    peak = max(hosts, key=lambda h: h.count, default=None)
    peak_count = peak.count if peak is not None else 0
    failure = 1.0 - (1.0 - model.failure_rate_per_server) ** total
    return McpFacts(
        hosts=tuple(hosts),
        unique_servers=len(unique),
        total_servers=total,
        peak_host=peak.name if peak is not None and peak_count else "",
        peak_count=peak_count,
        parity_score=parity_score(hosts),
        performance_score=performance_score(peak_count, model),
        memory_estimate_mb=total * model.memory_mb_per_server,
        startup_delay_ms=total * model.startup_ms_per_server,
        failure_probability=round(100 * failure),
    )


def probe_mcp(
    home: Path,
    project_root: Path,
    model: McpCostModel,
    platform_id: str | None = None,
) -> McpFacts:
    """Inventory MCP servers for every host applicable to this platform.

    Args:
        home: Home directory holding per-user host configs.
        project_root: Project directory holding project-level configs.
        model: Per-server cost model and performance thresholds.
        platform_id: Override of the platform ("macos", "linux", ...).

    Returns:
        Aggregated MCP facts.
    """
    hosts = hosts_for_platform(platform_id or current_platform())
    stats = [probe_host(host, home, project_root) for host in hosts]
    for host in stats:
        logger.debug("MCP host %s: %d server(s)", host.name, host.count)
    return summarize_hosts(stats, model)
