"""Probe layer: independent, read-only inspectors of machine and project.

Submodules:
    commands   -- CommandRunner with bounded timeouts
    services   -- StatusCheck capability interface and service checks
    system     -- System, developer tool and user settings probes
    auth       -- Per-service authentication probe
    mcp_hosts  -- Registry of assistant hosts and their MCP config paths
    mcp        -- MCP inventory, parity and cost model
    security   -- Secrets file protection and client exposure
    structure  -- Migrations, assistant settings and recency signals
    collector  -- ``collect_facts`` running every probe once
"""

from seatbelt.probes.collector import collect_facts
from seatbelt.probes.commands import CommandResult, CommandRunner
from seatbelt.probes.models import (
    AuthFacts,
    DevEnvFacts,
    FactSet,
    LockfileState,
    McpFacts,
    McpHostStats,
    SecurityFacts,
    ServiceState,
    ServiceStatus,
    StructureFacts,
    SystemFacts,
    UserSettingsFacts,
)

__all__ = [
    "AuthFacts",
    "CommandResult",
    "CommandRunner",
    "DevEnvFacts",
    "FactSet",
    "LockfileState",
    "McpFacts",
    "McpHostStats",
    "SecurityFacts",
    "ServiceState",
    "ServiceStatus",
    "StructureFacts",
    "SystemFacts",
    "UserSettingsFacts",
    "collect_facts",
]
