"""Static registry of assistant hosts and their MCP configuration files.

Each ``McpHost`` describes where one AI assistant host declares its MCP
(tool-server) entries. Paths are either relative to the user's home
directory or to the project root, and some hosts keep their file in a
platform-specific location.

Platform Notes:
    Claude Desktop stores its config under ``~/Library/Application Support``
    on macOS and under ``~/.config`` on Linux. Cursor and Claude Code use
    the same paths everywhere, plus a project-level file.
"""

from __future__ import annotations

from dataclasses import dataclass

# Top-level keys that hold the server map across different hosts.
MCP_SERVER_KEYS: tuple[str, ...] = ("mcpServers", "mcp", "servers")


@dataclass(frozen=True)
class McpHost:
    """Where an assistant host declares its MCP servers.

    Attributes:
        name: Human-readable display name (e.g., "Claude Desktop").
        home_paths: Config files relative to the home directory.
        project_paths: Config files relative to the project root.
        platform: Target platform ("macos", "linux", "windows" or "all").
    """

    name: str
    home_paths: tuple[str, ...] = ()
    project_paths: tuple[str, ...] = ()
    platform: str = "all"


MCP_HOSTS: tuple[McpHost, ...] = (
    McpHost(
        name="Claude Desktop",
        home_paths=("Library/Application Support/Claude/claude_desktop_config.json",),
        platform="macos",
    ),
    McpHost(
        name="Claude Desktop",
        home_paths=(".config/Claude/claude_desktop_config.json",),
        platform="linux",
    ),
    McpHost(
        name="Cursor",
        home_paths=(".cursor/mcp.json",),
        project_paths=(".cursor/mcp.json",),
    ),
    McpHost(
        name="Claude Code",
        home_paths=(".claude.json",),
        project_paths=(".mcp.json",),
    ),
)


def hosts_for_platform(platform_id: str) -> list[McpHost]:
    """Return the hosts that apply to a platform identifier."""
    return [h for h in MCP_HOSTS if h.platform in ("all", platform_id)]
