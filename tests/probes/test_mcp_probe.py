"""Tests for the MCP inventory probe."""

from __future__ import annotations

from pathlib import Path

import pytest

from seatbelt.config import McpCostModel
from seatbelt.probes.mcp import (
    extract_server_names,
    parity_score,
    performance_score,
    probe_host,
    probe_mcp,
    read_host_config,
    summarize_hosts,
)
from seatbelt.probes.mcp_hosts import MCP_HOSTS, hosts_for_platform
from seatbelt.probes.models import McpHostStats
from tests.probes.helpers import mcp_servers, write_json

MODEL = McpCostModel()
DESKTOP_LINUX = ".config/Claude/claude_desktop_config.json"


def _stats(name: str, *servers: str) -> McpHostStats:
    return McpHostStats(name=name, servers=tuple(sorted(servers)), config_found=True)


class TestExtractServerNames:

    def test_mcp_servers_map(self) -> None:
        assert extract_server_names(mcp_servers(["a", "b"])) == {"a", "b"}

    def test_alternate_keys_and_lists(self) -> None:
        data = {"servers": [{"name": "x"}, {"name": "y"}, {"bad": 1}], "mcp": {"z": {}}}
        assert extract_server_names(data) == {"x", "y", "z"}

    def test_comment_entries_and_non_dict_configs_skipped(self) -> None:
        data = {"mcpServers": {"// disabled": {}, "real": {}, "broken": "str"}}
        assert extract_server_names(data) == {"real"}

    def test_project_section_of_claude_json(self, tmp_path: Path) -> None:
        data = {
            "mcpServers": {"global": {}},
            "projects": {str(tmp_path): {"mcpServers": {"local": {}}}},
        }
        assert extract_server_names(data, tmp_path) == {"global", "local"}

    def test_non_mapping_document(self) -> None:
        assert extract_server_names(["not", "a", "dict"]) == set()


class TestReadHostConfig:

    def test_malformed_json_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "mcp.json"
        path.write_text("{ this is not json")
        assert read_host_config(path) is None

    def test_valid_file(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "mcp.json", mcp_servers(["one"]))
        assert read_host_config(path) == {"one"}


class TestProbeHost:

    def test_union_of_home_and_project_files(self, home: Path, project: Path) -> None:
        cursor = next(h for h in MCP_HOSTS if h.name == "Cursor")
        write_json(home / ".cursor" / "mcp.json", mcp_servers(["a", "b"]))
        write_json(project / ".cursor" / "mcp.json", mcp_servers(["b", "c"]))
        stats = probe_host(cursor, home, project)
        assert stats.servers == ("a", "b", "c")
        assert stats.config_found
        assert not stats.malformed

    def test_no_files(self, home: Path, project: Path) -> None:
        stats = probe_host(MCP_HOSTS[0], home, project)
        assert stats.count == 0
        assert not stats.config_found

    def test_malformed_file_flags_host(self, home: Path, project: Path) -> None:
        cursor = next(h for h in MCP_HOSTS if h.name == "Cursor")
        (home / ".cursor").mkdir()
        (home / ".cursor" / "mcp.json").write_text("[[[")
        stats = probe_host(cursor, home, project)
        assert stats.malformed
        assert stats.count == 0


class TestScores:

    def test_parity_single_host_is_full(self) -> None:
        assert parity_score([_stats("A", "x", "y")]) == 100

    def test_parity_identical_hosts(self) -> None:
        assert parity_score([_stats("A", "x", "y"), _stats("B", "x", "y")]) == 100

    def test_parity_disjoint_hosts(self) -> None:
        # 2 filled slots out of 2 unique * 2 hosts
        assert parity_score([_stats("A", "x"), _stats("B", "y")]) == 50

    def test_parity_ignores_empty_hosts(self) -> None:
        assert parity_score([_stats("A", "x"), _stats("B")]) == 100

    @pytest.mark.parametrize("peak, expected", [(0, 100), (8, 100), (9, 93), (12, 72), (30, 0)])
    def test_performance_score(self, peak: int, expected: int) -> None:
        assert performance_score(peak, MODEL) == expected


class TestSummarizeHosts:

    def test_zero_servers(self) -> None:
        facts = summarize_hosts([_stats("A"), _stats("B")], MODEL)
        assert facts.total_servers == 0
        assert facts.peak_host == ""
        assert facts.performance_score == 100
        assert facts.failure_probability == 0

    def test_cost_model_scales_with_total(self) -> None:
        facts = summarize_hosts([_stats("A", "x", "y"), _stats("B", "x")], MODEL)
        assert facts.unique_servers == 2
        assert facts.total_servers == 3
        assert facts.memory_estimate_mb == 150
        assert facts.startup_delay_ms == 750
        # 1 - 0.98 ** 3 = 0.0588
        assert facts.failure_probability == 6

    def test_peak_host(self) -> None:
        names = [f"s{i}" for i in range(12)]
        facts = summarize_hosts([_stats("Cursor", "s0"), _stats("Claude Desktop", *names)], MODEL)
        assert facts.peak_host == "Claude Desktop"
        assert facts.peak_count == 12


class TestProbeMcp:

    def test_hosts_for_linux(self) -> None:
        paths = [p for h in hosts_for_platform("linux") for p in h.home_paths]
        assert DESKTOP_LINUX in paths
        assert not any(p.startswith("Library/") for p in paths)

    def test_twelve_servers_on_one_host(self, home: Path, project: Path) -> None:
        write_json(home / DESKTOP_LINUX, mcp_servers([f"server-{i}" for i in range(12)]))
        facts = probe_mcp(home, project, MODEL, platform_id="linux")
        assert facts.peak_count == 12
        assert facts.peak_host == "Claude Desktop"
        assert facts.performance_score < MODEL.advisory_threshold

    def test_no_configs_anywhere(self, home: Path, project: Path) -> None:
        facts = probe_mcp(home, project, MODEL, platform_id="linux")
        assert facts.total_servers == 0
        assert facts.parity_score == 100
        assert facts.malformed_hosts == []
