"""Shared fixtures for CLI tests.

The CLI commands are exercised through ``CliRunner`` with the report
pipeline replaced by ``evaluate`` over canned fact sets, so no test probes
the real machine.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from seatbelt.core.report import HealthReport, evaluate
from seatbelt.probes.models import FactSet, McpFacts, SecurityFacts, StructureFacts
from tests.probes.helpers import fixed_system, healthy_facts

FIXED_TIME = datetime(2026, 1, 15, 9, 30)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def use_facts(monkeypatch: pytest.MonkeyPatch) -> Callable[[FactSet], list]:
    """Make ``seatbelt check`` evaluate the given facts.

    Returns a list that records the ``(project, config)`` of every call.
    """
    calls: list = []

    def install(facts: FactSet) -> list:
        def fake_build_report(project: Path, config) -> HealthReport:
            calls.append((project, config))
            return evaluate(facts, config, project_root=project, generated_at=FIXED_TIME)

        monkeypatch.setattr("seatbelt.cli.check_cmd.build_report", fake_build_report)
        return calls

    return install


@pytest.fixture
def ready_facts() -> FactSet:
    return healthy_facts()


@pytest.fixture
def warning_facts() -> FactSet:
    """Overall 75: no tracked structure, a stale repository, MCP overload."""
    return healthy_facts(
        structure=StructureFacts(last_commit_age_days=90),
        mcp=McpFacts(
            total_servers=12, peak_host="Claude Desktop", peak_count=12,
            parity_score=100, performance_score=72,
        ),
        security=SecurityFacts(),
    )


@pytest.fixture
def blocked_facts() -> FactSet:
    return FactSet(system=fixed_system())
