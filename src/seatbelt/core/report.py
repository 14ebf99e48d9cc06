"""Typed report model and the one-way check pipeline.

``build_report`` runs probes -> scores -> recommendations -> aggregate and
returns a ``HealthReport`` that renderers consume without re-deriving
anything. Given the same facts and config, the scores, result and
recommendations are identical on every run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from seatbelt.config import DEFAULT_CONFIG, SeatbeltConfig
from seatbelt.core.recommend import Optimization, recommend
from seatbelt.core.scoring import (
    CategoryScores,
    HealthResult,
    aggregate,
    score_all,
    score_system,
)
from seatbelt.probes import CommandRunner, FactSet, collect_facts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthReport:
    """Everything a renderer needs for one run.

    Attributes:
        facts: Facts collected by the probes.
        scores: Per-category scores.
        system_score: Informational system readiness score.
        result: Overall score, grade and verdict.
        optimizations: Every triggered recommendation, highest priority first.
        project_root: The inspected project directory.
        generated_at: Local time the report was produced.
    """

    facts: FactSet
    scores: CategoryScores
    system_score: int
    result: HealthResult
    optimizations: tuple[Optimization, ...] = ()
    project_root: Path = field(default_factory=Path)
    generated_at: datetime = field(default_factory=datetime.now)


def evaluate(
    facts: FactSet,
    config: SeatbeltConfig = DEFAULT_CONFIG,
    project_root: Path | None = None,
    generated_at: datetime | None = None,
) -> HealthReport:
    """Score, recommend and aggregate an already collected fact set."""
    scores = score_all(facts, config)
    result = aggregate(scores, config, facts.auth.core_authenticated)
    optimizations = recommend(facts, scores, config)
    logger.debug(
        "Overall %d (%s), verdict %s, %d recommendation(s)",
        result.overall_score, result.grade, result.verdict.value, len(optimizations),
    )
    return HealthReport(
        facts=facts,
        scores=scores,
        system_score=score_system(facts, config),
        result=result,
        optimizations=tuple(optimizations),
        project_root=project_root or Path.cwd(),
        generated_at=generated_at or datetime.now(),
    )


def build_report(
    project_root: Path,
    config: SeatbeltConfig = DEFAULT_CONFIG,
    *,
    runner: CommandRunner | None = None,
    home: Path | None = None,
    **probe_overrides: Any,
) -> HealthReport:
    """Run the full pipeline against a project directory.

    Args:
        project_root: Project directory to inspect.
        config: Effective configuration.
        runner: Command runner for external status commands.
        home: Home directory holding per-user configuration.
        **probe_overrides: Forwarded to ``collect_facts`` (``env``,
            ``platform_id``, ``now``, ``system``).

    Returns:
        The complete health report.
    """
    root = project_root.resolve()
    facts = collect_facts(root, config, runner=runner, home=home, **probe_overrides)
    return evaluate(facts, config, project_root=root)
