"""Combine category scores into an overall score, grade and verdict.

Blocking rules are evaluated in a fixed order and every rule that holds is
recorded; the verdict message is built from the first one:

1. Security score below ``security_minimum``.
2. No core service (GitHub, Supabase, Git) authenticated.
3. Overall score below ``warning_floor``.

A hard-fail blocks regardless of the overall score.
"""

from __future__ import annotations

from typing import Sequence

from seatbelt.config import GradeBand, SeatbeltConfig
from seatbelt.core.scoring.models import Category, CategoryScores, HealthResult, Verdict


def weighted_overall(scores: CategoryScores, config: SeatbeltConfig) -> int:
    """Return ``round(sum(weight * score))`` in category declaration order."""
    weights = config.weights.as_dict()
    total = 0.0
    for category, score in scores:
        total += weights[category.value] * score
    return max(0, min(100, round(total)))


def grade_for(score: int, bands: Sequence[GradeBand]) -> GradeBand:
    """Return the first band whose minimum the score reaches.

    Bands are ordered from highest to lowest minimum; the last band starts
    at 0, so every score in range maps to exactly one band.
    """
    for band in bands:
        if score >= band.minimum:
            return band
    return bands[-1]


def blocking_reasons(
    scores: CategoryScores,
    overall: int,
    config: SeatbeltConfig,
    core_authenticated: int,
) -> list[str]:
    thresholds = config.verdict
    reasons: list[str] = []
    security = scores[Category.SECURITY]
    if security < thresholds.security_minimum:
        reasons.append(
            f"Security score {security} is below the minimum of "
            f"{thresholds.security_minimum}"
        )
    if core_authenticated == 0:
        reasons.append("No core service (GitHub, Supabase, Git) is authenticated")
    if overall < thresholds.warning_floor:
        reasons.append(
            f"Overall score {overall} is below {thresholds.warning_floor}"
        )
    return reasons


def aggregate(
    scores: CategoryScores,
    config: SeatbeltConfig,
    core_authenticated: int,
) -> HealthResult:
    """Aggregate category scores into the run's ``HealthResult``.

    Args:
        scores: One score per category.
        config: Effective configuration (weights, bands, thresholds).
        core_authenticated: Number of core services authenticated.

    Returns:
        The immutable health result.
    """
    overall = weighted_overall(scores, config)
    band = grade_for(overall, config.grade_bands)
    reasons = blocking_reasons(scores, overall, config, core_authenticated)

    if reasons:
        verdict = Verdict.BLOCKED
        message = f"BLOCKED: {reasons[0]}. Fix critical issues before proceeding."
    elif overall < config.verdict.ready_floor:
        verdict = Verdict.WARNING
        message = (
            f"WARNINGS: Score {overall} is below {config.verdict.ready_floor}. "
            "Address issues soon."
        )
    else:
        verdict = Verdict.READY
        message = "READY: Configuration is healthy. Proceed with development."

    return HealthResult(
        overall_score=overall,
        grade=band.grade,
        descriptor=band.descriptor,
        verdict=verdict,
        verdict_message=message,
        blocking_reasons=tuple(reasons),
    )
