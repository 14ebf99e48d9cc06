"""Category scoring and aggregation.

Submodules:
    models      -- Category, CategoryScores, Verdict, HealthResult
    engine      -- one pure scoring function per category, plus system readiness
    aggregator  -- weighted overall score, grade band and verdict
"""

from seatbelt.core.scoring.aggregator import aggregate, grade_for, weighted_overall
from seatbelt.core.scoring.engine import (
    score_all,
    score_authentication,
    score_category,
    score_freshness,
    score_mcp_health,
    score_security,
    score_structure,
    score_system,
)
from seatbelt.core.scoring.models import Category, CategoryScores, HealthResult, Verdict

__all__ = [
    "Category",
    "CategoryScores",
    "HealthResult",
    "Verdict",
    "aggregate",
    "grade_for",
    "score_all",
    "score_authentication",
    "score_category",
    "score_freshness",
    "score_mcp_health",
    "score_security",
    "score_structure",
    "score_system",
    "weighted_overall",
]
