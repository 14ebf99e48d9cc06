"""Scoring data models: categories, category scores, verdicts, results.

These types are shared by the scoring engine, the aggregator, the
recommendation generator and the renderers, and are kept free of any
scoring logic so that renderers can import them cheaply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping


class Category(Enum):
    """The fixed scoring dimensions, in display and weighting order."""

    AUTHENTICATION = "authentication"
    SECURITY = "security"
    MCP_HEALTH = "mcp_health"
    STRUCTURE = "structure"
    FRESHNESS = "freshness"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[Category, str] = {
    Category.AUTHENTICATION: "Authentication",
    Category.SECURITY: "Security",
    Category.MCP_HEALTH: "MCP Health",
    Category.STRUCTURE: "Structure",
    Category.FRESHNESS: "Freshness",
}


class Verdict(Enum):
    """Final classification gating whether development should proceed."""

    READY = "ready"
    WARNING = "warning"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class CategoryScores:
    """One 0-100 score per category.

    Construct with ``CategoryScores.from_mapping`` to validate that every
    category is present and in range.
    """

    values: tuple[tuple[Category, int], ...]

    @classmethod
    def from_mapping(cls, scores: Mapping[Category, int]) -> CategoryScores:
        missing = [c.value for c in Category if c not in scores]
        if missing:
            raise ValueError(f"Missing category scores: {', '.join(missing)}")
        for category, value in scores.items():
            if not 0 <= value <= 100:
                raise ValueError(
                    f"Score for {category.value} must be in [0, 100], got {value}"
                )
        return cls(tuple((c, int(scores[c])) for c in Category))

    def __getitem__(self, category: Category) -> int:
        for key, value in self.values:
            if key is category:
                return value
        raise KeyError(category)

    def __iter__(self) -> Iterator[tuple[Category, int]]:
        return iter(self.values)

    def as_dict(self) -> dict[str, int]:
        return {c.value: v for c, v in self.values}


@dataclass(frozen=True)
class HealthResult:
    """Terminal output of a run.

    Attributes:
        overall_score: Weighted combination of category scores, 0-100.
        grade: Letter grade from the configured bands.
        descriptor: Word describing the grade (e.g. "Good").
        verdict: ready / warning / blocked.
        verdict_message: Short message explaining the verdict.
        blocking_reasons: Every hard-fail condition that held, in rule order.
    """

    overall_score: int
    grade: str
    descriptor: str
    verdict: Verdict
    verdict_message: str
    blocking_reasons: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_blocked(self) -> bool:
        return self.verdict is Verdict.BLOCKED
