"""Recommendation data models: Priority and Optimization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Priority(IntEnum):
    """Impact of acting on a recommendation.

    The integer encoding enables direct comparison: LOW < MEDIUM < HIGH.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class Optimization:
    """One actionable recommendation.

    Attributes:
        priority: HIGH, MEDIUM or LOW impact.
        category: Display category (e.g. "Security", "MCP", "System").
        title: Short headline.
        description: What was observed.
        benefit: What acting on it improves.
    """

    priority: Priority
    category: str
    title: str
    description: str
    benefit: str
