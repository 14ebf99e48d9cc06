"""Prioritized optimization recommendations.

Submodules:
    models  -- Priority, Optimization
    rules   -- independent recommendation rules and ``recommend``
"""

from seatbelt.core.recommend.models import Optimization, Priority
from seatbelt.core.recommend.rules import RULES, recommend

__all__ = [
    "Optimization",
    "Priority",
    "RULES",
    "recommend",
]
