"""Layout quality scoring."""

from .statistics import LayoutStatistics, StatisticsScorer, layout_efficiency

__all__ = [
    "LayoutStatistics",
    "StatisticsScorer",
    "layout_efficiency",
]
