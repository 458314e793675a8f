"""
Layout Statistics

Scores a finished layout: residual overlaps, relationship-line crossings and
a 0-100 efficiency figure that penalizes both.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..placement.legalizer import overlap_values
from ..placement.state import LayoutState

# Share of the efficiency score lost to each kind of defect
OVERLAP_WEIGHT = 60
CROSSING_WEIGHT = 40

Point = Tuple[float, float]


@dataclass
class LayoutStatistics:
    """Summary figures of one layout."""
    total_tables: int = 0
    total_relationships: int = 0
    total_clusters: int = 0
    overlaps: int = 0
    crossings: int = 0
    layout_efficiency: int = 100

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalTables": self.total_tables,
            "totalRelationships": self.total_relationships,
            "totalClusters": self.total_clusters,
            "overlaps": self.overlaps,
            "crossings": self.crossings,
            "layoutEfficiency": self.layout_efficiency,
        }

    def summary(self) -> str:
        """Generate human-readable summary."""
        return "\n".join([
            f"Layout Efficiency: {self.layout_efficiency}%",
            "",
            f"Tables: {self.total_tables}",
            f"Relationships: {self.total_relationships}",
            f"Clusters: {self.total_clusters}",
            f"Overlaps: {self.overlaps}",
            f"Crossings: {self.crossings}",
        ])


def layout_efficiency(table_count: int, relationship_count: int,
                      overlaps: int, crossings: int) -> int:
    """Efficiency score in [0, 100]; an empty layout scores 100."""
    if table_count == 0:
        return 100
    overlap_pairs = max(1, table_count * (table_count - 1) / 2)
    crossing_pairs = max(1, relationship_count * (relationship_count - 1) / 2)
    penalty = (OVERLAP_WEIGHT * min(1.0, overlaps / overlap_pairs)
               + CROSSING_WEIGHT * min(1.0, crossings / crossing_pairs))
    return int(round(max(0.0, 100 - penalty)))


def _orientation(p: Point, q: Point, r: Point) -> float:
    return (q[0] - p[0]) * (r[1] - p[1]) - (q[1] - p[1]) * (r[0] - p[0])


def segments_cross(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """True for a proper intersection; touching or collinear segments do not count."""
    d1 = _orientation(p3, p4, p1)
    d2 = _orientation(p3, p4, p2)
    d3 = _orientation(p1, p2, p3)
    d4 = _orientation(p1, p2, p4)
    return d1 * d2 < 0 and d3 * d4 < 0


class StatisticsScorer:
    """Computes LayoutStatistics over final positions."""

    def __init__(self, state: LayoutState, edges: List[Tuple[int, int]],
                 margin: float, count_crossings: bool = False):
        self.state = state
        self.edges = edges
        self.margin = margin
        self.count_crossings = count_crossings

    def count_overlaps(self) -> int:
        count = 0
        for i in range(len(self.state)):
            for j in range(i + 1, len(self.state)):
                if overlap_values(self.state, i, j, self.margin) is not None:
                    count += 1
        return count

    def count_edge_crossings(self) -> int:
        """Crossings between relationship center-lines, skipping pairs that share a table."""
        state = self.state
        count = 0
        for a in range(len(self.edges)):
            i1, j1 = self.edges[a]
            for b in range(a + 1, len(self.edges)):
                i2, j2 = self.edges[b]
                if {i1, j1} & {i2, j2}:
                    continue
                if segments_cross(state.center(i1), state.center(j1),
                                  state.center(i2), state.center(j2)):
                    count += 1
        return count

    def score(self, relationship_count: int, cluster_count: int) -> LayoutStatistics:
        """
        Args:
            relationship_count: Number of relationships in the input, as reported
            cluster_count: Number of detected clusters
        """
        overlaps = self.count_overlaps()
        crossings = self.count_edge_crossings() if self.count_crossings else 0
        return LayoutStatistics(
            total_tables=len(self.state),
            total_relationships=relationship_count,
            total_clusters=cluster_count,
            overlaps=overlaps,
            crossings=crossings,
            layout_efficiency=layout_efficiency(
                len(self.state), relationship_count, overlaps, crossings),
        )
