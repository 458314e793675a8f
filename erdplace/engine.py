"""
Layout Engine

Runs the full placement pipeline for one schema:

1. Size every table from its columns
2. Split the relationship graph into clusters
3. Seed positions (grid regions, circles within each cluster)
4. Untangle with the force simulation
5. Pack connected clusters masonry-style
6. Push apart remaining overlaps among connected tables
7. Park orphan tables in a grid below everything else
8. Score the result

The engine keeps the positions of its last layout so that callers can read
them back or adjust individual tables without re-running the pipeline.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .placement.cluster_detector import Cluster, ClusterDetector
from .placement.dimensions import calculate_dimensions
from .placement.force_directed import ForceDirectedSimulator
from .placement.initial_placer import InitialPlacer
from .placement.legalizer import OverlapResolver
from .placement.masonry import MasonryPacker
from .placement.orphans import OrphanPlacer
from .placement.state import LayoutState
from .schema.abstraction import Bounds, Schema
from .settings import LayoutSettings, get_default_settings
from .validation.statistics import LayoutStatistics, StatisticsScorer

logger = logging.getLogger(__name__)

IterationCallback = Callable[[LayoutState], None]


@dataclass
class LayoutDiagnostics:
    """How the pipeline stages ended. Not part of the layout itself."""
    iterations: int = 0
    converged: bool = False
    average_speed: float = 0.0
    overlap_passes: int = 0
    residual_overlaps: int = 0
    orphan_count: int = 0
    orphan_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "converged": self.converged,
            "averageSpeed": self.average_speed,
            "overlapPasses": self.overlap_passes,
            "residualOverlaps": self.residual_overlaps,
            "orphanCount": self.orphan_count,
            "orphanRows": self.orphan_rows,
        }


@dataclass
class LayoutResult:
    """Positioned tables plus clusters and statistics."""
    tables: List[Dict[str, Any]] = field(default_factory=list)
    relationships: List[Any] = field(default_factory=list)
    clusters: List[Cluster] = field(default_factory=list)
    bounds: Optional[Bounds] = None
    statistics: Optional[LayoutStatistics] = None
    diagnostics: LayoutDiagnostics = field(default_factory=LayoutDiagnostics)

    @property
    def is_empty(self) -> bool:
        return not self.tables

    def get_table(self, name: str) -> Optional[Dict[str, Any]]:
        for table in self.tables:
            if table.get("name") == name:
                return table
        return None

    def to_dict(self, include_diagnostics: bool = False) -> Dict[str, Any]:
        """Convert to the JSON-ready output form."""
        if self.statistics is None:
            return {"tables": [], "relationships": []}

        data = {
            "tables": [dict(t) for t in self.tables],
            "relationships": list(self.relationships),
            "clusters": [c.to_dict() for c in self.clusters],
            "bounds": self.bounds.to_dict() if self.bounds else None,
            "statistics": self.statistics.to_dict(),
        }
        if include_diagnostics:
            data["diagnostics"] = self.diagnostics.to_dict()
        return data


class LayoutEngine:
    """
    Automatic ER diagram layout.

    One instance may serve many sequential calls; concurrent calls need
    separate instances since the last layout's positions are instance state.
    """

    def __init__(self, settings: Union[LayoutSettings, Dict[str, Any], None] = None):
        """
        Args:
            settings: LayoutSettings, a mapping of overrides merged over the
                      packaged defaults, or None for the defaults
        """
        if isinstance(settings, LayoutSettings):
            self.settings = settings
        else:
            self.settings = get_default_settings().merged(settings)
        self._positions: Dict[str, Tuple[float, float]] = {}

    def update_settings(self, partial: Dict[str, Any]) -> LayoutSettings:
        """
        Shallow-merge ``partial`` into the settings for subsequent calls.

        Raises:
            ValueError: On unknown keys or values of the wrong type
        """
        self.settings = self.settings.merged(partial)
        return self.settings

    def get_table_positions(self) -> Dict[str, Tuple[float, float]]:
        """Top-left positions from the last layout, plus manual adjustments."""
        return dict(self._positions)

    def set_table_position(self, name: str, x: float, y: float):
        """Record a manual position for a table of the last layout."""
        if name not in self._positions:
            logger.debug("Ignoring position for unknown table %s", name)
            return
        self._positions[name] = (float(x), float(y))

    def calculate_layout(
        self,
        schema: Union[Schema, Dict[str, Any]],
        bounds: Union[Bounds, Dict[str, float], None] = None,
        callback: Optional[IterationCallback] = None,
    ) -> LayoutResult:
        """
        Compute positions for every table of ``schema``.

        Args:
            schema: Schema or its ``{"tables", "relationships"}`` dict form
            bounds: Target canvas; defaults to 1200x800
            callback: Called with the live LayoutState after each
                      force-simulation iteration

        Returns:
            LayoutResult. Empty input yields an empty result.

        Raises:
            ValueError: If the schema dict cannot be interpreted
        """
        schema = Schema.coerce(schema)
        if not schema.tables:
            self._positions = {}
            return LayoutResult()

        bounds = Bounds.from_value(bounds)
        settings = self.settings
        diagnostics = LayoutDiagnostics()

        state = LayoutState.from_dimensions(
            schema.table_names, calculate_dimensions(schema.tables))

        detector = ClusterDetector(schema)
        clusters = detector.detect()
        orphans = detector.orphan_names()
        orphan_set = set(orphans)

        InitialPlacer(bounds, settings).place(clusters, state)

        edges = [
            (state.index[rel.from_table], state.index[rel.to_table])
            for rel in schema.valid_relationships()
            if not rel.is_self_loop
        ]
        ForceDirectedSimulator(state, edges, bounds, settings).simulate(callback)
        diagnostics.iterations = state.iteration
        diagnostics.converged = state.converged
        diagnostics.average_speed = state.average_speed

        connected_clusters = [c for c in clusters if not c.is_orphan]
        MasonryPacker(state, bounds, settings).pack(connected_clusters)

        connected = [i for i, name in enumerate(state.names) if name not in orphan_set]
        legalization = OverlapResolver(state, settings).resolve(connected)
        diagnostics.overlap_passes = legalization.passes
        diagnostics.residual_overlaps = legalization.final_overlaps

        diagnostics.orphan_count = len(orphans)
        diagnostics.orphan_rows = OrphanPlacer(state, bounds, settings).place(
            orphans, [state.names[i] for i in connected])

        scorer = StatisticsScorer(
            state, edges, settings.min_table_distance, settings.count_crossings)
        statistics = scorer.score(len(schema.relationships), len(clusters))

        self._positions = state.positions()

        tables = []
        for i, table in enumerate(schema.tables):
            record = table.to_dict()
            record.update({
                "x": state.xs[i],
                "y": state.ys[i],
                "width": state.widths[i],
                "height": state.heights[i],
            })
            tables.append(record)

        logger.info(
            "Layout complete: tables=%d clusters=%d overlaps=%d efficiency=%d%%",
            statistics.total_tables,
            statistics.total_clusters,
            statistics.overlaps,
            statistics.layout_efficiency,
        )

        return LayoutResult(
            tables=tables,
            relationships=schema.relationship_records(),
            clusters=clusters,
            bounds=bounds,
            statistics=statistics,
            diagnostics=diagnostics,
        )


def calculate_layout(
    schema: Union[Schema, Dict[str, Any]],
    bounds: Union[Bounds, Dict[str, float], None] = None,
    settings: Union[LayoutSettings, Dict[str, Any], None] = None,
    callback: Optional[IterationCallback] = None,
) -> LayoutResult:
    """
    Convenience function to lay out a schema with a throwaway engine.

    Args:
        schema: Schema or its dict form
        bounds: Target canvas; defaults to 1200x800
        settings: LayoutSettings or a mapping of overrides
        callback: Per-iteration hook, see LayoutEngine.calculate_layout

    Returns:
        LayoutResult
    """
    return LayoutEngine(settings).calculate_layout(schema, bounds, callback)
