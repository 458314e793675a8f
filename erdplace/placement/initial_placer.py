"""
Initial Placement

Seeds the force simulation with a repeatable, non-degenerate configuration:
clusters get equal regions of a square-ish grid over the usable canvas, and
tables within a multi-table cluster sit evenly on a circle so that no two
start at the same point.
"""

import logging
import math
from typing import List, Tuple

from ..schema.abstraction import Bounds
from ..settings import LayoutSettings
from .cluster_detector import Cluster
from .state import LayoutState

logger = logging.getLogger(__name__)

# Circle radius as a fraction of the region's smaller side, applied to the
# inner 80% of the region
RADIUS_FRACTION = 0.4
REGION_FILL = 0.8


class InitialPlacer:
    """Assigns each cluster a grid region and arranges its tables inside it."""

    def __init__(self, bounds: Bounds, settings: LayoutSettings):
        self.bounds = bounds
        self.settings = settings

    def region_grid(self, cluster_count: int) -> Tuple[int, int, float, float]:
        """Return (columns, rows, region_width, region_height)."""
        columns = max(1, math.ceil(math.sqrt(cluster_count)))
        rows = max(1, math.ceil(cluster_count / columns))
        padding = self.settings.boundary_padding
        region_width = (self.bounds.width - 2 * padding) / columns
        region_height = (self.bounds.height - 2 * padding) / rows
        return columns, rows, region_width, region_height

    def place(self, clusters: List[Cluster], state: LayoutState):
        """Write starting positions for every table of every cluster."""
        if not clusters:
            return

        columns, rows, region_width, region_height = self.region_grid(len(clusters))
        padding = self.settings.boundary_padding
        radius = RADIUS_FRACTION * min(region_width, region_height) * REGION_FILL

        for cluster_index, cluster in enumerate(clusters):
            row = cluster_index // columns
            col = cluster_index % columns
            center_x = padding + col * region_width + region_width / 2
            center_y = padding + row * region_height + region_height / 2
            self._place_cluster(cluster, state, center_x, center_y, radius)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Initial placement: clusters=%d grid=%dx%d region=%.1fx%.1f radius=%.1f",
                len(clusters), columns, rows, region_width, region_height, radius,
            )

    def _place_cluster(self, cluster: Cluster, state: LayoutState,
                       center_x: float, center_y: float, radius: float):
        indices = [state.index[name] for name in cluster.tables]

        if len(indices) == 1:
            state.set_center(indices[0], center_x, center_y)
            return

        count = len(indices)
        for position, i in enumerate(indices):
            angle = 2 * math.pi * position / count
            state.set_center(
                i,
                center_x + math.cos(angle) * radius,
                center_y + math.sin(angle) * radius,
            )
