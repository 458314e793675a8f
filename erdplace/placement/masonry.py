"""
Masonry Packing

Replaces the loose cluster positions left by the force simulation with a
tight, top-aligned packing. Each cluster is treated as a rigid block (its
bounding box); blocks are dropped largest-first into the currently shortest
column, the way CSS masonry grids fill their columns.
"""

import logging
import math
from dataclasses import dataclass
from typing import List

from ..schema.abstraction import Bounds
from ..settings import LayoutSettings
from .cluster_detector import Cluster
from .state import LayoutState

logger = logging.getLogger(__name__)


@dataclass
class ClusterBlock:
    """Bounding box of one cluster at its current position."""
    indices: List[int]
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


class MasonryPacker:
    """Greedy shortest-column packing of cluster bounding boxes."""

    def __init__(self, state: LayoutState, bounds: Bounds, settings: LayoutSettings):
        self.state = state
        self.bounds = bounds
        self.settings = settings

    def blocks(self, clusters: List[Cluster]) -> List[ClusterBlock]:
        """Bounding boxes sorted by descending area (stable)."""
        blocks = []
        for cluster in clusters:
            indices = [self.state.index[name] for name in cluster.tables]
            if not indices:
                continue
            min_x, min_y, max_x, max_y = self.state.bounding_box(indices)
            blocks.append(ClusterBlock(
                indices=indices,
                x=min_x,
                y=min_y,
                width=max_x - min_x,
                height=max_y - min_y,
            ))
        blocks.sort(key=lambda b: -b.area)
        return blocks

    def column_count(self, average_width: float) -> int:
        padding = self.settings.boundary_padding
        pitch = average_width + self.settings.cluster_separation
        if pitch <= 0:
            return 1
        return max(1, math.floor((self.bounds.width - 2 * padding) / pitch))

    def pack(self, clusters: List[Cluster]) -> List[float]:
        """
        Move every cluster to its packed position.

        Args:
            clusters: Clusters to pack, usually all non-orphan clusters

        Returns:
            Final accumulated height of each column
        """
        blocks = self.blocks(clusters)
        if not blocks:
            return []

        padding = self.settings.boundary_padding
        separation = self.settings.cluster_separation
        average_width = sum(b.width for b in blocks) / len(blocks)
        columns = self.column_count(average_width)
        pitch = average_width + separation
        heights = [padding] * columns

        for block in blocks:
            # min() returns the first column on ties
            column = min(range(columns), key=lambda c: heights[c])
            target_x = padding + column * pitch
            target_y = heights[column]
            dx = target_x - block.x
            dy = target_y - block.y
            for i in block.indices:
                self.state.translate(i, dx, dy)
            heights[column] += block.height + separation

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Masonry packing: blocks=%d columns=%d avg_width=%.1f tallest=%.1f",
                len(blocks), columns, average_width, max(heights),
            )
        return heights
