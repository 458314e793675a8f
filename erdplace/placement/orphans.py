"""
Orphan Placement

Tables that no relationship touches carry no structural information for the
force model, so they are parked in a plain grid underneath the connected
part of the diagram, left to right and top to bottom in declaration order.
"""

import logging
import math
from typing import List

from ..schema.abstraction import Bounds
from ..settings import LayoutSettings
from .state import LayoutState

logger = logging.getLogger(__name__)


class OrphanPlacer:
    """Lays orphan tables out in a row-wrapped grid below the connected layout."""

    def __init__(self, state: LayoutState, bounds: Bounds, settings: LayoutSettings):
        self.state = state
        self.bounds = bounds
        self.settings = settings

    def column_count(self) -> int:
        padding = self.settings.boundary_padding
        pitch = self.settings.orphan_column_width + self.settings.min_table_distance
        if pitch <= 0:
            return 1
        return max(1, math.floor((self.bounds.width - 2 * padding) / pitch))

    def start_y(self, connected: List[int]) -> float:
        """Top of the orphan grid: orphan_padding below the lowest connected table.

        An empty connected layout counts as ending at y = 0.
        """
        bottom = max((self.state.bottom(i) for i in connected), default=0.0)
        return bottom + self.settings.orphan_padding

    def place(self, orphans: List[str], connected: List[str]) -> int:
        """
        Position every orphan.

        Args:
            orphans: Orphan table names, in placement order
            connected: All other table names (already in their final place)

        Returns:
            Number of grid rows used
        """
        if not orphans:
            return 0

        state = self.state
        gutter = self.settings.min_table_distance
        column_width = self.settings.orphan_column_width
        columns = self.column_count()

        x = self.settings.boundary_padding
        y = self.start_y([state.index[name] for name in connected])
        row_height = 0.0
        rows = 1

        for position, name in enumerate(orphans):
            if position > 0 and position % columns == 0:
                x = self.settings.boundary_padding
                y += row_height + gutter
                row_height = 0.0
                rows += 1

            i = state.index[name]
            state.xs[i] = x
            state.ys[i] = y
            # Wide tables push the next column over instead of overlapping it
            x += max(column_width, state.widths[i]) + gutter
            row_height = max(row_height, state.heights[i])

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Orphan placement: orphans=%d columns=%d rows=%d",
                len(orphans), columns, rows,
            )
        return rows
