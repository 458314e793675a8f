"""
Overlap Legalizer

Final clean-up pass over the connected layout. The packing step keeps
clusters apart, but tables inside a cluster may still touch after the force
simulation. Colliding pairs are pushed apart along the axis that needs the
least movement (the minimum translation vector), half the distance each,
until a full pass finds nothing left to fix or the pass cap is reached.

Residual overlaps after the cap are accepted: the layout is returned as-is
and a warning is logged.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..settings import LayoutSettings
from .state import LayoutState

logger = logging.getLogger(__name__)

# Overlaps at or below this are rounding noise, not collisions
OVERLAP_EPSILON = 1e-6


@dataclass
class LegalizationResult:
    """Result of an overlap resolution run."""
    passes: int = 0  # passes executed, including the final clean one
    overlaps_resolved: int = 0  # pair pushes applied
    final_overlaps: int = 0  # colliding pairs left after the last pass

    @property
    def completed(self) -> bool:
        return self.final_overlaps == 0


def overlap_values(state: LayoutState, i: int, j: int,
                   margin: float) -> Optional[Tuple[float, float]]:
    """
    Get overlap amounts for two tables, including the clearance margin.

    Returns:
        Tuple of (overlap_x, overlap_y) if colliding, None if not
    """
    x1, y1 = state.center(i)
    x2, y2 = state.center(j)

    sep_x = (state.widths[i] + state.widths[j]) / 2 + margin
    sep_y = (state.heights[i] + state.heights[j]) / 2 + margin

    overlap_x = sep_x - abs(x1 - x2)
    overlap_y = sep_y - abs(y1 - y2)

    # Both axes must overlap
    if overlap_x > OVERLAP_EPSILON and overlap_y > OVERLAP_EPSILON:
        return (overlap_x, overlap_y)
    return None


def find_overlaps(state: LayoutState, indices: List[int],
                  margin: float) -> List[Tuple[int, int]]:
    """All colliding pairs among ``indices``, in pair order."""
    pairs = []
    for a in range(len(indices)):
        for b in range(a + 1, len(indices)):
            if overlap_values(state, indices[a], indices[b], margin) is not None:
                pairs.append((indices[a], indices[b]))
    return pairs


class OverlapResolver:
    """Pairwise relaxation of overlapping tables."""

    def __init__(self, state: LayoutState, settings: LayoutSettings):
        self.state = state
        self.settings = settings

    def resolve(self, indices: Optional[List[int]] = None) -> LegalizationResult:
        """
        Push colliding tables apart.

        Args:
            indices: Tables taking part, in pair order. Defaults to all tables.

        Returns:
            LegalizationResult with pass and collision counts
        """
        state = self.state
        if indices is None:
            indices = list(range(len(state)))
        margin = self.settings.min_table_distance
        result = LegalizationResult()

        for _ in range(self.settings.overlap_max_passes):
            result.passes += 1
            collisions = 0

            for a in range(len(indices)):
                i = indices[a]
                for b in range(a + 1, len(indices)):
                    j = indices[b]
                    overlap = overlap_values(state, i, j, margin)
                    if overlap is None:
                        continue
                    collisions += 1
                    self._push_apart(i, j, overlap)

            result.overlaps_resolved += collisions
            if collisions == 0:
                break

        result.final_overlaps = len(find_overlaps(state, indices, margin))

        if result.final_overlaps:
            logger.warning(
                "Overlap resolution incomplete after %d passes: %d colliding pairs remain",
                result.passes,
                result.final_overlaps,
            )
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Overlap resolution done: passes=%d pushes=%d",
                result.passes,
                result.overlaps_resolved,
            )
        return result

    def _push_apart(self, i: int, j: int, overlap: Tuple[float, float]):
        """Move both tables half the overlap along the cheaper axis.

        ``i`` goes toward negative and ``j`` toward positive only when ``i`` is
        strictly behind ``j`` on that axis; on a tie ``i`` goes positive.
        """
        state = self.state
        overlap_x, overlap_y = overlap
        x1, y1 = state.center(i)
        x2, y2 = state.center(j)

        if overlap_x < overlap_y:
            shift = overlap_x / 2
            direction = -1.0 if x1 >= x2 else 1.0
            state.translate(i, -direction * shift, 0.0)
            state.translate(j, direction * shift, 0.0)
        else:
            shift = overlap_y / 2
            direction = -1.0 if y1 >= y2 else 1.0
            state.translate(i, 0.0, -direction * shift)
            state.translate(j, 0.0, direction * shift)
