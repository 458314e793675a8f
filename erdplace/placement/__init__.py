"""Placement pipeline: seeding, force-directed untangling, packing and legalization."""

from .state import LayoutState
from .dimensions import calculate_dimension, calculate_dimensions
from .cluster_detector import Cluster, ClusterDetector
from .initial_placer import InitialPlacer
from .force_directed import ForceDirectedSimulator, ForceType
from .masonry import ClusterBlock, MasonryPacker
from .orphans import OrphanPlacer
from .legalizer import LegalizationResult, OverlapResolver

__all__ = [
    "LayoutState",
    "calculate_dimension",
    "calculate_dimensions",
    "Cluster",
    "ClusterDetector",
    "InitialPlacer",
    "ForceDirectedSimulator",
    "ForceType",
    "ClusterBlock",
    "MasonryPacker",
    "OrphanPlacer",
    "LegalizationResult",
    "OverlapResolver",
]
