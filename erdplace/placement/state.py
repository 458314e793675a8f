"""
Layout State Arena

Working state of one layout call. Every table gets a stable integer index
when the call starts; positions, dimensions, forces and velocities live in
parallel lists addressed by that index. The engine owns the arena for the
duration of the call and rebuilds it from scratch on the next one.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..schema.abstraction import Dimension


@dataclass
class LayoutState:
    """Positions (top-left corners), sizes and transient physics per table."""
    names: List[str]
    widths: List[float]
    heights: List[float]
    xs: List[float] = field(default_factory=list)
    ys: List[float] = field(default_factory=list)

    # Transient, only meaningful inside the force simulation
    fxs: List[float] = field(default_factory=list)
    fys: List[float] = field(default_factory=list)
    vxs: List[float] = field(default_factory=list)
    vys: List[float] = field(default_factory=list)

    iteration: int = 0
    average_speed: float = 0.0
    converged: bool = False

    index: Dict[str, int] = field(init=False)

    def __post_init__(self):
        count = len(self.names)
        self.index = {name: i for i, name in enumerate(self.names)}
        if not self.xs:
            self.xs = [0.0] * count
        if not self.ys:
            self.ys = [0.0] * count
        self.reset_physics()

    @classmethod
    def from_dimensions(cls, names: List[str], dimensions: List[Dimension]) -> 'LayoutState':
        return cls(
            names=list(names),
            widths=[d.width for d in dimensions],
            heights=[d.height for d in dimensions],
        )

    def __len__(self) -> int:
        return len(self.names)

    def reset_forces(self):
        count = len(self.names)
        self.fxs = [0.0] * count
        self.fys = [0.0] * count

    def reset_physics(self):
        """Zero forces and velocities, as at the start of a simulation."""
        count = len(self.names)
        self.reset_forces()
        self.vxs = [0.0] * count
        self.vys = [0.0] * count
        self.iteration = 0
        self.average_speed = 0.0
        self.converged = False

    def center(self, i: int) -> Tuple[float, float]:
        return (self.xs[i] + self.widths[i] / 2, self.ys[i] + self.heights[i] / 2)

    def set_center(self, i: int, cx: float, cy: float):
        self.xs[i] = cx - self.widths[i] / 2
        self.ys[i] = cy - self.heights[i] / 2

    def translate(self, i: int, dx: float, dy: float):
        self.xs[i] += dx
        self.ys[i] += dy

    def bottom(self, i: int) -> float:
        return self.ys[i] + self.heights[i]

    def bounding_box(self, indices: List[int]) -> Tuple[float, float, float, float]:
        """Axis-aligned box (min_x, min_y, max_x, max_y) around the given tables."""
        min_x = min(self.xs[i] for i in indices)
        min_y = min(self.ys[i] for i in indices)
        max_x = max(self.xs[i] + self.widths[i] for i in indices)
        max_y = max(self.ys[i] + self.heights[i] for i in indices)
        return (min_x, min_y, max_x, max_y)

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {name: (self.xs[i], self.ys[i]) for i, name in enumerate(self.names)}
