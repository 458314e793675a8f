"""
Force-Directed Untangling

Uses a physics-based simulation to untangle the seeded layout by balancing
repulsion between every pair of tables with spring attraction along
relationship edges, while soft walls keep tables inside the canvas.

Each iteration:
1. Zero all forces
2. Accumulate repulsion, attraction, centering and boundary forces
3. Integrate: velocity = (velocity + force) * damping; position += velocity
4. Stop early once the average speed drops below the convergence threshold
"""

import logging
import math
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..schema.abstraction import Bounds
from ..settings import LayoutSettings
from .state import LayoutState

logger = logging.getLogger(__name__)


class ForceType(Enum):
    """Types of forces in the simulation."""
    REPULSION = "repulsion"       # Spreads every pair of tables apart
    ATTRACTION = "attraction"     # Springs along relationship edges
    CENTERING = "centering"       # Optional pull toward canvas center
    BOUNDARY = "boundary"         # Keeps tables on the canvas


# Distances below this are treated as 1 for the inverse-square law
MIN_REPULSION_DISTANCE = 1.0


class ForceDirectedSimulator:
    """
    Refine table positions using a damped spring-electrical model.

    Edges are index pairs into the state arena; dangling relationships and
    self-loops must already be filtered out by the caller.
    """

    def __init__(
        self,
        state: LayoutState,
        edges: List[Tuple[int, int]],
        bounds: Bounds,
        settings: LayoutSettings,
    ):
        self.state = state
        self.edges = edges
        self.bounds = bounds
        self.settings = settings
        self._log_every = 10

    def simulate(self, callback: Optional[Callable[[LayoutState], None]] = None
                 ) -> LayoutState:
        """
        Run the simulation until convergence or the iteration cap.

        Args:
            callback: Optional function called each iteration with the state

        Returns:
            The same LayoutState, with updated positions and
            ``iteration``/``converged``/``average_speed`` filled in
        """
        state = self.state
        state.reset_physics()

        if len(state) == 0:
            state.converged = True
            return state

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Force simulation start: tables=%d edges=%d max_iter=%d "
                "repulsion=%.1f attraction=%.3f damping=%.2f",
                len(state),
                len(self.edges),
                self.settings.max_iterations,
                self.settings.repulsion_force,
                self.settings.attraction_force,
                self.settings.damping_factor,
            )

        iterations_run = 0
        for iteration in range(self.settings.max_iterations):
            state.iteration = iteration
            iterations_run = iteration + 1

            magnitudes = self._calculate_all_forces()
            state.average_speed = self._apply_forces()

            if callback:
                callback(state)

            if logger.isEnabledFor(logging.DEBUG) and iteration % self._log_every == 0:
                logger.debug(
                    "Iteration %d: avg_speed=%.4f repulsion=%.3f attraction=%.3f boundary=%.3f",
                    iteration,
                    state.average_speed,
                    magnitudes[ForceType.REPULSION],
                    magnitudes[ForceType.ATTRACTION],
                    magnitudes[ForceType.BOUNDARY],
                )

            if state.average_speed < self.settings.convergence_threshold:
                state.converged = True
                break

        state.iteration = iterations_run

        if state.converged:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Converged after %d iterations (avg_speed=%.4f)",
                    iterations_run,
                    state.average_speed,
                )
        elif self.settings.max_iterations > 0:
            logger.warning(
                "Force simulation did not converge after %d iterations (avg_speed=%.3f). "
                "Continuing with best-effort positions.",
                self.settings.max_iterations,
                state.average_speed,
            )

        return state

    def _calculate_all_forces(self) -> Dict[ForceType, float]:
        """Accumulate every force into the state; return total magnitude per type."""
        self.state.reset_forces()
        return {
            ForceType.REPULSION: self._add_repulsion_forces(),
            ForceType.ATTRACTION: self._add_attraction_forces(),
            ForceType.CENTERING: self._add_centering_forces(),
            ForceType.BOUNDARY: self._add_boundary_forces(),
        }

    def _add_repulsion_forces(self) -> float:
        """Inverse-square repulsion between every pair of table centers."""
        state = self.state
        count = len(state)
        strength = self.settings.repulsion_force
        centers = [state.center(i) for i in range(count)]
        total = 0.0

        for i in range(count):
            x1, y1 = centers[i]
            for j in range(i + 1, count):
                x2, y2 = centers[j]
                dx = x2 - x1
                dy = y2 - y1
                distance = math.sqrt(dx * dx + dy * dy)
                if distance == 0.0:
                    # No direction to push along
                    continue

                floored = max(distance, MIN_REPULSION_DISTANCE)
                magnitude = strength / (floored * floored)
                fx = dx / distance * magnitude
                fy = dy / distance * magnitude

                state.fxs[i] -= fx
                state.fys[i] -= fy
                state.fxs[j] += fx
                state.fys[j] += fy
                total += magnitude

        return total

    def _add_attraction_forces(self) -> float:
        """Spring along each relationship: pulls when stretched, pushes when compressed."""
        state = self.state
        strength = self.settings.attraction_force
        total = 0.0

        for i, j in self.edges:
            x1, y1 = state.center(i)
            x2, y2 = state.center(j)
            dx = x2 - x1
            dy = y2 - y1
            distance = math.sqrt(dx * dx + dy * dy)
            if distance == 0.0:
                continue

            ideal = self.ideal_distance(i, j)
            magnitude = strength * (distance - ideal)
            fx = dx / distance * magnitude
            fy = dy / distance * magnitude

            state.fxs[i] += fx
            state.fys[i] += fy
            state.fxs[j] -= fx
            state.fys[j] -= fy
            total += abs(magnitude)

        return total

    def ideal_distance(self, i: int, j: int) -> float:
        """Rest length of the spring between two related tables."""
        widths = self.state.widths
        return (widths[i] + widths[j]) / 2 + self.settings.min_connection_distance

    def _add_centering_forces(self) -> float:
        """Pull every table by the offset of the area-weighted centroid from canvas center."""
        strength = self.settings.centering_force
        if strength <= 0:
            return 0.0

        state = self.state
        total_x = total_y = total_area = 0.0
        for i in range(len(state)):
            area = state.widths[i] * state.heights[i]
            cx, cy = state.center(i)
            total_x += cx * area
            total_y += cy * area
            total_area += area

        if total_area == 0:
            return 0.0

        dx = self.bounds.width / 2 - total_x / total_area
        dy = self.bounds.height / 2 - total_y / total_area
        for i in range(len(state)):
            state.fxs[i] += dx * strength
            state.fys[i] += dy * strength

        return math.sqrt(dx * dx + dy * dy) * strength * len(state)

    def _add_boundary_forces(self) -> float:
        """Soft walls at boundary_padding, proportional to penetration depth.

        Forces are accumulated per side so a table crossing a corner is pushed
        back along both axes.
        """
        state = self.state
        padding = self.settings.boundary_padding
        stiffness = self.settings.boundary_force
        right_wall = self.bounds.width - padding
        bottom_wall = self.bounds.height - padding
        total = 0.0

        for i in range(len(state)):
            x, y = state.xs[i], state.ys[i]
            right = x + state.widths[i]
            bottom = y + state.heights[i]
            fx = fy = 0.0

            if x < padding:
                fx += stiffness * (padding - x)
            if right > right_wall:
                fx -= stiffness * (right - right_wall)
            if y < padding:
                fy += stiffness * (padding - y)
            if bottom > bottom_wall:
                fy -= stiffness * (bottom - bottom_wall)

            if fx or fy:
                state.fxs[i] += fx
                state.fys[i] += fy
                total += math.sqrt(fx * fx + fy * fy)

        return total

    def _apply_forces(self) -> float:
        """Integrate forces into velocities and positions.

        Returns:
            Average speed across all tables this iteration
        """
        state = self.state
        damping = self.settings.damping_factor
        max_velocity = self.settings.max_velocity
        total_speed = 0.0

        for i in range(len(state)):
            vx = (state.vxs[i] + state.fxs[i]) * damping
            vy = (state.vys[i] + state.fys[i]) * damping

            # Clamp velocity
            speed = math.sqrt(vx * vx + vy * vy)
            if max_velocity > 0 and speed > max_velocity:
                scale = max_velocity / speed
                vx *= scale
                vy *= scale

            state.vxs[i] = vx
            state.vys[i] = vy
            state.xs[i] += vx
            state.ys[i] += vy
            total_speed += math.sqrt(vx * vx + vy * vy)

        return total_speed / len(state)
