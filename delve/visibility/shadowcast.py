"""Field-of-view computation using recursive shadowcasting.

The area around an origin is split into eight octants. Each octant is
scanned row by row outward from the origin while a slope window
``[start, end]`` (starting at ``[1.0, 0.0]``) tracks the part of the octant
still lit. Opaque cells narrow the window for the rows behind them; the
scan recurses into the lit sub-window whenever a run of open cells ends at
an opaque one.

An optional vision cone (facing angle plus angular span) filters the
result, and an optional nudge moves the vantage point along the facing
direction to model stance. The origin and its 3x3 neighbourhood are always
visible.
"""

import math
from enum import Enum
from typing import NamedTuple, Optional, Set
import logging

from ..core.coord import Coord, angular_deviation, heading, wrap_angle
from ..core.grid import Grid

logger = logging.getLogger(__name__)

# Angular slack when comparing a cell's heading against the cone edge
_CONE_EPSILON = 1e-9


class Octant(NamedTuple):
    """Reflection mapping a canonical scan onto one of eight sectors.

    A canonical cell at column ``col`` of row ``row`` lands on
    ``(ox + col*x + row*dx, oy + col*y + row*dy)``.
    """
    x: int
    dx: int
    y: int
    dy: int


OCTANTS = (
    Octant(0, 1, 1, 0),
    Octant(1, 0, 0, 1),
    Octant(0, -1, 1, 0),
    Octant(-1, 0, 0, 1),
    Octant(0, -1, -1, 0),
    Octant(-1, 0, 0, -1),
    Octant(0, 1, -1, 0),
    Octant(1, 0, 0, -1),
)


class Stance(Enum):
    """Actor posture and the forward nudge applied to its vantage point."""
    ERECT = 1.0
    CROUCH = 0.0
    PRONE = -1.0

    @property
    def nudge(self) -> float:
        return self.value


class _Cone(NamedTuple):
    angle: float
    span: float


class ShadowCaster:
    """Computes visible coordinates on a grid.

    ``compute`` never mutates the grid; apply its result with
    ``Grid.reveal`` when updating fog of war.
    """

    def __init__(self, grid: Grid):
        self.grid = grid

        # Performance tracking
        self.casts = 0
        self.last_visible_count = 0

    def compute(self, origin: Coord, radius: float,
                angle: Optional[float] = None,
                span: Optional[float] = None,
                nudge: float = 0.0) -> Set[Coord]:
        """Visible coordinates from an origin.

        Args:
            origin: Viewer position; off-grid origins see nothing
            radius: Maximum Euclidean sight distance
            angle: Facing direction in degrees (0 = +x, 90 = +y)
            span: Width of the vision cone in degrees; omitted or >= 360 means
                omnidirectional
            nudge: Distance to shift the vantage point along ``angle``

        Returns:
            Set of visible coordinates in the origin's z plane

        Raises:
            ValueError: If radius or span is negative
        """
        if radius < 0:
            raise ValueError("View radius cannot be negative")
        if span is not None and span < 0:
            raise ValueError("Cone span cannot be negative")

        origin = Coord(*origin)
        if not self.grid.is_valid(origin):
            self.casts += 1
            self.last_visible_count = 0
            logger.debug(f"FOV origin {origin} is off the grid")
            return set()

        cone = None
        if angle is not None and span is not None and span < 360.0:
            cone = _Cone(wrap_angle(angle), span)

        visible: Set[Coord] = set()

        # Always-visible ring: the origin and its 8 neighbours
        for cell in self.grid.neighborhood(origin):
            if cell is not None:
                visible.add(cell.position)

        vantage = origin
        if angle is not None and nudge:
            vantage = self.nudged_origin(origin, angle, nudge)
        if self.grid.is_valid(vantage):
            visible.add(self.grid.lookup(vantage).position)

        # Rows past the farthest grid edge hold no cells
        vx, vy = vantage[0], vantage[1]
        reach = max(vx, self.grid.width - 1 - vx, vy, self.grid.height - 1 - vy)
        max_row = min(int(radius), reach)

        for octant in OCTANTS:
            self._cast(vantage, 1, 1.0, 0.0, octant, radius, max_row, cone, visible)

        self.casts += 1
        self.last_visible_count = len(visible)
        logger.debug(f"FOV from {origin} radius {radius}: {len(visible)} cells visible")
        return visible

    def can_see(self, origin: Coord, target: Coord, radius: float,
                angle: Optional[float] = None, span: Optional[float] = None,
                nudge: float = 0.0) -> bool:
        """True if target is in the field of view from origin."""
        target = Coord(*target)
        if not self.grid.is_valid(target):
            return False
        target = self.grid.lookup(target).position
        return target in self.compute(origin, radius, angle, span, nudge)

    def nudged_origin(self, origin: Coord, angle: float, nudge: float) -> Coord:
        """Shift an origin along a facing angle.

        Falls back to the unshifted origin if the shifted point is off the
        grid or opaque.
        """
        origin = Coord(*origin)
        radians = math.radians(wrap_angle(angle))
        shifted = origin.offset(int(round(math.cos(radians) * nudge)),
                                int(round(math.sin(radians) * nudge)))
        cell = self.grid.lookup(shifted)
        if cell is None or cell.opaque:
            return origin
        return shifted

    @staticmethod
    def in_cone(origin: Coord, target: Coord, angle: float, span: float) -> bool:
        """True if target lies within half the span of the facing angle."""
        if span >= 360.0:
            return True
        if origin[0] == target[0] and origin[1] == target[1]:
            return True
        return angular_deviation(heading(origin, target), angle) <= span / 2.0 + _CONE_EPSILON

    def _cast(self, origin: Coord, row: int, start: float, end: float,
              octant: Octant, radius: float, max_row: int, cone: Optional[_Cone],
              visible: Set[Coord]) -> None:
        if start < end:
            return

        ox, oy, oz = origin
        radius_squared = radius * radius

        for distance in range(row, max_row + 1):
            dx, dy = -distance - 1, -distance

            # Once the row's axis cell leaves the grid, every later row does too
            if not self.grid.is_valid((ox + dy * octant.dx, oy + dy * octant.dy, oz)):
                break

            blocked = False
            new_start = start

            while dx <= 0:
                dx += 1
                x = ox + dx * octant.x + dy * octant.dx
                y = oy + dx * octant.y + dy * octant.dy

                left_slope = (dx - 0.5) / (dy + 0.5)
                right_slope = (dx + 0.5) / (dy - 0.5)
                if start < right_slope:
                    continue
                if end > left_slope:
                    break

                cell = self.grid.lookup((x, y, oz))
                # Off-grid cells are skipped and treated as see-through
                opaque = cell is not None and cell.opaque

                if cell is not None and dx * dx + dy * dy <= radius_squared:
                    if cone is None or self.in_cone(origin, (x, y), cone.angle, cone.span):
                        visible.add(cell.position)

                if blocked:
                    if opaque:
                        new_start = right_slope
                        continue
                    blocked = False
                    start = new_start
                elif opaque and distance < max_row:
                    blocked = True
                    self._cast(origin, distance + 1, start, left_slope, octant, radius, max_row, cone, visible)
                    new_start = right_slope

            if blocked:
                break


def compute_fov(grid: Grid, origin: Coord, radius: float,
                angle: Optional[float] = None, span: Optional[float] = None,
                nudge: float = 0.0) -> Set[Coord]:
    """Convenience wrapper around ``ShadowCaster.compute``."""
    return ShadowCaster(grid).compute(origin, radius, angle, span, nudge)
