"""Coordinate primitives for the grid substrate.

Positions are integer triples. A 2D point is a coordinate whose z is
implicitly 0; conversions keep z whenever the caller supplies one.
Distance metrics and angle helpers shared by visibility and routing
live here as well.
"""

import math
from enum import Enum
from typing import NamedTuple, Tuple

Point = Tuple[int, int]


class Coord(NamedTuple):
    """Integer grid coordinate (x, y, z)."""
    x: int
    y: int
    z: int = 0

    @classmethod
    def from_point(cls, point: Point, z: int = 0) -> 'Coord':
        """Lift a 2D point into the given z plane."""
        return cls(int(point[0]), int(point[1]), int(z))

    def to_point(self) -> Point:
        return (self.x, self.y)

    def offset(self, dx: int, dy: int, dz: int = 0) -> 'Coord':
        return Coord(self.x + dx, self.y + dy, self.z + dz)

    def __add__(self, other) -> 'Coord':
        return self.offset(other[0], other[1], other[2] if len(other) > 2 else 0)

    def __sub__(self, other) -> 'Coord':
        return self.offset(-other[0], -other[1], -(other[2] if len(other) > 2 else 0))

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


class Bounds(NamedTuple):
    """Extent of a volume along each axis."""
    width: int
    height: int
    depth: int = 1

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def volume(self) -> int:
        return self.width * self.height * self.depth


class Distance(Enum):
    """Distance metrics usable as pathfinding heuristics."""
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"
    OCTILE = "octile"
    EUCLIDEAN = "euclidean"


def distance(origin: Coord, target: Coord, metric: Distance = Distance.CHEBYSHEV) -> float:
    """Planar distance between two coordinates.

    Args:
        origin: Starting coordinate
        target: Ending coordinate
        metric: Which metric to apply

    Returns:
        Distance over the absolute x/y deltas (z is ignored)
    """
    dx = abs(target[0] - origin[0])
    dy = abs(target[1] - origin[1])

    if metric is Distance.MANHATTAN:
        return float(dx + dy)
    if metric is Distance.CHEBYSHEV:
        return float(max(dx, dy))
    if metric is Distance.OCTILE:
        return (dx + dy) + (1.414 - 2.0) * min(dx, dy)
    if metric is Distance.EUCLIDEAN:
        return math.sqrt(dx * dx + dy * dy)
    raise ValueError(f"Unknown distance metric: {metric!r}")


def wrap_angle(degrees: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    wrapped = math.fmod(degrees, 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    # fmod of a tiny negative can round back up to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def heading(origin: Coord, target: Coord) -> float:
    """Direction from origin to target in degrees, wrapped to [0, 360).

    Uses screen orientation: +x is 0 degrees and +y (down) is 90 degrees.
    """
    return wrap_angle(math.degrees(math.atan2(target[1] - origin[1], target[0] - origin[0])))


def angular_deviation(a: float, b: float) -> float:
    """Smallest unsigned difference between two angles, in [0, 180]."""
    diff = abs(wrap_angle(a) - wrap_angle(b))
    return 360.0 - diff if diff > 180.0 else diff
