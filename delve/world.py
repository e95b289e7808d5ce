"""
World Facade

Ties a grid to its generator, visibility solver and pathfinder behind the
calls that actor, rendering and spawning code make each turn. The world owns
one seeded random generator; every random decision (terrain noise, region
seeds, spawn placement) draws from it so a fixed seed replays exactly.
"""

import numpy as np
from typing import List, Optional, Set
import logging

from .config import WorldConfig
from .core.cell import Cell
from .core.coord import Coord, Distance, Point
from .core.grid import Grid
from .generation.cave_rules import CaveRuleParams, DEFAULT_FILL_PERCENT, DEFAULT_ITERATIONS, DEFAULT_THRESHOLD
from .generation.generator import CaveGenerator
from .regions.partition import Partitioner, Region
from .routing.pathfinder import Pathfinder
from .visibility.shadowcast import ShadowCaster, Stance

logger = logging.getLogger(__name__)


class World:
    """A cave level and the queries collaborators run against it."""

    def __init__(self, config: Optional[WorldConfig] = None):
        """Initialize an all-solid world.

        Terrain does not exist until ``regenerate`` (or the
        generate/smooth/populate sequence) runs.

        Args:
            config: World configuration (defaults used if None)
        """
        self.config = config.copy() if config is not None else WorldConfig()
        self.rng = np.random.default_rng(self.config.seed)

        width, height, depth = self.config.size
        self.grid = Grid(width, height, depth,
                         border=self.config.border,
                         viewport=self.config.viewport)

        self.generator = CaveGenerator(self.grid, self.rng)
        self.caster = ShadowCaster(self.grid)
        self.pathfinder = Pathfinder(self.grid, self.config.heuristic)

        logger.debug(f"Created world {self.config!r}")

    # Grid access

    def lookup(self, coord: Coord) -> Optional[Cell]:
        """Cell at a coordinate, or None outside the grid."""
        return self.grid.lookup(coord)

    def is_solid(self, coord: Coord) -> bool:
        return self.grid.is_solid(coord)

    # Terrain lifecycle

    def generate(self, fill_percent: float = DEFAULT_FILL_PERCENT) -> None:
        self.generator.generate(fill_percent)

    def smooth(self, iterations: int = DEFAULT_ITERATIONS, threshold: int = DEFAULT_THRESHOLD) -> None:
        self.generator.smooth(iterations, threshold)

    def populate(self) -> None:
        self.generator.populate()

    def regenerate(self, params: Optional[CaveRuleParams] = None) -> None:
        """Rebuild terrain with the given (or configured) rules."""
        self.generator.regenerate(params or self.config.rules)

    @property
    def is_generating(self) -> bool:
        return self.generator.is_generating

    # Spawning

    def find_open_cell(self, max_attempts: Optional[int] = None) -> Cell:
        """Open, unoccupied cell for placing an actor.

        Raises:
            NoOpenCellError: If every cell is solid or occupied
        """
        return self.grid.find_open_cell(self.rng, max_attempts)

    def partition(self) -> List[Region]:
        """Split the open cells into connected regions."""
        return Partitioner(self.grid, self.rng).regions

    def largest_region(self) -> Optional[Region]:
        return Partitioner(self.grid, self.rng).largest

    # Visibility

    def compute_fov(self, origin: Coord, radius: Optional[float] = None,
                    angle: Optional[float] = None, span: Optional[float] = None,
                    nudge: float = 0.0, stance: Optional[Stance] = None) -> Set[Coord]:
        """Visible coordinates from an origin without touching fog of war.

        Args:
            origin: Viewer position
            radius: Sight radius (configured default if None)
            angle: Facing direction in degrees
            span: Vision cone width in degrees
            nudge: Vantage shift along ``angle``
            stance: Overrides ``nudge`` with the stance's vantage shift

        Returns:
            Set of visible coordinates
        """
        if radius is None:
            radius = self.config.view_radius
        if stance is not None:
            nudge = stance.nudge
        return self.caster.compute(origin, radius, angle, span, nudge)

    def calculate_fov(self, origin: Coord, radius: Optional[float] = None,
                      angle: Optional[float] = None, span: Optional[float] = None,
                      nudge: float = 0.0, stance: Optional[Stance] = None) -> Set[Coord]:
        """Compute the field of view and apply it to the fog of war.

        Clears ``seen`` everywhere, then marks visible cells seen and explored.
        """
        visible = self.compute_fov(origin, radius, angle, span, nudge, stance)
        self.grid.reset_seen()
        self.grid.reveal(visible)
        return visible

    def reset_seen(self) -> None:
        self.grid.reset_seen()

    def reveal_map(self) -> None:
        self.grid.reveal_map()

    # Routing

    def compute_path(self, origin: Coord, destination: Coord,
                     heuristic: Optional[Distance] = None) -> List[Coord]:
        """Stack-ordered route; empty when there is none."""
        return self.pathfinder.find_path(origin, destination, heuristic)

    # Viewport

    @property
    def view_position(self) -> Point:
        return self.grid.position

    def move_view(self, point: Point, offset: bool = True) -> Point:
        return self.grid.move(point, offset)

    def center_view(self, coord: Coord) -> Point:
        return self.grid.center_on(coord)

    def get_world_stats(self) -> dict:
        """Combined generation, visibility and routing statistics."""
        stats = dict(self.generator.get_generation_stats())
        stats['fov_casts'] = self.caster.casts
        stats['last_visible_count'] = self.caster.last_visible_count
        stats.update(self.pathfinder.get_pathfinding_stats())
        return stats

    def __repr__(self) -> str:
        return f"World({self.grid!r})"


def create_world(seed: Optional[int] = None, generate: bool = True, **overrides) -> World:
    """Build a world from default configuration.

    Args:
        seed: Random seed
        generate: Run ``regenerate`` before returning
        **overrides: Any other ``WorldConfig`` argument

    Returns:
        World, with terrain when ``generate`` is set
    """
    world = World(WorldConfig(seed=seed, **overrides))
    if generate:
        world.regenerate()
    return world
