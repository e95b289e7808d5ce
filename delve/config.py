"""World configuration."""

from typing import Optional, Tuple

from .core.coord import Bounds, Distance
from .generation.cave_rules import CaveRuleParams

DEFAULT_SIZE = Bounds(256, 256, 1)
DEFAULT_BORDER = Bounds(16, 16, 16)
DEFAULT_VIEWPORT = (96, 42)
DEFAULT_VIEW_RADIUS = 32.0


class WorldConfig:
    """Configuration for building a cave world."""

    def __init__(self,
                 size: Tuple[int, ...] = DEFAULT_SIZE,
                 border: Tuple[int, ...] = DEFAULT_BORDER,
                 viewport: Tuple[int, int] = DEFAULT_VIEWPORT,
                 seed: Optional[int] = None,
                 rules: Optional[CaveRuleParams] = None,
                 heuristic: Distance = Distance.EUCLIDEAN,
                 view_radius: float = DEFAULT_VIEW_RADIUS):
        """Initialize world configuration.

        Args:
            size: Grid extent (width, height[, depth]); each axis at least 1
            border: Solid inset per axis (0+)
            viewport: Visible window (width, height); each axis at least 1
            seed: Seed for the world's random generator (None = unseeded)
            rules: Cave seeding and smoothing parameters
            heuristic: Default pathfinding heuristic
            view_radius: Default sight radius for field of view (0.0+)
        """
        self.size = Bounds(*(max(1, int(v)) for v in size))
        self.border = Bounds(*(max(0, int(v)) for v in border))
        self.viewport = (max(1, int(viewport[0])), max(1, int(viewport[1])))
        self.seed = seed
        self.rules = rules.copy() if rules is not None else CaveRuleParams.standard()
        self.heuristic = heuristic
        self.view_radius = max(0.0, float(view_radius))

    def copy(self) -> 'WorldConfig':
        """Create a deep copy of the configuration."""
        return WorldConfig(
            size=self.size,
            border=self.border,
            viewport=self.viewport,
            seed=self.seed,
            rules=self.rules,
            heuristic=self.heuristic,
            view_radius=self.view_radius
        )

    def __repr__(self) -> str:
        return (f"WorldConfig(size={tuple(self.size)}, border={tuple(self.border)}, "
                f"viewport={self.viewport}, seed={self.seed})")
