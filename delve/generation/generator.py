"""Procedural cave generation.

Seeds a grid's solidity buffer with Bernoulli noise, smooths it with the
threshold automaton in ``cave_rules``, then materialises the result into the
grid's cells. The border inset is always solid.
"""

import numpy as np
from enum import Enum
from typing import Optional
import logging
import time

from ..core.coord import Coord
from ..core.grid import Grid
from .cave_rules import (
    CaveRuleParams, DEFAULT_FILL_PERCENT, DEFAULT_ITERATIONS, DEFAULT_THRESHOLD,
    apply_rule, count_solid_neighbors, next_state,
)

logger = logging.getLogger(__name__)


class GeneratorState(Enum):
    IDLE = "idle"
    GENERATING = "generating"


class CaveGenerator:
    """Builds cave terrain on an existing grid.

    Generation never fails: extreme parameters simply yield an all-solid or
    all-open interior.
    """

    def __init__(self, grid: Grid, rng: Optional[np.random.Generator] = None):
        """Initialize generator.

        Args:
            grid: Grid whose solidity buffer and cells are written
            rng: Random source for seeding (fresh unseeded generator if None)
        """
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.state = GeneratorState.IDLE

        # Performance tracking
        self.generations = 0
        self.last_runtime_ms = 0.0

    @property
    def is_generating(self) -> bool:
        return self.state is GeneratorState.GENERATING

    def generate(self, fill_percent: float = DEFAULT_FILL_PERCENT) -> None:
        """Seed the solidity buffer with random noise.

        Every interior slot draws one Bernoulli trial with probability
        ``fill_percent`` of being solid; the border is forced solid.
        """
        fill_percent = max(0.0, min(1.0, float(fill_percent)))
        self.state = GeneratorState.GENERATING
        try:
            draws = self.rng.random(self.grid.solids.shape) < fill_percent
            self.grid.solids = np.where(self.grid.interior_mask(), draws, True)
        finally:
            self.state = GeneratorState.IDLE

        logger.debug(f"Seeded {self.grid!r} with fill {fill_percent:.2f}")

    def smooth(self, iterations: int = DEFAULT_ITERATIONS, threshold: int = DEFAULT_THRESHOLD) -> None:
        """Run the smoothing automaton over the whole buffer.

        Each pass reads only the previous pass: two buffers are swapped
        between iterations rather than updated in place.

        Args:
            iterations: Number of passes
            threshold: Solid-neighbour count at which a cell keeps its state
        """
        self.state = GeneratorState.GENERATING
        try:
            interior = self.grid.interior_mask()
            front = self.grid.solids
            back = np.empty_like(front)

            for _ in range(max(0, iterations)):
                counts = count_solid_neighbors(front, self.grid.three_d)
                apply_rule(front, counts, threshold, out=back)
                back[~interior] = True
                front, back = back, front

            self.grid.solids = front
        finally:
            self.state = GeneratorState.IDLE

        logger.debug(f"Smoothed {iterations} iterations at threshold {threshold}")

    def automatize(self, position: Coord, threshold: int = DEFAULT_THRESHOLD) -> bool:
        """Apply the smoothing rule to one slot of the current buffer.

        Returns:
            New solidity of the slot (border slots are always solid)
        """
        if not self.grid.is_valid(position):
            return True
        index = self.grid.index(position)
        if not self.grid.within_bounds(position):
            self.grid.solids.flat[index] = True
            return True

        current = bool(self.grid.solids.flat[index])
        solid = next_state(current, self._solid_neighbors(position, current), threshold)
        self.grid.solids.flat[index] = solid
        return solid

    def _solid_neighbors(self, position: Coord, current: bool) -> int:
        """Moore-neighbourhood solid count for one slot; off-grid counts solid."""
        if not self.grid.three_d:
            return self.grid.solid_neighbor_count(position)

        x, y, z = position[0], position[1], position[2] if len(position) > 2 else 0
        window = self.grid.solids[max(z - 1, 0):z + 2, max(y - 1, 0):y + 2, max(x - 1, 0):x + 2]
        off_grid = 27 - window.size
        return off_grid + int(np.count_nonzero(window)) - int(current)

    def populate(self) -> None:
        """Materialise cells from the solidity buffer.

        Cells are reinitialised in place (terrain is opaque exactly where it
        is solid), neighbour caches rebuilt, and every cell marked dirty.
        """
        self.state = GeneratorState.GENERATING
        try:
            grid = self.grid
            flat = grid.solids.ravel()
            for index, cell in enumerate(grid.cells):
                solid = bool(flat[index])
                cell.reinitialize(grid, grid.coord_of(index), solid=solid, opaque=solid)

            for cell in grid.cells:
                cell.build_neighborhood()

            grid.mark_all_dirty()
        finally:
            self.state = GeneratorState.IDLE

    def regenerate(self, params: Optional[CaveRuleParams] = None) -> None:
        """Seed, smooth and populate in one call."""
        params = params or CaveRuleParams.standard()
        start = time.perf_counter()

        self.generate(params.fill_percent)
        self.smooth(params.iterations, params.threshold)
        self.populate()

        self.generations += 1
        self.last_runtime_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Generated {self.grid!r} in {self.last_runtime_ms:.1f}ms ({params})")

    def get_generation_stats(self) -> dict:
        return {
            'generations': self.generations,
            'last_runtime_ms': self.last_runtime_ms,
            'solid_ratio': self.grid.solid_ratio(),
        }
