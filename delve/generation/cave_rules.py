"""
Cave Smoothing Rules

Threshold cellular-automaton rule used to turn random noise into cave
terrain. A cell with more solid neighbours than the threshold becomes solid,
one with fewer becomes open, and a tie keeps its previous state.
"""

import numpy as np
from typing import Tuple

# Defaults tuned for 2D caves (8-neighbour Moore neighbourhood)
DEFAULT_FILL_PERCENT: float = 0.5
DEFAULT_ITERATIONS: int = 5
DEFAULT_THRESHOLD: int = 4


def next_state(solid: bool, solid_neighbors: int, threshold: int) -> bool:
    """Apply the smoothing rule to a single cell.

    Args:
        solid: Current cell state (True=solid)
        solid_neighbors: Number of solid neighbours (0-8 in 2D, 0-26 in 3D)
        threshold: Neighbour count at which the cell keeps its state

    Returns:
        Next cell state (True=solid)
    """
    if solid_neighbors > threshold:
        return True
    if solid_neighbors < threshold:
        return False
    return solid


def count_solid_neighbors(solids: np.ndarray, three_d: bool) -> np.ndarray:
    """Count solid Moore neighbours of every cell at once.

    Cells beyond the array edge count as solid, matching ``Grid.is_solid``.

    Args:
        solids: Boolean array shaped (depth, height, width)
        three_d: Count the 26-cell neighbourhood across z planes; otherwise the
            8 planar neighbours of each plane

    Returns:
        Integer array of the same shape with per-cell solid neighbour counts
    """
    depth, height, width = solids.shape
    pz = 1 if three_d else 0
    padded = np.pad(solids, ((pz, pz), (1, 1), (1, 1)), mode='constant', constant_values=True)

    counts = np.zeros(solids.shape, dtype=np.int16)
    for dz in ((-1, 0, 1) if three_d else (0,)):
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0 and dz == 0:
                    continue
                counts += padded[pz + dz:pz + dz + depth,
                                 1 + dy:1 + dy + height,
                                 1 + dx:1 + dx + width]
    return counts


def apply_rule(solids: np.ndarray, counts: np.ndarray, threshold: int, out: np.ndarray) -> np.ndarray:
    """Vectorised ``next_state`` writing into a preallocated buffer."""
    np.copyto(out, solids)
    out[counts > threshold] = True
    out[counts < threshold] = False
    return out


class CaveRuleParams:
    """Parameters for seeding and smoothing cave terrain."""

    def __init__(self,
                 fill_percent: float = DEFAULT_FILL_PERCENT,
                 iterations: int = DEFAULT_ITERATIONS,
                 threshold: int = DEFAULT_THRESHOLD):
        """Initialize rule parameters.

        Args:
            fill_percent: Probability an interior cell starts solid (0.0-1.0)
            iterations: Smoothing passes (0+)
            threshold: Solid-neighbour count at which a cell is left unchanged (0+)
        """
        self.fill_percent = max(0.0, min(1.0, float(fill_percent)))
        self.iterations = max(0, int(iterations))
        self.threshold = max(0, int(threshold))

    @classmethod
    def standard(cls) -> 'CaveRuleParams':
        """Default cave parameters."""
        return cls(DEFAULT_FILL_PERCENT, DEFAULT_ITERATIONS, DEFAULT_THRESHOLD)

    def copy(self) -> 'CaveRuleParams':
        return CaveRuleParams(self.fill_percent, self.iterations, self.threshold)

    def next_state(self, solid: bool, solid_neighbors: int) -> bool:
        """Apply these parameters' threshold to a cell."""
        return next_state(solid, solid_neighbors, self.threshold)

    def as_tuple(self) -> Tuple[float, int, int]:
        return (self.fill_percent, self.iterations, self.threshold)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CaveRuleParams):
            return False
        return self.as_tuple() == other.as_tuple()

    def __repr__(self) -> str:
        return (f"CaveRuleParams(fill_percent={self.fill_percent}, "
                f"iterations={self.iterations}, threshold={self.threshold})")
