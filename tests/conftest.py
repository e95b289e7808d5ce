"""Shared fixtures for grid-based tests."""

import pytest

from delve.core.grid import Grid
from delve.generation.generator import CaveGenerator


def carve(width, height, walls=(), depth=1):
    """Borderless grid that is open everywhere except the given walls.

    Walls are solid and opaque; every cell has its neighbour cache built.
    """
    grid = Grid(width, height, depth, border=(0, 0, 0))
    grid.solids[...] = False
    for wall in walls:
        grid.solids.flat[grid.index(wall)] = True
    CaveGenerator(grid).populate()
    return grid


@pytest.fixture
def carved_grid():
    """Factory fixture building open grids with hand-placed walls."""
    return carve
