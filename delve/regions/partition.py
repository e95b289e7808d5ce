"""Connected-region analysis.

Flood-fills open cells into maximal 8-connected regions using each cell's
cached 3x3 neighbourhood. A partition covers every open cell exactly once;
the largest region is the usual candidate for spawning the player.
"""

from collections import deque
import numpy as np
from typing import Dict, Iterator, List, Optional
import logging

from ..core.cell import Cell
from ..core.coord import Coord
from ..core.grid import Grid

logger = logging.getLogger(__name__)


class Region:
    """Set of open cells reachable from a seed cell."""

    def __init__(self, grid: Grid, origin: Coord):
        """Flood-fill a region from an origin.

        Args:
            grid: Populated grid to fill across
            origin: Seed coordinate; must address an open cell

        Raises:
            ValueError: If the origin is off the grid, solid, or its neighbour
                cache has not been built yet
        """
        origin_cell = grid.lookup(origin)
        if origin_cell is None:
            raise ValueError(f"No cell at region origin {origin}")
        if origin_cell.solid:
            raise ValueError(f"Cell at region origin {origin} is solid")
        if not origin_cell.has_neighborhood:
            raise ValueError(f"Cell at region origin {origin} has no neighbourhood; populate the grid first")

        self.grid = grid
        self.origin = origin_cell.position
        self.cells: List[Cell] = []
        self._indices = set()

        frontier = deque([grid.index(origin_cell.position)])
        while frontier:
            index = frontier.popleft()
            if index in self._indices:
                continue
            cell = grid.cells[index]
            if cell.solid:
                continue

            self._indices.add(index)
            self.cells.append(cell)

            # The centre entry is the cell itself; the visited check absorbs it
            for neighbor_index in cell.neighbor_indices:
                if neighbor_index is not None and neighbor_index not in self._indices:
                    frontier.append(neighbor_index)

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def indices(self) -> frozenset:
        return frozenset(self._indices)

    def coords(self) -> List[Coord]:
        return [cell.position for cell in self.cells]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __contains__(self, item) -> bool:
        if isinstance(item, Cell):
            return item.grid is self.grid and self.grid.index(item.position) in self._indices
        return self.grid.is_valid(item) and self.grid.index(item) in self._indices

    def __repr__(self) -> str:
        return f"Region(origin={self.origin}, size={self.size})"


class Partitioner:
    """Cover of all open cells by disjoint regions."""

    def __init__(self, grid: Grid, rng: Optional[np.random.Generator] = None):
        """Partition a populated grid.

        Args:
            grid: Grid to analyse
            rng: Random source for picking each region's seed cell
        """
        self.grid = grid
        rng = rng if rng is not None else np.random.default_rng()
        self.regions: List[Region] = []
        self._region_by_index: Dict[int, Region] = {}

        unassigned = [i for i, cell in enumerate(grid.cells) if cell.open]
        while unassigned:
            seed_index = unassigned[int(rng.integers(len(unassigned)))]
            region = Region(grid, grid.coord_of(seed_index))
            self.regions.append(region)
            members = region.indices
            for index in members:
                self._region_by_index[index] = region
            unassigned = [i for i in unassigned if i not in members]

        logger.debug(f"Partitioned {grid!r} into {len(self.regions)} regions")

    @property
    def size(self) -> int:
        return len(self.regions)

    @property
    def largest(self) -> Optional[Region]:
        """Region with the most cells, or None if the grid has no open cell."""
        if not self.regions:
            return None
        return max(self.regions, key=lambda region: region.size)

    def region_of(self, coord: Coord) -> Optional[Region]:
        if not self.grid.is_valid(coord):
            return None
        return self._region_by_index.get(self.grid.index(coord))

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def __len__(self) -> int:
        return len(self.regions)
