"""Dense cell grid addressed by 3D integer coordinates.

The grid is the spatial substrate every other component reads. Solidity is
mirrored in a numpy boolean array shaped (depth, height, width); its C-order
flattening uses the same linear index as the cell arena, so
``solids.flat[i]`` and ``cells[i]`` always describe the same slot.
"""

import numpy as np
from typing import Iterable, Iterator, List, Optional, Tuple
import logging

from .cell import Cell, CellState
from .coord import Bounds, Coord, Point

logger = logging.getLogger(__name__)


class NoOpenCellError(RuntimeError):
    """Raised when no open, unoccupied cell exists to place an actor."""


_STATE_CHARS = {
    CellState.WALL: '#',
    CellState.OBSTACLE: '%',
    CellState.OVERHANG: '^',
    CellState.FLOOR: '.',
}


class Grid:
    """Flat arena of cells with bounds, border inset and viewport position.

    Attributes:
        bounds: Grid extent (width, height, depth)
        border: Inset kept solid by terrain generation
        viewport: Visible window size (width, height) used to clamp ``position``
        solids: numpy bool array (depth, height, width), True = solid
        cells: One Cell per slot, allocated once
    """

    def __init__(self, width: int, height: int, depth: int = 1,
                 border: Optional[Tuple[int, int, int]] = None,
                 viewport: Optional[Point] = None):
        """Allocate a fully solid grid.

        Args:
            width: Cells along x
            height: Cells along y
            depth: Cells along z (1 = 2D mode)
            border: Solid margin per axis (defaults to 1 on every axis)
            viewport: Visible window size; defaults to the full grid

        Raises:
            ValueError: If dimensions are not positive or the border is negative
        """
        if width < 1 or height < 1 or depth < 1:
            raise ValueError("Grid dimensions must be positive")

        border = Bounds(*border) if border is not None else Bounds(1, 1, 1)
        if min(border) < 0:
            raise ValueError("Grid border cannot be negative")

        self.bounds = Bounds(width, height, depth)
        self.border = border
        self.viewport: Point = tuple(viewport) if viewport is not None else (width, height)
        self._position: Point = (0, 0)

        self.solids = np.ones((depth, height, width), dtype=bool)
        self.cells: List[Cell] = [
            Cell(self, self.coord_of(i), solid=True, opaque=True)
            for i in range(self.volume)
        ]

        logger.debug(f"Created grid {width}x{height}x{depth} with border {tuple(border)}")

    @property
    def width(self) -> int:
        return self.bounds.width

    @property
    def height(self) -> int:
        return self.bounds.height

    @property
    def depth(self) -> int:
        return self.bounds.depth

    @property
    def volume(self) -> int:
        return self.bounds.volume

    @property
    def three_d(self) -> bool:
        return self.depth > 1

    # Addressing

    def index(self, coord: Coord) -> int:
        """Linear arena index of a coordinate (no validity check).

        In 2D mode every z maps onto the single plane.
        """
        z = coord[2] if self.depth > 1 and len(coord) > 2 else 0
        return z * self.bounds.area + coord[1] * self.width + coord[0]

    def coord_of(self, index: int) -> Coord:
        z, rest = divmod(index, self.bounds.area)
        y, x = divmod(rest, self.width)
        return Coord(x, y, z)

    def is_valid(self, coord: Coord) -> bool:
        """True if the coordinate addresses a slot of this grid."""
        x, y = coord[0], coord[1]
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        if self.depth == 1:
            return True
        z = coord[2] if len(coord) > 2 else 0
        return 0 <= z < self.depth

    def within_bounds(self, coord: Coord) -> bool:
        """True if the coordinate lies inside the border inset."""
        bw, bh, bd = self.border
        x, y = coord[0], coord[1]
        if not (bw <= x < self.width - bw and bh <= y < self.height - bh):
            return False
        if self.depth == 1:
            return True
        z = coord[2] if len(coord) > 2 else 0
        return bd <= z < self.depth - bd

    def interior_mask(self) -> np.ndarray:
        """Boolean array marking slots that pass ``within_bounds``."""
        mask = np.zeros(self.solids.shape, dtype=bool)
        bw, bh, bd = self.border
        if self.depth == 1:
            mask[:, bh:self.height - bh, bw:self.width - bw] = True
        else:
            mask[bd:self.depth - bd, bh:self.height - bh, bw:self.width - bw] = True
        return mask

    def lookup(self, coord: Coord) -> Optional[Cell]:
        """Cell at a coordinate, or None for a miss."""
        if not self.is_valid(coord):
            return None
        return self.cells[self.index(coord)]

    def __getitem__(self, coord: Coord) -> Optional[Cell]:
        return self.lookup(coord)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def is_solid(self, coord: Coord, solids: Optional[np.ndarray] = None) -> bool:
        """Solidity from a buffer; coordinates off the grid read as solid."""
        if not self.is_valid(coord):
            return True
        buffer = self.solids if solids is None else solids
        return bool(buffer.flat[self.index(coord)])

    def neighborhood(self, coord: Coord) -> List[Optional[Cell]]:
        """The 3x3 block around a coordinate, centre included, misses as None."""
        coord = Coord(*coord)
        return [self.lookup(coord.offset(dx, dy))
                for dy in (-1, 0, 1) for dx in (-1, 0, 1)]

    def solid_neighbor_count(self, coord: Coord, solids: Optional[np.ndarray] = None) -> int:
        """Count solid cells among the 8 planar neighbours (misses count solid)."""
        coord = Coord(*coord)
        count = 0
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                if self.is_solid(coord.offset(dx, dy), solids):
                    count += 1
        return count

    # Viewport

    @property
    def position(self) -> Point:
        """Top-left corner of the visible viewport."""
        return self._position

    def move(self, point: Point, offset: bool = True) -> Point:
        """Scroll the viewport by (or to) a point, clamped to the grid."""
        if offset:
            x, y = self._position[0] + point[0], self._position[1] + point[1]
        else:
            x, y = point[0], point[1]
        self._position = self._constrain(x, y)
        return self._position

    def center_on(self, coord: Coord) -> Point:
        """Scroll so the coordinate sits in the middle of the viewport."""
        return self.move((coord[0] - self.viewport[0] // 2,
                          coord[1] - self.viewport[1] // 2), offset=False)

    def _constrain(self, x: int, y: int) -> Point:
        max_x = max(0, self.width - self.viewport[0])
        max_y = max(0, self.height - self.viewport[1])
        return (min(max(x, 0), max_x), min(max(y, 0), max_y))

    # Occupancy and queries

    def open_cells(self) -> List[Cell]:
        return [cell for cell in self.cells if cell.open]

    def count_solid(self) -> int:
        return int(np.sum(self.solids))

    def solid_ratio(self) -> float:
        return self.count_solid() / self.volume

    def find_open_cell(self, rng: np.random.Generator, max_attempts: Optional[int] = None) -> Cell:
        """Pick a random cell that is both open and vacant.

        Random probes are tried first; if they all miss, every slot is scanned
        so a placement only fails when none exists.

        Args:
            rng: Random source
            max_attempts: Random probes before the full scan (default: half the volume)

        Returns:
            An open, unoccupied cell

        Raises:
            ValueError: If max_attempts is negative
            NoOpenCellError: If the grid has no open, unoccupied cell
        """
        if max_attempts is None:
            max_attempts = max(1, self.volume // 2)
        if max_attempts < 0:
            raise ValueError("max_attempts cannot be negative")

        for _ in range(max_attempts):
            cell = self.cells[int(rng.integers(self.volume))]
            if cell.open and cell.vacant:
                return cell

        candidates = [cell for cell in self.cells if cell.open and cell.vacant]
        if not candidates:
            logger.warning(f"No open cells available on {self.width}x{self.height}x{self.depth} grid")
            raise NoOpenCellError("Grid has no open, unoccupied cells")

        return candidates[int(rng.integers(len(candidates)))]

    # Fog of war

    def reveal(self, coords: Iterable[Coord]) -> int:
        """Mark cells as seen and explored.

        Returns:
            Number of coordinates that addressed a cell
        """
        revealed = 0
        for coord in coords:
            cell = self.lookup(coord)
            if cell is None:
                continue
            cell.seen = True
            cell.explored = True
            revealed += 1
        return revealed

    def reset_seen(self) -> None:
        for cell in self.cells:
            cell.seen = False

    def reveal_map(self) -> None:
        for cell in self.cells:
            cell.seen = True
            cell.explored = True

    def mark_all_dirty(self) -> None:
        for cell in self.cells:
            cell.dirty = True

    # Display

    def to_ascii(self, z: int = 0) -> str:
        """Render one z plane as text (one character per cell)."""
        lines = []
        for y in range(self.height):
            lines.append(''.join(
                _STATE_CHARS[self.cells[self.index((x, y, z))].state]
                for x in range(self.width)
            ))
        return '\n'.join(lines)

    def __str__(self) -> str:
        """Preview of the top-left corner of plane 0."""
        lines = self.to_ascii().split('\n')[:10]
        lines = [line[:20] + ('...' if self.width > 20 else '') for line in lines]
        if self.height > 10:
            lines.append('...')
        return '\n'.join(lines)

    def __repr__(self) -> str:
        solid_pct = self.solid_ratio() * 100
        return f"Grid({self.width}x{self.height}x{self.depth}, solid={solid_pct:.1f}%)"
