"""Single grid unit.

Cells are allocated once per grid slot and reinitialized in place when the
terrain is regenerated. Neighbours are cached as arena indices into the
owning grid's cell list, and the occupant is held through a weak reference,
so a cell never owns the actors or cells it points at.
"""

import weakref
from enum import Enum
from typing import Any, List, Optional, TYPE_CHECKING

from .coord import Coord

if TYPE_CHECKING:
    from .grid import Grid


class CellState(Enum):
    """Terrain state derived from solidity and opacity."""
    WALL = "wall"            # solid, opaque
    OBSTACLE = "obstacle"    # solid, see-through
    OVERHANG = "overhang"    # walkable, blocks sight
    FLOOR = "floor"          # walkable, see-through


class Cell:
    """One addressable unit of a grid.

    Attributes:
        grid: Owning grid (never None)
        position: Coordinate of this cell; matches its slot in the grid
        bloody: Cosmetic flag written by the actor subsystem
        seen: Currently visible to the player
        explored: Ever seen by the player
        dirty: Needs cosmetic recomputation by the renderer
        corpses: Corpse references stored for the actor subsystem
    """

    __slots__ = ("grid", "position", "_solid", "_opaque", "bloody", "seen",
                 "explored", "dirty", "corpses", "_neighbor_indices",
                 "_occupant", "__weakref__")

    def __init__(self, grid: 'Grid', position: Coord, solid: bool = False, opaque: bool = False):
        """Create a cell bound to a grid.

        Args:
            grid: Parent grid
            position: Coordinate of the slot this cell lives in
            solid: Blocks movement
            opaque: Blocks sight

        Raises:
            ValueError: If grid is None
        """
        if grid is None:
            raise ValueError("Cell requires a parent grid")

        self.grid = grid
        self.position = Coord(*position)
        self._solid = bool(solid)
        self._opaque = bool(opaque)

        self.bloody = False
        self.seen = False
        self.explored = False
        self.dirty = True

        self.corpses: List[Any] = []
        self._neighbor_indices: List[Optional[int]] = []
        self._occupant: Optional[weakref.ReferenceType] = None

    def reinitialize(self, grid: 'Grid', position: Coord, solid: bool = False, opaque: bool = False) -> None:
        """Reset terrain state in place for a regenerated grid.

        The neighbour index list keeps its identity; only its contents are
        reassigned by ``build_neighborhood``. Occupant and corpses belong to
        the actor subsystem and are left untouched.

        Raises:
            ValueError: If grid is None
        """
        if grid is None:
            raise ValueError("Cell cannot be reinitialized without a parent grid")

        self.grid = grid
        self.position = Coord(*position)
        self._solid = bool(solid)
        self._opaque = bool(opaque)
        self.bloody = False
        self.seen = False
        self.explored = False
        self.dirty = True

    # Terrain

    @property
    def solid(self) -> bool:
        return self._solid

    @solid.setter
    def solid(self, value: bool) -> None:
        value = bool(value)
        if value != self._solid:
            self.dirty = True
            for neighbor in self.neighbors:
                if neighbor is not None:
                    neighbor.dirty = True
        self._solid = value
        # keep the backing solidity buffer in step with the cell
        self.grid.solids.flat[self.grid.index(self.position)] = value

    @property
    def open(self) -> bool:
        return not self._solid

    @property
    def opaque(self) -> bool:
        return self._opaque

    @opaque.setter
    def opaque(self, value: bool) -> None:
        value = bool(value)
        if value != self._opaque:
            self.dirty = True
        self._opaque = value

    @property
    def transparent(self) -> bool:
        return not self._opaque

    @property
    def state(self) -> CellState:
        if self._solid:
            return CellState.WALL if self._opaque else CellState.OBSTACLE
        return CellState.OVERHANG if self._opaque else CellState.FLOOR

    # Neighbourhood cache

    @property
    def neighbor_indices(self) -> List[Optional[int]]:
        """Arena indices of the 3x3 neighbourhood, centre slot included.

        Entries are None where the neighbour falls outside the grid.
        """
        return self._neighbor_indices

    @property
    def has_neighborhood(self) -> bool:
        return len(self._neighbor_indices) == 9

    @property
    def neighbors(self) -> List[Optional['Cell']]:
        cells = self.grid.cells
        return [cells[i] if i is not None else None for i in self._neighbor_indices]

    def build_neighborhood(self) -> None:
        """Fill the neighbour cache from the parent grid (row-major, y then x)."""
        indices = []
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                coord = self.position.offset(dx, dy)
                indices.append(self.grid.index(coord) if self.grid.is_valid(coord) else None)
        self._neighbor_indices[:] = indices

    # Occupancy

    @property
    def occupant(self) -> Optional[Any]:
        """The occupying actor, or None if vacant or the actor is gone."""
        if self._occupant is None:
            return None
        return self._occupant()

    @occupant.setter
    def occupant(self, actor: Optional[Any]) -> None:
        self._occupant = weakref.ref(actor) if actor is not None else None

    @property
    def vacant(self) -> bool:
        return self.occupant is None

    @property
    def occupied(self) -> bool:
        return self.occupant is not None

    def occupy(self, actor: Any) -> bool:
        """Place an actor here if the cell is vacant.

        Returns:
            True if the actor now occupies this cell
        """
        if actor is None or self.occupied:
            return False
        self.occupant = actor
        return True

    def vacate(self) -> Optional[Any]:
        """Remove and return the current occupant, if any."""
        actor = self.occupant
        self._occupant = None
        return actor

    def add_corpse(self, corpse: Any) -> None:
        if corpse is not None:
            self.corpses.append(corpse)

    def clear_corpses(self) -> None:
        self.corpses.clear()

    def __repr__(self) -> str:
        return f"Cell({self.position}, {self.state.value})"
