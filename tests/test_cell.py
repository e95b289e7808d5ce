"""Unit tests for cells: terrain state, neighbour cache and occupancy."""

import gc
import pytest
from delve.core.cell import Cell, CellState
from delve.core.coord import Coord
from delve.core.grid import Grid


class Actor:
    """Minimal stand-in for an actor owned elsewhere."""

    def __init__(self, name):
        self.name = name


class TestCellCreation:
    """Test cell construction and reinitialisation."""

    def test_requires_grid(self):
        """A cell cannot exist without a parent grid."""
        with pytest.raises(ValueError, match="parent grid"):
            Cell(None, (0, 0))

    def test_reinitialize_requires_grid(self):
        grid = Grid(3, 3)
        with pytest.raises(ValueError, match="parent grid"):
            grid.cells[0].reinitialize(None, (0, 0))

    def test_reinitialize_resets_terrain_flags(self):
        """Reinitialising clears cosmetic flags but keeps actor data."""
        grid = Grid(3, 3)
        cell = grid.lookup((1, 1))
        actor = Actor("kobold")
        cell.occupy(actor)
        cell.add_corpse("rat")
        cell.bloody = True
        cell.seen = True
        cell.explored = True
        cell.dirty = False

        cell.reinitialize(grid, (1, 1), solid=False, opaque=False)

        assert cell.open
        assert not cell.bloody
        assert not cell.seen
        assert not cell.explored
        assert cell.dirty
        assert cell.occupant is actor
        assert cell.corpses == ["rat"]

    def test_position_is_coord(self):
        grid = Grid(3, 3)
        assert isinstance(grid.cells[4].position, Coord)
        assert grid.cells[4].position == (1, 1, 0)


class TestCellState:
    """Test derived terrain state."""

    @pytest.mark.parametrize("solid,opaque,expected", [
        (True, True, CellState.WALL),
        (True, False, CellState.OBSTACLE),
        (False, True, CellState.OVERHANG),
        (False, False, CellState.FLOOR),
    ])
    def test_state(self, solid, opaque, expected):
        grid = Grid(3, 3)
        cell = Cell(grid, (0, 0), solid=solid, opaque=opaque)
        assert cell.state is expected
        assert cell.open is not solid
        assert cell.transparent is not opaque


class TestNeighborhood:
    """Test the cached 3x3 neighbourhood."""

    def test_includes_self(self, carved_grid):
        """The centre slot of the cache is the cell itself."""
        grid = carved_grid(5, 5)
        cell = grid.lookup((2, 2))
        assert cell.has_neighborhood
        assert len(cell.neighbor_indices) == 9
        assert cell.neighbors[4] is cell

    def test_corner_misses(self, carved_grid):
        """Neighbours off the grid are stored as None."""
        grid = carved_grid(5, 5)
        corner = grid.lookup((0, 0))
        present = [n for n in corner.neighbors if n is not None]
        assert len(present) == 4
        assert corner.neighbors[0] is None

    def test_cache_identity_survives_rebuild(self, carved_grid):
        """Rebuilding reuses the same list object."""
        grid = carved_grid(5, 5)
        cell = grid.lookup((2, 2))
        cache = cell.neighbor_indices
        cell.build_neighborhood()
        assert cell.neighbor_indices is cache

    def test_fresh_cell_has_no_neighborhood(self):
        grid = Grid(3, 3)
        assert not grid.cells[0].has_neighborhood


class TestDirtyPropagation:
    """Test dirty flags set by terrain changes."""

    def test_solid_change_marks_neighbours(self, carved_grid):
        grid = carved_grid(5, 5)
        for cell in grid:
            cell.dirty = False

        grid.lookup((2, 2)).solid = True

        dirty = {cell.position for cell in grid if cell.dirty}
        expected = {Coord(x, y) for x in (1, 2, 3) for y in (1, 2, 3)}
        assert dirty == expected

    def test_solid_change_updates_buffer(self, carved_grid):
        """The grid's solidity buffer follows the cell."""
        grid = carved_grid(5, 5)
        grid.lookup((3, 1)).solid = True
        assert grid.solids[0, 1, 3]
        assert grid.is_solid((3, 1))

    def test_unchanged_value_leaves_flags(self, carved_grid):
        grid = carved_grid(5, 5)
        for cell in grid:
            cell.dirty = False
        grid.lookup((2, 2)).solid = False
        assert not any(cell.dirty for cell in grid)

    def test_opacity_change_marks_self(self, carved_grid):
        grid = carved_grid(5, 5)
        cell = grid.lookup((2, 2))
        cell.dirty = False
        cell.opaque = True
        assert cell.dirty
        assert cell.state is CellState.OVERHANG


class TestOccupancy:
    """Test occupant and corpse bookkeeping."""

    def setup_method(self):
        """Set up test fixtures."""
        self.grid = Grid(3, 3)
        self.cell = self.grid.lookup((1, 1))

    def test_occupy_vacant_cell(self):
        actor = Actor("player")
        assert self.cell.vacant
        assert self.cell.occupy(actor)
        assert self.cell.occupant is actor
        assert self.cell.occupied

    def test_occupy_rejects_second_actor(self):
        first, second = Actor("a"), Actor("b")
        self.cell.occupy(first)
        assert not self.cell.occupy(second)
        assert self.cell.occupant is first

    def test_vacate_returns_occupant(self):
        actor = Actor("player")
        self.cell.occupy(actor)
        assert self.cell.vacate() is actor
        assert self.cell.vacant
        assert self.cell.vacate() is None

    def test_occupant_does_not_keep_actor_alive(self):
        """The cell holds only a weak reference to its occupant."""
        actor = Actor("ghost")
        self.cell.occupy(actor)
        del actor
        gc.collect()
        assert self.cell.occupant is None
        assert self.cell.vacant

    def test_corpses(self):
        self.cell.add_corpse("goblin")
        self.cell.add_corpse(None)
        self.cell.add_corpse("bat")
        assert self.cell.corpses == ["goblin", "bat"]
        self.cell.clear_corpses()
        assert self.cell.corpses == []
