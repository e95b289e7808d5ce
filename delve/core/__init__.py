"""Grid substrate: coordinates, cells and the cell arena."""

from .coord import Coord, Bounds, Distance, distance, wrap_angle, heading, angular_deviation
from .cell import Cell, CellState
from .grid import Grid, NoOpenCellError

__all__ = [
    'Coord',
    'Bounds',
    'Distance',
    'distance',
    'wrap_angle',
    'heading',
    'angular_deviation',
    'Cell',
    'CellState',
    'Grid',
    'NoOpenCellError',
]
