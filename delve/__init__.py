"""
Delve: Cave World Core

Procedural cave terrain on a cell grid, with connected-region analysis,
shadowcast field of view and A* routing. Rendering, actors and input live
outside this package and talk to it through ``World``.
"""

from .core import Coord, Bounds, Distance, Cell, CellState, Grid, NoOpenCellError
from .generation import CaveRuleParams, CaveGenerator
from .regions import Region, Partitioner
from .visibility import ShadowCaster, Stance, compute_fov
from .routing import Pathfinder
from .config import WorldConfig
from .world import World, create_world

__version__ = "0.1.0"

__all__ = [
    'Coord',
    'Bounds',
    'Distance',
    'Cell',
    'CellState',
    'Grid',
    'NoOpenCellError',
    'CaveRuleParams',
    'CaveGenerator',
    'Region',
    'Partitioner',
    'ShadowCaster',
    'Stance',
    'compute_fov',
    'Pathfinder',
    'WorldConfig',
    'World',
    'create_world',
]
