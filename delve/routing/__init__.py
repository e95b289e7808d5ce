"""Grid pathfinding."""

from .pathfinder import Pathfinder, heuristic_cost, DEFAULT_HEURISTIC

__all__ = ['Pathfinder', 'heuristic_cost', 'DEFAULT_HEURISTIC']
