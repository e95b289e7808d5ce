"""A* pathfinding over the grid's 8-connected open cells.

Every step between adjacent cells costs 1, diagonals included. The distance
heuristic is selectable; the default is Euclidean distance truncated to an
integer. An unreachable destination yields an empty path, which callers
treat as "no route" rather than an error.
"""

import heapq
import itertools
from typing import Dict, List, Optional
import logging

from ..core.coord import Coord, Distance, distance
from ..core.grid import Grid

logger = logging.getLogger(__name__)

DEFAULT_HEURISTIC = Distance.EUCLIDEAN

_STEPS = tuple((dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if dx or dy)


def heuristic_cost(position: Coord, goal: Coord, metric: Distance = DEFAULT_HEURISTIC) -> int:
    """Estimated remaining cost, truncated to an integer."""
    return int(distance(position, goal, metric))


class Pathfinder:
    """A* search on a grid.

    Paths are returned in stack order: ``path.pop()`` yields the next step
    from the origin and ``path[0]`` is the destination. The origin itself
    is never part of the path.
    """

    def __init__(self, grid: Grid, heuristic: Distance = DEFAULT_HEURISTIC):
        """Initialize pathfinder.

        Args:
            grid: Grid to search
            heuristic: Default distance metric for the A* estimate
        """
        self.grid = grid
        self.heuristic = heuristic

        # Performance tracking
        self.pathfinding_attempts = 0
        self.successful_paths = 0
        self.average_path_length = 0.0
        self.total_nodes_explored = 0

    def find_path(self, origin: Coord, destination: Coord,
                  heuristic: Optional[Distance] = None) -> List[Coord]:
        """Find a route from origin to destination.

        Args:
            origin: Starting coordinate (may itself be solid)
            destination: Goal coordinate
            heuristic: Metric for this search; defaults to the pathfinder's

        Returns:
            Coordinates from destination back to the first step, or an empty
            list if no route exists
        """
        self.pathfinding_attempts += 1
        metric = heuristic or self.heuristic

        start_cell = self.grid.lookup(origin)
        goal_cell = self.grid.lookup(destination)
        if start_cell is None or goal_cell is None or goal_cell.solid:
            logger.debug(f"No route from {origin} to {destination}: endpoint blocked or off grid")
            return []

        start = start_cell.position
        goal = goal_cell.position
        if start == goal:
            return []

        # Priority queue for A* search: (f_score, insertion order, position)
        order = itertools.count()
        frontier = [(heuristic_cost(start, goal, metric), next(order), start)]

        g_score: Dict[Coord, int] = {start: 0}
        came_from: Dict[Coord, Coord] = {}
        explored = set()
        nodes_explored = 0

        while frontier:
            _, _, current = heapq.heappop(frontier)

            if current in explored:
                continue
            explored.add(current)
            nodes_explored += 1

            if current == goal:
                path = self._reconstruct(came_from, start, goal)
                self._record_success(len(path), nodes_explored)
                logger.info(f"Found route {start} -> {goal}: {len(path)} steps, {nodes_explored} nodes")
                return path

            tentative_g = g_score[current] + 1
            for dx, dy in _STEPS:
                neighbor_cell = self.grid.lookup(current.offset(dx, dy))
                if neighbor_cell is None or neighbor_cell.solid:
                    continue
                neighbor = neighbor_cell.position
                if neighbor in explored:
                    continue

                if tentative_g < g_score.get(neighbor, tentative_g + 1):
                    g_score[neighbor] = tentative_g
                    came_from[neighbor] = current
                    f_score = tentative_g + heuristic_cost(neighbor, goal, metric)
                    heapq.heappush(frontier, (f_score, next(order), neighbor))

        self.total_nodes_explored += nodes_explored
        logger.debug(f"No route from {start} to {goal} after exploring {nodes_explored} nodes")
        return []

    @staticmethod
    def _reconstruct(came_from: Dict[Coord, Coord], start: Coord, goal: Coord) -> List[Coord]:
        path = []
        current = goal
        while current != start:
            path.append(current)
            current = came_from[current]
        return path

    def _record_success(self, length: int, nodes_explored: int) -> None:
        self.successful_paths += 1
        self.average_path_length = (
            (self.average_path_length * (self.successful_paths - 1)) + length
        ) / self.successful_paths
        self.total_nodes_explored += nodes_explored

    def get_pathfinding_stats(self) -> Dict[str, float]:
        """Get pathfinding performance statistics."""
        success_rate = 0.0
        if self.pathfinding_attempts > 0:
            success_rate = self.successful_paths / self.pathfinding_attempts

        return {
            'pathfinding_attempts': self.pathfinding_attempts,
            'successful_paths': self.successful_paths,
            'success_rate': success_rate,
            'average_path_length': self.average_path_length,
            'total_nodes_explored': self.total_nodes_explored
        }
