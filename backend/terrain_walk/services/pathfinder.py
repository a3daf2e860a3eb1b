"""
A* search over the navigation grid.

Step cost is the distance between cell centres plus the absolute elevation
change, so the search trades a longer walk against climbing. All search state
is local to a single call and keyed by flat cell index; cells themselves are
never written by the search.
"""

import heapq
import logging
from dataclasses import dataclass, field
from math import hypot, inf
from typing import List, Optional

import numpy as np

from terrain_walk.services.navigation_grid import Cell, NavigationGrid

logger = logging.getLogger(__name__)


def step_cost(current: Cell, neighbor: Cell) -> float:
    """Cost of moving from current to neighbor: distance + |elevation change|"""
    distance = hypot(neighbor.x - current.x, neighbor.y - current.y)
    return distance + abs(neighbor.elevation - current.elevation)


def path_cost(path: List[Cell]) -> float:
    """Total cost of walking a path from its first cell to its last"""
    return sum(step_cost(path[i - 1], path[i]) for i in range(1, len(path)))


def manhattan_distance(a: Cell, b: Cell) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


@dataclass
class PathResult:
    """Outcome of a single search"""

    cells: List[Cell] = field(default_factory=list)
    costs_from_start: List[float] = field(default_factory=list)
    nodes_explored: int = 0

    @property
    def found(self) -> bool:
        return len(self.cells) > 0

    @property
    def total_cost(self) -> float:
        return self.costs_from_start[-1] if self.costs_from_start else inf


class AStarPathfinder:
    """Minimum-cost path search between two cells of one grid"""

    def __init__(self, grid: NavigationGrid, debug_mode: bool = False):
        self.grid = grid
        self.debug_mode = debug_mode
        self.debug_data = None

    def find_path(self, start: Cell, goal: Cell) -> List[Cell]:
        """
        Computes the least-cost path using the A* algorithm.

        Returns:
        - path: cells from start to goal inclusive, or an empty list if the
          goal cannot be reached.
        """
        return self.search(start, goal).cells

    def search(self, start: Cell, goal: Cell) -> PathResult:
        """Run A* and return the path together with its per-step costs"""
        for cell in (start, goal):
            if not self.grid.owns(cell):
                raise ValueError(f"Cell ({cell.x}, {cell.y}) does not belong to this grid")

        size = self.grid.size
        start_idx = start.index
        end_idx = goal.index

        g_score = np.full(size, inf)
        g_score[start_idx] = 0.0
        came_from = np.full(size, -1, dtype=np.int64)
        closed_set = np.zeros(size, dtype=bool)

        # Heap entries are (f, h, seq, idx): lowest f, then lowest h, then insertion order
        open_set = []
        tie_breaker = 0
        start_h = self.heuristic(start_idx, end_idx)
        heapq.heappush(open_set, (start_h, start_h, tie_breaker, start_idx))

        if self.debug_mode:
            self._init_debug_data(start_idx, end_idx)
            self.debug_data['grid_exploration']['h_scores'].flat[start_idx] = start_h

        nodes_explored = 0

        while open_set:
            current_f, current_h, _, current = heapq.heappop(open_set)

            # Ignore stale entries for cells that were already expanded
            if closed_set[current]:
                continue
            nodes_explored += 1

            if self.debug_mode:
                self._record_exploration(nodes_explored, current, g_score[current], current_h, current_f)

            if current == end_idx:
                path_indices = self.reconstruct_path(came_from, current, start_idx)
                cells = [self.grid.cells[idx] for idx in path_indices]

                if self.debug_mode:
                    for idx in path_indices:
                        self.debug_data['grid_exploration']['in_path'].flat[idx] = True

                logger.debug(
                    f"A* reached ({goal.x}, {goal.y}) from ({start.x}, {start.y}) "
                    f"after {nodes_explored} expansions, cost {g_score[current]:.2f}"
                )
                return PathResult(
                    cells=cells,
                    costs_from_start=[float(g_score[idx]) for idx in path_indices],
                    nodes_explored=nodes_explored,
                )

            closed_set[current] = True
            current_cell = self.grid.cells[current]

            for neighbor in self.grid.neighbors_of(current_cell):
                neighbor_idx = neighbor.index
                if closed_set[neighbor_idx]:
                    continue

                tentative_g_score = g_score[current] + step_cost(current_cell, neighbor)
                if tentative_g_score < g_score[neighbor_idx]:
                    came_from[neighbor_idx] = current
                    g_score[neighbor_idx] = tentative_g_score
                    heuristic_cost = self.heuristic(neighbor_idx, end_idx)
                    f_score = tentative_g_score + heuristic_cost
                    tie_breaker += 1
                    heapq.heappush(open_set, (f_score, heuristic_cost, tie_breaker, neighbor_idx))

                    if self.debug_mode:
                        exploration = self.debug_data['grid_exploration']
                        exploration['g_scores'].flat[neighbor_idx] = tentative_g_score
                        exploration['h_scores'].flat[neighbor_idx] = heuristic_cost
                        exploration['f_scores'].flat[neighbor_idx] = f_score

        logger.warning(
            f"A* search exhausted all possibilities after {nodes_explored} expansions: "
            f"no path from ({start.x}, {start.y}) to ({goal.x}, {goal.y})"
        )
        return PathResult(nodes_explored=nodes_explored)

    def heuristic(self, node_idx: int, end_idx: int) -> int:
        """
        Manhattan distance between two cells.

        Every orthogonal step costs at least 1, so this never overestimates.
        """
        row_node, col_node = divmod(int(node_idx), self.grid.cols)
        row_end, col_end = divmod(int(end_idx), self.grid.cols)
        return abs(row_node - row_end) + abs(col_node - col_end)

    def reconstruct_path(self, came_from: np.ndarray, current: int, start_idx: int) -> List[int]:
        """
        Reconstructs the path from the came_from array.

        The walk is bounded by the number of cells and stops at the first
        repeated cell, returning what was collected so far.

        Returns:
        - path: flat cell indices, start first.
        """
        current = int(current)
        path = [current]
        visited = {current}

        for _ in range(self.grid.size):
            if current == start_idx:
                break
            previous = int(came_from[current])
            if previous < 0:
                break
            if previous in visited:
                logger.error(
                    f"Cycle detected in path reconstruction at cell index {previous}, "
                    f"returning partial path of {len(path)} cells"
                )
                break
            visited.add(previous)
            path.append(previous)
            current = previous

        path.reverse()
        return path

    def _init_debug_data(self, start_idx: int, end_idx: int):
        shape = self.grid.shape
        self.debug_data = {
            'explored_nodes': [],
            'grid_exploration': {
                'shape': shape,
                'g_scores': np.full(shape, np.inf),
                'f_scores': np.full(shape, np.inf),
                'h_scores': np.full(shape, np.inf),
                'explored': np.zeros(shape, dtype=bool),
                'in_path': np.zeros(shape, dtype=bool),
            },
            'elevations': self.grid.elevations.copy(),
            'bounds': {
                'start_idx': start_idx,
                'end_idx': end_idx,
            },
        }
        self.debug_data['grid_exploration']['g_scores'].flat[start_idx] = 0.0

    def _record_exploration(self, step: int, node_idx: int, g: float, h: float, f: float):
        row, col = np.unravel_index(node_idx, self.grid.shape)
        self.debug_data['explored_nodes'].append({
            'step': step,
            'node_idx': node_idx,
            'x': col,
            'y': row,
            'g_score': g,
            'h_score': h,
            'f_score': f,
        })
        self.debug_data['grid_exploration']['explored'][row, col] = True

    def get_debug_data(self) -> Optional[dict]:
        """Return the collected debug data as plain Python types"""
        if not self.debug_mode or not self.debug_data:
            return None

        def convert_numpy_types(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            elif isinstance(obj, np.floating):
                return float(obj)
            elif isinstance(obj, (np.bool_, bool)):
                return bool(obj)
            elif isinstance(obj, np.ndarray):
                return obj.tolist()
            elif isinstance(obj, list):
                return [convert_numpy_types(item) for item in obj]
            elif isinstance(obj, dict):
                return {key: convert_numpy_types(value) for key, value in obj.items()}
            elif isinstance(obj, tuple):
                return tuple(convert_numpy_types(item) for item in obj)
            else:
                return obj

        debug_copy = convert_numpy_types(self.debug_data)
        debug_copy['total_explored'] = len(self.debug_data['explored_nodes'])
        return debug_copy
