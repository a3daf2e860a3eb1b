"""
Navigation grid built over an elevation field.

Cells live in a flat arena indexed by ``row * cols + col``; neighbor links
are references to other cells of the same grid and never change after
construction.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Neighbor offsets as (dx, dy): right, left, down, up
NEIGHBOR_OFFSETS = [(1, 0), (-1, 0), (0, 1), (0, -1)]


@dataclass(eq=False)
class Cell:
    """A grid node. Identity is the cell itself; coordinates never change."""

    x: int
    y: int
    index: int
    grid: "NavigationGrid" = field(repr=False)
    neighbors: Tuple["Cell", ...] = field(default=(), repr=False)

    @property
    def elevation(self) -> float:
        return float(self.grid.elevations[self.y, self.x])

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


class NavigationGrid:
    """Fixed-size 2D container of cells and their orthogonal adjacency"""

    def __init__(self, elevations: np.ndarray):
        if elevations.ndim != 2 or elevations.shape[0] == 0 or elevations.shape[1] == 0:
            raise ValueError(f"Elevation grid must be a non-empty 2D array, got shape {elevations.shape}")

        self.elevations = np.array(elevations, dtype=np.float64)
        self.rows, self.cols = self.elevations.shape
        self.cells: List[Cell] = []

        # First pass: every cell must exist before any neighbor can be linked
        for row in range(self.rows):
            for col in range(self.cols):
                self.cells.append(Cell(x=col, y=row, index=row * self.cols + col, grid=self))

        # Second pass: link neighbors
        for cell in self.cells:
            cell.neighbors = tuple(self._collect_neighbors(cell))

        logger.debug(f"Built {self.cols}x{self.rows} navigation grid ({self.size} cells)")

    @classmethod
    def build(cls, cols: int, rows: int, elevation_sampler: Callable[[int, int], float]) -> "NavigationGrid":
        """Allocate cols*rows cells and assign each its elevation from the sampler"""
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {cols}x{rows}")

        elevations = np.empty((rows, cols), dtype=np.float64)
        for row in range(rows):
            for col in range(cols):
                elevations[row, col] = elevation_sampler(col, row)
        return cls(elevations)

    @classmethod
    def from_elevations(cls, elevations) -> "NavigationGrid":
        """Build a grid from a (rows, cols) array-like of heights"""
        return cls(np.asarray(elevations, dtype=np.float64))

    @property
    def size(self) -> int:
        return self.rows * self.cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def index_of(self, x: int, y: int) -> int:
        return y * self.cols + x

    def cell_at(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.cols}x{self.rows} grid")
        return self.cells[self.index_of(x, y)]

    def find_cell(self, x: int, y: int) -> Optional[Cell]:
        """Like cell_at but returns None for out-of-range coordinates"""
        if not self.in_bounds(x, y):
            return None
        return self.cells[self.index_of(x, y)]

    def neighbors_of(self, cell: Cell) -> Tuple[Cell, ...]:
        """Precomputed neighbors in right, left, down, up order"""
        return cell.neighbors

    def owns(self, cell: Cell) -> bool:
        return 0 <= cell.index < self.size and self.cells[cell.index] is cell

    def wear(self, cell: Cell, amount: float) -> float:
        """Lower a cell's elevation by amount, never below zero. Returns the new elevation."""
        current = self.elevations[cell.y, cell.x]
        self.elevations[cell.y, cell.x] = max(current - amount, 0.0)
        return float(self.elevations[cell.y, cell.x])

    def _collect_neighbors(self, cell: Cell) -> List[Cell]:
        neighbors = []
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = cell.x + dx, cell.y + dy
            if self.in_bounds(nx, ny):
                neighbors.append(self.cells[self.index_of(nx, ny)])
        return neighbors
