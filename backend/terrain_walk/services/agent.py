"""
The walking agent: follows one path at a time, a step per tick, wearing
down the terrain it walks over.
"""

import logging
from typing import List, Optional

from terrain_walk.models.walk import AgentState
from terrain_walk.services.navigation_grid import Cell, NavigationGrid

logger = logging.getLogger(__name__)


class Agent:
    """Tracks the agent's cell and its progress along the active path"""

    def __init__(self, x: int = 0, y: int = 0, wear_amount: float = 10.0):
        self.x = x
        self.y = y
        self.wear_amount = wear_amount
        self.path: List[Cell] = []
        self.path_index: Optional[int] = None

    @property
    def state(self) -> AgentState:
        if self.path_index is None:
            return AgentState.IDLE
        return AgentState.FOLLOWING

    @property
    def is_idle(self) -> bool:
        return self.state == AgentState.IDLE

    @property
    def position(self):
        return (self.x, self.y)

    def current_cell(self, grid: NavigationGrid) -> Cell:
        return grid.cell_at(self.x, self.y)

    def install_path(self, path: List[Cell]):
        """Replace the active path. An empty path leaves the agent idle."""
        if not path:
            if not self.is_idle:
                logger.info(f"Empty path installed, stopping at ({self.x}, {self.y})")
            self.clear_path()
            return

        if not self.is_idle:
            logger.debug(f"New path preempts travel at index {self.path_index}/{len(self.path)}")
        self.path = list(path)
        self.path_index = 0

    def clear_path(self):
        self.path = []
        self.path_index = None

    def advance(self, grid: NavigationGrid) -> Optional[Cell]:
        """
        Move to the next cell of the active path and wear it down.

        Returns the newly occupied cell, or None when the agent is idle.
        """
        if self.is_idle:
            return None

        next_cell = self.path[self.path_index]
        self.x, self.y = next_cell.x, next_cell.y
        self.path_index += 1

        grid.wear(next_cell, self.wear_amount)

        if self.path_index >= len(self.path):
            logger.info(f"Reached the target at ({self.x}, {self.y})")
            self.clear_path()

        return next_cell
