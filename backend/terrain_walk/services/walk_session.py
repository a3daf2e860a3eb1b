import logging
from typing import List, Optional, Tuple

from terrain_walk.models.walk import GridPosition, PathResponse, PathStats, WalkSnapshot
from terrain_walk.services.agent import Agent
from terrain_walk.services.elevation_field import ElevationField
from terrain_walk.services.navigation_grid import Cell, NavigationGrid
from terrain_walk.services.pathfinder import AStarPathfinder, PathResult, step_cost
from terrain_walk.services.walk_config import WalkConfig

logger = logging.getLogger(__name__)


class WalkSession:
    """Owns the terrain, the grid and the agent for one interactive walk"""

    def __init__(self, config: WalkConfig = None, grid: NavigationGrid = None):
        self.config = config if config is not None else WalkConfig()
        self.elevation_field = ElevationField.from_config(self.config)

        # Use provided grid or generate one from the noise field
        if grid is not None:
            self.grid = grid
            logger.info(f"WalkSession using provided {grid.cols}x{grid.rows} grid")
        else:
            self.grid = NavigationGrid.build(self.config.cols, self.config.rows, self.elevation_field.sample)
            logger.info(
                f"WalkSession generated {self.grid.cols}x{self.grid.rows} grid "
                f"(seed={self.config.seed}, noise_scale={self.config.noise_scale})"
            )

        self.pathfinder = AStarPathfinder(self.grid, debug_mode=self.config.debug_mode)
        self.agent = Agent(wear_amount=self.config.wear_amount)
        self.tick_count = 0
        self.last_result: Optional[PathResult] = None

    def pixel_to_grid(self, px: int, py: int) -> Tuple[int, int]:
        """Convert canvas pixels to grid coordinates (floor division by the cell size)"""
        return px // self.config.resolution, py // self.config.resolution

    def click(self, px: int, py: int) -> Optional[List[Cell]]:
        """
        Handle a pointer click at pixel (px, py).

        Returns the new path, or None if the click fell outside the grid
        and no search was run.
        """
        x, y = self.pixel_to_grid(px, py)
        return self.request_path(x, y)

    def request_path(self, x: int, y: int) -> Optional[List[Cell]]:
        """Search from the agent's cell to grid cell (x, y) and start following the result"""
        goal = self.grid.find_cell(x, y)
        if goal is None:
            logger.debug(f"Ignoring target ({x}, {y}) outside {self.grid.cols}x{self.grid.rows} grid")
            return None

        start = self.agent.current_cell(self.grid)
        result = self.pathfinder.search(start, goal)
        self.last_result = result

        if not result.found:
            logger.warning(f"No path from ({start.x}, {start.y}) to ({x}, {y})")
        else:
            logger.info(
                f"Path to ({x}, {y}): {len(result.cells)} cells, cost {result.total_cost:.1f}, "
                f"{result.nodes_explored} nodes explored"
            )

        self.agent.install_path(result.cells)
        return result.cells

    def tick(self) -> Optional[Cell]:
        """One animation frame: advance the agent a single step"""
        self.tick_count += 1
        return self.agent.advance(self.grid)

    def run(self, ticks: int) -> int:
        """Run up to `ticks` frames, stopping once the agent is idle. Returns frames run."""
        frames = 0
        while frames < ticks and not self.agent.is_idle:
            self.tick()
            frames += 1
        return frames

    def path_stats(self, path: List[Cell], nodes_explored: int = 0) -> PathStats:
        """Summarise a path against the current terrain"""
        total_cost = 0.0
        elevation_gain = 0.0
        elevation_loss = 0.0
        max_step_change = 0.0

        for i in range(1, len(path)):
            total_cost += step_cost(path[i - 1], path[i])
            change = path[i].elevation - path[i - 1].elevation
            if change > 0:
                elevation_gain += change
            else:
                elevation_loss -= change
            max_step_change = max(max_step_change, abs(change))

        return PathStats(
            steps=max(len(path) - 1, 0),
            total_cost=round(total_cost, 3),
            elevation_gain=round(elevation_gain, 3),
            elevation_loss=round(elevation_loss, 3),
            max_step_change=round(max_step_change, 3),
            nodes_explored=nodes_explored,
        )

    def path_response(self) -> PathResponse:
        """The most recent search as a boundary model"""
        if self.last_result is None or not self.last_result.found:
            return PathResponse(found=False, path=[])

        cells = self.last_result.cells
        return PathResponse(
            found=True,
            path=[GridPosition(x=cell.x, y=cell.y) for cell in cells],
            stats=self.path_stats(cells, self.last_result.nodes_explored),
        )

    def snapshot(self, include_elevations: bool = False) -> WalkSnapshot:
        """Agent position, state and remaining path for the presentation layer"""
        agent = self.agent
        remaining = agent.path[agent.path_index:] if agent.path_index is not None else []

        return WalkSnapshot(
            tick=self.tick_count,
            agent=GridPosition(x=agent.x, y=agent.y),
            state=agent.state,
            path_index=agent.path_index,
            remaining_path=[GridPosition(x=cell.x, y=cell.y) for cell in remaining],
            grid_size=[self.grid.cols, self.grid.rows],
            elevations=self.grid.elevations.tolist() if include_elevations else None,
        )
