import logging

import pytest
import numpy as np

from terrain_walk.services.navigation_grid import NavigationGrid
from terrain_walk.services.pathfinder import AStarPathfinder, path_cost, manhattan_distance
from tests.fixtures.reference_search import brute_force_costs


def assert_valid_walk(path):
    for previous, current in zip(path, path[1:]):
        assert manhattan_distance(previous, current) == 1, \
            f"({previous.x}, {previous.y}) -> ({current.x}, {current.y}) is not a single grid step"


@pytest.mark.unit
class TestPathfindingAlgorithm:
    """Test the A* pathfinding algorithm with controlled scenarios"""

    def test_flat_corner_to_corner(self, flat_grid):
        """5x5 flat grid, (0,0) to (4,4): Manhattan distance + 1 cells"""
        pathfinder = AStarPathfinder(flat_grid)
        start = flat_grid.cell_at(0, 0)
        goal = flat_grid.cell_at(4, 4)

        result = pathfinder.search(start, goal)

        assert len(result.cells) == 9
        assert result.cells[0] is start
        assert result.cells[-1] is goal
        assert result.total_cost == pytest.approx(8.0)
        assert_valid_walk(result.cells)

        costs = result.costs_from_start
        assert costs[0] == 0.0
        assert all(later >= earlier for earlier, later in zip(costs, costs[1:]))

    def test_start_equals_goal(self, random_grid):
        pathfinder = AStarPathfinder(random_grid)
        cell = random_grid.cell_at(2, 3)

        assert pathfinder.find_path(cell, cell) == [cell]

    def test_every_pair_connected(self, random_grid):
        """On an obstacle-free grid every pair of cells has a valid walk"""
        pathfinder = AStarPathfinder(random_grid)

        for start in random_grid.cells:
            for goal in random_grid.cells:
                path = pathfinder.find_path(start, goal)
                assert path, f"No path from ({start.x}, {start.y}) to ({goal.x}, {goal.y})"
                assert path[0] is start
                assert path[-1] is goal
                assert_valid_walk(path)

    @pytest.mark.parametrize("grid_fixture", ["random_grid", "walled_grid", "flat_grid"])
    def test_path_cost_is_optimal(self, grid_fixture, request):
        """A* cost matches an exhaustive relaxation for all pairs"""
        grid = request.getfixturevalue(grid_fixture)
        pathfinder = AStarPathfinder(grid)

        for start in grid.cells:
            best = brute_force_costs(grid, start)
            for goal in grid.cells:
                result = pathfinder.search(start, goal)
                assert result.total_cost == pytest.approx(best[goal.index])
                assert path_cost(result.cells) == pytest.approx(best[goal.index])

    def test_noise_terrain_is_optimal(self, noise_grid):
        pathfinder = AStarPathfinder(noise_grid)
        start = noise_grid.cell_at(0, 0)
        best = brute_force_costs(noise_grid, start)

        for goal in noise_grid.cells:
            path = pathfinder.find_path(start, goal)
            assert path_cost(path) == pytest.approx(best[goal.index])

    def test_heuristic_admissibility(self, noise_grid):
        """Heuristic never overestimates the true remaining cost"""
        pathfinder = AStarPathfinder(noise_grid)
        goal = noise_grid.cell_at(7, 7)
        best = brute_force_costs(noise_grid, goal)

        for cell in noise_grid.cells:
            h_cost = pathfinder.heuristic(cell.index, goal.index)
            assert h_cost == manhattan_distance(cell, goal)
            assert h_cost <= best[cell.index] + 1e-9

    def test_repeated_search_is_identical(self, noise_grid):
        pathfinder = AStarPathfinder(noise_grid)
        start = noise_grid.cell_at(1, 6)
        goal = noise_grid.cell_at(6, 0)

        first = pathfinder.find_path(start, goal)
        second = pathfinder.find_path(start, goal)

        assert [c.position for c in first] == [c.position for c in second]

    def test_separate_pathfinders_agree(self, noise_grid):
        """No search state is left behind on the cells"""
        start = noise_grid.cell_at(0, 7)
        goal = noise_grid.cell_at(7, 0)

        AStarPathfinder(noise_grid).find_path(noise_grid.cell_at(3, 3), noise_grid.cell_at(5, 1))
        first = AStarPathfinder(noise_grid).find_path(start, goal)
        second = AStarPathfinder(noise_grid).find_path(start, goal)

        assert first == second

    def test_avoids_ridge(self, walled_grid):
        """Walking around the ridge is cheaper than climbing it"""
        pathfinder = AStarPathfinder(walled_grid)
        start = walled_grid.cell_at(0, 0)
        goal = walled_grid.cell_at(4, 0)

        result = pathfinder.search(start, goal)

        assert all(cell.elevation == 0.0 for cell in result.cells)
        assert walled_grid.cell_at(2, 4) in result.cells
        assert result.total_cost == pytest.approx(12.0)

    def test_tie_break_order(self):
        """Equal f scores prefer lower h, then the earlier discovered cell"""
        grid = NavigationGrid.from_elevations(np.zeros((3, 3)))
        pathfinder = AStarPathfinder(grid)

        path = pathfinder.find_path(grid.cell_at(0, 0), grid.cell_at(2, 2))

        assert [c.position for c in path] == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]

    def test_unreachable_goal_returns_empty(self, caplog):
        """A goal with no incoming links yields an empty path"""
        grid = NavigationGrid.from_elevations(np.zeros((3, 3)))
        goal = grid.cell_at(2, 2)
        for cell in grid.cells:
            cell.neighbors = tuple(n for n in cell.neighbors if n is not goal)

        pathfinder = AStarPathfinder(grid)
        with caplog.at_level(logging.WARNING):
            result = pathfinder.search(grid.cell_at(0, 0), goal)

        assert result.cells == []
        assert not result.found
        assert result.nodes_explored == 8
        assert "no path" in caplog.text

    def test_rejects_cell_from_other_grid(self, flat_grid, random_grid):
        pathfinder = AStarPathfinder(flat_grid)

        with pytest.raises(ValueError):
            pathfinder.find_path(flat_grid.cell_at(0, 0), random_grid.cell_at(1, 1))


@pytest.mark.unit
class TestPathReconstruction:

    def test_follows_predecessors(self, flat_grid):
        pathfinder = AStarPathfinder(flat_grid)
        came_from = np.full(flat_grid.size, -1, dtype=np.int64)
        came_from[1] = 0
        came_from[2] = 1
        came_from[7] = 2

        assert pathfinder.reconstruct_path(came_from, 7, 0) == [0, 1, 2, 7]

    def test_cycle_returns_partial_path(self, flat_grid, caplog):
        pathfinder = AStarPathfinder(flat_grid)
        came_from = np.full(flat_grid.size, -1, dtype=np.int64)
        came_from[8] = 5
        came_from[5] = 4
        came_from[4] = 5

        with caplog.at_level(logging.ERROR):
            path = pathfinder.reconstruct_path(came_from, 8, 0)

        assert path == [4, 5, 8]
        assert "Cycle detected" in caplog.text

    def test_self_loop_terminates(self, flat_grid):
        pathfinder = AStarPathfinder(flat_grid)
        came_from = np.full(flat_grid.size, -1, dtype=np.int64)
        came_from[6] = 6

        assert pathfinder.reconstruct_path(came_from, 6, 0) == [6]


@pytest.mark.unit
def test_debug_data_collected(flat_grid):
    pathfinder = AStarPathfinder(flat_grid, debug_mode=True)
    path = pathfinder.find_path(flat_grid.cell_at(0, 0), flat_grid.cell_at(4, 2))

    debug_data = pathfinder.get_debug_data()

    assert debug_data is not None
    assert debug_data['total_explored'] == len(debug_data['explored_nodes'])
    assert debug_data['total_explored'] >= len(path)
    in_path = debug_data['grid_exploration']['in_path']
    for cell in path:
        assert in_path[cell.y][cell.x] is True
    assert debug_data['grid_exploration']['g_scores'][0][0] == 0.0


@pytest.mark.unit
def test_debug_data_disabled(flat_grid):
    pathfinder = AStarPathfinder(flat_grid)
    pathfinder.find_path(flat_grid.cell_at(0, 0), flat_grid.cell_at(1, 1))

    assert pathfinder.get_debug_data() is None
