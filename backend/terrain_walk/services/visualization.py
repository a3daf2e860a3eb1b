"""
Static snapshots of a walk: height map, path and agent.
"""

import logging
from typing import List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from terrain_walk.services.navigation_grid import Cell, NavigationGrid

logger = logging.getLogger(__name__)


def plot_walk(grid: NavigationGrid, path: List[Cell], agent_position: Tuple[int, int],
              output_file: str, title: Optional[str] = None):
    """
    Plots the elevation grid in grayscale, the path through cell centres and
    the agent as a red square, then saves the figure to output_file.
    """
    fig, ax = plt.subplots(figsize=(8, 8))

    # Cell (x, y) covers [x - 0.5, x + 0.5] so path vertices land on cell centres
    ax.imshow(grid.elevations, cmap='gray', vmin=0, vmax=max(255.0, float(grid.elevations.max())),
              origin='upper', interpolation='nearest')

    if path:
        xs = [cell.x for cell in path]
        ys = [cell.y for cell in path]
        ax.plot(xs, ys, color='lime', linewidth=2, label='Path')
        ax.scatter([xs[-1]], [ys[-1]], color='lime', s=40, zorder=5, label='Target')

    agent_x, agent_y = agent_position
    ax.add_patch(Rectangle((agent_x - 0.5, agent_y - 0.5), 1, 1, color='red', zorder=6, label='Agent'))

    ax.set_xlim(-0.5, grid.cols - 0.5)
    ax.set_ylim(grid.rows - 0.5, -0.5)
    ax.set_xlabel('Column')
    ax.set_ylabel('Row')
    ax.set_title(title or 'Least-Cost Walk Over Terrain')
    ax.legend(loc='upper right')

    plt.tight_layout()
    fig.savefig(output_file, dpi=100)
    plt.close(fig)
    logger.info(f"Saved walk snapshot to {output_file}")
