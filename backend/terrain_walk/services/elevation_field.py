"""Procedural terrain heights from coherent Perlin noise."""

import logging

import numpy as np
from noise import pnoise2

from terrain_walk.services.walk_config import WalkConfig

logger = logging.getLogger(__name__)


class ElevationField:
    """
    Smooth, irregular height per grid cell.

    Sampling is a pure function of the grid coordinates, the noise scale
    and the seed, so the same configuration always yields the same terrain.
    """

    def __init__(self, noise_scale: float = 0.1, octaves: int = 4, persistence: float = 0.5,
                 seed: int = 0, min_elevation: float = 0.0, max_elevation: float = 255.0):
        self.noise_scale = noise_scale
        self.octaves = octaves
        self.persistence = persistence
        self.seed = seed
        self.min_elevation = min_elevation
        self.max_elevation = max_elevation

    @classmethod
    def from_config(cls, config: WalkConfig) -> "ElevationField":
        return cls(
            noise_scale=config.noise_scale,
            octaves=config.octaves,
            persistence=config.persistence,
            seed=config.seed,
            min_elevation=config.min_elevation,
            max_elevation=config.max_elevation,
        )

    def sample(self, x: int, y: int) -> float:
        """Elevation for grid cell (x, y), mapped into [min_elevation, max_elevation]"""
        raw = pnoise2(
            x * self.noise_scale,
            y * self.noise_scale,
            octaves=self.octaves,
            persistence=self.persistence,
            base=self.seed,
        )
        # pnoise2 is roughly in [-1, 1]
        normalized = min(max((raw + 1.0) / 2.0, 0.0), 1.0)
        return self.min_elevation + normalized * (self.max_elevation - self.min_elevation)

    def to_array(self, cols: int, rows: int) -> np.ndarray:
        """Sample the whole field into a (rows, cols) array"""
        heights = np.empty((rows, cols), dtype=np.float64)
        for row in range(rows):
            for col in range(cols):
                heights[row, col] = self.sample(col, row)

        logger.debug(
            f"Sampled {cols}x{rows} elevation field: "
            f"min={heights.min():.1f}, max={heights.max():.1f}, mean={heights.mean():.1f}"
        )
        return heights
