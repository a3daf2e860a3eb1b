"""
Walk configuration for the terrain demo.
Controls the board size, terrain generation and how quickly walked cells wear down.
"""

from dataclasses import dataclass


@dataclass
class WalkConfig:
    """Configuration for board layout, terrain noise and agent wear"""

    # Canvas size in pixels and cell size in pixels
    canvas_width: int = 400
    canvas_height: int = 400
    resolution: int = 5

    # Perlin noise parameters
    noise_scale: float = 0.1
    octaves: int = 4
    persistence: float = 0.5
    seed: int = 0

    # Elevation range the noise is mapped into
    min_elevation: float = 0.0
    max_elevation: float = 255.0

    # How much a cell is lowered each time the agent steps on it
    wear_amount: float = 10.0

    debug_mode: bool = False

    def __post_init__(self):
        """Reject configurations that cannot produce a board"""
        self.validate()

    @property
    def cols(self) -> int:
        return self.canvas_width // self.resolution

    @property
    def rows(self) -> int:
        return self.canvas_height // self.resolution

    def validate(self):
        if self.resolution <= 0:
            raise ValueError(f"resolution must be positive, got {self.resolution}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"canvas must have positive size, got {self.canvas_width}x{self.canvas_height}"
            )
        if self.cols == 0 or self.rows == 0:
            raise ValueError("canvas is smaller than a single cell")
        if self.octaves < 1:
            raise ValueError(f"octaves must be at least 1, got {self.octaves}")
        if self.max_elevation < self.min_elevation:
            raise ValueError("max_elevation must not be below min_elevation")
        if self.wear_amount < 0:
            raise ValueError("wear_amount must not be negative")


# Preset configurations for common boards
class WalkPresets:
    """Predefined walk configurations"""

    @staticmethod
    def default() -> WalkConfig:
        """80x80 board with gently rolling terrain"""
        return WalkConfig()

    @staticmethod
    def small_board() -> WalkConfig:
        """20x20 board, quick to search and easy to print"""
        return WalkConfig(canvas_width=100, canvas_height=100)

    @staticmethod
    def rugged() -> WalkConfig:
        """Higher frequency noise - more climbing between neighbors"""
        config = WalkConfig()
        config.noise_scale = 0.3
        config.octaves = 6
        config.persistence = 0.65
        return config

    @staticmethod
    def flat() -> WalkConfig:
        """No elevation at all, every step costs the same"""
        return WalkConfig(min_elevation=0.0, max_elevation=0.0)

    @staticmethod
    def by_name(name: str) -> WalkConfig:
        """Look up a preset by name"""
        presets = {
            "default": WalkPresets.default,
            "small": WalkPresets.small_board,
            "rugged": WalkPresets.rugged,
            "flat": WalkPresets.flat,
        }
        if name not in presets:
            raise ValueError(f"Unknown preset '{name}', choose from {sorted(presets)}")
        return presets[name]()
