"""
Configuration for the lidar data generator.
All defaults mirror the reference episode layout.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

# Arena (world units, square)
ARENA_SIZE = 1024.0

# Planning grid (points per side) and fixed start/goal indices (col + res * row)
GRID_RESOLUTION = 100
START_INDEX = 702
GOAL_INDEX = 6290

# Procedural geometry
NUM_SHAPES = 100
SHAPE_SIZE_RANGE = (10.0, 100.0)
CIRCLE_SEGMENTS = 32
WALL_THICKNESS = 10.0

# Lidar ring
NUM_RAYS = 360
MAX_RANGE = 100000.0
INITIAL_POSITION = (100.0, 100.0)

# Heading dynamics
SLEW_RATE = np.deg2rad(30.0)   # rad/s
HEADING_EPSILON = 1e-4

# Run control
DEFAULT_OUT_DIR = "lidar_out"
DEFAULT_ITERATIONS = 10
DEFAULT_DT = 1.0 / 60.0


@dataclass
class SimulationConfig:
    """Everything a run needs before episode 0 begins."""
    out_dir: str = DEFAULT_OUT_DIR
    n_iterations: int = DEFAULT_ITERATIONS
    label: Optional[str] = None
    suppress_lines: bool = False
    seed: Optional[int] = None
    render: bool = False
    count_empty_episodes: bool = False

    arena_size: float = ARENA_SIZE
    resolution: int = GRID_RESOLUTION
    start_index: int = START_INDEX
    goal_index: int = GOAL_INDEX
    num_shapes: int = NUM_SHAPES
    num_rays: int = NUM_RAYS
    max_range: float = MAX_RANGE
    slew_rate: float = SLEW_RATE

    def __post_init__(self):
        if self.n_iterations < 1:
            raise ValueError(f"n_iterations must be >= 1, got {self.n_iterations}")
        if self.resolution < 1:
            raise ValueError(f"resolution must be >= 1, got {self.resolution}")
        if self.num_rays < 1:
            raise ValueError(f"num_rays must be positive, got {self.num_rays}")
        if self.slew_rate <= 0:
            raise ValueError(f"slew_rate must be positive, got {self.slew_rate}")
