"""
Occupancy grid over the lidar arena.
A uniform lattice of grid points; each point is flagged occluded when it falls
inside an obstacle polygon.
"""
import numpy as np
from typing import Tuple

from lidar_sim.config import ARENA_SIZE, GRID_RESOLUTION


class OccupancyGrid:
    """resolution x resolution grid of points spanning a square arena."""

    def __init__(self, arena_size: float = ARENA_SIZE, resolution: int = GRID_RESOLUTION):
        """
        Initialize occupancy grid.

        Args:
            arena_size: side length of the arena in world units
            resolution: number of grid points per side
        """
        if resolution < 1:
            raise ValueError(f"resolution must be positive, got {resolution}")
        self.arena_size = float(arena_size)
        self.resolution = int(resolution)
        self.cell_size = self.arena_size / self.resolution

        # Occlusion flags indexed [row, col]; filled by compute_occlusion
        self.occluded = np.zeros((self.resolution, self.resolution), dtype=bool)

    @property
    def num_points(self) -> int:
        return self.resolution * self.resolution

    def index(self, col: int, row: int) -> int:
        """Flat node index of a grid point."""
        return col + self.resolution * row

    def index_to_grid(self, index: int) -> Tuple[int, int]:
        """Inverse of index(): (col, row)."""
        return index % self.resolution, index // self.resolution

    def grid_to_world(self, col: int, row: int) -> Tuple[float, float]:
        """Grid point to world coordinates (points sit on cell corners)."""
        return col * self.cell_size, row * self.cell_size

    def world_to_grid(self, x: float, y: float) -> Tuple[int, int]:
        """Nearest grid point to a world coordinate."""
        return int(round(x / self.cell_size)), int(round(y / self.cell_size))

    def is_valid(self, col: int, row: int) -> bool:
        """Check if grid coordinates are within bounds."""
        return 0 <= col < self.resolution and 0 <= row < self.resolution

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < self.num_points

    def world_coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """(xs, ys) of every grid point, each shaped (resolution, resolution) as [row, col]."""
        coords = np.arange(self.resolution) * self.cell_size
        xs, ys = np.meshgrid(coords, coords)
        return xs, ys

    def compute_occlusion(self, environment) -> np.ndarray:
        """Flag every grid point that lies inside an obstacle of the environment."""
        xs, ys = self.world_coordinates()
        self.occluded = environment.occlusion_mask(xs, ys)
        return self.occluded

    def is_occluded(self, col: int, row: int) -> bool:
        if not self.is_valid(col, row):
            return True  # Out of bounds treated as occluded
        return bool(self.occluded[row, col])

