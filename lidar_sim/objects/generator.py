"""
Procedural Environment Generator
--------------------------------
• Random mix of squares and 32-gon circles
• Shapes kept inside the arena by their anchor range
• Four arena walls appended after the random shapes
• Reproducible through an optional rng seed
"""

import numpy as np
from typing import List, Optional, Tuple

from loguru import logger

from lidar_sim.config import (
    ARENA_SIZE,
    NUM_SHAPES,
    SHAPE_SIZE_RANGE,
    WALL_THICKNESS,
    CIRCLE_SEGMENTS,
)
from lidar_sim.env.environment import Environment
from .primitives import Obstacle, square, circle, arena_walls


def generate_obstacles(
    arena_size: float = ARENA_SIZE,
    num_shapes: int = NUM_SHAPES,
    size_range: Tuple[float, float] = SHAPE_SIZE_RANGE,
    rng: Optional[np.random.Generator] = None,
) -> List[Obstacle]:
    """
    Sample random squares and circles inside a square arena.

    Args:
        arena_size: side length of the arena
        num_shapes: number of random shapes (walls not included)
        size_range: (min, max) for square side length and circle radius
        rng: numpy Generator; a fresh unseeded one is used if None

    Returns:
        obstacles: list of polygon obstacles.
    """
    rng = rng if rng is not None else np.random.default_rng()
    lo, hi = size_range
    obstacles: List[Obstacle] = []

    for _ in range(num_shapes):
        size = float(rng.uniform(lo, hi))
        x = float(rng.uniform(0.0, arena_size - size))
        y = float(rng.uniform(0.0, arena_size - size))

        if rng.random() < 0.5:
            obstacles.append(square(x, y, size))
        else:
            obstacles.append(circle(x, y, size, segments=CIRCLE_SEGMENTS))

    return obstacles


def generate_environment(
    arena_size: float = ARENA_SIZE,
    num_shapes: int = NUM_SHAPES,
    size_range: Tuple[float, float] = SHAPE_SIZE_RANGE,
    wall_thickness: float = WALL_THICKNESS,
    rng_seed: Optional[int] = None,
) -> Environment:
    """Random shapes plus arena walls, wrapped as an Environment."""
    rng = np.random.default_rng(rng_seed)
    obstacles = generate_obstacles(arena_size, num_shapes, size_range, rng)
    obstacles.extend(arena_walls(arena_size, arena_size, wall_thickness))
    logger.debug(f"Generated {len(obstacles)} polygons (seed={rng_seed})")
    return Environment(obstacles, arena_size=arena_size)
