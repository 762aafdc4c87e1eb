"""
Polygon obstacles for the lidar arena.
Supports: square, circle (regular n-gon), wall, arena boundary.
Every obstacle is an implicitly closed vertex loop in world coordinates;
containment and ray queries live in the Environment.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple

from lidar_sim.config import CIRCLE_SEGMENTS, WALL_THICKNESS

Point = Tuple[float, float]

OBSTACLE_COLOR = (180 / 255, 214 / 255, 205 / 255)
WALL_COLOR = (0.5, 0.5, 0.5)


# ==========================================================
# Base Class
# ==========================================================
@dataclass(frozen=True)
class Obstacle:
    """Immutable polygon; the closing edge back to vertex 0 is implicit."""
    vertices: Tuple[Point, ...]
    kind: str = "polygon"
    color: Optional[Tuple[float, float, float]] = None

    def __post_init__(self):
        if len(self.vertices) < 3:
            raise ValueError(f"Polygon needs at least 3 vertices, got {len(self.vertices)}")

    def as_array(self) -> np.ndarray:
        return np.asarray(self.vertices, dtype=float)

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the vertex loop."""
        pts = self.as_array()
        return (float(pts[:, 0].min()), float(pts[:, 1].min()),
                float(pts[:, 0].max()), float(pts[:, 1].max()))

    def translated(self, dx: float, dy: float) -> "Obstacle":
        return Obstacle(tuple((x + dx, y + dy) for x, y in self.vertices),
                        kind=self.kind, color=self.color)


# ==========================================================
# Factories
# ==========================================================
def square(x: float, y: float, size: float,
           color: Optional[Tuple[float, float, float]] = OBSTACLE_COLOR) -> Obstacle:
    """Axis-aligned square with its lower-left corner at (x, y)."""
    verts = ((x, y), (x + size, y), (x + size, y + size), (x, y + size))
    return Obstacle(verts, kind="square", color=color)


def circle(cx: float, cy: float, radius: float, segments: int = CIRCLE_SEGMENTS,
           color: Optional[Tuple[float, float, float]] = OBSTACLE_COLOR) -> Obstacle:
    """Regular polygon approximation of a circle centred on (cx, cy)."""
    angles = np.linspace(0, 2 * np.pi, segments, endpoint=False)
    verts = tuple((float(cx + radius * np.cos(a)), float(cy + radius * np.sin(a)))
                  for a in angles)
    return Obstacle(verts, kind="circle", color=color)


def wall(x: float, y: float, width: float, height: float) -> Obstacle:
    verts = ((x, y), (x + width, y), (x + width, y + height), (x, y + height))
    return Obstacle(verts, kind="wall", color=WALL_COLOR)


def arena_walls(width: float, height: float,
                thickness: float = WALL_THICKNESS) -> List[Obstacle]:
    """Four walls lining the inside of the arena: top, bottom, left, right."""
    return [
        wall(0.0, 0.0, width, thickness),
        wall(0.0, height - thickness, width, thickness),
        wall(0.0, 0.0, thickness, height),
        wall(width - thickness, 0.0, thickness, height),
    ]


def arena_boundary(width: float, height: float) -> Obstacle:
    """Outline of the arena itself; used for drawing, not for collisions."""
    verts = ((0.0, 0.0), (width, 0.0), (width, height), (0.0, height))
    return Obstacle(verts, kind="arena", color=None)
