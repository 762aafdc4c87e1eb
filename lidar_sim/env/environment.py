"""
Environment model for one episode.
Holds the immutable obstacle set and answers the two geometric queries the
core needs: point occlusion and nearest ray hit. Geometry is delegated to
shapely.
"""
import numpy as np
import shapely
from shapely.geometry import Point, Polygon
from shapely.ops import unary_union
from shapely.prepared import prep
from typing import Iterable, Optional, Sequence, Tuple

from lidar_sim.config import ARENA_SIZE
from lidar_sim.objects.primitives import Obstacle


class Environment:
    """Read-only obstacle set for a single episode."""

    def __init__(self, obstacles: Iterable[Obstacle], arena_size: float = ARENA_SIZE):
        self.obstacles: Tuple[Obstacle, ...] = tuple(obstacles)
        self.arena_size = float(arena_size)

        self._polygons = [Polygon(o.vertices) for o in self.obstacles]
        self._prepared = [prep(p) for p in self._polygons]
        self._union = unary_union(self._polygons) if self._polygons else None

    @classmethod
    def empty(cls, arena_size: float = ARENA_SIZE) -> "Environment":
        return cls([], arena_size=arena_size)

    def __len__(self) -> int:
        return len(self.obstacles)

    # ==========================================================
    #                    OCCLUSION
    # ==========================================================
    def is_occluded(self, point: Sequence[float]) -> bool:
        """True if the point lies strictly inside any obstacle."""
        p = Point(float(point[0]), float(point[1]))
        return any(poly.contains(p) for poly in self._prepared)

    def occlusion_mask(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Vectorized is_occluded over matching coordinate arrays."""
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        mask = np.zeros(np.broadcast(xs, ys).shape, dtype=bool)
        for poly in self._polygons:
            mask |= shapely.contains_xy(poly, xs, ys)
        return mask

    # ==========================================================
    #                    RAY QUERIES
    # ==========================================================
    def cast_rays(self, origin: Sequence[float],
                  targets: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Intersect the segments origin -> target[i] with every obstacle.

        Args:
            origin: shared ray origin (x, y)
            targets: (N, 2) array of segment end points

        Returns:
            (hit_points, hit_mask): hit_points[i] is the nearest intersection
            for rays that hit and the untouched target otherwise. An origin on
            or inside an obstacle reports the origin itself.
        """
        origin = np.asarray(origin, dtype=float).reshape(2)
        targets = np.asarray(targets, dtype=float).reshape(-1, 2)
        hit_points = targets.copy()
        hit_mask = np.zeros(len(targets), dtype=bool)
        if self._union is None or len(targets) == 0:
            return hit_points, hit_mask

        coords = np.empty((len(targets), 2, 2))
        coords[:, 0, :] = origin
        coords[:, 1, :] = targets
        segments = shapely.linestrings(coords)
        crossings = shapely.intersection(segments, self._union)
        hit_mask = ~shapely.is_empty(crossings)

        if hit_mask.any():
            # shortest_line runs from the crossing geometry towards the origin,
            # so its first vertex is the entry point nearest the origin
            nearest = shapely.shortest_line(crossings[hit_mask], shapely.points(origin))
            hit_points[hit_mask] = shapely.get_coordinates(nearest)[0::2]
        return hit_points, hit_mask

    def cast_ray(self, origin: Sequence[float],
                 target: Sequence[float]) -> Optional[Tuple[float, float]]:
        """Nearest hit along a single segment, or None."""
        hits, mask = self.cast_rays(origin, np.asarray(target, dtype=float).reshape(1, 2))
        if not mask[0]:
            return None
        return float(hits[0, 0]), float(hits[0, 1])
