# lidar_sim/sensors/lidar.py
"""
Ray-sweep lidar: a fixed ring of uniformly spaced rays that follows the
platform's position and heading and records (distance, bearing) per ray.
"""
import numpy as np
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from lidar_sim.config import NUM_RAYS, MAX_RANGE, INITIAL_POSITION

# observer(origin, hit_points, hit_mask)
RayObserver = Callable[[np.ndarray, np.ndarray, np.ndarray], None]


@dataclass
class Ray:
    index: int
    bearing: float          # local offset from the ring's zero bearing (rad)
    max_range: float
    origin: np.ndarray
    offset: np.ndarray      # origin -> target, length max_range
    hit: bool = False
    hit_point: Optional[np.ndarray] = None

    @property
    def target(self) -> np.ndarray:
        return self.origin + self.offset


def rotate(vectors: np.ndarray, angle: float) -> np.ndarray:
    """Rotate (N, 2) vectors counter-clockwise by angle (rad)."""
    c, s = np.cos(angle), np.sin(angle)
    out = np.empty_like(vectors)
    out[:, 0] = vectors[:, 0] * c - vectors[:, 1] * s
    out[:, 1] = vectors[:, 0] * s + vectors[:, 1] * c
    return out


class RaySweepSampler:
    def __init__(self, num_rays: int = NUM_RAYS, max_range: float = MAX_RANGE,
                 position: Sequence[float] = INITIAL_POSITION, heading: float = 0.0,
                 observer: Optional[RayObserver] = None):
        if num_rays < 1:
            raise ValueError(f"num_rays must be positive, got {num_rays}")
        if max_range <= 0:
            raise ValueError(f"max_range must be positive, got {max_range}")
        self.num_rays = int(num_rays)
        self.max_range = float(max_range)
        self.observer = observer

        self.angles = np.arange(self.num_rays) * (2 * np.pi / self.num_rays)
        self.position = np.asarray(position, dtype=float).copy()
        self.offsets = self.max_range * np.column_stack([np.cos(self.angles), np.sin(self.angles)])
        self.heading = 0.0
        self.hit_mask = np.zeros(self.num_rays, dtype=bool)
        self.hit_points = self.targets()
        self.track_heading(heading)

    # ------------------------------------------------------------------
    def targets(self) -> np.ndarray:
        return self.position + self.offsets

    def ray(self, index: int) -> Ray:
        """Snapshot of a single ray."""
        return Ray(index=index, bearing=float(self.angles[index]), max_range=self.max_range,
                   origin=self.position.copy(), offset=self.offsets[index].copy(),
                   hit=bool(self.hit_mask[index]), hit_point=self.hit_points[index].copy())

    @property
    def rays(self) -> List[Ray]:
        return [self.ray(i) for i in range(self.num_rays)]

    def track_heading(self, heading: float) -> float:
        """Rotate every ray by the heading change since the last call; returns that change."""
        delta = heading - self.heading
        if delta != 0.0:
            self.offsets = rotate(self.offsets, delta)
        self.heading = heading
        return delta

    def move_to(self, position: Sequence[float]):
        self.position = np.asarray(position, dtype=float).copy()

    def sample(self, position: Sequence[float], heading: float, environment) -> np.ndarray:
        """
        Cast the whole ring from position at the given heading.

        Returns:
            (num_rays, 2) array of (distance, bearing) rows, indexed by ray.
        """
        self.track_heading(heading)
        self.move_to(position)

        targets = self.targets()
        hit_points, hit_mask = environment.cast_rays(self.position, targets)
        hit_points = np.where(hit_mask[:, None], hit_points, targets)

        diff = hit_points - self.position
        returns = np.zeros((self.num_rays, 2))
        returns[:, 0] = np.hypot(diff[:, 0], diff[:, 1])
        returns[:, 1] = np.arctan2(diff[:, 1], diff[:, 0])

        self.hit_points = hit_points
        self.hit_mask = hit_mask
        if self.observer is not None:
            self.observer(self.position.copy(), hit_points.copy(), hit_mask.copy())
        return returns
