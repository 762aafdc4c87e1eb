"""
Heading / motion controller for the lidar platform.
Two-state machine: the platform either slews its heading toward the bearing
of the current path segment (rate limited) or advances one waypoint and
triggers a ray sweep. Rotation and translation never happen in the same tick.
"""
import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from lidar_sim.config import SLEW_RATE, HEADING_EPSILON


class TickEvent(Enum):
    SLEWED = "slewed"
    SAMPLED = "sampled"
    EPISODE_COMPLETE = "episode_complete"


@dataclass
class TickResult:
    event: TickEvent
    returns: Optional[np.ndarray] = None   # (N, 2) when event is SAMPLED


@dataclass
class PlatformState:
    """Mutable per-episode platform state; owned by the simulation loop."""
    heading: float = 0.0           # rad
    target_heading: float = 0.0    # rad
    slewing: bool = False
    slew_rate: float = SLEW_RATE   # rad/s
    path_idx: int = 0

    def __post_init__(self):
        if self.slew_rate <= 0:
            raise ValueError(f"slew_rate must be positive, got {self.slew_rate}")

    def reset(self):
        self.heading = 0.0
        self.target_heading = 0.0
        self.slewing = False
        self.path_idx = 0


def path_bearing(a: Sequence[float], b: Sequence[float]) -> float:
    """Angle of the vector a -> b (rad); 0 for coincident points."""
    return math.atan2(b[1] - a[1], b[0] - a[0])


def slew_step(state: PlatformState, dt: float, epsilon: float = HEADING_EPSILON) -> float:
    """Advance heading toward target_heading by at most slew_rate * dt; returns the step."""
    remaining = state.target_heading - state.heading
    step = np.sign(remaining) * min(state.slew_rate * dt, abs(remaining))
    state.heading += float(step)

    if abs(state.target_heading - state.heading) < epsilon:
        state.heading = state.target_heading
        state.slewing = False
    return float(step)


def segment(path: Sequence[Tuple[float, float]], idx: int) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """(previous, current) waypoints for path index idx."""
    loc = path[idx]
    prev_loc = path[idx - 1] if idx > 0 else loc
    return prev_loc, loc


def process(dt: float, state: PlatformState, path: Sequence[Tuple[float, float]],
            sampler, environment, epsilon: float = HEADING_EPSILON) -> TickResult:
    """
    One simulation tick.

    Args:
        dt: elapsed time since the previous tick (s)
        state: platform state, mutated in place
        path: planned waypoints for the episode
        sampler: RaySweepSampler attached to the platform
        environment: Environment queried by the sampler

    Returns:
        TickResult describing what happened this tick.
    """
    if state.slewing:
        slew_step(state, dt, epsilon)
        # Rays follow the heading while the platform holds position
        sampler.track_heading(state.heading)
        if path:
            sampler.move_to(path[state.path_idx])
        return TickResult(TickEvent.SLEWED)

    if not path or state.path_idx >= len(path) - 1:
        return TickResult(TickEvent.EPISODE_COMPLETE)

    prev_loc, loc = segment(path, state.path_idx)
    desired = path_bearing(prev_loc, loc)

    if abs(state.heading - desired) > epsilon:
        state.target_heading = desired
        state.slewing = True
        return TickResult(TickEvent.SLEWED)

    state.heading = desired
    returns = sampler.sample(loc, state.heading, environment)
    state.path_idx += 1
    return TickResult(TickEvent.SAMPLED, returns)
