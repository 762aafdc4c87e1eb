"""
Episode recorder.
Accumulates per-waypoint ray returns, flushes path + returns at the end of an
episode and decides whether the run has produced enough episodes.
"""
import os
import threading
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from . import serializer

PATH_TEMPLATE = "lidar_path_{}.json"
RETURNS_TEMPLATE = "lidar_returns_{}.json"


class RunContext:
    """Episode counter that persists across episode resets."""

    def __init__(self, iteration_limit: int, count_empty_episodes: bool = False):
        if iteration_limit < 1:
            raise ValueError(f"iteration_limit must be >= 1, got {iteration_limit}")
        self.iteration_limit = int(iteration_limit)
        self.count_empty_episodes = count_empty_episodes
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def finished(self) -> bool:
        return self.count >= self.iteration_limit

    @contextmanager
    def episode_slot(self):
        """Hold the counter while an episode is flushed; it advances only if the block succeeds."""
        with self._lock:
            yield self._count
            self._count += 1

    def advance(self) -> int:
        """Increment the counter; returns the new value."""
        with self._lock:
            self._count += 1
            return self._count


class EpisodeRecorder:
    def __init__(self, out_dir: str, context: RunContext):
        self.out_dir = out_dir
        self.context = context
        self.returns: List[np.ndarray] = []

    def reset(self):
        self.returns = []

    def on_waypoint_sampled(self, step_returns: np.ndarray):
        self.returns.append(np.asarray(step_returns, dtype=float))

    def filenames(self, episode: int) -> Tuple[str, str]:
        return (os.path.join(self.out_dir, PATH_TEMPLATE.format(episode)),
                os.path.join(self.out_dir, RETURNS_TEMPLATE.format(episode)))

    def on_episode_complete(self, path: Sequence[Tuple[float, float]],
                            returns: Optional[Sequence[np.ndarray]] = None) -> bool:
        """
        Flush the episode and report whether the run should terminate.

        Args:
            path: the episode's planned waypoints
            returns: per-waypoint (N, 2) tables; defaults to what was recorded

        Returns:
            True once the episode counter has reached the iteration limit.
        """
        if returns is None:
            returns = self.returns

        if not path:
            if self.context.count_empty_episodes:
                count = self.context.advance()
                logger.warning(f"Empty path counted as episode ({count}/{self.context.iteration_limit})")
                return count >= self.context.iteration_limit
            logger.warning("Empty path, episode skipped")
            return False

        with self.context.episode_slot() as episode:
            path_file, returns_file = self.filenames(episode)
            try:
                serializer.write_json(path_file, serializer.path_to_array(path))
                serializer.write_json(returns_file, list(returns))
            except OSError:
                # Never leave half of a path/returns pair behind
                for name in (path_file, returns_file):
                    if os.path.exists(name):
                        os.remove(name)
                raise
        count = self.context.count

        logger.info(f"Episode {episode}: {len(path)} waypoints, {len(returns)} sweeps -> {self.out_dir}")
        if count >= self.context.iteration_limit:
            logger.info(f"Finished {self.context.iteration_limit} iterations")
            return True
        return False
