import sys
from typing import Callable, List, Optional, Tuple

from loguru import logger

from lidar_sim.cli import parse_args
from lidar_sim.config import DEFAULT_DT, INITIAL_POSITION, SimulationConfig
from lidar_sim.control.heading_controller import PlatformState, TickEvent, process
from lidar_sim.env.environment import Environment
from lidar_sim.objects.generator import generate_environment
from lidar_sim.planning.astar import plan
from lidar_sim.recording.recorder import EpisodeRecorder, RunContext
from lidar_sim.sensors.lidar import RaySweepSampler

EnvironmentFactory = Callable[[int], Environment]


class LidarSimulation:
    """
    Tick-driven episode loop: generate arena, plan, follow the path while
    sweeping the ray ring, flush the episode and start over until the
    iteration limit is reached.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 environment_factory: Optional[EnvironmentFactory] = None,
                 renderer=None):
        self.config = config or SimulationConfig()
        self.context = RunContext(self.config.n_iterations, self.config.count_empty_episodes)
        self.recorder = EpisodeRecorder(self.config.out_dir, self.context)
        self.environment_factory = environment_factory or self._generate_environment
        self.renderer = renderer

        # --- Episode state ---
        self.episodes_started = 0
        self.environment: Optional[Environment] = None
        self.path: List[Tuple[float, float]] = []
        self.state = PlatformState(slew_rate=self.config.slew_rate)
        self.sampler: Optional[RaySweepSampler] = None
        self.terminated = False

    def _generate_environment(self, episode: int) -> Environment:
        seed = None if self.config.seed is None else self.config.seed + episode
        return generate_environment(arena_size=self.config.arena_size,
                                    num_shapes=self.config.num_shapes,
                                    rng_seed=seed)

    # ================================================================
    #  Episode lifecycle
    # ================================================================
    def reset_episode(self):
        """Fresh environment, path, platform state and ray ring."""
        self.environment = self.environment_factory(self.episodes_started)
        logger.info(f"Episode {self.episodes_started} (recorded {self.context.count}): "
                    f"{len(self.environment)} polygons")

        self.path = plan(self.environment, self.config.resolution,
                         self.config.start_index, self.config.goal_index,
                         arena_size=self.config.arena_size)
        logger.info(f"Path length: {len(self.path)}")

        self.state = PlatformState(slew_rate=self.config.slew_rate)
        self.recorder.reset()

        observer = None
        if self.renderer is not None and not self.config.suppress_lines:
            observer = self.renderer.draw_rays
        position = self.path[0] if self.path else INITIAL_POSITION
        self.sampler = RaySweepSampler(num_rays=self.config.num_rays,
                                       max_range=self.config.max_range,
                                       position=position, observer=observer)

        if self.renderer is not None:
            self.renderer.draw_environment(self.environment)
            self.renderer.draw_path(self.path)
        self.episodes_started += 1

    def process(self, dt: float) -> bool:
        """Run one tick; returns True once the run should stop."""
        if self.terminated:
            return True
        if self.environment is None:
            self.reset_episode()

        result = process(dt, self.state, self.path, self.sampler, self.environment)

        if result.event is TickEvent.SAMPLED:
            self.recorder.on_waypoint_sampled(result.returns)
        elif result.event is TickEvent.SLEWED:
            logger.trace(f"Slewing, target {self.state.target_heading:.4f}, "
                         f"angle {self.state.heading:.4f}")
        else:
            if self.recorder.on_episode_complete(self.path):
                self.terminated = True
                return True
            self.reset_episode()

        if self.renderer is not None and self.config.render:
            self.renderer.render()
        return False

    def run(self, dt: float = DEFAULT_DT, max_ticks: Optional[int] = None) -> int:
        """Headless loop; returns the number of recorded episodes."""
        ticks = 0
        while not self.process(dt):
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                logger.warning(f"Stopped after {ticks} ticks without reaching the iteration limit")
                break
        return self.context.count


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)
    logger.info(f"Command-line configuration: {config}")

    renderer = None
    if config.render:
        from lidar_sim.env.env_2d import Renderer2D
        renderer = Renderer2D(config.arena_size, suppress_lines=config.suppress_lines,
                              label=config.label)

    sim = LidarSimulation(config, renderer=renderer)
    episodes = sim.run()
    logger.info(f"Recorded {episodes} episodes in {config.out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
