"""End-to-end tests for the episode loop."""

import os

import numpy as np
import pytest

from lidar_sim.config import SimulationConfig
from lidar_sim.recording import serializer
from lidar_sim.simulation import LidarSimulation, main

SQUARE_LO, SQUARE_HI = 362.0, 662.0


def fast_config(out_dir, **overrides):
    """Corner-to-corner run with a small ray ring and instant slews."""
    params = dict(out_dir=str(out_dir), n_iterations=1, start_index=0, goal_index=9999,
                  num_rays=24, max_range=2000.0, slew_rate=1000.0)
    params.update(overrides)
    return SimulationConfig(**params)


class TestLidarSimulation:

    def test_square_obstacle_scenario(self, tmp_path, square_environment):
        sim = LidarSimulation(fast_config(tmp_path), environment_factory=lambda i: square_environment)
        assert sim.run(dt=1.0, max_ticks=5000) == 1
        assert sim.terminated

        path = serializer.read_json(str(tmp_path / "lidar_path_0.json"))
        returns = serializer.read_json(str(tmp_path / "lidar_returns_0.json"))
        outside = [p for p in path
                   if not (SQUARE_LO <= p[0] <= SQUARE_HI and SQUARE_LO <= p[1] <= SQUARE_HI)]

        assert len(path) >= 2
        assert len(outside) >= 2
        assert np.asarray(returns).shape == (len(path) - 1, 24, 2)

    def test_iteration_limit(self, tmp_path, square_environment):
        sim = LidarSimulation(fast_config(tmp_path, n_iterations=3),
                              environment_factory=lambda i: square_environment)
        assert sim.run(dt=1.0, max_ticks=20000) == 3
        assert sim.terminated
        assert sim.episodes_started == 3
        assert sorted(os.listdir(tmp_path)) == sorted(
            [f"lidar_path_{i}.json" for i in range(3)] + [f"lidar_returns_{i}.json" for i in range(3)]
        )
        # Further ticks are no-ops
        assert sim.process(1.0)

    def test_empty_path_restarts_without_counting(self, tmp_path, isolated_goal_environment,
                                                  square_environment):
        layouts = [isolated_goal_environment, square_environment]
        sim = LidarSimulation(fast_config(tmp_path),
                              environment_factory=lambda i: layouts[min(i, 1)])
        assert sim.run(dt=1.0, max_ticks=5000) == 1
        assert sim.episodes_started == 2
        assert sorted(os.listdir(tmp_path)) == ["lidar_path_0.json", "lidar_returns_0.json"]

    def test_empty_path_counted_when_configured(self, tmp_path, isolated_goal_environment):
        sim = LidarSimulation(fast_config(tmp_path, count_empty_episodes=True),
                              environment_factory=lambda i: isolated_goal_environment)
        assert sim.run(dt=1.0, max_ticks=10) == 1
        assert os.listdir(tmp_path) == []

    def test_rays_start_at_first_waypoint(self, tmp_path, square_environment):
        sim = LidarSimulation(fast_config(tmp_path), environment_factory=lambda i: square_environment)
        sim.reset_episode()
        np.testing.assert_allclose(sim.sampler.position, sim.path[0])
        assert sim.state.path_idx == 0

    def test_write_failure_is_fatal(self, tmp_path, square_environment):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        sim = LidarSimulation(fast_config(blocker / "out"),
                              environment_factory=lambda i: square_environment)
        with pytest.raises(OSError):
            sim.run(dt=1.0, max_ticks=5000)
        assert sim.context.count == 0

    def test_generated_environment_is_seeded(self, tmp_path):
        config = fast_config(tmp_path, seed=11, num_shapes=5)
        a = LidarSimulation(config)._generate_environment(0)
        b = LidarSimulation(config)._generate_environment(0)
        c = LidarSimulation(config)._generate_environment(1)
        assert a.obstacles == b.obstacles
        assert a.obstacles != c.obstacles

    def test_renderer_receives_episode(self, tmp_path, square_environment):
        class RecordingRenderer:
            def __init__(self):
                self.calls = []

            def draw_environment(self, env):
                self.calls.append("environment")

            def draw_path(self, path):
                self.calls.append("path")

            def draw_rays(self, origin, hits, mask):
                self.calls.append("rays")

            def render(self):
                self.calls.append("render")

        fake_renderer = RecordingRenderer()
        sim = LidarSimulation(fast_config(tmp_path), environment_factory=lambda i: square_environment,
                              renderer=fake_renderer)
        sim.process(1.0)
        assert fake_renderer.calls == ["environment", "path", "rays"]


def test_main_runs_headless(tmp_path, monkeypatch):
    import lidar_sim.simulation as simulation
    from lidar_sim.env.environment import Environment
    from lidar_sim.objects.primitives import square

    monkeypatch.setattr(simulation, "generate_environment",
                        lambda **kwargs: Environment([square(362, 362, 300)], arena_size=1024))

    assert main(["--out_dir", str(tmp_path), "--n_iterations", "2"]) == 0
    assert sorted(os.listdir(tmp_path)) == [
        "lidar_path_0.json", "lidar_path_1.json", "lidar_returns_0.json", "lidar_returns_1.json",
    ]
