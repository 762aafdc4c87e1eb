"""Smoke tests for the matplotlib renderer (Agg backend)."""

import numpy as np
import pytest

from lidar_sim.env.env_2d import HIT_COLOR, MISS_COLOR, Renderer2D


@pytest.fixture
def renderer():
    r = Renderer2D(arena_size=1024, label="episode")
    yield r
    r.close()


class TestRenderer2D:

    def test_draws_episode(self, renderer, square_environment, tmp_path):
        renderer.draw_environment(square_environment)
        renderer.draw_path([(10.0, 10.0), (20.0, 10.0)])
        renderer.draw_rays(np.array([0.0, 0.0]), np.array([[10.0, 0.0], [0.0, 10.0]]),
                           np.array([True, False]))
        # arena outline, one obstacle, two path squares
        assert len(renderer.ax.patches) == 4
        assert len(renderer.ray_lines.get_segments()) == 2

        out = tmp_path / "frame.png"
        renderer.save(str(out))
        assert out.exists()

    def test_ray_colours(self, renderer):
        renderer.draw_rays(np.zeros(2), np.array([[1.0, 0.0], [0.0, 1.0]]), np.array([True, False]))
        colors = renderer.ray_lines.get_colors()
        np.testing.assert_allclose(colors[0][:3], HIT_COLOR)
        np.testing.assert_allclose(colors[1][:3], MISS_COLOR)

    def test_suppressed_lines(self, square_environment):
        r = Renderer2D(arena_size=1024, suppress_lines=True)
        r.draw_rays(np.zeros(2), np.array([[1.0, 0.0]]), np.array([False]))
        assert r.ray_lines is None
        r.close()

    def test_arena_outline_is_unfilled(self, renderer, empty_environment):
        renderer.draw_environment(empty_environment)
        assert len(renderer.ax.patches) == 1
        outline = renderer.ax.patches[0]
        assert not outline.get_fill()
        np.testing.assert_allclose(outline.get_xy()[:4],
                                   [[0, 0], [1024, 0], [1024, 1024], [0, 1024]])
