"""Tests for obstacle primitives and the procedural generator."""

import math

import numpy as np
import pytest

from lidar_sim.objects.generator import generate_environment, generate_obstacles
from lidar_sim.objects.primitives import Obstacle, arena_walls, circle, square


class TestPrimitives:

    def test_square_vertices(self):
        sq = square(10, 20, 5)
        assert sq.vertices == ((10, 20), (15, 20), (15, 25), (10, 25))
        assert sq.bounds() == (10, 20, 15, 25)

    def test_circle_is_regular_polygon(self):
        c = circle(0, 0, 10)
        pts = c.as_array()
        assert len(pts) == 32
        np.testing.assert_allclose(np.hypot(pts[:, 0], pts[:, 1]), 10.0)

    def test_arena_walls_line_the_arena(self):
        walls = arena_walls(1024, 1024, thickness=10)
        assert len(walls) == 4
        assert walls[1].bounds() == (0, 1014, 1024, 1024)
        assert walls[3].bounds() == (1014, 0, 1024, 1024)
        assert all(w.kind == "wall" for w in walls)

    def test_degenerate_polygon_rejected(self):
        with pytest.raises(ValueError):
            Obstacle(((0, 0), (1, 1)))

    def test_translated(self):
        moved = square(0, 0, 1).translated(5, 5)
        assert moved.bounds() == (5, 5, 6, 6)


class TestGenerator:

    def test_shape_count_and_walls(self):
        env = generate_environment(num_shapes=20, rng_seed=4)
        kinds = [o.kind for o in env.obstacles]
        assert len(env) == 24
        assert kinds[-4:] == ["wall"] * 4
        assert set(kinds[:-4]) <= {"square", "circle"}

    def test_seed_is_reproducible(self):
        a = generate_environment(num_shapes=10, rng_seed=123)
        b = generate_environment(num_shapes=10, rng_seed=123)
        assert a.obstacles == b.obstacles

    def test_sizes_within_range(self):
        obstacles = generate_obstacles(num_shapes=200, size_range=(10.0, 100.0),
                                       rng=np.random.default_rng(9))
        for obs in obstacles:
            x0, y0, x1, y1 = obs.bounds()
            if obs.kind == "square":
                assert 10.0 <= x1 - x0 <= 100.0
                assert 0.0 <= x0 and x1 <= 1024.0
                assert 0.0 <= y0 and y1 <= 1024.0
            else:
                radius = (x1 - x0) / 2
                assert 10.0 * math.cos(math.pi / 32) <= radius <= 100.0

    def test_mix_of_shapes(self):
        obstacles = generate_obstacles(num_shapes=100, rng=np.random.default_rng(0))
        kinds = {o.kind for o in obstacles}
        assert kinds == {"square", "circle"}
