# In env_2d.py
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.patches import Polygon, Rectangle

from lidar_sim.config import ARENA_SIZE
from lidar_sim.objects.primitives import arena_boundary

BACKGROUND = (255 / 255, 218 / 255, 118 / 255)
PATH_COLOR = (255 / 255, 78 / 255, 136 / 255)
HIT_COLOR = (255 / 255, 140 / 255, 158 / 255)
MISS_COLOR = (0.0, 1.0, 0.0)
OUTLINE_COLOR = (0.2, 0.2, 0.2)


class Renderer2D:
    """Observational view of an episode: obstacles, path and the ray ring."""

    def __init__(self, arena_size=ARENA_SIZE, suppress_lines=False, label=None):
        self.arena_size = arena_size
        self.suppress_lines = suppress_lines
        self.label = label
        self.fig, self.ax = plt.subplots(figsize=(8, 8))
        self.ray_lines = None
        self._setup_axes()

    def _setup_axes(self):
        self.ax.clear()
        self.ax.set_facecolor(BACKGROUND)
        self.ax.set_xlim(0, self.arena_size)
        self.ax.set_ylim(self.arena_size, 0)   # y grows downward like screen space
        self.ax.set_aspect('equal')
        if self.label:
            self.ax.text(self.arena_size / 2, self.arena_size / 2, self.label,
                         ha='center', va='center')
        self.ray_lines = None

    def draw_environment(self, environment):
        self._setup_axes()
        outline = arena_boundary(self.arena_size, self.arena_size)
        self.ax.add_patch(Polygon(outline.as_array(), closed=True, fill=False,
                                  edgecolor=OUTLINE_COLOR, linewidth=2.0))
        for obs in environment.obstacles:
            self.ax.add_patch(Polygon(obs.as_array(), closed=True,
                                      color=obs.color or 'gray', alpha=0.9))

    def draw_path(self, path):
        """Small 5x5 squares at every waypoint."""
        for x, y in path:
            self.ax.add_patch(Rectangle((x - 5.0, y), 5.0, 5.0, color=PATH_COLOR))

    def draw_rays(self, origin, hit_points, hit_mask):
        """Ray observer: one segment per ray, red on hit, green on miss."""
        if self.suppress_lines:
            return
        segments = np.stack([np.broadcast_to(origin, hit_points.shape), hit_points], axis=1)
        colors = [HIT_COLOR if h else MISS_COLOR for h in hit_mask]
        if self.ray_lines is None:
            self.ray_lines = LineCollection(segments, colors=colors, linewidths=1.0)
            self.ax.add_collection(self.ray_lines)
        else:
            self.ray_lines.set_segments(segments)
            self.ray_lines.set_color(colors)

    def render(self, pause=0.001):
        self.fig.canvas.draw_idle()
        plt.pause(pause)

    def save(self, filename):
        self.fig.savefig(filename)

    def close(self):
        plt.close(self.fig)
