"""
A* Path Planner on the arena point grid
---------------------------------------
✓ 4-connected planning graph stored as a sparse adjacency matrix
✓ Edges only leave unoccluded points (left / top neighbour)
✓ Unit edge costs, Manhattan heuristic
✓ Deterministic tie breaking (insertion order)
✓ Empty path when start and goal are disconnected
"""

import heapq
import itertools
import numpy as np
from dataclasses import dataclass, field
from scipy import sparse
from scipy.sparse.csgraph import connected_components
from typing import List, Optional, Tuple

from loguru import logger

from lidar_sim.config import ARENA_SIZE, GRID_RESOLUTION, START_INDEX, GOAL_INDEX
from lidar_sim.map.occupancy_grid import OccupancyGrid

Path = List[Tuple[float, float]]


@dataclass(order=True)
class Node:
    f: int
    seq: int
    g: int = field(compare=False)
    index: int = field(compare=False)
    parent: Optional['Node'] = field(default=None, compare=False)


class PlanningGraph:
    """Undirected lattice graph over every grid point."""

    def __init__(self, grid: OccupancyGrid, adjacency: sparse.csr_matrix):
        self.grid = grid
        self.adjacency = adjacency

    @classmethod
    def build(cls, grid: OccupancyGrid, occluded: Optional[np.ndarray] = None) -> 'PlanningGraph':
        """
        Connect each unoccluded point to its left and top neighbour.

        Only the source point is tested, so an occluded point can still pick up
        edges from its right and bottom neighbours.
        """
        if occluded is None:
            occluded = grid.occluded
        res = grid.resolution
        n = grid.num_points
        idx = np.arange(n).reshape(res, res)   # [row, col] -> col + res * row
        free = ~np.asarray(occluded, dtype=bool)

        left_src = idx[:, 1:][free[:, 1:]]
        top_src = idx[1:, :][free[1:, :]]
        src = np.concatenate([left_src, top_src])
        dst = np.concatenate([left_src - 1, top_src - res])

        directed = sparse.coo_matrix(
            (np.ones(len(src), dtype=np.int8), (src, dst)), shape=(n, n)
        ).tocsr()
        adjacency = directed.maximum(directed.T).tocsr()
        adjacency.sort_indices()
        return cls(grid, adjacency)

    @property
    def num_nodes(self) -> int:
        return self.adjacency.shape[0]

    @property
    def num_edges(self) -> int:
        return self.adjacency.nnz // 2

    def neighbors(self, index: int) -> np.ndarray:
        start, end = self.adjacency.indptr[index], self.adjacency.indptr[index + 1]
        return self.adjacency.indices[start:end]

    def degree(self, index: int) -> int:
        return int(self.adjacency.indptr[index + 1] - self.adjacency.indptr[index])

    def has_edge(self, a: int, b: int) -> bool:
        return b in self.neighbors(a)

    def connected_components(self) -> Tuple[int, np.ndarray]:
        """(count, labels) of the undirected graph."""
        return connected_components(self.adjacency, directed=False)


class AStarPlanner:
    """A* path planner operating on a PlanningGraph."""

    def __init__(self, graph: PlanningGraph):
        self.graph = graph
        self.grid = graph.grid

    # ==========================================================
    #                    PUBLIC API
    # ==========================================================
    def search(self, start: int, goal: int) -> List[int]:
        """Shortest node-index sequence from start to goal, [] if unreachable."""
        if not self.grid.is_valid_index(start) or not self.grid.is_valid_index(goal):
            logger.warning(f"Start {start} or goal {goal} outside the grid.")
            return []

        counter = itertools.count()
        open_set = [Node(f=self._heuristic(start, goal), seq=next(counter), g=0, index=start)]
        g_score = {start: 0}
        closed_set = set()

        while open_set:
            current = heapq.heappop(open_set)
            if current.index in closed_set:
                continue
            if current.index == goal:
                return self._reconstruct(current)
            closed_set.add(current.index)

            for nb in self.graph.neighbors(current.index):
                nb = int(nb)
                if nb in closed_set:
                    continue
                tentative_g = current.g + 1
                if nb not in g_score or tentative_g < g_score[nb]:
                    g_score[nb] = tentative_g
                    f = tentative_g + self._heuristic(nb, goal)
                    heapq.heappush(open_set, Node(f=f, seq=next(counter), g=tentative_g,
                                                  index=nb, parent=current))
        return []

    def plan(self, start: int, goal: int) -> Path:
        """Shortest path as world-coordinate waypoints."""
        return [self.grid.grid_to_world(*self.grid.index_to_grid(i))
                for i in self.search(start, goal)]

    # ==========================================================
    #                    INTERNAL HELPERS
    # ==========================================================
    def _heuristic(self, a: int, b: int) -> int:
        ac, ar = self.grid.index_to_grid(a)
        bc, br = self.grid.index_to_grid(b)
        return abs(ac - bc) + abs(ar - br)

    def _reconstruct(self, node: Node) -> List[int]:
        out = []
        while node:
            out.append(node.index)
            node = node.parent
        out.reverse()
        return out


def plan(environment, resolution: int = GRID_RESOLUTION,
         start: int = START_INDEX, goal: int = GOAL_INDEX,
         arena_size: Optional[float] = None) -> Path:
    """
    Plan a traversal path through an environment.

    Args:
        environment: Environment providing occlusion queries
        resolution: grid points per side
        start, goal: flat node indices (col + resolution * row)
        arena_size: arena side length; defaults to the environment's

    Returns:
        list of (x, y) waypoints, empty if start and goal are disconnected.
    """
    if arena_size is None:
        arena_size = getattr(environment, 'arena_size', ARENA_SIZE)
    grid = OccupancyGrid(arena_size=arena_size, resolution=resolution)
    grid.compute_occlusion(environment)
    graph = PlanningGraph.build(grid)
    path = AStarPlanner(graph).plan(start, goal)
    if not path:
        logger.warning(f"No path found from {start} to {goal}.")
    else:
        logger.debug(f"Planned {len(path)} waypoints ({int(grid.occluded.sum())} occluded points)")
    return path
