import heapq
import itertools

import numpy as np

from Colony.config import Defaults

NEIGHBOR_DELTAS = [Defaults.DIRECTION_VECTORS[d] for d in Defaults.AVAILABLE_DIRECTIONS]


def astar_python(costs: np.ndarray, start: tuple[int, int], goal: tuple[int, int],
                 radius: int, max_ops: int) -> tuple[list[tuple[int, int]], bool, int, int]:
    """
    Heap-based A* over an entry-cost matrix.

    Returns ``(path, found, ops, cost)``; *path* excludes *start* and ends on
    the first cell within Chebyshev *radius* of *goal*.
    """
    height, width = costs.shape
    blocked = Defaults.COST_BLOCKED
    gx, gy = goal

    def h(x: int, y: int) -> int:
        # Chebyshev distance to the acceptance region
        return max(0, max(abs(x - gx), abs(y - gy)) - radius)

    seq = itertools.count()
    open_set: list[tuple[int, int, tuple[int, int]]] = [(h(*start), next(seq), start)]
    g_cost: dict[tuple[int, int], int] = {start: 0}
    came_from: dict[tuple[int, int], tuple[int, int]] = {}
    closed: set[tuple[int, int]] = set()
    ops = 0

    while open_set:
        _, _, pos = heapq.heappop(open_set)
        if pos in closed:
            continue

        x, y = pos
        g = g_cost[pos]
        if h(x, y) == 0:
            path = []
            while pos != start:
                path.append(pos)
                pos = came_from[pos]
            path.reverse()
            return path, True, ops, g

        ops += 1
        if ops > max_ops:
            return [], False, ops, 0
        closed.add(pos)

        for dx, dy in NEIGHBOR_DELTAS:
            nx, ny = x + dx, y + dy
            if nx < 0 or nx >= width or ny < 0 or ny >= height:
                continue
            step = int(costs[ny, nx])
            if step >= blocked:
                continue
            npos = (nx, ny)
            if npos in closed:
                continue

            ng = g + step
            if ng < g_cost.get(npos, 0x7FFFFFFF):
                g_cost[npos] = ng
                came_from[npos] = pos
                heapq.heappush(open_set, (ng + h(nx, ny), next(seq), npos))

    return [], False, ops, 0
