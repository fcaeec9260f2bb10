# path_solver.py  --------------------------------------------------------------
from collections import namedtuple

import numpy as np

from Colony.config import Defaults
from Colony.utilities import pathfinding
from Colony.utilities.pathfinding.cost_model import CostProfile, build_cost_matrix

# found=False is the NoPathFound signal; path excludes the source cell
PathResult = namedtuple("PathResult", "path found ops cost")


def _solver_for(method: str | None):
    if method is None:
        return pathfinding.astar
    try:
        return pathfinding.SOLVERS[method.upper()]
    except KeyError:
        raise ValueError(f"unknown pathfinding method {method!r}") from None


def find_path(costs: np.ndarray,
              source: tuple[int, int],
              target: tuple[int, int],
              radius: int = Defaults.PATHING_DEFAULT_RANGE,
              max_ops: int = Defaults.PATHING_MAX_OPS,
              method: str | None = None) -> PathResult:
    """Lowest-cost 8-connected route from *source* to within *radius* of *target*."""
    solver = _solver_for(method)
    height, width = costs.shape
    sx, sy = source
    if not (0 <= sx < width and 0 <= sy < height):
        return PathResult([], False, 0, 0)

    path, found, ops, cost = solver(costs, source, target, max(0, int(radius)), int(max_ops))
    return PathResult(path, found, ops, cost)


def find_zone_path(zone,
                   source: tuple[int, int],
                   target: tuple[int, int],
                   profile: CostProfile,
                   radius: int = Defaults.PATHING_DEFAULT_RANGE,
                   blocked_cells=(),
                   max_ops: int = Defaults.PATHING_MAX_OPS,
                   method: str | None = None) -> PathResult:
    """Convenience: build the cost matrix for *zone* under *profile*, then solve."""
    costs = build_cost_matrix(zone, profile, blocked_cells)
    return find_path(costs, source, target, radius, max_ops, method)
