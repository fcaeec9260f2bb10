# cost_model.py ─ terrain/structure weighting shared by planners and movers
from collections import namedtuple
from typing import Iterable

import numpy as np

from Colony.config import Defaults
from Colony.structures import StructureKind, is_blocking

# pending_lanes_as_roads: requested-but-unbuilt lanes already cost like lanes,
# so trunks planned later in the same pass reuse earlier ones
CostProfile = namedtuple("CostProfile", "name open_cost slow_cost road_cost pending_lanes_as_roads")

LAYOUT_PROFILE = CostProfile(
    "layout",
    Defaults.LAYOUT_OPEN_COST,
    Defaults.LAYOUT_SLOW_COST,
    Defaults.COST_ROAD,
    True,
)

MOVEMENT_PROFILE = CostProfile(
    "movement",
    Defaults.MOVEMENT_OPEN_COST,
    Defaults.MOVEMENT_SLOW_COST,
    Defaults.COST_ROAD,
    False,
)


def build_cost_matrix(zone, profile: CostProfile, blocked_cells: Iterable[tuple[int, int]] = ()) -> np.ndarray:
    """
    Return a ``(height, width)`` uint8 matrix of entry costs for *zone*.

    255 marks an impassable cell. Built lanes cost ``road_cost``; blocking
    structures and anchor objects are impassable; passable structures keep
    the terrain cost. *blocked_cells* (other movers, for instance) are forced
    to 255 last.
    """
    blocked = Defaults.COST_BLOCKED
    terrain = zone.terrain

    costs = np.full(terrain.shape, profile.open_cost, dtype=np.uint8)
    costs[terrain == Defaults.TERRAIN_SLOW] = profile.slow_cost
    costs[terrain == Defaults.TERRAIN_BLOCKED] = blocked

    if profile.pending_lanes_as_roads:
        for (x, y), kinds in zone.requests.items():
            if StructureKind.LANE in kinds and costs[y, x] != blocked:
                costs[y, x] = profile.road_cost

    for (x, y), kinds in zone.structures.items():
        if any(is_blocking(k) for k in kinds):
            costs[y, x] = blocked
        elif StructureKind.LANE in kinds:
            costs[y, x] = profile.road_cost

    for x, y in zone.anchor_obstacles():
        costs[y, x] = blocked

    height, width = costs.shape
    for x, y in blocked_cells:
        if 0 <= x < width and 0 <= y < height:
            costs[y, x] = blocked

    return costs
