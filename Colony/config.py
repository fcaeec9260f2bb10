# config.py
from dataclasses import dataclass

@dataclass(frozen=True)
class Defaults:
    # grid
    ZONE_SIZE: int = 50

    TERRAIN_OPEN: int = 0
    TERRAIN_BLOCKED: int = 1
    TERRAIN_SLOW: int = 2

    # 8-connected, y grows downward (row index)
    DIRECTION_VECTORS = {
        "N":  (0, -1),
        "NE": (1, -1),
        "E":  (1, 0),
        "SE": (1, 1),
        "S":  (0, 1),
        "SW": (-1, 1),
        "W":  (-1, 0),
        "NW": (-1, -1),
    }
    AVAILABLE_DIRECTIONS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

    # COST MODEL

    COST_BLOCKED: int = 255
    COST_ROAD: int = 1

    LAYOUT_OPEN_COST: int = 2
    LAYOUT_SLOW_COST: int = 5

    MOVEMENT_OPEN_COST: int = 2
    MOVEMENT_SLOW_COST: int = 10

    # PATHFINDING

    PATHFINDING_METHOD = "NUMBA"
    # "NUMBA" "PYTHON"
    PATHING_MAX_OPS: int = 2000
    PATHING_DEFAULT_RANGE: int = 1

    # STATIC LAYOUT

    LAYOUT_VERSION: int = 2
    PLAZA_RADII = (1, 2)
    ANCHOR_SEARCH_RADIUS: int = 3
    TREASURY_RING_RADII = (2, 3)
    EXPANSION_MIN_RADIUS: int = 2
    EXPANSION_MAX_RADIUS: int = 6
    TRUNK_RANGE: int = 1
    EXTRACTOR_UNLOCK_LEVEL: int = 6

    # Immediate home neighbours, tried in this order before the outer rings
    TREASURY_OFFSETS = [
        (1, 0),
        (-1, 0),
        (0, 1),
        (0, -1),
        (1, 1),
        (1, -1),
        (-1, 1),
        (-1, -1),
    ]

    # DYNAMIC ROADS

    ROADS_MIN_USAGE: int = 20
    ROADS_DECAY_PER_RUN: int = 1
    ROADS_MAX_TILES_PER_ZONE: int = 500
    ROADS_MAX_REQUESTS_PER_RUN: int = 3
    ROADS_TICK_INTERVAL: int = 5
    ROADS_POPULATION_BASELINE: int = 10
    ROADS_POPULATION_STEP: int = 5

    # DEFENSE

    DEFENSE_ENABLED: bool = True
    DEFENSE_START_LEVEL: int = 3
    DEFENSE_MAX_PERIMETER_PER_RUN: int = 8
    DEFENSE_MAX_WATCHTOWERS_PER_RUN: int = 1
    DEFENSE_MIN_BUDGET: int = 500

    WATCHTOWER_OFFSETS = [
        (2, 0),
        (-2, 0),
        (0, 2),
        (0, -2),
        (2, 2),
        (2, -2),
        (-2, 2),
        (-2, -2),
    ]

    # MOVEMENT

    MOVEMENT_REUSE_WINDOW: int = 10
    MOVEMENT_STUCK_TICKS: int = 3
    PATH_CACHE_MAX_AGE: int = 100
    PATH_SWEEP_MIN_BUDGET: int = 200

    # WORLD

    MAX_PENDING_REQUESTS: int = 100
    BUDGET_CEILING: int = 10000

    # Maximum structure count per development level (index = level 0..8)
    CONTROLLER_STRUCTURES = {
        "home":       [0, 1, 1, 1, 1, 1, 2, 2, 3],
        "lane":       [2500, 2500, 2500, 2500, 2500, 2500, 2500, 2500, 2500],
        "buffer":     [5, 5, 5, 5, 5, 5, 5, 5, 5],
        "treasury":   [0, 0, 0, 0, 1, 1, 1, 1, 1],
        "expansion":  [0, 0, 5, 10, 20, 30, 40, 50, 60],
        "relay":      [0, 0, 0, 0, 0, 2, 3, 4, 6],
        "extractor":  [0, 0, 0, 0, 0, 0, 1, 1, 1],
        "perimeter":  [0, 0, 2500, 2500, 2500, 2500, 2500, 2500, 2500],
        "watchtower": [0, 0, 0, 1, 1, 2, 2, 3, 6],
    }

    MAX_DEVELOPMENT_LEVEL: int = 8


def structure_quota(kind, level: int) -> int:
    """Default quota function: how many structures of *kind* a zone may hold at *level*."""
    key = getattr(kind, "value", kind)
    table = Defaults.CONTROLLER_STRUCTURES.get(key)
    if table is None:
        return 0
    level = max(0, min(int(level), Defaults.MAX_DEVELOPMENT_LEVEL))
    return table[level]
