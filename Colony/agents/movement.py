# movement.py ─ one-tick move decisions with path caching and stall recovery
import logging
import random
from collections import namedtuple
from enum import Enum

from Colony.config import Defaults
from Colony.state import MovementState, PathCacheEntry
from Colony.utilities.general import chebyshev_range, direction_between, next_cell_in_direction
from Colony.utilities.pathfinding.cost_model import MOVEMENT_PROFILE
from Colony.utilities.pathfinding.path_solver import find_zone_path

logger = logging.getLogger(__name__)


class MoveOutcome(Enum):
    MOVED = "moved"
    BLOCKED = "blocked"
    AT_DESTINATION = "at_destination"


# direction is None unless outcome is MOVED; next_cell is where the agent
# would stand after the move (its current cell otherwise)
MoveResult = namedtuple("MoveResult", "outcome direction next_cell")


class MovementController:
    """
    Turns "go to *destination* (within *radius*)" into one step per tick.

    Per call: stall bookkeeping → destination check → stall nudge →
    follow the cached route or recompute it with the movement cost profile.
    """

    def __init__(self,
                 rng: random.Random | None = None,
                 reuse_window: int = Defaults.MOVEMENT_REUSE_WINDOW,
                 stuck_ticks: int = Defaults.MOVEMENT_STUCK_TICKS,
                 max_ops: int = Defaults.PATHING_MAX_OPS,
                 method: str | None = None):
        self.rng = rng if rng is not None else random.Random()
        self.reuse_window = reuse_window
        self.stuck_ticks = stuck_ticks
        self.max_ops = max_ops
        self.method = method

    # ════════════════════════════════════════════════════════════
    #  PUBLIC
    # ════════════════════════════════════════════════════════════
    def move_to(self, zone, agent_id, state: MovementState, current, destination,
                radius: int = Defaults.PATHING_DEFAULT_RANGE, tick: int = 0) -> MoveResult:
        previous = state.last_cell
        if previous == current:
            state.stall_ticks += 1
        else:
            state.stall_ticks = 0
        state.last_cell = current

        if chebyshev_range(current, destination) <= radius:
            state.stall_ticks = 0
            return MoveResult(MoveOutcome.AT_DESTINATION, None, current)

        if state.stall_ticks >= self.stuck_ticks:
            return self._nudge(agent_id, state, current)

        step = None
        cache = state.cache
        if cache is not None and cache.is_reusable(destination, radius, tick, self.reuse_window):
            step = self._next_step(cache.route, current)
            if step is None:
                logger.debug("agent %s: cached route broken at %s", agent_id, current)

        if step is None:
            state.clear_cache()
            blocked = zone.other_agent_cells(agent_id)
            blocked.discard(previous)
            result = find_zone_path(zone, current, destination, MOVEMENT_PROFILE,
                                    radius=radius, blocked_cells=blocked,
                                    max_ops=self.max_ops, method=self.method)
            if not result.found or not result.path:
                logger.debug("agent %s: no path %s → %s (%d ops)", agent_id, current, destination, result.ops)
                return MoveResult(MoveOutcome.BLOCKED, None, current)
            state.cache = PathCacheEntry(destination, radius, list(result.path), tick)
            step = result.path[0]

        return MoveResult(MoveOutcome.MOVED, direction_between(current, step), step)

    # ════════════════════════════════════════════════════════════
    #  INTERNAL
    # ════════════════════════════════════════════════════════════
    def _nudge(self, agent_id, state: MovementState, current) -> MoveResult:
        state.clear_cache()
        state.stall_ticks = 0
        direction = self.rng.choice(Defaults.AVAILABLE_DIRECTIONS)
        logger.debug("agent %s stalled at %s, nudging %s", agent_id, current, direction)
        return MoveResult(MoveOutcome.MOVED, direction, next_cell_in_direction(current, direction))

    @staticmethod
    def _next_step(route, current):
        """Next cell on *route* after *current*; None when the route no longer continues from here."""
        if current in route:
            idx = route.index(current)
            if idx + 1 >= len(route):
                return None
            step = route[idx + 1]
        elif route:
            step = route[0]
        else:
            return None
        return step if chebyshev_range(current, step) == 1 else None
