# defense.py ─ perimeter walls, watchtowers and shielding of critical structures
import logging

from Colony.config import Defaults
from Colony.structures import CRITICAL_KINDS, StructureKind
from Colony.planners.placement import can_place, candidates, submit

logger = logging.getLogger(__name__)


class PerimeterDefensePlanner:
    """
    Requests a reinforced wall one cell inside every passable zone edge and a
    few watchtowers at fixed offsets around home. Placed perimeter cells are
    never moved or withdrawn, even if the level later drops.
    """

    def __init__(self,
                 enabled: bool = Defaults.DEFENSE_ENABLED,
                 start_level: int = Defaults.DEFENSE_START_LEVEL,
                 max_perimeter_per_run: int = Defaults.DEFENSE_MAX_PERIMETER_PER_RUN,
                 max_watchtowers_per_run: int = Defaults.DEFENSE_MAX_WATCHTOWERS_PER_RUN,
                 min_budget: int = Defaults.DEFENSE_MIN_BUDGET,
                 watchtower_offsets=None):
        self.enabled = enabled
        self.start_level = start_level
        self.max_perimeter_per_run = max_perimeter_per_run
        self.max_watchtowers_per_run = max_watchtowers_per_run
        self.min_budget = min_budget
        self.watchtower_offsets = list(watchtower_offsets or Defaults.WATCHTOWER_OFFSETS)

    def is_active(self, zone) -> bool:
        return self.enabled and zone.development_level >= self.start_level

    def plan(self, zone) -> list:
        """Run one defense pass; returns ``(cell, kind)`` for every accepted request."""
        if not self.is_active(zone):
            return []

        placed = []
        perimeter_budget = self._perimeter_allowance(zone)
        placed += self._plan_border(zone, perimeter_budget)

        perimeter_budget = self._perimeter_allowance(zone, len(placed))
        if zone.budget >= self.min_budget:
            placed += self._plan_shielding(zone, perimeter_budget)
        else:
            logger.debug("zone %s: budget %d below %d, shielding skipped",
                         zone.name, zone.budget, self.min_budget)

        placed += self._plan_watchtowers(zone)

        if placed:
            logger.info("zone %s: %d defense request(s)", zone.name, len(placed))
        return placed

    def _perimeter_allowance(self, zone, already: int = 0) -> int:
        remaining = zone.remaining_quota(StructureKind.PERIMETER)
        return max(0, min(remaining, self.max_perimeter_per_run - already))

    # ────────────────────────────────────────────────────────────────
    #  border
    # ────────────────────────────────────────────────────────────────
    @staticmethod
    def border_cells(zone) -> list:
        """Cells one step inward of every passable edge cell, de-duplicated, scan order kept."""
        width, height = zone.width, zone.height
        cells = []
        seen = set()

        def add(edge, inward):
            if zone.is_wall(edge) or inward in seen:
                return
            seen.add(inward)
            cells.append(inward)

        # top / bottom edges, then left / right without the corners
        for x in range(width):
            add((x, 0), (x, 1))
            add((x, height - 1), (x, height - 2))
        for y in range(1, height - 1):
            add((0, y), (1, y))
            add((width - 1, y), (width - 2, y))
        return cells

    def _plan_border(self, zone, allowance: int) -> list:
        placed = []
        if allowance <= 0:
            return placed
        for cell in self.border_cells(zone):
            if len(placed) >= allowance:
                break
            if not can_place(zone, cell, StructureKind.PERIMETER):
                continue
            if submit(zone, cell, StructureKind.PERIMETER):
                placed.append((cell, StructureKind.PERIMETER))
        return placed

    def _plan_shielding(self, zone, allowance: int) -> list:
        placed = []
        for kind in CRITICAL_KINDS:
            for cell in zone.cells_with_structure(kind):
                if len(placed) >= allowance:
                    return placed
                if not can_place(zone, cell, StructureKind.PERIMETER):
                    continue
                if submit(zone, cell, StructureKind.PERIMETER):
                    placed.append((cell, StructureKind.PERIMETER))
        return placed

    # ────────────────────────────────────────────────────────────────
    #  watchtowers
    # ────────────────────────────────────────────────────────────────
    def _plan_watchtowers(self, zone) -> list:
        kind = StructureKind.WATCHTOWER
        home = zone.home_cell
        if home is None:
            return []
        allowance = min(zone.remaining_quota(kind), self.max_watchtowers_per_run)

        placed = []
        if allowance <= 0:
            return placed
        for cell in candidates(zone, kind, home, home, offsets=self.watchtower_offsets):
            if len(placed) >= allowance:
                break
            if submit(zone, cell, kind):
                placed.append((cell, kind))
        return placed
