# layout_planner.py ─ one-time infrastructure blueprint around the home anchor
import logging

from Colony.config import Defaults
from Colony.state import LayoutRecord
from Colony.structures import RequestResult, StructureKind
from Colony.planners.placement import (
    can_place, candidates, find_existing, first_candidate, request,
)
from Colony.utilities.general import ring_cells
from Colony.utilities.pathfinding.cost_model import LAYOUT_PROFILE, build_cost_matrix
from Colony.utilities.pathfinding.path_solver import find_path

logger = logging.getLogger(__name__)

CONTROL_KEY = "control"
TREASURY_KEY = "treasury"


class StaticLayoutPlanner:
    """
    Derives the static blueprint of a zone and records what it decided in the
    zone's ``LayoutRecord``.

    A pass runs only when the record is older than ``version`` or the zone's
    development level has risen since the last pass. Within a pass the order
    is buffers → treasury → plaza → trunks → expansions → relays → extractor,
    and every placement checks what is already built or requested first, so
    a pass never duplicates a request. A pass that runs into the zone's
    pending-request cap leaves the record open and is repeated on a later
    call, once some of the pending work has been built.
    """

    def __init__(self,
                 version: int = Defaults.LAYOUT_VERSION,
                 max_ops: int = Defaults.PATHING_MAX_OPS,
                 trunk_range: int = Defaults.TRUNK_RANGE,
                 search_radius: int = Defaults.ANCHOR_SEARCH_RADIUS,
                 method: str | None = None):
        self.version = version
        self.max_ops = max_ops
        self.trunk_range = trunk_range
        self.search_radius = search_radius
        self.method = method
        self._emitted = 0
        self._saturated = False

    # ════════════════════════════════════════════════════════════════
    #  ENTRY POINT
    # ════════════════════════════════════════════════════════════════
    def plan(self, zone, record: LayoutRecord | None = None) -> LayoutRecord:
        if record is None:
            record = LayoutRecord()

        level = zone.development_level
        if not record.needs_replan(level, self.version):
            return record

        home = zone.home_cell
        if home is None:
            # leave the record untouched so the next tick retries
            logger.debug("zone %s has no home anchor, layout deferred", zone.name)
            return record

        if zone.pending_total() >= zone.max_pending_requests:
            logger.debug("zone %s is at its pending cap, layout deferred", zone.name)
            return record

        self._emitted = 0
        self._saturated = False
        self._plan_buffers(zone, record, home)
        self._plan_treasury(zone, record, home)
        self._plan_plaza(zone, home)
        self._plan_trunks(zone, record, home)
        self._plan_expansions(zone, home)
        self._plan_relays(zone, record, home)
        self._plan_extractor(zone)

        if self._saturated:
            logger.info("zone %s hit its pending cap after %d request(s), layout pass will repeat",
                        zone.name, self._emitted)
            return record

        record.mark_planned(level, self.version)
        logger.info("planned v%d layout (level %d) in zone %s: %d request(s)",
                    self.version, level, zone.name, self._emitted)
        return record

    def _request(self, zone, cell, kind: StructureKind) -> bool:
        if self._saturated:
            return False
        result = request(zone, cell, kind)
        if result is RequestResult.FULL:
            self._saturated = True
            return False
        if result is RequestResult.OK:
            self._emitted += 1
            return True
        return False

    def _ensure_cached(self, zone, cell, kind: StructureKind) -> bool:
        """True when *cell* is covered (built, pending, or re-requested now)."""
        if zone.has_structure(cell, kind) or zone.has_request(cell, kind):
            return True
        if zone.remaining_quota(kind) > 0 and can_place(zone, cell, kind):
            return self._request(zone, cell, kind)
        return False

    # ────────────────────────────────────────────────────────────────
    #  buffers
    # ────────────────────────────────────────────────────────────────
    def _plan_buffers(self, zone, record: LayoutRecord, home) -> None:
        targets = [(a.anchor_id, a.cell) for a in zone.resource_anchors()]
        control = zone.control_anchor
        if control is not None:
            targets.append((control.anchor_id, control.cell))

        for key, anchor_cell in targets:
            cached = record.buffer_cells.get(key)
            if cached is not None:
                # never relocate a decided buffer
                self._ensure_cached(zone, cached, StructureKind.BUFFER)
                continue

            existing = find_existing(zone, anchor_cell, StructureKind.BUFFER)
            if existing is not None:
                record.buffer_cells[key] = existing
                continue

            if zone.remaining_quota(StructureKind.BUFFER) <= 0:
                continue
            cell = first_candidate(zone, StructureKind.BUFFER, anchor_cell, home, radius=self.search_radius)
            if cell is not None and self._request(zone, cell, StructureKind.BUFFER):
                record.buffer_cells[key] = cell

    # ────────────────────────────────────────────────────────────────
    #  treasury
    # ────────────────────────────────────────────────────────────────
    def _plan_treasury(self, zone, record: LayoutRecord, home) -> None:
        kind = StructureKind.TREASURY
        if record.treasury_cell is not None:
            self._ensure_cached(zone, record.treasury_cell, kind)
            return

        sited = zone.treasury_cell
        if sited is None:
            pending = zone.cells_with_request(kind)
            sited = pending[0] if pending else None
        if sited is not None:
            record.treasury_cell = sited
            self._ensure_cached(zone, sited, kind)
            return

        if zone.remaining_quota(kind) <= 0:
            return
        cell = first_candidate(zone, kind, home, home)
        if cell is not None and self._request(zone, cell, kind):
            record.treasury_cell = cell

    # ────────────────────────────────────────────────────────────────
    #  lanes
    # ────────────────────────────────────────────────────────────────
    def _plan_plaza(self, zone, home) -> None:
        for r in Defaults.PLAZA_RADII:
            for cell in ring_cells(home, r):
                if can_place(zone, cell, StructureKind.LANE):
                    self._request(zone, cell, StructureKind.LANE)

    def _trunk_pairs(self, zone, record: LayoutRecord, home) -> list:
        control = zone.control_cell
        resources = [a.cell for a in zone.resource_anchors()]

        pairs = []
        if control is not None:
            pairs.append((home, control))
        for cell in resources:
            pairs.append((home, cell))
        if control is not None:
            for cell in resources:
                pairs.append((cell, control))

        treasury = record.treasury_cell or zone.treasury_cell
        if treasury is not None:
            pairs.append((treasury, home))
            if control is not None:
                pairs.append((treasury, control))
            for cell in resources:
                pairs.append((treasury, cell))
            if zone.bonus_cell is not None:
                pairs.append((treasury, zone.bonus_cell))
        return pairs

    def _plan_trunks(self, zone, record: LayoutRecord, home) -> None:
        costs = build_cost_matrix(zone, LAYOUT_PROFILE)
        skip = {home, zone.control_cell}

        for source, target in self._trunk_pairs(zone, record, home):
            if self._saturated:
                return
            result = find_path(costs, source, target, self.trunk_range, self.max_ops, self.method)
            if not result.found:
                logger.debug("zone %s: no trunk %s → %s (%d ops)", zone.name, source, target, result.ops)
                continue

            for cell in result.path:
                if cell in skip or not can_place(zone, cell, StructureKind.LANE):
                    continue
                if self._request(zone, cell, StructureKind.LANE):
                    x, y = cell
                    # later trunks in this pass reuse the new lane
                    costs[y, x] = LAYOUT_PROFILE.road_cost

    # ────────────────────────────────────────────────────────────────
    #  quota-bound structures
    # ────────────────────────────────────────────────────────────────
    def _plan_expansions(self, zone, home) -> None:
        kind = StructureKind.EXPANSION
        remaining = zone.remaining_quota(kind)
        if remaining <= 0:
            return
        for cell in candidates(zone, kind, home, home):
            if remaining <= 0 or self._saturated:
                break
            if self._request(zone, cell, kind):
                remaining -= 1

    def _relay_targets(self, zone, record: LayoutRecord) -> list:
        targets = []
        control = zone.control_anchor
        if control is not None:
            base = record.buffer_cells.get(control.anchor_id, control.cell)
            targets.append((CONTROL_KEY, base))
        if record.treasury_cell is not None:
            targets.append((TREASURY_KEY, record.treasury_cell))
        for anchor in zone.resource_anchors():
            buffer_cell = record.buffer_cells.get(anchor.anchor_id)
            if buffer_cell is not None:
                targets.append((anchor.anchor_id, buffer_cell))
        return targets

    def _plan_relays(self, zone, record: LayoutRecord, home) -> None:
        kind = StructureKind.RELAY
        for key, base in self._relay_targets(zone, record):
            if zone.remaining_quota(kind) <= 0:
                return
            cached = record.relay_cells.get(key)
            if cached is not None:
                self._ensure_cached(zone, cached, kind)
                continue
            cell = first_candidate(zone, kind, base, home, radius=self.search_radius)
            if cell is not None and self._request(zone, cell, kind):
                record.relay_cells[key] = cell

    def _plan_extractor(self, zone) -> None:
        kind = StructureKind.EXTRACTOR
        bonus = zone.bonus_cell
        if bonus is None or zone.development_level < Defaults.EXTRACTOR_UNLOCK_LEVEL:
            return
        if zone.remaining_quota(kind) <= 0:
            return
        for cell in candidates(zone, kind, bonus):
            self._request(zone, cell, kind)
