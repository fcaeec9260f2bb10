# road_usage.py ─ grow lanes where agents actually walk
import logging

from Colony.config import Defaults
from Colony.state import HeatmapStore
from Colony.structures import StructureKind
from Colony.planners.placement import can_place, submit

logger = logging.getLogger(__name__)


def track_step(store: HeatmapStore, cell, previous_cell) -> bool:
    """Count an arrival on *cell*; standing still is not counted."""
    if cell == previous_cell:
        return False
    store.record_visit(cell)
    return True


class RoadUsagePlanner:
    """
    Periodic pass over a zone's heatmap: trim to cap, decay, then request a
    lane on the busiest legal cells whose usage reached the threshold.
    """

    def __init__(self,
                 min_usage: int = Defaults.ROADS_MIN_USAGE,
                 decay: int = Defaults.ROADS_DECAY_PER_RUN,
                 max_requests_per_run: int = Defaults.ROADS_MAX_REQUESTS_PER_RUN,
                 tick_interval: int = Defaults.ROADS_TICK_INTERVAL,
                 population_baseline: int = Defaults.ROADS_POPULATION_BASELINE,
                 population_step: int = Defaults.ROADS_POPULATION_STEP):
        self.min_usage = min_usage
        self.decay = decay
        self.max_requests_per_run = max_requests_per_run
        self.tick_interval = tick_interval
        self.population_baseline = population_baseline
        self.population_step = population_step

    def threshold(self, population: int) -> int:
        extra = max(0, population - self.population_baseline)
        return self.min_usage + extra * self.population_step

    def is_due(self, tick: int) -> bool:
        return tick % self.tick_interval == 0

    def run(self, zone, store: HeatmapStore, tick: int | None = None) -> list:
        """
        Execute one periodic pass. With *tick* given, the pass only runs on
        interval ticks. Returns the cells that received a lane request.
        """
        if tick is not None and not self.is_due(tick):
            return []

        evicted = store.trim()
        if evicted:
            logger.debug("zone %s: heatmap trimmed by %d cell(s)", zone.name, len(evicted))
        store.decay(self.decay)

        threshold = self.threshold(zone.population)
        candidates = sorted(
            ((value, cell) for cell, value in store.items() if value >= threshold),
            key=lambda vc: (-vc[0], vc[1]),
        )

        emitted = []
        for value, cell in candidates:
            if len(emitted) >= self.max_requests_per_run:
                break  # the rest roll over to the next run

            if zone.is_wall(cell) or zone.has_structure(cell, StructureKind.LANE):
                store.discard(cell)
                continue
            if not can_place(zone, cell, StructureKind.LANE):
                continue
            if submit(zone, cell, StructureKind.LANE):
                store.reset(cell)
                emitted.append(cell)

        if emitted:
            logger.info("zone %s: %d usage lane request(s) (threshold %d)",
                        zone.name, len(emitted), threshold)
        return emitted
