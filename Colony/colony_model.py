# colony_model.py ─ tick orchestrator tying zones, planners and workers together
from __future__ import annotations
import logging
from typing import Iterable

from mesa import Model

from Colony.config import Defaults
from Colony.state import HeatmapStore, LayoutRecord, MovementState, sweep_stale_paths
from Colony.structures import StructureKind
from Colony.zone import Zone
from Colony.agents.movement import MovementController
from Colony.agents.worker import WorkerAgent
from Colony.planners.defense import PerimeterDefensePlanner
from Colony.planners.layout_planner import StaticLayoutPlanner
from Colony.planners.road_usage import RoadUsagePlanner

logger = logging.getLogger(__name__)


class ColonyModel(Model):
    """
    Owns the zones, their persisted planning state, and the workers.

    One ``step()`` is one tick: per zone layout → roads → defense, then every
    worker moves once in shuffled order, then stale path caches are swept
    when the budget allows.
    """

    def __init__(self,
                 zones: Iterable[Zone] = (),
                 budget: int = Defaults.BUDGET_CEILING,
                 layout_planner: StaticLayoutPlanner | None = None,
                 road_planner: RoadUsagePlanner | None = None,
                 defense_planner: PerimeterDefensePlanner | None = None,
                 movement: MovementController | None = None,
                 seed=None):

        super().__init__(seed=seed)
        self.tick = 0
        self.budget = budget

        self.layout_planner = layout_planner or StaticLayoutPlanner()
        self.road_planner = road_planner or RoadUsagePlanner()
        self.defense_planner = defense_planner or PerimeterDefensePlanner()
        # nudges draw from the seeded model RNG
        self.movement = movement or MovementController(rng=self.random)

        self.zones: dict[str, Zone] = {}
        self.layout_records: dict[str, LayoutRecord] = {}
        self.heatmaps: dict[str, HeatmapStore] = {}
        self.workers: dict[str, WorkerAgent] = {}
        for zone in zones:
            self.add_zone(zone)

    # ════════════════════════════════════════════════════════════
    #  SETUP
    # ════════════════════════════════════════════════════════════
    def add_zone(self, zone: Zone) -> None:
        if zone.name in self.zones:
            raise ValueError(f"zone {zone.name!r} already registered")
        self.zones[zone.name] = zone
        self.layout_records[zone.name] = LayoutRecord()
        self.heatmaps[zone.name] = HeatmapStore()

    def add_worker(self, zone_name: str, cell: tuple[int, int], name: str | None = None) -> WorkerAgent:
        zone = self.zones[zone_name]
        if not zone.is_passable(cell) or zone.agent_at(cell) is not None:
            raise ValueError(f"cannot place a worker at {cell} in zone {zone_name}")
        if name is not None and name in self.workers:
            raise ValueError(f"worker {name!r} already exists")
        worker = WorkerAgent(self, zone_name, cell, name)
        self.workers[worker.name] = worker
        return worker

    def remove_worker(self, name: str) -> None:
        worker = self.workers.pop(name, None)
        if worker is not None:
            worker.remove()

    def complete_construction(self, zone_name: str, cell: tuple[int, int], kind: StructureKind) -> bool:
        """World-side completion of a pending request."""
        return self.zones[zone_name].complete_construction(cell, kind)

    def movement_states(self) -> dict[str, MovementState]:
        return {name: worker.movement for name, worker in self.workers.items()}

    # ════════════════════════════════════════════════════════════
    #  STEP
    # ════════════════════════════════════════════════════════════
    def step(self):
        self.tick += 1

        for name, zone in self.zones.items():
            zone.population = sum(1 for w in self.workers.values() if w.zone_name == name)
            self.layout_records[name] = self.layout_planner.plan(zone, self.layout_records[name])
            self.road_planner.run(zone, self.heatmaps[name], self.tick)
            self.defense_planner.plan(zone)

        self.agents.shuffle_do("step")

        if self.budget >= Defaults.PATH_SWEEP_MIN_BUDGET:
            sweep_stale_paths(self.movement_states(), self.tick)

    # ════════════════════════════════════════════════════════════
    #  PERSISTENCE
    # ════════════════════════════════════════════════════════════
    def to_memory(self) -> dict:
        return {
            "tick": self.tick,
            "layout": {name: rec.to_memory() for name, rec in self.layout_records.items()},
            "heatmaps": {name: store.to_memory() for name, store in self.heatmaps.items()},
            "agents": {name: state.to_memory() for name, state in self.movement_states().items()},
        }

    def load_memory(self, data: dict) -> None:
        """Restore persisted state for zones and workers that are already registered."""
        self.tick = int(data.get("tick", self.tick))
        for name, rec in data.get("layout", {}).items():
            if name in self.zones:
                self.layout_records[name] = LayoutRecord.from_memory(rec)
        for name, store in data.get("heatmaps", {}).items():
            if name in self.zones:
                self.heatmaps[name] = HeatmapStore.from_memory(store)
        for name, state in data.get("agents", {}).items():
            if name in self.workers:
                self.workers[name].movement = MovementState.from_memory(state)
