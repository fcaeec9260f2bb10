# worker.py ─ a mobile agent that walks wherever it is told to go
from __future__ import annotations
from typing import TYPE_CHECKING, cast

from mesa import Agent

from Colony.config import Defaults
from Colony.state import MovementState
from Colony.agents.movement import MoveOutcome
from Colony.planners.road_usage import track_step

if TYPE_CHECKING:
    from Colony.colony_model import ColonyModel


class WorkerAgent(Agent):
    """
    A worker holds a destination assigned from outside (it has no behavior of
    its own), asks the model's movement controller for one step per tick,
    applies it when the target cell is free, and reports its arrival to the
    zone heatmap.
    """

    # ════════════════════════════════════════════════════════════
    #  INIT / HELPERS
    # ════════════════════════════════════════════════════════════
    def __init__(self, model, zone_name: str, cell: tuple[int, int], name: str | None = None):
        super().__init__(model)
        self.colony = cast("ColonyModel", self.model)
        self.name = name or f"worker-{self.unique_id}"
        self.zone_name = zone_name
        self.cell = cell
        self.last_reported: tuple[int, int] | None = None

        self.destination: tuple[int, int] | None = None
        self.radius = Defaults.PATHING_DEFAULT_RANGE
        self.movement = MovementState()
        self.last_result = None

        self.zone.place_agent(self.name, cell)

    @property
    def zone(self):
        return self.colony.zones[self.zone_name]

    def assign_destination(self, cell: tuple[int, int], radius: int = Defaults.PATHING_DEFAULT_RANGE) -> None:
        self.destination = cell
        self.radius = radius

    def clear_destination(self) -> None:
        self.destination = None

    def _can_enter(self, cell) -> bool:
        zone = self.zone
        return zone.is_passable(cell) and zone.agent_at(cell) is None

    def _apply(self, cell) -> bool:
        if not self._can_enter(cell):
            return False
        self.cell = cell
        self.zone.place_agent(self.name, cell)
        return True

    # ════════════════════════════════════════════════════════════
    #  STEP
    # ════════════════════════════════════════════════════════════
    def step(self):
        if self.destination is not None:
            result = self.colony.movement.move_to(
                self.zone, self.name, self.movement, self.cell,
                self.destination, self.radius, self.colony.tick,
            )
            self.last_result = result
            if result.outcome is MoveOutcome.MOVED:
                self._apply(result.next_cell)

        track_step(self.colony.heatmaps[self.zone_name], self.cell, self.last_reported)
        self.last_reported = self.cell

    def remove(self) -> None:
        self.zone.remove_agent(self.name)
        super().remove()
