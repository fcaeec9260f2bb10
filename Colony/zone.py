# zone.py ─ one managed grid region: terrain, anchors, structures and requests
from __future__ import annotations
from collections import Counter, namedtuple
from enum import Enum
from typing import Callable, Iterable

import numpy as np

from Colony.config import Defaults, structure_quota
from Colony.structures import StructureKind, RequestResult, can_share_cell, is_blocking

Cell = tuple[int, int]


class AnchorRole(str, Enum):
    HOME = "home"
    RESOURCE = "resource"
    CONTROL = "control"
    BONUS_RESOURCE = "bonus_resource"
    TREASURY = "treasury"


Anchor = namedtuple("Anchor", "anchor_id role cell")

# anchors that are physical objects nobody can stand on or build over
_OBSTACLE_ROLES = (AnchorRole.RESOURCE, AnchorRole.CONTROL, AnchorRole.BONUS_RESOURCE)
_SINGLE_ROLES = (AnchorRole.HOME, AnchorRole.CONTROL, AnchorRole.BONUS_RESOURCE, AnchorRole.TREASURY)


class Zone:
    """
    Observation and mutation surface for a single zone.

    Terrain is a ``(height, width)`` uint8 array indexed ``[y, x]`` holding
    ``Defaults.TERRAIN_OPEN``, ``TERRAIN_BLOCKED`` or ``TERRAIN_SLOW``.
    Built structures and pending construction requests are tracked per cell;
    a cell may carry several built kinds (a lane under a buffer, a perimeter
    over anything) but at most one pending request.
    """

    def __init__(self,
                 name: str,
                 terrain,
                 anchors: Iterable[Anchor] = (),
                 development_level: int = 1,
                 population: int = 0,
                 budget: int = Defaults.BUDGET_CEILING,
                 quota: Callable[[StructureKind, int], int] = structure_quota,
                 max_pending_requests: int = Defaults.MAX_PENDING_REQUESTS):
        terrain = np.asarray(terrain, dtype=np.uint8)
        if terrain.ndim != 2:
            raise ValueError(f"terrain must be a 2-D grid, got shape {terrain.shape}")

        self.name = name
        self.terrain = terrain
        self.height, self.width = terrain.shape
        self.development_level = development_level
        self.population = population
        self.budget = budget
        self.quota = quota
        self.max_pending_requests = max_pending_requests

        self.structures: dict[Cell, set[StructureKind]] = {}
        self.requests: dict[Cell, set[StructureKind]] = {}
        self._built_counts: Counter = Counter()
        self._pending_counts: Counter = Counter()
        self.agent_cells: dict[str, Cell] = {}

        self.anchors: list[Anchor] = []
        self._obstacles: dict[Cell, AnchorRole] = {}
        for anchor in anchors:
            self._add_anchor(anchor)

        home = self.home_cell
        if home is not None:
            self.add_structure(home, StructureKind.HOME)

    # -------------------------------------------------------------------
    #  anchors
    # -------------------------------------------------------------------
    def _add_anchor(self, anchor: Anchor) -> None:
        role = AnchorRole(anchor.role)
        cell = (int(anchor.cell[0]), int(anchor.cell[1]))
        if not self.in_bounds(*cell):
            raise ValueError(f"anchor {anchor.anchor_id!r} at {cell} is outside zone {self.name}")
        if role in _SINGLE_ROLES and any(a.role is role for a in self.anchors):
            raise ValueError(f"zone {self.name} already has a {role.value} anchor")

        self.anchors.append(Anchor(anchor.anchor_id, role, cell))
        if role in _OBSTACLE_ROLES:
            self._obstacles[cell] = role

    def _first_anchor(self, role: AnchorRole) -> Anchor | None:
        for anchor in self.anchors:
            if anchor.role is role:
                return anchor
        return None

    @property
    def home_cell(self) -> Cell | None:
        anchor = self._first_anchor(AnchorRole.HOME)
        return anchor.cell if anchor else None

    @property
    def control_anchor(self) -> Anchor | None:
        return self._first_anchor(AnchorRole.CONTROL)

    @property
    def control_cell(self) -> Cell | None:
        anchor = self.control_anchor
        return anchor.cell if anchor else None

    @property
    def bonus_cell(self) -> Cell | None:
        anchor = self._first_anchor(AnchorRole.BONUS_RESOURCE)
        return anchor.cell if anchor else None

    def resource_anchors(self) -> list[Anchor]:
        return [a for a in self.anchors if a.role is AnchorRole.RESOURCE]

    @property
    def treasury_cell(self) -> Cell | None:
        """The treasury anchor, or the cell of a built treasury when no anchor was given."""
        anchor = self._first_anchor(AnchorRole.TREASURY)
        if anchor is not None:
            return anchor.cell
        for cell, kinds in self.structures.items():
            if StructureKind.TREASURY in kinds:
                return cell
        return None

    def is_anchor_obstacle(self, cell: Cell) -> bool:
        return cell in self._obstacles

    def anchor_obstacles(self) -> list[Cell]:
        return list(self._obstacles)

    # -------------------------------------------------------------------
    #  terrain
    # -------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def terrain_at(self, cell: Cell) -> int:
        x, y = cell
        return int(self.terrain[y, x])

    def is_wall(self, cell: Cell) -> bool:
        x, y = cell
        if not self.in_bounds(x, y):
            return True
        return self.terrain[y, x] == Defaults.TERRAIN_BLOCKED

    def is_passable(self, cell: Cell) -> bool:
        """True when a mover could stand on *cell* right now (ignoring other agents)."""
        if self.is_wall(cell) or cell in self._obstacles:
            return False
        return not any(is_blocking(k) for k in self.structures_at(cell))

    # -------------------------------------------------------------------
    #  structures & requests
    # -------------------------------------------------------------------
    def structures_at(self, cell: Cell) -> frozenset:
        return frozenset(self.structures.get(cell, ()))

    def requests_at(self, cell: Cell) -> frozenset:
        return frozenset(self.requests.get(cell, ()))

    def has_structure(self, cell: Cell, kind: StructureKind) -> bool:
        return kind in self.structures.get(cell, ())

    def has_request(self, cell: Cell, kind: StructureKind) -> bool:
        return kind in self.requests.get(cell, ())

    def count_structures(self, kind: StructureKind) -> int:
        return self._built_counts[kind]

    def count_requests(self, kind: StructureKind) -> int:
        return self._pending_counts[kind]

    def pending_total(self) -> int:
        return sum(self._pending_counts.values())

    def cells_with_structure(self, kind: StructureKind) -> list[Cell]:
        return [cell for cell, kinds in self.structures.items() if kind in kinds]

    def cells_with_request(self, kind: StructureKind) -> list[Cell]:
        return [cell for cell, kinds in self.requests.items() if kind in kinds]

    def remaining_quota(self, kind: StructureKind) -> int:
        allowed = self.quota(kind, self.development_level)
        return allowed - self.count_structures(kind) - self.count_requests(kind)

    def add_structure(self, cell: Cell, kind: StructureKind) -> None:
        """World-side: record a built structure (bypasses request rules)."""
        kinds = self.structures.setdefault(cell, set())
        if kind not in kinds:
            kinds.add(kind)
            self._built_counts[kind] += 1

    def remove_structure(self, cell: Cell, kind: StructureKind) -> None:
        kinds = self.structures.get(cell)
        if kinds and kind in kinds:
            kinds.discard(kind)
            self._built_counts[kind] -= 1
            if not kinds:
                del self.structures[cell]

    def request_construction(self, cell: Cell, kind: StructureKind) -> RequestResult:
        """
        Submit a ConstructionRequest. Rejections are ordinary return values:

        * INVALID_TARGET – out of bounds, blocked terrain, or an anchor object
          (the extractor is the one kind that must sit on the bonus anchor)
        * OCCUPIED       – duplicate (cell, kind), another pending request on
          the cell, or an incompatible built structure
        * QUOTA_EXCEEDED – built + pending already at quota for the level
        * FULL           – too many pending requests zone-wide
        """
        x, y = cell
        if not self.in_bounds(x, y):
            return RequestResult.INVALID_TARGET

        if kind is StructureKind.EXTRACTOR:
            if cell != self.bonus_cell:
                return RequestResult.INVALID_TARGET
        elif cell in self._obstacles or self.is_wall(cell):
            return RequestResult.INVALID_TARGET

        built = self.structures_at(cell)
        if kind in built or self.requests.get(cell):
            return RequestResult.OCCUPIED
        if not can_share_cell(kind, built):
            return RequestResult.OCCUPIED

        if self.remaining_quota(kind) <= 0:
            return RequestResult.QUOTA_EXCEEDED
        if self.pending_total() >= self.max_pending_requests:
            return RequestResult.FULL

        self.requests.setdefault(cell, set()).add(kind)
        self._pending_counts[kind] += 1
        return RequestResult.OK

    def cancel_request(self, cell: Cell, kind: StructureKind) -> bool:
        kinds = self.requests.get(cell)
        if not kinds or kind not in kinds:
            return False
        kinds.discard(kind)
        self._pending_counts[kind] -= 1
        if not kinds:
            del self.requests[cell]
        return True

    def complete_construction(self, cell: Cell, kind: StructureKind) -> bool:
        """Turn a pending request into a built structure."""
        if not self.cancel_request(cell, kind):
            return False
        self.add_structure(cell, kind)
        return True

    # -------------------------------------------------------------------
    #  agents
    # -------------------------------------------------------------------
    def place_agent(self, agent_id: str, cell: Cell) -> None:
        self.agent_cells[agent_id] = cell

    def remove_agent(self, agent_id: str) -> None:
        self.agent_cells.pop(agent_id, None)

    def agent_at(self, cell: Cell) -> str | None:
        for agent_id, pos in self.agent_cells.items():
            if pos == cell:
                return agent_id
        return None

    def other_agent_cells(self, agent_id: str | None) -> set[Cell]:
        return {pos for aid, pos in self.agent_cells.items() if aid != agent_id}
