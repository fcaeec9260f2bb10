# state.py ─ persisted per-zone and per-agent planning state
from __future__ import annotations
import heapq
import itertools
import logging
from dataclasses import dataclass, field

from Colony.config import Defaults
from Colony.utilities.general import cell_key, parse_cell_key, cell_from_memory, cell_to_memory

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


# ════════════════════════════════════════════════════════════════════
#  LAYOUT RECORD
# ════════════════════════════════════════════════════════════════════
@dataclass
class LayoutRecord:
    """Placement decisions of the static layout planner for one zone."""

    version: int = 0
    development_level: int = 0
    treasury_cell: Cell | None = None
    buffer_cells: dict[str, Cell] = field(default_factory=dict)   # anchor_id → cell
    relay_cells: dict[str, Cell] = field(default_factory=dict)    # "control" / "treasury" / anchor_id → cell

    def needs_replan(self, development_level: int, version: int = Defaults.LAYOUT_VERSION) -> bool:
        return self.version < version or development_level > self.development_level

    def mark_planned(self, development_level: int, version: int = Defaults.LAYOUT_VERSION) -> None:
        # both fields only ever move forward
        self.version = max(self.version, version)
        self.development_level = max(self.development_level, development_level)

    def to_memory(self) -> dict:
        return {
            "version": self.version,
            "development_level": self.development_level,
            "treasury_cell": cell_to_memory(self.treasury_cell),
            "buffer_cells": {k: cell_to_memory(v) for k, v in self.buffer_cells.items()},
            "relay_cells": {k: cell_to_memory(v) for k, v in self.relay_cells.items()},
        }

    @classmethod
    def from_memory(cls, data: dict | None) -> "LayoutRecord":
        if not data:
            return cls()
        return cls(
            version=int(data.get("version", 0)),
            development_level=int(data.get("development_level", 0)),
            treasury_cell=cell_from_memory(data.get("treasury_cell")),
            buffer_cells={k: cell_from_memory(v) for k, v in data.get("buffer_cells", {}).items()},
            relay_cells={k: cell_from_memory(v) for k, v in data.get("relay_cells", {}).items()},
        )


# ════════════════════════════════════════════════════════════════════
#  HEATMAP STORE
# ════════════════════════════════════════════════════════════════════
class HeatmapStore:
    """
    Bounded per-zone usage counters.

    Counts live in a plain dict; a lazy min-heap of ``(count, seq, cell)``
    tuples indexes them for eviction. Heap entries whose count no longer
    matches the dict are stale and skipped on pop.
    """

    def __init__(self, cap: int = Defaults.ROADS_MAX_TILES_PER_ZONE):
        if cap <= 0:
            raise ValueError(f"heatmap cap must be positive, got {cap}")
        self.cap = cap
        self.counts: dict[Cell, int] = {}
        self._heap: list[tuple[int, int, Cell]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self.counts)

    def __contains__(self, cell) -> bool:
        return cell in self.counts

    def get(self, cell: Cell, default: int = 0) -> int:
        return self.counts.get(cell, default)

    def items(self):
        return self.counts.items()

    # ─ internal ────────────────────────────────────────────────────
    def _push(self, cell: Cell, count: int) -> None:
        heapq.heappush(self._heap, (count, next(self._seq), cell))
        if len(self._heap) > 4 * len(self.counts) + 64:
            self._rebuild()

    def _rebuild(self) -> None:
        self._heap = [(count, next(self._seq), cell) for cell, count in self.counts.items()]
        heapq.heapify(self._heap)

    def _evict_lowest(self) -> Cell | None:
        while self._heap:
            count, _, cell = heapq.heappop(self._heap)
            if self.counts.get(cell) == count:
                del self.counts[cell]
                return cell
        return None

    # ─ mutation ────────────────────────────────────────────────────
    def record_visit(self, cell: Cell, amount: int = 1) -> int:
        """Add *amount* to *cell*; a new cell entering a full store evicts the lowest entry first."""
        if cell not in self.counts and len(self.counts) >= self.cap:
            evicted = self._evict_lowest()
            logger.debug("heatmap full (%d): evicted %s", self.cap, evicted)
        value = self.counts.get(cell, 0) + amount
        self.counts[cell] = value
        self._push(cell, value)
        return value

    def set(self, cell: Cell, value: int) -> None:
        value = max(0, int(value))
        self.counts[cell] = value
        self._push(cell, value)

    def reset(self, cell: Cell) -> None:
        if cell in self.counts:
            self.set(cell, 0)

    def discard(self, cell: Cell) -> None:
        # any heap entry for the cell goes stale
        self.counts.pop(cell, None)

    def trim(self) -> list[Cell]:
        """Evict lowest-usage entries until the store is back at its cap."""
        evicted = []
        while len(self.counts) > self.cap:
            cell = self._evict_lowest()
            if cell is None:
                break
            evicted.append(cell)
        return evicted

    def decay(self, amount: int) -> None:
        for cell, value in self.counts.items():
            self.counts[cell] = max(0, value - amount)
        self._rebuild()

    # ─ persistence ─────────────────────────────────────────────────
    def to_memory(self) -> dict:
        return {cell_key(cell): count for cell, count in self.counts.items()}

    @classmethod
    def from_memory(cls, data: dict | None, cap: int = Defaults.ROADS_MAX_TILES_PER_ZONE) -> "HeatmapStore":
        store = cls(cap)
        for key, count in (data or {}).items():
            store.counts[parse_cell_key(key)] = max(0, int(count))
        store._rebuild()
        store.trim()
        return store


# ════════════════════════════════════════════════════════════════════
#  PATH CACHE
# ════════════════════════════════════════════════════════════════════
@dataclass
class PathCacheEntry:
    destination: Cell
    radius: int
    route: list[Cell]
    computed_at: int

    def matches(self, destination: Cell, radius: int) -> bool:
        return self.destination == destination and self.radius == radius

    def age(self, tick: int) -> int:
        return tick - self.computed_at

    def is_reusable(self, destination: Cell, radius: int, tick: int,
                    window: int = Defaults.MOVEMENT_REUSE_WINDOW) -> bool:
        return self.matches(destination, radius) and self.age(tick) <= window

    def to_memory(self) -> dict:
        return {
            "destination": cell_to_memory(self.destination),
            "radius": self.radius,
            "route": [cell_to_memory(c) for c in self.route],
            "computed_at": self.computed_at,
        }

    @classmethod
    def from_memory(cls, data: dict) -> "PathCacheEntry":
        return cls(
            destination=cell_from_memory(data["destination"]),
            radius=int(data["radius"]),
            route=[cell_from_memory(c) for c in data.get("route", [])],
            computed_at=int(data["computed_at"]),
        )


@dataclass
class MovementState:
    """Per-agent movement memory: cached route, last seen cell, stall counter."""

    cache: PathCacheEntry | None = None
    last_cell: Cell | None = None
    stall_ticks: int = 0

    def clear_cache(self) -> None:
        self.cache = None

    def to_memory(self) -> dict:
        return {
            "cache": self.cache.to_memory() if self.cache else None,
            "last_cell": cell_to_memory(self.last_cell),
            "stall_ticks": self.stall_ticks,
        }

    @classmethod
    def from_memory(cls, data: dict | None) -> "MovementState":
        if not data:
            return cls()
        cache = data.get("cache")
        return cls(
            cache=PathCacheEntry.from_memory(cache) if cache else None,
            last_cell=cell_from_memory(data.get("last_cell")),
            stall_ticks=int(data.get("stall_ticks", 0)),
        )


def sweep_stale_paths(states: dict, tick: int, max_age: int = Defaults.PATH_CACHE_MAX_AGE) -> int:
    """Drop cached routes older than *max_age* ticks; return how many were dropped."""
    dropped = 0
    for state in states.values():
        if state.cache is not None and state.cache.age(tick) > max_age:
            state.cache = None
            dropped += 1
    if dropped:
        logger.debug("swept %d stale path cache(s) at tick %d", dropped, tick)
    return dropped
