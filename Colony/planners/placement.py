# placement.py ─ legality checks and cell-search strategies shared by planners
import logging

from Colony.config import Defaults
from Colony.structures import STRUCTURE_SPECS, StructureKind, RequestResult, can_share_cell
from Colony.utilities.general import chebyshev_range, ring_cells

logger = logging.getLogger(__name__)


def request(zone, cell, kind: StructureKind) -> RequestResult:
    """Send one construction request; a rejection is logged and handed back to the caller."""
    result = zone.request_construction(cell, kind)
    if result is not RequestResult.OK:
        logger.debug("zone %s: %s at %s rejected (%s)", zone.name, kind.value, cell, result.name)
    return result


def submit(zone, cell, kind: StructureKind) -> bool:
    return request(zone, cell, kind) is RequestResult.OK


def can_place(zone, cell, kind: StructureKind) -> bool:
    """
    Planner-side pre-check mirroring ``Zone.request_construction`` minus the
    quota and pending-cap rules. False means IllegalPlacement: skip silently.
    """
    x, y = cell
    if not zone.in_bounds(x, y):
        return False
    if kind is StructureKind.EXTRACTOR:
        if cell != zone.bonus_cell:
            return False
    elif zone.is_anchor_obstacle(cell) or zone.is_wall(cell):
        return False

    if zone.requests_at(cell):
        return False
    built = zone.structures_at(cell)
    if kind in built:
        return False
    return can_share_cell(kind, built)


def find_existing(zone, center, kind: StructureKind, radius: int = 1):
    """First cell within *radius* of *center* that already holds or awaits *kind*."""
    for r in range(1, radius + 1):
        for cell in ring_cells(center, r):
            if zone.has_structure(cell, kind) or zone.has_request(cell, kind):
                return cell
    return None


def radiate(zone, center, kind: StructureKind, home, max_radius: int):
    """
    Walk rings 1..max_radius around *center*; in the first ring that holds a
    legal cell, return the one closest to *home* (first seen wins ties).
    """
    for r in range(1, max_radius + 1):
        best = None
        best_dist = None
        for cell in ring_cells(center, r):
            if not can_place(zone, cell, kind):
                continue
            d = chebyshev_range(cell, home)
            if best is None or d < best_dist:
                best = cell
                best_dist = d
        if best is not None:
            return best
    return None


def near_home(zone, home, kind: StructureKind, offsets, ring_radii):
    """Fixed neighbour offsets first, then the listed rings in order."""
    hx, hy = home
    for dx, dy in offsets:
        cell = (hx + dx, hy + dy)
        if can_place(zone, cell, kind):
            return cell
    for r in ring_radii:
        for cell in ring_cells(home, r):
            if can_place(zone, cell, kind):
                return cell
    return None


def ring_layers(zone, center, kind: StructureKind, min_radius: int, max_radius: int):
    """Yield legal cells ring by ring, innermost first."""
    for r in range(min_radius, max_radius + 1):
        for cell in ring_cells(center, r):
            if can_place(zone, cell, kind):
                yield cell


def fixed_offsets(zone, center, kind: StructureKind, offsets):
    """Yield legal cells at *offsets* from *center*, in the given priority order."""
    cx, cy = center
    for dx, dy in offsets:
        cell = (cx + dx, cy + dy)
        if can_place(zone, cell, kind):
            yield cell


# -------------------------------------------------------------------
#  per-kind dispatch through STRUCTURE_SPECS[kind].strategy
# -------------------------------------------------------------------
def _single(cell):
    return [] if cell is None else [cell]


def _anchor_adjacent(zone, kind, center, home, radius=Defaults.ANCHOR_SEARCH_RADIUS):
    return _single(radiate(zone, center, kind, home, radius))


def _near_home(zone, kind, center, home,
               offsets=Defaults.TREASURY_OFFSETS, ring_radii=Defaults.TREASURY_RING_RADII):
    return _single(near_home(zone, home, kind, offsets, ring_radii))


def _ring_layers(zone, kind, center, home,
                 min_radius=Defaults.EXPANSION_MIN_RADIUS, max_radius=Defaults.EXPANSION_MAX_RADIUS):
    return ring_layers(zone, home, kind, min_radius, max_radius)


def _on_anchor(zone, kind, center, home):
    return fixed_offsets(zone, center, kind, [(0, 0)])


def _fixed_offsets(zone, kind, center, home, offsets=Defaults.WATCHTOWER_OFFSETS):
    return fixed_offsets(zone, home, kind, offsets)


STRATEGIES = {
    "anchor_adjacent": _anchor_adjacent,
    "near_home": _near_home,
    "ring_layers": _ring_layers,
    "on_anchor": _on_anchor,
    "fixed_offsets": _fixed_offsets,
}


def candidates(zone, kind: StructureKind, center=None, home=None, **options):
    """
    Legal cells for *kind*, best first, found by the search its rule table
    names. *center* is the anchor or base the search is tied to; *home*
    defaults to the zone's home anchor. Keyword *options* override the
    search's defaults (radius, offsets, ring bounds).

    Kinds laid out by a planner pass of their own (lanes, perimeter, home)
    have no cell search and raise ValueError.
    """
    strategy = STRUCTURE_SPECS[kind].strategy
    search = STRATEGIES.get(strategy)
    if search is None:
        raise ValueError(f"no cell search for {kind.value} (strategy {strategy!r})")
    if home is None:
        home = zone.home_cell
    return search(zone, kind, center, home, **options)


def first_candidate(zone, kind: StructureKind, center=None, home=None, **options):
    return next(iter(candidates(zone, kind, center, home, **options)), None)
