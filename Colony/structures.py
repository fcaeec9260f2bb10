# structures.py ─ structure kinds and the per-kind rule table
from collections import namedtuple
from enum import Enum, IntEnum


class StructureKind(str, Enum):
    HOME = "home"
    LANE = "lane"
    BUFFER = "buffer"
    TREASURY = "treasury"
    EXPANSION = "expansion"
    RELAY = "relay"
    EXTRACTOR = "extractor"
    PERIMETER = "perimeter"
    WATCHTOWER = "watchtower"


class RequestResult(IntEnum):
    """Outcome of a construction request submitted to a zone."""
    OK = 0
    OCCUPIED = -7
    FULL = -8
    INVALID_TARGET = -10
    QUOTA_EXCEEDED = -14


# blocking:        movers cannot enter a cell holding this structure
# placeable_over:  built kinds that may already sit on the target cell
# strategy:        cell search planners dispatch on (see placement.STRATEGIES);
#                  "fixed", "path" and "border" kinds are laid out by their own pass
StructureSpec = namedtuple("StructureSpec", "kind blocking placeable_over strategy")

_SITE_FRIENDLY = frozenset({StructureKind.LANE, StructureKind.BUFFER})

STRUCTURE_SPECS: dict[StructureKind, StructureSpec] = {
    StructureKind.HOME: StructureSpec(
        StructureKind.HOME, True, frozenset({StructureKind.LANE}), "fixed"),
    StructureKind.LANE: StructureSpec(
        StructureKind.LANE, False,
        frozenset({StructureKind.BUFFER, StructureKind.PERIMETER}), "path"),
    StructureKind.BUFFER: StructureSpec(
        StructureKind.BUFFER, False,
        frozenset({StructureKind.LANE, StructureKind.BUFFER, StructureKind.PERIMETER}), "anchor_adjacent"),
    StructureKind.TREASURY: StructureSpec(
        StructureKind.TREASURY, True, _SITE_FRIENDLY, "near_home"),
    # expansions only go on empty cells so they never cut a lane
    StructureKind.EXPANSION: StructureSpec(
        StructureKind.EXPANSION, True, frozenset(), "ring_layers"),
    StructureKind.RELAY: StructureSpec(
        StructureKind.RELAY, True, _SITE_FRIENDLY, "anchor_adjacent"),
    StructureKind.EXTRACTOR: StructureSpec(
        StructureKind.EXTRACTOR, True, frozenset(), "on_anchor"),
    # a reinforced wall can be raised on top of anything we own
    StructureKind.PERIMETER: StructureSpec(
        StructureKind.PERIMETER, False,
        frozenset(k for k in StructureKind if k is not StructureKind.PERIMETER), "border"),
    StructureKind.WATCHTOWER: StructureSpec(
        StructureKind.WATCHTOWER, True, _SITE_FRIENDLY, "fixed_offsets"),
}

# Structures worth shielding with a perimeter segment
CRITICAL_KINDS = (StructureKind.HOME, StructureKind.TREASURY, StructureKind.WATCHTOWER)


def is_blocking(kind: StructureKind) -> bool:
    return STRUCTURE_SPECS[kind].blocking


def can_share_cell(kind: StructureKind, existing) -> bool:
    """Return True when *kind* may be built on a cell already holding every kind in *existing*."""
    allowed = STRUCTURE_SPECS[kind].placeable_over
    return all(other in allowed for other in existing)
