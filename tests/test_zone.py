import numpy as np
import pytest

from Colony.config import Defaults
from Colony.structures import RequestResult, StructureKind
from Colony.zone import Anchor, AnchorRole, Zone


class TestConstruction:
    def test_rejects_flat_terrain(self) -> None:
        with pytest.raises(ValueError):
            Zone("bad", np.zeros(10, dtype=np.uint8))

    def test_rejects_second_home(self) -> None:
        anchors = [Anchor("a", AnchorRole.HOME, (1, 1)), Anchor("b", AnchorRole.HOME, (2, 2))]
        with pytest.raises(ValueError):
            Zone("bad", np.zeros((5, 5), dtype=np.uint8), anchors)

    def test_rejects_anchor_outside(self) -> None:
        with pytest.raises(ValueError):
            Zone("bad", np.zeros((5, 5), dtype=np.uint8), [Anchor("a", AnchorRole.RESOURCE, (9, 9))])

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(ValueError):
            Zone("bad", np.zeros((5, 5), dtype=np.uint8), [Anchor("a", "portal", (1, 1))])

    def test_home_carries_structure(self, zone) -> None:
        assert zone.has_structure((25, 25), StructureKind.HOME)
        assert zone.count_structures(StructureKind.HOME) == 1
        assert not zone.is_passable((25, 25))

    def test_anchor_lookups(self, make_zone) -> None:
        zone = make_zone(bonus=("mineral", (10, 40)))
        assert zone.home_cell == (25, 25)
        assert zone.control_cell == (40, 40)
        assert zone.bonus_cell == (10, 40)
        assert [a.anchor_id for a in zone.resource_anchors()] == ["src1"]
        assert zone.treasury_cell is None
        assert zone.is_anchor_obstacle((25, 10))
        assert not zone.is_anchor_obstacle((25, 25))


class TestRequests:
    def test_accepts_and_rejects_duplicates(self, zone) -> None:
        assert zone.request_construction((5, 5), StructureKind.LANE) is RequestResult.OK
        assert zone.request_construction((5, 5), StructureKind.LANE) is RequestResult.OCCUPIED
        assert zone.request_construction((5, 5), StructureKind.BUFFER) is RequestResult.OCCUPIED
        assert zone.count_requests(StructureKind.LANE) == 1

    def test_invalid_targets(self, make_zone) -> None:
        zone = make_zone(walls=[(3, 3)])
        assert zone.request_construction((3, 3), StructureKind.LANE) is RequestResult.INVALID_TARGET
        assert zone.request_construction((50, 3), StructureKind.LANE) is RequestResult.INVALID_TARGET
        assert zone.request_construction((25, 10), StructureKind.LANE) is RequestResult.INVALID_TARGET
        assert zone.request_construction((40, 40), StructureKind.BUFFER) is RequestResult.INVALID_TARGET

    def test_extractor_only_on_bonus_anchor(self, make_zone) -> None:
        zone = make_zone(bonus=("mineral", (10, 40)), level=6)
        assert zone.request_construction((11, 40), StructureKind.EXTRACTOR) is RequestResult.INVALID_TARGET
        assert zone.request_construction((10, 40), StructureKind.LANE) is RequestResult.INVALID_TARGET
        assert zone.request_construction((10, 40), StructureKind.EXTRACTOR) is RequestResult.OK

    def test_quota_by_level(self, make_zone) -> None:
        zone = make_zone(level=1)
        assert zone.request_construction((5, 5), StructureKind.EXPANSION) is RequestResult.QUOTA_EXCEEDED

        zone.development_level = 2
        for x in range(5):
            assert zone.request_construction((x, 5), StructureKind.EXPANSION) is RequestResult.OK
        assert zone.request_construction((6, 5), StructureKind.EXPANSION) is RequestResult.QUOTA_EXCEEDED
        assert zone.remaining_quota(StructureKind.EXPANSION) == 0

    def test_pending_cap(self, make_zone) -> None:
        zone = make_zone(max_pending_requests=2)
        assert zone.request_construction((1, 1), StructureKind.LANE) is RequestResult.OK
        assert zone.request_construction((2, 1), StructureKind.LANE) is RequestResult.OK
        assert zone.request_construction((3, 1), StructureKind.LANE) is RequestResult.FULL

    def test_compatibility_with_built_structures(self, make_zone) -> None:
        zone = make_zone(level=3)
        zone.add_structure((5, 5), StructureKind.LANE)
        assert zone.request_construction((5, 5), StructureKind.EXPANSION) is RequestResult.OCCUPIED
        assert zone.request_construction((5, 5), StructureKind.BUFFER) is RequestResult.OK
        assert zone.request_construction((25, 25), StructureKind.PERIMETER) is RequestResult.OK
        assert zone.request_construction((25, 25), StructureKind.LANE) is RequestResult.OCCUPIED


class TestCompletion:
    def test_complete_turns_request_into_structure(self, zone) -> None:
        zone.request_construction((5, 5), StructureKind.LANE)
        assert zone.complete_construction((5, 5), StructureKind.LANE)
        assert zone.has_structure((5, 5), StructureKind.LANE)
        assert not zone.has_request((5, 5), StructureKind.LANE)
        assert zone.count_requests(StructureKind.LANE) == 0
        assert zone.count_structures(StructureKind.LANE) == 1

    def test_complete_without_request(self, zone) -> None:
        assert not zone.complete_construction((5, 5), StructureKind.LANE)

    def test_remove_structure(self, zone) -> None:
        zone.add_structure((5, 5), StructureKind.LANE)
        zone.add_structure((5, 5), StructureKind.BUFFER)
        zone.remove_structure((5, 5), StructureKind.LANE)
        assert zone.structures_at((5, 5)) == {StructureKind.BUFFER}
        assert zone.count_structures(StructureKind.LANE) == 0

        zone.remove_structure((5, 5), StructureKind.BUFFER)
        assert (5, 5) not in zone.structures
        zone.remove_structure((5, 5), StructureKind.BUFFER)
        assert zone.count_structures(StructureKind.BUFFER) == 0

    def test_terrain_at(self, make_zone) -> None:
        zone = make_zone(walls=[(1, 1)], slow=[(2, 1)])
        assert zone.terrain_at((1, 1)) == Defaults.TERRAIN_BLOCKED
        assert zone.terrain_at((2, 1)) == Defaults.TERRAIN_SLOW
        assert zone.terrain_at((3, 1)) == Defaults.TERRAIN_OPEN

    def test_passability(self, make_zone) -> None:
        zone = make_zone(level=2, walls=[(1, 1)])
        zone.add_structure((2, 2), StructureKind.BUFFER)
        zone.add_structure((3, 3), StructureKind.EXPANSION)
        assert not zone.is_passable((1, 1))
        assert zone.is_passable((2, 2))
        assert not zone.is_passable((3, 3))
        assert not zone.is_passable((40, 40))


def test_agent_cells(zone) -> None:
    zone.place_agent("a", (1, 1))
    zone.place_agent("b", (2, 2))
    assert zone.agent_at((1, 1)) == "a"
    assert zone.other_agent_cells("a") == {(2, 2)}
    zone.remove_agent("a")
    assert zone.agent_at((1, 1)) is None
