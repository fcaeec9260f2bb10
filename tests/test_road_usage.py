import pytest

from Colony.planners.road_usage import RoadUsagePlanner, track_step
from Colony.state import HeatmapStore
from Colony.structures import StructureKind

CELL = (10, 10)


def visit(store, cell, times):
    for _ in range(times):
        store.record_visit(cell)


class TestThreshold:
    @pytest.mark.parametrize(
        ("population", "expected"),
        [(0, 20), (10, 20), (11, 25), (14, 40)],
    )
    def test_population_scaling(self, population: int, expected: int) -> None:
        assert RoadUsagePlanner().threshold(population) == expected

    def test_interval(self) -> None:
        planner = RoadUsagePlanner()
        assert planner.is_due(5)
        assert planner.is_due(10)
        assert not planner.is_due(7)


def test_track_step_counts_arrivals_only() -> None:
    store = HeatmapStore()
    assert track_step(store, (1, 1), None)
    assert not track_step(store, (1, 1), (1, 1))
    assert track_step(store, (2, 1), (1, 1))
    assert track_step(store, (1, 1), (2, 1))
    assert store.get((1, 1)) == 2
    assert store.get((2, 1)) == 1


class TestPeriodicRun:
    def test_emits_on_first_run_reaching_threshold(self, zone) -> None:
        planner = RoadUsagePlanner(min_usage=24)
        store = HeatmapStore()

        for run in range(1, 6):
            visit(store, CELL, 5)
            assert planner.run(zone, store) == []
            assert store.get(CELL) == 4 * run

        visit(store, CELL, 5)
        assert planner.run(zone, store) == [CELL]
        assert zone.has_request(CELL, StructureKind.LANE)
        assert store.get(CELL) == 0

    def test_off_interval_tick_does_nothing(self, zone) -> None:
        store = HeatmapStore()
        visit(store, CELL, 30)
        assert RoadUsagePlanner().run(zone, store, tick=3) == []
        assert store.get(CELL) == 30

    def test_wall_cell_is_forgotten(self, make_zone) -> None:
        zone = make_zone(walls=[CELL])
        store = HeatmapStore()
        store.set(CELL, 50)
        assert RoadUsagePlanner().run(zone, store) == []
        assert CELL not in store

    def test_built_lane_is_forgotten(self, zone) -> None:
        zone.add_structure(CELL, StructureKind.LANE)
        store = HeatmapStore()
        store.set(CELL, 50)
        assert RoadUsagePlanner().run(zone, store) == []
        assert CELL not in store

    def test_pending_lane_is_retained(self, zone) -> None:
        zone.request_construction(CELL, StructureKind.LANE)
        store = HeatmapStore()
        store.set(CELL, 50)
        assert RoadUsagePlanner().run(zone, store) == []
        assert store.get(CELL) == 49
        assert zone.count_requests(StructureKind.LANE) == 1

    def test_anchor_cells_are_never_requested(self, zone) -> None:
        store = HeatmapStore()
        store.set((40, 40), 50)
        store.set((25, 25), 50)
        assert RoadUsagePlanner().run(zone, store) == []
        assert zone.pending_total() == 0

    def test_below_threshold_is_retained(self, zone) -> None:
        store = HeatmapStore()
        store.set(CELL, 20)
        assert RoadUsagePlanner().run(zone, store) == []
        assert store.get(CELL) == 19

    def test_per_run_cap_rolls_over(self, zone) -> None:
        store = HeatmapStore()
        cells = [(5, 5), (6, 5), (7, 5), (8, 5), (9, 5)]
        for value, cell in zip([100, 90, 80, 70, 60], cells):
            store.set(cell, value)
        planner = RoadUsagePlanner(max_requests_per_run=3)

        assert planner.run(zone, store) == cells[:3]
        assert planner.run(zone, store) == cells[3:]

    def test_population_raises_bar(self, zone) -> None:
        zone.population = 14
        store = HeatmapStore()
        store.set(CELL, 31)
        assert RoadUsagePlanner().run(zone, store) == []
        store.set(CELL, 41)
        assert RoadUsagePlanner().run(zone, store) == [CELL]

    def test_store_trimmed_to_cap(self, zone) -> None:
        store = HeatmapStore(cap=3)
        for i in range(6):
            store.set((i, 1), i)
        RoadUsagePlanner().run(zone, store)
        assert len(store) <= 3
        assert all(v >= 0 for _, v in store.items())
