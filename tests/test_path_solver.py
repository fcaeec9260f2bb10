import numpy as np
import pytest

from Colony.config import Defaults
from Colony.utilities.general import chebyshev_range
from Colony.utilities.pathfinding.path_solver import PathResult, find_path

BLOCKED = Defaults.COST_BLOCKED


def open_costs(width=10, height=10, cost=2):
    return np.full((height, width), cost, dtype=np.uint8)


def assert_contiguous(source, path):
    prev = source
    for cell in path:
        assert chebyshev_range(prev, cell) == 1
        prev = cell


class TestReachable:
    def test_straight_run(self, solver_method) -> None:
        result = find_path(open_costs(), (0, 0), (5, 0), radius=0, method=solver_method)
        assert isinstance(result, PathResult)
        assert result.found
        assert len(result.path) == 5
        assert result.path[-1] == (5, 0)
        assert result.cost == 10
        assert_contiguous((0, 0), result.path)

    def test_radius_stops_early(self, solver_method) -> None:
        result = find_path(open_costs(), (0, 0), (5, 0), radius=1, method=solver_method)
        assert result.found
        assert len(result.path) == 4
        assert chebyshev_range(result.path[-1], (5, 0)) == 1

    def test_source_inside_radius(self, solver_method) -> None:
        result = find_path(open_costs(), (3, 3), (4, 4), radius=1, method=solver_method)
        assert result == PathResult([], True, 0, 0)

    def test_diagonal_moves(self, solver_method) -> None:
        result = find_path(open_costs(), (0, 0), (6, 6), radius=0, method=solver_method)
        assert result.path == [(i, i) for i in range(1, 7)]

    def test_impassable_target_reached_by_range(self, solver_method) -> None:
        costs = open_costs()
        costs[5, 5] = BLOCKED
        result = find_path(costs, (0, 5), (5, 5), radius=1, method=solver_method)
        assert result.found
        assert chebyshev_range(result.path[-1], (5, 5)) == 1
        assert (5, 5) not in result.path

    def test_detours_around_wall(self, solver_method) -> None:
        costs = open_costs()
        costs[0:9, 5] = BLOCKED       # gap left at (5, 9)
        result = find_path(costs, (0, 0), (9, 0), radius=0, method=solver_method)
        assert result.found
        assert (5, 9) in result.path
        assert_contiguous((0, 0), result.path)

    def test_prefers_cheap_lanes(self, solver_method) -> None:
        costs = open_costs(width=10, height=3)
        costs[0, 1:9] = 1
        result = find_path(costs, (0, 1), (9, 1), radius=0, method=solver_method)
        assert result.cost == 10
        assert all((x, 0) in result.path for x in range(1, 9))


class TestNoPathFound:
    def test_sealed_target(self, solver_method) -> None:
        costs = open_costs()
        costs[:, 5] = BLOCKED
        result = find_path(costs, (0, 0), (9, 9), radius=0, method=solver_method)
        assert not result.found
        assert result.path == []

    def test_operation_budget(self, solver_method) -> None:
        result = find_path(open_costs(50, 50), (0, 0), (49, 49), radius=0,
                           max_ops=5, method=solver_method)
        assert not result.found
        assert result.ops == 6

    def test_source_outside_grid(self, solver_method) -> None:
        result = find_path(open_costs(), (-1, 0), (5, 5), method=solver_method)
        assert not result.found


def test_solvers_agree_on_rough_terrain() -> None:
    rng = np.random.RandomState(7)
    costs = rng.choice(np.array([2, 2, 2, 5, 1, BLOCKED], dtype=np.uint8), size=(30, 30))
    costs[0, 0] = 2
    costs[29, 29] = 2

    py = find_path(costs, (0, 0), (29, 29), radius=0, max_ops=5000, method="PYTHON")
    nb = find_path(costs, (0, 0), (29, 29), radius=0, max_ops=5000, method="NUMBA")
    assert py == nb


def test_unknown_method() -> None:
    with pytest.raises(ValueError):
        find_path(open_costs(), (0, 0), (1, 1), method="CUDA")
