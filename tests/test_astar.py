# tests/test_astar.py
"""
A* search over NavGrid.

Optimality checks compare against a plain Dijkstra over the same
neighbor policy and edge costs.
"""

from __future__ import annotations

import heapq
import math
import random
from typing import Dict, List, Tuple

import pytest

from gridnav import (
    DIAGONAL_COST,
    CellFlags,
    GridOverlay,
    InvalidGoalError,
    InvalidStartError,
    NavGrid,
    NoGridError,
    NoPathError,
    Path,
    Pathfinder,
    PathfindingError,
    PathfindingErrorKind,
    Scenario,
    SmoothingMode,
    chebyshev,
    euclidean,
    manhattan,
    octile,
    smooth_path_simple,
)

Coord = Tuple[int, int]


def dijkstra_cost(grid: NavGrid, start: Coord, goal: Coord) -> float:
    dist: Dict[Coord, float] = {start: 0.0}
    heap: List[Tuple[float, Coord]] = [(0.0, start)]
    while heap:
        d, (x, y) = heapq.heappop(heap)
        if (x, y) == goal:
            return d
        if d > dist[(x, y)]:
            continue
        for c in grid.get_neighbors(x, y):
            step = c.cost * (DIAGONAL_COST if c.x != x and c.y != y else 1.0)
            nd = d + step
            if nd < dist.get((c.x, c.y), math.inf):
                dist[(c.x, c.y)] = nd
                heapq.heappush(heap, (nd, (c.x, c.y)))
    return math.inf


def step_cost_sum(grid: NavGrid, path: Path) -> float:
    total = 0.0
    pts = path.points
    for (x1, y1), (x2, y2) in zip(pts, pts[1:]):
        diag = x1 != x2 and y1 != y2
        total += grid.get_cell_cost(x2, y2) * (DIAGONAL_COST if diag else 1.0)
    return total


# ---------------------------------------------------------------------------
# preconditions
# ---------------------------------------------------------------------------


def test_no_grid() -> None:
    pf = Pathfinder(None)

    with pytest.raises(NoGridError) as exc:
        pf.find_path(0, 0, 5, 5)
    assert exc.value.kind is PathfindingErrorKind.NO_GRID


def test_out_of_bounds_endpoints(pathfinder: Pathfinder) -> None:
    with pytest.raises(InvalidStartError) as exc:
        pathfinder.find_path(-1, 0, 5, 5)
    assert exc.value.reason == "out_of_bounds"

    with pytest.raises(InvalidGoalError) as exc:
        pathfinder.find_path(0, 0, 100, 100)
    assert exc.value.reason == "out_of_bounds"


def test_blocked_endpoints(open_grid: NavGrid, pathfinder: Pathfinder) -> None:
    open_grid.set_blocked(0, 0, True)
    with pytest.raises(InvalidStartError) as exc:
        pathfinder.find_path(0, 0, 5, 5)
    assert exc.value.kind is PathfindingErrorKind.INVALID_START
    assert exc.value.reason == "not_walkable"

    open_grid.set_blocked(0, 0, False)
    open_grid.set_blocked(5, 5, True)
    with pytest.raises(InvalidGoalError) as exc:
        pathfinder.find_path(0, 0, 5, 5)
    assert exc.value.kind is PathfindingErrorKind.INVALID_GOAL


def test_start_checked_before_goal(pathfinder: Pathfinder) -> None:
    with pytest.raises(InvalidStartError):
        pathfinder.find_path(-1, -1, -5, -5)


def test_same_start_and_goal(pathfinder: Pathfinder) -> None:
    path = pathfinder.find_path(5, 5, 5, 5)

    assert path.points == ((5, 5),)
    assert path.total_cost == 0.0
    assert pathfinder.last_nodes_explored == 0


# ---------------------------------------------------------------------------
# search results
# ---------------------------------------------------------------------------


def test_simple_path_endpoints(pathfinder: Pathfinder) -> None:
    path = pathfinder.find_path(0, 0, 5, 5)

    assert not path.is_empty()
    assert path.get_start() == (0, 0)
    assert path.get_end() == (5, 5)
    assert pathfinder.last_nodes_explored > 0


def test_wall_without_gap_has_no_path() -> None:
    grid = NavGrid(5, 5)
    for y in range(5):
        grid.set_blocked(2, y, True)
    pf = Pathfinder(grid)

    with pytest.raises(NoPathError) as exc:
        pf.find_path(0, 2, 4, 2)
    assert exc.value.start == (0, 2)
    assert exc.value.goal == (4, 2)
    assert exc.value.kind is PathfindingErrorKind.NO_PATH


def test_path_goes_around_obstacle() -> None:
    grid = NavGrid(10, 10)
    for y in range(8):
        grid.set_blocked(5, y, True)
    pf = Pathfinder(grid)

    path = pf.find_path(0, 5, 9, 5)

    assert path.get_start() == (0, 5)
    assert path.get_end() == (9, 5)
    assert all(grid.is_walkable(x, y) for x, y in path)


def test_wall_with_gap(wall_scenario: Scenario) -> None:
    pf = Pathfinder(wall_scenario.grid, heuristic=octile)
    path = pf.find_path(*wall_scenario.start, *wall_scenario.goal)

    assert (3, 4) in path.points
    assert path.total_cost == pytest.approx(dijkstra_cost(wall_scenario.grid, (0, 0), (6, 0)))


def test_cardinal_only_moves() -> None:
    grid = NavGrid(5, 5, allow_diagonal=False)
    pf = Pathfinder(grid)

    path = pf.find_path(0, 0, 2, 2)

    for (x1, y1), (x2, y2) in zip(path.points, path.points[1:]):
        assert abs(x2 - x1) + abs(y2 - y1) == 1
    assert path.total_cost == pytest.approx(4.0)


def test_diagonal_example_with_octile() -> None:
    grid = NavGrid(5, 5, allow_diagonal=True, cut_corners=True)
    pf = Pathfinder(grid, heuristic=octile)

    path = pf.find_path(0, 0, 4, 4)

    assert len(path) == 5
    assert path.total_cost == pytest.approx(4 * math.sqrt(2))
    assert path.total_cost == pytest.approx(5.657, abs=1e-3)


def test_blocked_center_forces_cardinal_detour() -> None:
    grid = NavGrid(5, 5, allow_diagonal=True, cut_corners=False)
    grid.set_blocked(2, 2, True)
    pf = Pathfinder(grid, heuristic=octile)

    path = pf.find_path(0, 0, 4, 4)

    assert path.total_cost > 4 * math.sqrt(2)
    assert path.total_cost == pytest.approx(dijkstra_cost(grid, (0, 0), (4, 4)))
    steps = list(zip(path.points, path.points[1:]))
    assert any(x1 == x2 or y1 == y2 for (x1, y1), (x2, y2) in steps)


@pytest.mark.parametrize("cut_corners", [False, True])
def test_single_diagonal_gap(cut_corners: bool) -> None:
    grid = NavGrid(2, 2, cut_corners=cut_corners)
    grid.set_blocked(1, 0, True)
    grid.set_blocked(0, 1, True)
    pf = Pathfinder(grid)

    if cut_corners:
        path = pf.find_path(0, 0, 1, 1)
        assert path.points == ((0, 0), (1, 1))
        assert path.total_cost == pytest.approx(DIAGONAL_COST)
    else:
        with pytest.raises(NoPathError):
            pf.find_path(0, 0, 1, 1)


def test_total_cost_is_sum_of_step_costs() -> None:
    rng = random.Random(7)
    grid = NavGrid(12, 9)
    for cell in grid.iter_cells():
        cell.cost = rng.choice([1.0, 1.0, 2.0, 3.5])
    pf = Pathfinder(grid, heuristic=octile)

    path = pf.find_path(0, 0, 11, 8)

    assert path.total_cost == pytest.approx(step_cost_sum(grid, path))


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("cut_corners", [False, True])
def test_octile_is_optimal_against_dijkstra(seed: int, cut_corners: bool) -> None:
    rng = random.Random(seed)
    grid = NavGrid(9, 9, allow_diagonal=True, cut_corners=cut_corners)
    for cell in grid.iter_cells():
        if rng.random() < 0.25:
            cell.flags = cell.flags | CellFlags.BLOCKED
        else:
            cell.cost = rng.choice([1.0, 1.0, 1.5, 2.0])
    grid.set_blocked(0, 0, False)
    grid.set_blocked(8, 8, False)
    pf = Pathfinder(grid, heuristic=octile)

    expected = dijkstra_cost(grid, (0, 0), (8, 8))
    if math.isinf(expected):
        assert not pf.is_reachable(0, 0, 8, 8)
    else:
        path = pf.find_path(0, 0, 8, 8)
        assert path.total_cost == pytest.approx(expected)


@pytest.mark.parametrize("heuristic", [manhattan, euclidean, chebyshev, octile])
def test_every_heuristic_reaches_goal(heuristic, wall_scenario: Scenario) -> None:
    pf = Pathfinder(wall_scenario.grid, heuristic=heuristic)
    path = pf.find_path(0, 0, 6, 0)

    assert path.get_start() == (0, 0)
    assert path.get_end() == (6, 0)


def test_repeated_calls_are_deterministic(wall_scenario: Scenario) -> None:
    pf = Pathfinder(wall_scenario.grid)

    first = pf.find_path(0, 0, 6, 0)
    explored = pf.last_nodes_explored
    second = pf.find_path(0, 0, 6, 0)

    assert first == second
    assert pf.last_nodes_explored == explored


def _zero(x1: int, y1: int, x2: int, y2: int) -> float:
    return 0.0


def test_equal_f_expands_in_insertion_order() -> None:
    pf = Pathfinder(NavGrid(3, 3, allow_diagonal=False), heuristic=_zero)

    pf.find_path(1, 1, 0, 0)

    # neighbors are pushed N, E, S, W; ties pop first-in first-out
    assert pf.last_expanded == ((1, 1), (1, 0), (2, 1), (1, 2), (0, 1), (2, 0), (0, 0))


def test_relaxed_node_queues_behind_earlier_ties() -> None:
    #   S 0 .
    #   . . G     (1, 0) is free to enter
    grid = NavGrid(3, 2)
    grid.set_cell_cost(1, 0, 0.0)
    pf = Pathfinder(grid, heuristic=_zero)

    path = pf.find_path(0, 0, 2, 1)

    # (1, 1) is first reached diagonally at sqrt(2), then improved to 1 via
    # (1, 0) after (0, 1) and (2, 0) were already queued at 1
    assert pf.last_expanded == ((0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (2, 1))
    assert path.points == ((0, 0), (1, 0), (2, 1))
    assert path.total_cost == pytest.approx(DIAGONAL_COST)


def test_heuristic_none_restores_manhattan() -> None:
    pf = Pathfinder(NavGrid(3, 3), heuristic=octile)
    assert pf.heuristic is octile

    pf.heuristic = None
    assert pf.heuristic is manhattan


def test_custom_heuristic_is_called() -> None:
    calls: List[Tuple[int, int, int, int]] = []

    def zero(x1: int, y1: int, x2: int, y2: int) -> float:
        calls.append((x1, y1, x2, y2))
        return 0.0

    pf = Pathfinder(NavGrid(4, 4), heuristic=zero)
    path = pf.find_path(0, 0, 3, 3)

    assert calls
    assert all(c[2:] == (3, 3) for c in calls)
    assert path.total_cost == pytest.approx(3 * DIAGONAL_COST)


# ---------------------------------------------------------------------------
# limits and diagnostics
# ---------------------------------------------------------------------------


def test_max_iterations_reports_no_path(pathfinder: Pathfinder) -> None:
    pathfinder.max_iterations = 1

    with pytest.raises(NoPathError):
        pathfinder.find_path(0, 0, 9, 9)
    assert pathfinder.last_nodes_explored == 1

    pathfinder.max_iterations = 0
    assert pathfinder.find_path(0, 0, 9, 9).get_end() == (9, 9)


def test_negative_max_iterations_rejected(pathfinder: Pathfinder) -> None:
    with pytest.raises(ValueError):
        pathfinder.max_iterations = -1


def test_nodes_explored_reset_on_early_failure(pathfinder: Pathfinder) -> None:
    pathfinder.find_path(0, 0, 5, 5)
    assert pathfinder.last_nodes_explored > 0
    assert pathfinder.last_expanded

    with pytest.raises(InvalidStartError):
        pathfinder.find_path(-1, 0, 5, 5)
    assert pathfinder.last_nodes_explored == 0
    assert pathfinder.last_expanded == ()


def test_last_expanded_starts_at_start(pathfinder: Pathfinder) -> None:
    pathfinder.find_path(0, 0, 4, 0)

    assert pathfinder.last_expanded[0] == (0, 0)
    assert pathfinder.last_expanded[-1] == (4, 0)
    assert len(pathfinder.last_expanded) == pathfinder.last_nodes_explored


def test_octile_explores_no_more_than_manhattan_on_open_grid() -> None:
    grid = NavGrid(20, 20)
    pf = Pathfinder(grid, heuristic=octile)
    pf.find_path(0, 0, 19, 19)
    octile_nodes = pf.last_nodes_explored

    pf.heuristic = euclidean
    pf.find_path(0, 0, 19, 19)
    assert octile_nodes <= pf.last_nodes_explored


def test_is_reachable_matches_find_path() -> None:
    grid = NavGrid(10, 10)
    pf = Pathfinder(grid)

    assert pf.is_reachable(0, 0, 9, 9)
    assert not pf.is_reachable(-1, 0, 9, 9)

    for y in range(10):
        grid.set_blocked(5, y, True)
    assert not pf.is_reachable(0, 0, 9, 9)
    with pytest.raises(PathfindingError):
        pf.find_path(0, 0, 9, 9)


def test_grid_can_be_swapped() -> None:
    pf = Pathfinder()
    assert not pf.is_reachable(0, 0, 1, 1)

    pf.grid = NavGrid(2, 2)
    assert pf.is_reachable(0, 0, 1, 1)


def test_overlay_costs_steer_the_search() -> None:
    grid = NavGrid(5, 3, allow_diagonal=False)

    def swamp(base: NavGrid, x: int, y: int) -> float:
        return 10.0 if y == 1 and 1 <= x <= 3 else base.get_cell_cost(x, y)

    pf = Pathfinder(GridOverlay(grid, cost_fn=swamp))
    path = pf.find_path(0, 1, 4, 1)

    assert path.total_cost == pytest.approx(6.0)
    assert not any(y == 1 and 1 <= x <= 3 for x, y in path)


def test_overlay_walkability_per_agent() -> None:
    grid = NavGrid(3, 3, allow_diagonal=False)
    forbidden = {(1, 0), (1, 1)}
    pf = Pathfinder(GridOverlay(grid, walkable_fn=lambda base, x, y: (x, y) not in forbidden))

    path = pf.find_path(0, 0, 2, 0)

    assert not forbidden & set(path.points)
    assert Pathfinder(grid).find_path(0, 0, 2, 0).total_cost == pytest.approx(2.0)


# ---------------------------------------------------------------------------
# smoothing
# ---------------------------------------------------------------------------


def test_simple_smoothing_collapses_straight_line() -> None:
    grid = NavGrid(5, 1)
    pf = Pathfinder(grid, smoothing=SmoothingMode.SIMPLE)

    path = pf.find_path(0, 0, 4, 0)

    assert path.points == ((0, 0), (4, 0))
    assert path.total_cost == pytest.approx(4.0)


def test_simple_smoothing_collapses_diagonal_run() -> None:
    grid = NavGrid(5, 5, cut_corners=True)
    pf = Pathfinder(grid, heuristic=octile, smoothing="simple")

    path = pf.find_path(0, 0, 4, 4)

    assert path.points == ((0, 0), (4, 4))
    assert path.total_cost == pytest.approx(4 * math.sqrt(2))


def test_smoothing_keeps_turning_points() -> None:
    path = Path([(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)], total_cost=4.0)
    smooth_path_simple(path)

    assert path.points == ((0, 0), (2, 0), (2, 2))
    assert path.total_cost == 4.0


def test_smoothing_no_repeated_direction_is_noop() -> None:
    pts = [(0, 0), (1, 0), (1, 1), (2, 1), (2, 2)]
    path = Path(pts, total_cost=4.0)
    smooth_path_simple(path)

    assert list(path) == pts


def test_smoothing_none_passes_raw_path(pathfinder: Pathfinder) -> None:
    pathfinder.smoothing = SmoothingMode.NONE
    pathfinder.grid.allow_diagonal = False

    path = pathfinder.find_path(0, 0, 4, 0)
    assert len(path) == 5
