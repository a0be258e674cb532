# tests/planning/test_a_star_planning.py
import sys
import os
import heapq

import numpy as np
import pytest

# --- 路径设置 (确保能导入 global_planner) ---
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from global_planner.types import Vector3
from global_planner.errors import NoPathFound, UnreachableEndpoint
from global_planner.map.grid_map import GridMap
from global_planner.collision import SegmentChecker
from global_planner.planning.planners.a_star import AStarPlanner, OpenSet
from global_planner.planning.heuristics import ZeroHeuristic
from global_planner.planning.costs import DistanceCost
from global_planner.planning.smoother import PathSimplifier, path_length


def make_wall_with_gap_map() -> GridMap:
    """5x5, 0.5m 单元，第 2 列是墙，只在第 2 行留一个缺口"""
    data = np.zeros((5, 5), dtype=np.int8)
    data[:, 2] = 1
    data[2, 2] = 0
    return GridMap(5, 5, resolution=0.5, data=data)


def dijkstra_cost(grid_map: GridMap, start: Vector3, goal: Vector3):
    """独立实现的 Dijkstra，作为最优代价参照"""
    cost_fn = DistanceCost()
    s = grid_map.cell_at(start)
    g = grid_map.cell_at(goal)
    dist = {s.index: 0.0}
    heap = [(0.0, s.index)]
    done = set()
    while heap:
        d, idx = heapq.heappop(heap)
        if idx in done:
            continue
        done.add(idx)
        if idx == g.index:
            return d
        cell = grid_map.cell_at_index(*idx)
        for n in grid_map.neighbours_of(cell):
            if not n.walkable:
                continue
            nd = d + cost_fn.calculate(cell.world_position, n.world_position)
            if nd < dist.get(n.index, float('inf')):
                dist[n.index] = nd
                heapq.heappush(heap, (nd, n.index))
    return None


def test_open_grid_diagonal_collapses_to_two_points():
    grid_map = GridMap(5, 5, resolution=0.5)
    planner = AStarPlanner()

    path = planner.plan(Vector3(0.1, 0.1), Vector3(2.4, 2.4), grid_map)

    assert path[0] == Vector3(0.25, 0.25, 0.0)
    assert path[-1] == Vector3(2.25, 2.25, 0.0)
    # 唯一最优路径是对角线
    assert len(path) == 5
    assert path_length(path) == pytest.approx(4 * 0.5 * np.sqrt(2))

    simplified = PathSimplifier(grid_map).simplify(path)
    assert simplified == [Vector3(0.25, 0.25, 0.0), Vector3(2.25, 2.25, 0.0)]


def test_wall_with_gap_threads_the_gap():
    grid_map = make_wall_with_gap_map()
    planner = AStarPlanner()
    start = Vector3(0.25, 0.25)
    goal = Vector3(2.25, 0.25)

    path = planner.plan(start, goal, grid_map)
    assert path[0] == start
    assert path[-1] == goal
    assert grid_map.grid_to_world(2, 2) in path

    checker = SegmentChecker()
    simplified = PathSimplifier(grid_map, checker).simplify(path)

    # 直线被墙挡住，缺口处的拐点必须保留
    assert len(simplified) > 2
    assert simplified[0] == start
    assert simplified[-1] == goal

    crosses_gap = False
    for a, b in zip(simplified[:-1], simplified[1:]):
        assert checker.is_segment_free(a, b, grid_map)
        for probe in checker.probes(a, b):
            if grid_map.world_to_grid(probe.x, probe.y) == (2, 2):
                crosses_gap = True
    assert crosses_gap


def test_unwalkable_enclosed_goal_raises_no_path():
    grid_map = GridMap(5, 5, resolution=0.5)
    grid_map.data[4, 4] = 1
    grid_map.data[3, 3] = 1
    grid_map.data[3, 4] = 1
    grid_map.data[4, 3] = 1

    with pytest.raises(NoPathFound):
        AStarPlanner().plan(Vector3(0.25, 0.25), Vector3(2.25, 2.25), grid_map)


def test_start_outside_grid_is_unreachable():
    grid_map = GridMap(5, 5, resolution=0.5)
    with pytest.raises(UnreachableEndpoint):
        AStarPlanner().plan(Vector3(-1.0, -1.0), Vector3(2.25, 2.25), grid_map)


def test_goal_outside_grid_is_unreachable():
    grid_map = GridMap(5, 5, resolution=0.5)
    with pytest.raises(UnreachableEndpoint):
        AStarPlanner().plan(Vector3(0.25, 0.25), Vector3(2.6, 1.0), grid_map)


def test_start_equals_goal_gives_single_point():
    grid_map = GridMap(5, 5, resolution=0.5)
    result = AStarPlanner().search(Vector3(0.3, 0.3), Vector3(0.4, 0.4), grid_map)
    assert result.expanded == 1

    path = AStarPlanner().plan(Vector3(0.3, 0.3), Vector3(0.4, 0.4), grid_map)
    assert path == [Vector3(0.25, 0.25, 0.0)]


def test_expansion_budget():
    grid_map = GridMap(10, 10, resolution=0.5)
    planner = AStarPlanner(max_expansions=1)
    with pytest.raises(NoPathFound):
        planner.plan(Vector3(0.25, 0.25), Vector3(4.75, 4.75), grid_map)


def test_search_does_not_touch_shared_grid():
    grid_map = make_wall_with_gap_map()
    before = grid_map.data.copy()
    planner = AStarPlanner()

    first = planner.plan(Vector3(0.25, 0.25), Vector3(2.25, 0.25), grid_map)
    second = planner.plan(Vector3(0.25, 0.25), Vector3(2.25, 0.25), grid_map)

    assert first == second
    np.testing.assert_array_equal(grid_map.data, before)


@pytest.mark.parametrize("seed", range(8))
def test_path_cost_is_optimal(seed):
    rng = np.random.default_rng(seed)
    data = (rng.random((15, 15)) < 0.25).astype(np.int8)
    data[0, 0] = 0
    data[14, 14] = 0
    grid_map = GridMap(15, 15, resolution=0.5, data=data)

    start = grid_map.grid_to_world(0, 0)
    goal = grid_map.grid_to_world(14, 14)
    best = dijkstra_cost(grid_map, start, goal)

    if best is None:
        with pytest.raises(NoPathFound):
            AStarPlanner().plan(start, goal, grid_map)
        return

    path = AStarPlanner().plan(start, goal, grid_map)
    assert path[0] == start
    assert path[-1] == goal
    assert path_length(path) == pytest.approx(best, rel=1e-9)

    # ZeroHeuristic (Dijkstra) 得到的代价一致
    dijkstra_path = AStarPlanner(heuristic=ZeroHeuristic()).plan(start, goal, grid_map)
    assert path_length(dijkstra_path) == pytest.approx(best, rel=1e-9)


class TestOpenSet:
    def test_orders_by_f_then_h(self):
        open_set = OpenSet()
        open_set.push((0, 0), 2.0, 1.0)
        open_set.push((0, 1), 2.0, 0.5)
        open_set.push((1, 0), 1.5, 1.4)

        assert open_set.pop() == (1, 0)
        assert open_set.pop() == (0, 1)
        assert open_set.pop() == (0, 0)
        assert not open_set

    def test_full_tie_is_fifo(self):
        open_set = OpenSet()
        open_set.push((3, 3), 1.0, 0.5)
        open_set.push((1, 1), 1.0, 0.5)
        assert open_set.pop() == (3, 3)

    def test_decrease_key_keeps_single_membership(self):
        open_set = OpenSet()
        open_set.push((0, 0), 5.0, 1.0)
        open_set.push((0, 1), 3.0, 1.0)
        open_set.push((0, 0), 1.0, 1.0)

        assert len(open_set) == 2
        assert open_set.pop() == (0, 0)
        assert (0, 0) not in open_set
        assert open_set.pop() == (0, 1)
        assert len(open_set) == 0
        with pytest.raises(IndexError):
            open_set.pop()
