# global_planner/planning/planners/a_star.py
import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import List, Tuple, Dict, Optional, Set

from global_planner.types import Cell, SearchRecord, Vector3
from global_planner.errors import NoPathFound, UnreachableEndpoint
from global_planner.map.base import MapBase
from global_planner.planning.planners.base import PlannerBase
from global_planner.planning.heuristics.base import Heuristic
from global_planner.planning.heuristics.euclidean import EuclideanHeuristic
from global_planner.planning.costs.base import CostFunction
from global_planner.planning.costs.distance_cost import DistanceCost
from global_planner.planning.interfaces import IPlannerObserver
from global_planner.planning.reconstruct import retrace_path
from global_planner.visualization.observers import EfficientObserver

logger = logging.getLogger(__name__)

Index = Tuple[int, int]


class OpenSet:
    """
    OpenSet: 最小堆 + 字典

    - 排序键 (f, h, seq)：f 相同时 h 小的优先，再相同时先入先出
    - 同一个单元在逻辑上只出现一次；降低代价时压入新条目，旧条目出堆时丢弃
    """

    def __init__(self):
        self._heap: List[Tuple[float, float, int, Index]] = []
        # index -> 该单元当前有效条目的 seq
        self._live: Dict[Index, int] = {}
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._live)

    def __bool__(self) -> bool:
        return bool(self._live)

    def __contains__(self, idx: Index) -> bool:
        return idx in self._live

    def push(self, idx: Index, f: float, h: float):
        """插入或更新 (decrease-key)"""
        seq = next(self._counter)
        self._live[idx] = seq
        heapq.heappush(self._heap, (f, h, seq, idx))

    def pop(self) -> Index:
        while self._heap:
            _, _, seq, idx = heapq.heappop(self._heap)
            if self._live.get(idx) == seq:
                del self._live[idx]
                return idx
        raise IndexError("pop from empty OpenSet")


@dataclass
class SearchResult:
    """一次搜索的产物；records 只属于这一次请求"""
    start_cell: Cell
    goal_cell: Cell
    records: Dict[Index, SearchRecord]
    expanded: int


class AStarPlanner(PlannerBase):
    """
    8-连通栅格上的 A* 实现。

    工作流程：
    1. 通过 Grid Adapter 将连续的 Start/Goal 映射到单元。
    2. 每次扩展 f 最小的单元 (f 相同取 h 更小者)。
    3. 边代价与启发式都使用单元中心之间的三维欧氏距离。
    4. g/h/parent 存放在本次搜索私有的 records 字典里，不修改共享地图，
       因此同一张地图可以并发搜索。
    """

    def __init__(self,
                 heuristic: Optional[Heuristic] = None,
                 edge_cost: Optional[CostFunction] = None,
                 max_expansions: Optional[int] = None):
        self.h_fn = heuristic if heuristic is not None else EuclideanHeuristic()
        self.cost_fn = edge_cost if edge_cost is not None else DistanceCost()
        self.max_expansions = max_expansions

    def plan(self,
             start: Vector3,
             goal: Vector3,
             grid_map: MapBase,
             observer: Optional[IPlannerObserver] = None) -> List[Vector3]:
        result = self.search(start, goal, grid_map, observer)
        return retrace_path(result.start_cell, result.goal_cell, result.records, grid_map)

    def search(self,
               start: Vector3,
               goal: Vector3,
               grid_map: MapBase,
               observer: Optional[IPlannerObserver] = None) -> SearchResult:

        # 1. 初始化观察者
        if observer is None:
            observer = EfficientObserver()

        # 2. 坐标离散化
        start_cell = grid_map.cell_at(start)
        goal_cell = grid_map.cell_at(goal)

        if start_cell is None:
            raise UnreachableEndpoint(f"Start {start} is out of map bounds")
        if goal_cell is None:
            raise UnreachableEndpoint(f"Goal {goal} is out of map bounds")

        logger.info("[A*] StartNode  => %s", start_cell.index)
        logger.info("[A*] TargetNode => %s", goal_cell.index)
        observer.on_search_started(grid_map, start_cell, goal_cell)

        # 3. 初始化核心容器
        records: Dict[Index, SearchRecord] = {
            start_cell.index: SearchRecord(
                g_cost=0.0,
                h_cost=self.h_fn.estimate(start_cell.world_position, goal_cell.world_position),
            )
        }
        open_set = OpenSet()
        start_rec = records[start_cell.index]
        open_set.push(start_cell.index, start_rec.f_cost, start_rec.h_cost)
        observer.on_cell_queued(start_cell, start_rec)
        closed_set: Set[Index] = set()

        expanded = 0

        # 4. 主循环
        while open_set:
            if self.max_expansions is not None and expanded >= self.max_expansions:
                observer.log("Expansion budget exhausted", 'WARN', {'expanded': expanded})
                observer.on_search_finished(expanded, False)
                raise NoPathFound(f"Expansion budget of {self.max_expansions} cells exhausted")

            current_idx = open_set.pop()
            closed_set.add(current_idx)
            expanded += 1

            current = grid_map.cell_at_index(*current_idx)
            current_rec = records[current_idx]
            observer.on_cell_expanded(current, current_rec)

            # A. 终止条件
            if current_idx == goal_cell.index:
                logger.info("[A*] Reached the target after %d expansions.", expanded)
                observer.on_search_finished(expanded, True)
                return SearchResult(start_cell, goal_cell, records, expanded)

            # B. 扩展邻居
            for neighbour in grid_map.neighbours_of(current):
                n_idx = neighbour.index
                if not neighbour.walkable or n_idx in closed_set:
                    continue

                new_g = current_rec.g_cost + self.cost_fn.calculate(
                    current.world_position, neighbour.world_position)

                # 未发现过的单元，或找到更短的路
                if n_idx not in open_set or new_g < records[n_idx].g_cost:
                    h_val = self.h_fn.estimate(neighbour.world_position, goal_cell.world_position)
                    rec = SearchRecord(g_cost=new_g, h_cost=h_val, parent=current_idx)
                    records[n_idx] = rec
                    open_set.push(n_idx, rec.f_cost, h_val)
                    observer.on_cell_queued(neighbour, rec)

        logger.info("[A*] Open set is empty, no path found (%d expansions).", expanded)
        observer.log("Open set exhausted", 'WARN', {'expanded': expanded})
        observer.on_search_finished(expanded, False)
        raise NoPathFound(f"No path from {start_cell.index} to {goal_cell.index}")
