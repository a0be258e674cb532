import itertools
import logging
import time
import os
from typing import Dict, List, Optional, Tuple

from global_planner.types import Cell, SearchRecord, Vector3
from global_planner.map.base import MapBase
from global_planner.planning.interfaces import IPlannerObserver

Index = Tuple[int, int]

_session_counter = itertools.count()


class EfficientObserver(IPlannerObserver):
    """
    高效运行模式 (默认)
    搜索热路径上的钩子全部为空操作。
    """
    def on_search_started(self, grid_map: MapBase, start: Cell, goal: Cell): pass
    def on_cell_queued(self, cell: Cell, record: SearchRecord): pass
    def on_cell_expanded(self, cell: Cell, record: SearchRecord): pass
    def on_search_finished(self, expanded: int, reached_goal: bool): pass
    def on_path_stage(self, stage: str, path: List[Vector3]): pass

    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        if level == 'ERROR':
            print(f"[ERROR] {message}")


class ExperimentObserver(IPlannerObserver):
    """
    实验模式
    保存一次请求的搜索轨迹和各阶段路径，供绘图 (plot_plan) 与算法对比使用。
    """
    def __init__(self):
        self.grid_map: Optional[MapBase] = None
        self.start_cell: Optional[Cell] = None
        self.goal_cell: Optional[Cell] = None
        # (row, col, f, h)，同一单元降代价时会出现多次
        self.queued: List[Tuple[int, int, float, float]] = []
        # 按扩展顺序
        self.expanded_cells: List[Cell] = []
        self.path_stages: Dict[str, List[Vector3]] = {}
        self.reached_goal = False

    def on_search_started(self, grid_map: MapBase, start: Cell, goal: Cell):
        self.grid_map = grid_map
        self.start_cell = start
        self.goal_cell = goal

    def on_cell_queued(self, cell: Cell, record: SearchRecord):
        self.queued.append((cell.row, cell.col, record.f_cost, record.h_cost))

    def on_cell_expanded(self, cell: Cell, record: SearchRecord):
        self.expanded_cells.append(cell)

    def on_search_finished(self, expanded: int, reached_goal: bool):
        self.reached_goal = reached_goal

    def on_path_stage(self, stage: str, path: List[Vector3]):
        self.path_stages[stage] = list(path)

    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        pass

    @property
    def expanded_positions(self) -> List[Vector3]:
        return [c.world_position for c in self.expanded_cells]

    def expansion_order(self) -> Dict[Index, int]:
        """单元索引 -> 第几个被扩展 (从 0 开始)"""
        return {c.index: i for i, c in enumerate(self.expanded_cells)}


class DebugObserver(ExperimentObserver):
    """
    Debug 模式
    在实验模式数据之外，把每一步的单元与代价写入带时间戳的日志文件，
    用于排查某次规划为什么绕远或失败。用完需要 close()。
    """
    def __init__(self, log_dir: str = "logs/planning_debug"):
        super().__init__()
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)

        # 每个请求独占一个文件：秒级时间戳 + 进程内序号
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        session_id = next(_session_counter)
        self.log_file = os.path.join(self.log_dir, f"plan_debug_{timestamp}_{session_id:04d}.log")

        # 不经过 logging.getLogger，logger 不进入全局注册表，close() 后即可回收
        self.logger = logging.Logger(f"PlannerDebug_{timestamp}_{session_id}", logging.DEBUG)

        fh = logging.FileHandler(self.log_file, encoding='utf-8')
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
        self.logger.addHandler(fh)

        self.logger.info("=== Debug Session Started ===")

    def on_search_started(self, grid_map: MapBase, start: Cell, goal: Cell):
        super().on_search_started(grid_map, start, goal)
        self.logger.info(f"Map: {grid_map}")
        self.logger.info(f"Start cell {start.index} @ {start.world_position.as_tuple()}")
        self.logger.info(f"Goal cell {goal.index} @ {goal.world_position.as_tuple()} walkable={goal.walkable}")

    def on_cell_queued(self, cell: Cell, record: SearchRecord):
        super().on_cell_queued(cell, record)
        self.logger.debug(f"Queued {cell.index} g={record.g_cost:.3f} h={record.h_cost:.3f} parent={record.parent}")

    def on_cell_expanded(self, cell: Cell, record: SearchRecord):
        super().on_cell_expanded(cell, record)
        self.logger.debug(f"Expanding {cell.index} f={record.f_cost:.3f}")

    def on_search_finished(self, expanded: int, reached_goal: bool):
        super().on_search_finished(expanded, reached_goal)
        outcome = "goal reached" if reached_goal else "no path"
        self.logger.info(f"Search finished: {outcome} after {expanded} expansions")

    def on_path_stage(self, stage: str, path: List[Vector3]):
        super().on_path_stage(stage, path)
        self.logger.info(f"Stage '{stage}': {len(path)} waypoints")

    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        if payload:
            message = f"{message} | Payload: {payload}"

        if level == 'DEBUG':
            self.logger.debug(message)
        elif level == 'WARN':
            self.logger.warning(message)
        elif level == 'ERROR':
            self.logger.error(message)
        else:
            self.logger.info(message)

    def close(self):
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)
