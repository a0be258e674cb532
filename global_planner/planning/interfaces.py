from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from global_planner.types import Cell, SearchRecord, Vector3
from global_planner.map.base import MapBase


class IPlannerObserver(ABC):
    """
    规划流水线的观察者
    搜索、回溯和简化只通过这些钩子对外暴露中间状态，自身不做记录。
    三种实现见 visualization/observers.py：Efficient / Experiment / Debug
    """

    @abstractmethod
    def on_search_started(self, grid_map: MapBase, start: Cell, goal: Cell):
        """起终点已映射到单元，搜索即将开始"""
        pass

    @abstractmethod
    def on_cell_queued(self, cell: Cell, record: SearchRecord):
        """单元被加入 OpenSet，或以更小的 g 重新入队"""
        pass

    @abstractmethod
    def on_cell_expanded(self, cell: Cell, record: SearchRecord):
        pass

    @abstractmethod
    def on_search_finished(self, expanded: int, reached_goal: bool):
        pass

    @abstractmethod
    def on_path_stage(self, stage: str, path: List[Vector3]):
        """流水线某一阶段产出的路径 (raw / collinear / line_of_sight)"""
        pass

    @abstractmethod
    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        """
        :param level: 'DEBUG', 'INFO', 'WARN', 'ERROR'
        :param payload: 额外的结构化数据 (如单元索引、代价)
        """
        pass
