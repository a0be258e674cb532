# global_planner/planning/planners/base.py
from abc import ABC, abstractmethod
from typing import List, Optional
from global_planner.types import Vector3
from global_planner.map.base import MapBase
from global_planner.planning.interfaces import IPlannerObserver

class PlannerBase(ABC):
    """
    所有路径规划器的抽象基类
    """

    @abstractmethod
    def plan(self,
             start: Vector3,
             goal: Vector3,
             grid_map: MapBase,
             observer: Optional[IPlannerObserver] = None) -> List[Vector3]:
        """
        执行路径规划
        :param start: 起点世界坐标
        :param goal: 目标世界坐标
        :param grid_map: Grid Adapter
        :param observer: 观察者钩子 (用于可视化搜索过程)
        :return: 从起点单元中心到目标单元中心的路点列表
        :raises PlanningError: 起终点无效或无可行路径
        """
        pass
