# global_planner/map/base.py
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from global_planner.types import Cell, Vector3


class MapBase(ABC):
    """
    Grid Adapter 抽象基类
    规划核心只通过这里的接口读取栅格，不关心地图如何构建。
    """

    @property
    @abstractmethod
    def resolution(self) -> float:
        """单元边长 (m/cell)"""
        pass

    @property
    @abstractmethod
    def origin(self) -> Vector3:
        """栅格 (0, 0) 单元左下角的世界坐标"""
        pass

    @property
    @abstractmethod
    def num_cells(self) -> int:
        """单元总数，用作回溯路径的迭代上限"""
        pass

    @abstractmethod
    def world_to_grid(self, x: float, y: float) -> Tuple[int, int]:
        """
        [关键接口] 物理坐标 -> 栅格索引
        返回: (row, col)，不做越界检查
        """
        pass

    @abstractmethod
    def grid_to_world(self, row: int, col: int) -> Vector3:
        """
        [关键接口] 栅格索引 -> 单元中心的世界坐标
        """
        pass

    @abstractmethod
    def cell_at(self, position: Vector3) -> Optional[Cell]:
        """世界坐标所在的单元，越界返回 None"""
        pass

    @abstractmethod
    def cell_at_index(self, row: int, col: int) -> Optional[Cell]:
        """按索引取单元，越界返回 None"""
        pass

    @abstractmethod
    def neighbours_of(self, cell: Cell) -> List[Cell]:
        """相邻单元 (包含不可通行的单元，由调用方过滤)"""
        pass
