# global_planner/planning/costs/base.py
from abc import ABC, abstractmethod
from global_planner.types import Vector3

class CostFunction(ABC):
    """
    边代价基类 (Strategy Interface)
    定义从 current 移动到相邻单元 next_node 的代价。
    """
    @abstractmethod
    def calculate(self, current: Vector3, next_node: Vector3) -> float:
        """
        :param current: 当前单元中心
        :param next_node: 相邻单元中心
        :return: 代价数值 (必须 >= 0)
        """
        pass
