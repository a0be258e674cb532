from abc import ABC, abstractmethod
from global_planner.types import Vector3

class Heuristic(ABC):
    @abstractmethod
    def estimate(self, current: Vector3, goal: Vector3) -> float:
        """统一接口：只接受当前点和目标点的世界坐标"""
        pass
