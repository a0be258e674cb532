# global_planner/planning/costs/distance_cost.py
from global_planner.types import Vector3
from .base import CostFunction

class DistanceCost(CostFunction):
    """
    三维欧氏距离作为边代价。
    """
    def calculate(self, current: Vector3, next_node: Vector3) -> float:
        return current.distance_to(next_node)
