# global_planner/planning/heuristics/euclidean.py
from global_planner.types import Vector3
from .base import Heuristic

class EuclideanHeuristic(Heuristic):
    """
    三维欧氏距离启发式
    与 DistanceCost 使用同一度量，因此是可采纳 (admissible) 且一致 (consistent) 的。
    """
    def estimate(self, current: Vector3, goal: Vector3) -> float:
        return current.distance_to(goal)
