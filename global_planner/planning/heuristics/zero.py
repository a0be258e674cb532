# global_planner/planning/heuristics/zero.py
from global_planner.types import Vector3
from .base import Heuristic

class ZeroHeuristic(Heuristic):
    """
    零启发式 (h=0).
    A* 退化为 Dijkstra，保证最优但扩展节点最多。测试中用作最优性参照。
    """
    def estimate(self, current: Vector3, goal: Vector3) -> float:
        return 0.0
