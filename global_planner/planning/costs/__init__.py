# global_planner/planning/costs/__init__.py

from .base import CostFunction
from .distance_cost import DistanceCost

__all__ = ['CostFunction', 'DistanceCost']
