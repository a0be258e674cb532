# global_planner/planning/planners/__init__.py

from .base import PlannerBase
from .a_star import AStarPlanner, OpenSet, SearchResult



__all__ = [
    "PlannerBase",
    "AStarPlanner",
    "OpenSet",
    "SearchResult",
]
