# global_planner/__init__.py

from .types import Vector3, Pose, Cell, SearchRecord
from .config import PlannerConfig
from .errors import (
    PlanningError,
    UnreachableEndpoint,
    NoPathFound,
    BrokenParentChain,
    PathTooShortToSimplify,
)

__all__ = [
    "Vector3",
    "Pose",
    "Cell",
    "SearchRecord",
    "PlannerConfig",
    "PlanningError",
    "UnreachableEndpoint",
    "NoPathFound",
    "BrokenParentChain",
    "PathTooShortToSimplify",
]
