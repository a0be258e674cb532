# global_planner/collision/__init__.py

from .config import LineCheckConfig, LineCheckMethod
from .checker import SegmentChecker

__all__ = [
    "LineCheckConfig",
    "LineCheckMethod",
    "SegmentChecker",
]
