# global_planner/map/__init__.py

from .base import MapBase
from .grid_map import GridMap

__all__ = ["MapBase", "GridMap"]
