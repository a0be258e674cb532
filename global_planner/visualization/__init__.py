# global_planner/visualization/__init__.py

from .observers import EfficientObserver, ExperimentObserver, DebugObserver

# plotter 依赖 matplotlib，按需单独导入
__all__ = ["EfficientObserver", "ExperimentObserver", "DebugObserver"]
