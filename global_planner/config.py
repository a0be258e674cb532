# [关键] 全局配置定义

# global_planner/config.py
from dataclasses import dataclass
from typing import Optional

from global_planner.collision.config import LineCheckMethod


@dataclass
class PlannerConfig:
    # Pass 2 射线步进长度 (世界坐标单位)
    probe_step: float = 0.02
    line_check_method: LineCheckMethod = LineCheckMethod.SAMPLED
    # 0.0 表示方位角严格相等才视为共线
    collinear_angle_tolerance: float = 0.0
    # None: 一直搜索到 OpenSet 为空
    max_expansions: Optional[int] = None
    path_output_file: Optional[str] = None
    debug_mode: bool = False
    log_dir: str = "logs/planning_debug"

    def __post_init__(self):
        if self.probe_step <= 0.0:
            raise ValueError(f"probe_step must be positive, got {self.probe_step}")
        if self.collinear_angle_tolerance < 0.0:
            raise ValueError("collinear_angle_tolerance must be >= 0")
        if self.max_expansions is not None and self.max_expansions <= 0:
            raise ValueError("max_expansions must be a positive integer or None")
