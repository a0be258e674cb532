# global_planner/collision/config.py
from enum import Enum
from dataclasses import dataclass


class LineCheckMethod(Enum):
    # 固定步长射线采样 (默认)。步长过大时可能漏掉细小障碍；
    # 两个障碍只在角点相接时，探测点几乎不会恰好落在角点上，线段会从缝隙穿过
    SAMPLED = 0

    # 精确栅格遍历，线段经过的每个单元都会检查。穿过角点时两侧单元都检查，
    # 与 GridMap 默认禁止切角的邻接规则一致
    SUPERCOVER = 1


@dataclass
class LineCheckConfig:
    method: LineCheckMethod = LineCheckMethod.SAMPLED
    # 采样步长 (世界坐标单位)，仅 SAMPLED 使用
    probe_step: float = 0.02
