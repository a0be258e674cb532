# global_planner/types.py
import math
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Vector3:
    """
    世界坐标点 (x, y, z)，不可变值类型
    """
    x: float             # [m]
    y: float             # [m]
    z: float = 0.0       # [m]

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> "Vector3":
        return Vector3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: "Vector3") -> float:
        """三维欧氏距离"""
        return (self - other).norm()

    def bearing_to(self, other: "Vector3") -> float:
        """平面方位角 atan2(dy, dx) [rad]"""
        return math.atan2(other.y - self.y, other.x - self.x)

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.x, self.y, self.z


@dataclass(frozen=True)
class Pose:
    """带朝向的路点，交给局部规划器使用"""
    position: Vector3
    heading_rad: float = 0.0

    @property
    def x(self): return self.position.x

    @property
    def y(self): return self.position.y

    @property
    def z(self): return self.position.z


@dataclass(frozen=True)
class Cell:
    """
    栅格单元 (只读)
    由 Grid Adapter 创建，搜索过程从不修改它。
    """
    row: int
    col: int
    world_position: Vector3
    walkable: bool

    @property
    def index(self) -> Tuple[int, int]:
        return self.row, self.col


@dataclass
class SearchRecord:
    """
    单次搜索私有的临时数据 (g, h, parent)
    保存在以 cell.index 为 key 的字典中，不写回共享的 Cell 对象。
    """
    g_cost: float
    h_cost: float
    parent: Optional[Tuple[int, int]] = None

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost
