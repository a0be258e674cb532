# global_planner/map/grid_map.py
import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.ndimage import distance_transform_edt

from global_planner.types import Cell, Vector3
from .base import MapBase

logger = logging.getLogger(__name__)

# 8-连通邻域 (d_row, d_col)
_NEIGHBOUR_OFFSETS = [
    (1, 0), (0, 1), (-1, 0), (0, -1),
    (1, 1), (1, -1), (-1, 1), (-1, -1),
]


class GridMap(MapBase):
    """
    基于 numpy 占据栅格的 Grid Adapter 参考实现

    约定：
    - data[row, col]，row 对应 y 方向，col 对应 x 方向
    - 0 表示空闲，1 表示障碍物
    - origin 是 (0, 0) 单元左下角的世界坐标
    """

    def __init__(self,
                 width: int,
                 height: int,
                 resolution: float = 0.1,
                 origin: Vector3 = Vector3(0.0, 0.0, 0.0),
                 data: Optional[np.ndarray] = None,
                 allow_corner_cutting: bool = False):
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")

        self._width = width
        self._height = height
        self._resolution = resolution
        self._origin = origin
        self.allow_corner_cutting = allow_corner_cutting

        if data is None:
            self._grid = np.zeros((height, width), dtype=np.int8)  # 全 0 (空闲)
        else:
            grid = np.asarray(data, dtype=np.int8)
            if grid.shape != (height, width):
                raise ValueError(f"data shape {grid.shape} does not match ({height}, {width})")
            self._grid = grid.copy()

        self._dist_map = None

    @classmethod
    def from_rows(cls,
                  rows: Sequence[Sequence[int]],
                  resolution: float,
                  origin: Vector3 = Vector3(0.0, 0.0, 0.0),
                  allow_corner_cutting: bool = False) -> "GridMap":
        """由嵌套列表构造，rows[0] 是 y 最小的一行"""
        data = np.asarray(rows, dtype=np.int8)
        if data.ndim != 2:
            raise ValueError("rows must describe a 2D grid")
        height, width = data.shape
        return cls(width, height, resolution, origin, data, allow_corner_cutting)

    @property
    def data(self) -> np.ndarray:
        return self._grid

    @property
    def resolution(self) -> float:
        return self._resolution

    @property
    def origin(self) -> Vector3:
        return self._origin

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def num_cells(self) -> int:
        return self._width * self._height

    def world_to_grid(self, x: float, y: float) -> Tuple[int, int]:
        """
        物理坐标 -> 栅格索引
        向下取整 floor，负坐标会得到负索引 (越界)
        """
        col = int(math.floor((x - self._origin.x) / self._resolution))
        row = int(math.floor((y - self._origin.y) / self._resolution))
        return row, col

    def grid_to_world(self, row: int, col: int) -> Vector3:
        """
        栅格索引 -> 单元中心：idx * res + res/2
        """
        x = self._origin.x + col * self._resolution + self._resolution / 2.0
        y = self._origin.y + row * self._resolution + self._resolution / 2.0
        return Vector3(x, y, self._origin.z)

    def _is_valid_index(self, row: int, col: int) -> bool:
        return (0 <= row < self._height) and (0 <= col < self._width)

    def is_walkable(self, row: int, col: int) -> bool:
        if not self._is_valid_index(row, col):
            return False  # 越界视为不可通行
        return self._grid[row, col] == 0

    def cell_at_index(self, row: int, col: int) -> Optional[Cell]:
        if not self._is_valid_index(row, col):
            return None
        return Cell(row, col, self.grid_to_world(row, col), bool(self._grid[row, col] == 0))

    def cell_at(self, position: Vector3) -> Optional[Cell]:
        row, col = self.world_to_grid(position.x, position.y)
        return self.cell_at_index(row, col)

    def neighbours_of(self, cell: Cell) -> List[Cell]:
        neighbours = []
        for d_row, d_col in _NEIGHBOUR_OFFSETS:
            row, col = cell.row + d_row, cell.col + d_col
            if not self._is_valid_index(row, col):
                continue
            # 斜向移动：两侧正交单元都必须可通行，否则会擦过障碍物的角
            if d_row != 0 and d_col != 0 and not self.allow_corner_cutting:
                if not (self.is_walkable(cell.row + d_row, cell.col) and
                        self.is_walkable(cell.row, cell.col + d_col)):
                    continue
            neighbours.append(self.cell_at_index(row, col))
        return neighbours

    def precompute_distance_map(self):
        """
        计算欧氏距离变换 (EDT)，结果单位为米，存入 self._dist_map。
        """
        # distance_transform_edt 计算离最近 0 值像素的距离，所以障碍物=0, 空闲=1
        binary_grid = np.ones_like(self._grid, dtype=float)
        binary_grid[self._grid == 1] = 0

        self._dist_map = distance_transform_edt(binary_grid) * self._resolution
        logger.debug("[GridMap] Distance map pre-computed. Max clearance: %.2fm", float(np.max(self._dist_map)))

    def get_obstacle_distance(self, x: float, y: float) -> float:
        """
        指定坐标离最近障碍物的距离 (米)。越界返回 0.0。
        """
        if self._dist_map is None:
            self.precompute_distance_map()

        row, col = self.world_to_grid(x, y)
        if not self._is_valid_index(row, col):
            return 0.0
        return float(self._dist_map[row, col])

    def __repr__(self):
        return (f"GridMap({self._width}x{self._height}, res={self._resolution}, "
                f"origin=({self._origin.x}, {self._origin.y}))")
