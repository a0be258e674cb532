# global_planner/collision/checker.py
import math
from typing import Iterator, Tuple

from global_planner.types import Vector3
from global_planner.map.base import MapBase
from .config import LineCheckConfig, LineCheckMethod


class SegmentChecker:
    """
    线段碰撞检测：判断两个路点之间的直线是否只经过可通行单元。
    """

    def __init__(self, config: LineCheckConfig = None):
        if config is None:
            self.config = LineCheckConfig()
        else:
            self.config = config

        if self.config.probe_step <= 0:
            raise ValueError("probe_step must be positive")

    def is_segment_free(self, start: Vector3, end: Vector3, grid_map: MapBase) -> bool:
        """
        统一入口
        :return: True 表示整条线段安全, False 表示有碰撞
        """
        if self.config.method == LineCheckMethod.SUPERCOVER:
            cells = self._supercover_cells(start, end, grid_map)
            return all(self._index_walkable(row, col, grid_map) for row, col in cells)

        for probe in self.probes(start, end):
            cell = grid_map.cell_at(probe)
            # 越界 (None) 同样视为碰撞
            if cell is None or not cell.walkable:
                return False
        return True

    def probes(self, start: Vector3, end: Vector3) -> Iterator[Vector3]:
        """
        从 start 沿方位角 theta 以固定步长前进，生成 l < l_max 的探测点。
        终点本身不在其中。
        """
        theta = math.atan2(end.y - start.y, end.x - start.x)
        l_max = math.hypot(end.x - start.x, end.y - start.y)
        step = self.config.probe_step
        c, s = math.cos(theta), math.sin(theta)

        k = 0
        l = 0.0
        while l < l_max:
            yield Vector3(start.x + l * c, start.y + l * s, start.z)
            k += 1
            # 用乘法代替累加，避免长线段上的浮点漂移
            l = k * step

    @staticmethod
    def _index_walkable(row: int, col: int, grid_map: MapBase) -> bool:
        cell = grid_map.cell_at_index(row, col)
        return cell is not None and cell.walkable

    @staticmethod
    def _supercover_cells(start: Vector3, end: Vector3, grid_map: MapBase) -> Iterator[Tuple[int, int]]:
        """
        Amanatides-Woo 栅格遍历，返回线段 [start, end) 触及的所有 (row, col)。
        """
        res = grid_map.resolution
        ox, oy = grid_map.origin.x, grid_map.origin.y

        # 转到以单元为单位的坐标系
        x0, y0 = (start.x - ox) / res, (start.y - oy) / res
        x1, y1 = (end.x - ox) / res, (end.y - oy) / res

        row, col = grid_map.world_to_grid(start.x, start.y)
        end_row, end_col = grid_map.world_to_grid(end.x, end.y)
        yield row, col

        dx, dy = x1 - x0, y1 - y0
        step_col = 1 if dx > 0 else (-1 if dx < 0 else 0)
        step_row = 1 if dy > 0 else (-1 if dy < 0 else 0)

        t_delta_x = abs(1.0 / dx) if dx != 0 else math.inf
        t_delta_y = abs(1.0 / dy) if dy != 0 else math.inf

        if dx > 0:
            t_max_x = (col + 1 - x0) * t_delta_x
        elif dx < 0:
            t_max_x = (x0 - col) * t_delta_x
        else:
            t_max_x = math.inf

        if dy > 0:
            t_max_y = (row + 1 - y0) * t_delta_y
        elif dy < 0:
            t_max_y = (y0 - row) * t_delta_y
        else:
            t_max_y = math.inf

        # 每一步至少改变一个索引，步数不会超过曼哈顿距离
        remaining = abs(end_col - col) + abs(end_row - row)
        eps = 1e-9
        while remaining > 0 and (row, col) != (end_row, end_col):
            if abs(t_max_x - t_max_y) < eps:
                # 恰好穿过角点：两侧单元都算被触及
                yield row, col + step_col
                yield row + step_row, col
                col += step_col
                row += step_row
                t_max_x += t_delta_x
                t_max_y += t_delta_y
                remaining -= 2
            elif t_max_x < t_max_y:
                col += step_col
                t_max_x += t_delta_x
                remaining -= 1
            else:
                row += step_row
                t_max_y += t_delta_y
                remaining -= 1
            yield row, col
