# global_planner/planning/reconstruct.py
import logging
from typing import Dict, List, Tuple

from global_planner.types import Cell, SearchRecord, Vector3
from global_planner.errors import BrokenParentChain
from global_planner.map.base import MapBase

logger = logging.getLogger(__name__)


def retrace_path(start_cell: Cell,
                 goal_cell: Cell,
                 records: Dict[Tuple[int, int], SearchRecord],
                 grid_map: MapBase) -> List[Vector3]:
    """
    沿 parent 指针从终点回溯到起点，返回起点 -> 终点的单元中心列表 (含起终点)。

    回溯步数上限为地图单元总数，超出说明父链存在环或已损坏。
    """
    path: List[Vector3] = []
    current = goal_cell

    for _ in range(grid_map.num_cells):
        path.append(current.world_position)
        if current.index == start_cell.index:
            path.reverse()
            logger.debug("[Retrace] Preliminary path => Nodes: %d", len(path))
            return path

        record = records.get(current.index)
        if record is None or record.parent is None:
            raise BrokenParentChain(f"Cell {current.index} has no parent record")

        parent = grid_map.cell_at_index(*record.parent)
        if parent is None:
            raise BrokenParentChain(f"Parent {record.parent} of {current.index} is outside the grid")
        current = parent

    raise BrokenParentChain(
        f"Start {start_cell.index} not reached within {grid_map.num_cells} steps")
