# 绘图逻辑 (Matplotlib)

import matplotlib.pyplot as plt
from typing import List, Optional

from global_planner.types import Vector3
from global_planner.map.grid_map import GridMap
from global_planner.visualization.observers import ExperimentObserver


def plot_plan(grid_map: GridMap,
              raw_path: Optional[List[Vector3]] = None,
              simplified_path: Optional[List[Vector3]] = None,
              observer: Optional[ExperimentObserver] = None,
              ax=None,
              title: str = "Global Plan",
              save_path: Optional[str] = None):
    """
    画出地图、已扩展节点、原始路径与简化后的路径
    :return: 使用的 Axes
    """
    own_fig = ax is None
    if own_fig:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure

    # A. 地图背景 (origin='lower' 与 row<->y 的约定一致)
    x0, y0 = grid_map.origin.x, grid_map.origin.y
    ax.imshow(grid_map.data, cmap='Greys', origin='lower',
              extent=[x0, x0 + grid_map.width * grid_map.resolution,
                      y0, y0 + grid_map.height * grid_map.resolution],
              alpha=0.5)

    # B. 已扩展节点
    if observer is not None and observer.expanded_cells:
        ex_x = [c.world_position.x for c in observer.expanded_cells]
        ex_y = [c.world_position.y for c in observer.expanded_cells]
        ax.scatter(ex_x, ex_y, c='red', s=4, alpha=0.3, label='Expanded Nodes')

    # C. 原始路径
    if raw_path:
        ax.plot([p.x for p in raw_path], [p.y for p in raw_path],
                'c--', linewidth=1.5, label='A* Path')

    # D. 简化路径
    if simplified_path:
        sx = [p.x for p in simplified_path]
        sy = [p.y for p in simplified_path]
        ax.plot(sx, sy, 'b-', linewidth=2.5, label='Simplified Path')
        ax.scatter(sx, sy, c='blue', s=20, zorder=5)
        ax.plot(sx[0], sy[0], 'go', markersize=10, label='Start')
        ax.plot(sx[-1], sy[-1], 'rx', markersize=10, label='Goal')

    ax.set_title(title)
    ax.set_xlabel("X [m]")
    ax.set_ylabel("Y [m]")
    ax.set_aspect('equal')
    if ax.get_legend_handles_labels()[0]:
        ax.legend()

    if save_path is not None:
        fig.savefig(save_path)
        if own_fig:
            plt.close(fig)

    return ax
