import sys
import os
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

# --- 路径设置 ---
# 确保能找到 global_planner 包
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from global_planner.types import Vector3
from global_planner.config import PlannerConfig
from global_planner.collision import LineCheckMethod
from global_planner.map.grid_map import GridMap
from global_planner.service import PlanningService
from global_planner.visualization.observers import ExperimentObserver


def make_random_map(width, height, res, density, seed, keep_free):
    """随机障碍地图，起终点所在单元保持空闲"""
    rng = np.random.default_rng(seed)
    data = (rng.random((height, width)) < density).astype(np.int8)
    grid_map = GridMap(width=width, height=height, resolution=res, data=data)
    for p in keep_free:
        row, col = grid_map.world_to_grid(p.x, p.y)
        grid_map.data[row, col] = 0
    return grid_map


def run_experiment():
    # --- 1. 实验参数设置 ---
    densities = [0.0, 0.05, 0.1, 0.15, 0.2, 0.25]  # 障碍物密度梯度
    num_trials = 10                                # 每个密度下测试多少张地图
    map_width, map_height, res = 100, 100, 0.5      # 50m x 50m 地图

    start = Vector3(1.25, 1.25)
    goal = Vector3(48.75, 48.75)

    methods = [LineCheckMethod.SAMPLED, LineCheckMethod.SUPERCOVER]
    results = []

    print(f"{'Density':<10} | {'Check':<12} | {'Success%':<10} | {'Raw':<8} | {'Pass1':<8} | {'Pass2':<8} | {'Len(m)':<8} | {'Time(ms)':<10}")
    print("-" * 90)

    # --- 2. 循环实验 ---
    for density in densities:
        for method in methods:
            stats = {'success': 0, 'raw': [], 'pass1': [], 'pass2': [], 'length': [], 'time': []}

            for i in range(num_trials):
                # 同一个 seed 保证两种检测方式跑在同一张图上
                seed = 42 + i + int(density * 1000)
                grid_map = make_random_map(map_width, map_height, res, density, seed, [start, goal])

                service = PlanningService(grid_map, config=PlannerConfig(line_check_method=method))
                observer = ExperimentObserver()
                result = service.plan(start, goal, observer=observer)

                if not result.success:
                    continue

                stats['success'] += 1
                stats['raw'].append(result.stats['raw_points'])
                stats['pass1'].append(result.stats['collinear_points'])
                stats['pass2'].append(result.stats['final_points'])
                stats['length'].append(sum(a.distance_to(b) for a, b in zip(result.waypoints, result.waypoints[1:])))
                total = (result.stats['search_time_s'] + result.stats['retrace_time_s']
                         + result.stats['collinear_time_s'] + result.stats['line_of_sight_time_s'])
                stats['time'].append(total * 1000)

            # --- 3. 汇总当前 Density 的数据 ---
            succ_rate = stats['success'] / num_trials * 100
            row = {
                'Density': density,
                'Check': method.name,
                'SuccessRate': succ_rate,
                'RawMean': np.mean(stats['raw']) if stats['raw'] else 0,
                'Pass1Mean': np.mean(stats['pass1']) if stats['pass1'] else 0,
                'Pass2Mean': np.mean(stats['pass2']) if stats['pass2'] else 0,
                'LengthMean': np.mean(stats['length']) if stats['length'] else 0,
                'TimeMean': np.mean(stats['time']) if stats['time'] else 0,
            }
            print(f"{density:<10.2f} | {method.name:<12} | {succ_rate:<10.1f} | {row['RawMean']:<8.1f} | "
                  f"{row['Pass1Mean']:<8.1f} | {row['Pass2Mean']:<8.1f} | {row['LengthMean']:<8.2f} | {row['TimeMean']:<10.2f}")
            results.append(row)

    return pd.DataFrame(results)


def plot_comparisons(df):
    """航点数量与路径长度随密度的变化"""
    fig, axes = plt.subplots(1, 3, figsize=(18, 5))

    # A. 各阶段航点数 (只看 SAMPLED)
    sampled = df[df['Check'] == 'SAMPLED']
    ax = axes[0]
    ax.plot(sampled['Density'], sampled['RawMean'], 'o-', label='A* raw')
    ax.plot(sampled['Density'], sampled['Pass1Mean'], 's-', label='Collinear')
    ax.plot(sampled['Density'], sampled['Pass2Mean'], '^-', label='Line of sight')
    ax.set_yscale('log')
    ax.set_xlabel('Obstacle Density')
    ax.set_ylabel('Waypoints')
    ax.set_title('Waypoint Reduction')
    ax.legend()

    # B/C. 两种线段检测方式的对比
    for ax, (metric, ylabel, title) in zip(axes[1:], [
        ('Pass2Mean', 'Final Waypoints', 'Sampled vs Supercover'),
        ('LengthMean', 'Path Length (m)', 'Optimality'),
    ]):
        for check, marker in [('SAMPLED', 'o-'), ('SUPERCOVER', 's-')]:
            data = df[df['Check'] == check]
            ax.plot(data['Density'], data[metric], marker, label=check)
        ax.set_xlabel('Obstacle Density')
        ax.set_ylabel(ylabel)
        ax.set_title(title)
        ax.legend()

    for ax in axes:
        ax.grid(True, linestyle=':', alpha=0.6)

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    print("=== 开始全局路径简化对比实验 (Sampled vs Supercover) ===")
    df_results = run_experiment()
    print("\n实验结束，正在绘图...")
    plot_comparisons(df_results)
