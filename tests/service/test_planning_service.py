import logging
import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from global_planner.types import Vector3
from global_planner.config import PlannerConfig
from global_planner.errors import (
    NoPathFound,
    PathTooShortToSimplify,
    UnreachableEndpoint,
)
from global_planner.map.grid_map import GridMap
from global_planner.service import (
    CallbackLocalPlannerClient,
    CsvPathRecorder,
    PathRecorder,
    PlanningService,
    load_path,
)
from global_planner.visualization.observers import ExperimentObserver


START = Vector3(0.25, 0.25)
TARGET = Vector3(4.25, 4.25)


@pytest.fixture
def open_map():
    return GridMap(width=10, height=10, resolution=0.5)


@pytest.fixture
def walled_map():
    # 第 5 列为墙，只在第 8 行留一个缺口
    grid_map = GridMap(width=10, height=10, resolution=0.5)
    grid_map.data[:, 5] = 1
    grid_map.data[8, 5] = 0
    return grid_map


class RecordingClient(CallbackLocalPlannerClient):
    def __init__(self):
        self.received = []
        super().__init__(self.received.append)


class FailingRecorder(PathRecorder):
    def save(self, path):
        raise OSError("disk full")


def test_request_without_pose_fails(open_map):
    service = PlanningService(open_map)
    result = service.handle_plan_request(TARGET)

    assert not result.success
    assert isinstance(result.error, UnreachableEndpoint)
    assert result.waypoints == []


def test_latest_pose_wins(open_map):
    service = PlanningService(open_map)
    service.update_pose(Vector3(1.0, 1.0))
    service.update_pose(START)
    assert service.current_position == START

    result = service.handle_plan_request(TARGET)
    assert result.success
    assert result.waypoints[0] == Vector3(0.25, 0.25)


def test_successful_plan_is_handed_off(open_map):
    client = RecordingClient()
    service = PlanningService(open_map, local_planner=client)
    service.update_pose(START)

    result = service.handle_plan_request(TARGET)

    assert result.success
    assert result.error is None
    # 对角直线被压缩成两个端点
    assert result.waypoints == [Vector3(0.25, 0.25), Vector3(4.25, 4.25)]
    assert len(client.received) == 1
    poses = client.received[0]
    assert [p.position for p in poses] == result.waypoints
    assert poses[-1].heading_rad == pytest.approx(0.7853981633974483)

    assert result.stats['raw_points'] == 9
    assert result.stats['final_points'] == 2
    assert result.stats['expanded'] >= 9
    assert service.request_count == 1


def test_detour_around_wall(walled_map):
    service = PlanningService(walled_map)
    observer = ExperimentObserver()
    result = service.plan(Vector3(0.25, 0.25), Vector3(4.75, 0.25), observer=observer)

    assert result.success
    assert len(result.waypoints) > 2
    assert set(observer.path_stages) == {'raw', 'collinear', 'line_of_sight'}
    assert len(observer.path_stages['collinear']) <= len(observer.path_stages['raw'])
    assert len(result.waypoints) <= len(observer.path_stages['collinear'])
    # 必须从缺口 (8, 5) 所在的行附近通过
    assert max(p.y for p in observer.path_stages['raw']) >= 4.0


def test_hand_off_failure_is_logged(open_map, caplog):
    def explode(poses):
        raise ConnectionError("local planner unavailable")

    service = PlanningService(open_map, local_planner=CallbackLocalPlannerClient(explode))
    with caplog.at_level(logging.WARNING):
        result = service.plan(START, TARGET)

    assert result.success
    assert "hand-off failed" in caplog.text


def test_path_is_persisted(open_map, tmp_path):
    out = str(tmp_path / "paths" / "plan.csv")
    service = PlanningService(open_map, config=PlannerConfig(path_output_file=out))
    result = service.plan(START, TARGET)

    assert result.success
    assert os.path.exists(out)
    assert load_path(out) == result.waypoints


def test_explicit_recorder(open_map, tmp_path):
    out = str(tmp_path / "explicit.csv")
    service = PlanningService(open_map, path_recorder=CsvPathRecorder(out))
    result = service.plan(START, TARGET)
    assert load_path(out) == result.waypoints


def test_persistence_failure_does_not_fail_plan(open_map, caplog):
    service = PlanningService(open_map, path_recorder=FailingRecorder())
    with caplog.at_level(logging.WARNING):
        result = service.plan(START, TARGET)

    assert result.success
    assert "Could not save path" in caplog.text


def test_no_path_is_reported(open_map):
    # 目标被完全包围
    open_map.data[7:10, 7:10] = 1
    open_map.data[8, 8] = 0
    client = RecordingClient()
    service = PlanningService(open_map, local_planner=client)

    result = service.plan(START, Vector3(4.25, 4.25))

    assert not result.success
    assert isinstance(result.error, NoPathFound)
    assert result.waypoints == []
    assert client.received == []


def test_target_outside_map(open_map):
    result = PlanningService(open_map).plan(START, Vector3(5.5, 1.0))
    assert not result.success
    assert isinstance(result.error, UnreachableEndpoint)


def test_start_equals_goal_is_too_short(open_map):
    service = PlanningService(open_map)
    result = service.plan(Vector3(1.1, 1.1), Vector3(1.2, 1.2))

    assert not result.success
    assert isinstance(result.error, PathTooShortToSimplify)
    assert result.stats['raw_points'] == 1


def test_expansion_budget(open_map):
    service = PlanningService(open_map, config=PlannerConfig(max_expansions=2))
    result = service.plan(START, TARGET)
    assert isinstance(result.error, NoPathFound)


def test_debug_mode_writes_log(open_map, tmp_path):
    log_dir = str(tmp_path / "debug")
    service = PlanningService(open_map, config=PlannerConfig(debug_mode=True, log_dir=log_dir))
    result = service.plan(START, TARGET)

    assert result.success
    logs = os.listdir(log_dir)
    assert len(logs) == 1
    with open(os.path.join(log_dir, logs[0]), encoding='utf-8') as f:
        content = f.read()
    assert "Stage 'line_of_sight': 2 waypoints" in content


def test_concurrent_requests_agree(walled_map):
    service = PlanningService(walled_map)
    goal = Vector3(4.75, 0.25)
    expected = service.plan(START, goal).waypoints

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: service.plan(START, goal), range(8)))

    assert all(r.success for r in results)
    assert all(r.waypoints == expected for r in results)
    assert service.request_count == 9
    # 共享地图未被修改
    assert walled_map.data.sum() == 9


def test_invalid_config():
    with pytest.raises(ValueError):
        PlannerConfig(probe_step=0.0)
    with pytest.raises(ValueError):
        PlannerConfig(max_expansions=0)
    with pytest.raises(ValueError):
        PlannerConfig(collinear_angle_tolerance=-1.0)


def test_concurrent_debug_requests_each_get_a_log(open_map, tmp_path):
    log_dir = str(tmp_path / "debug")
    service = PlanningService(open_map, config=PlannerConfig(debug_mode=True, log_dir=log_dir))

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: service.plan(START, TARGET), range(6)))

    assert all(r.success for r in results)
    assert service.request_count == 6
    logs = sorted(os.listdir(log_dir))
    assert len(logs) == 6
    for name in logs:
        with open(os.path.join(log_dir, name), encoding='utf-8') as f:
            content = f.read()
        assert content.count("=== Debug Session Started ===") == 1
        assert "Stage 'line_of_sight': 2 waypoints" in content
