import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from global_planner.types import Pose, Vector3
from global_planner.config import PlannerConfig
from global_planner.errors import BrokenParentChain, PlanningError, UnreachableEndpoint
from global_planner.map.base import MapBase
from global_planner.collision import LineCheckConfig, SegmentChecker
from global_planner.planning.interfaces import IPlannerObserver
from global_planner.planning.planners.a_star import AStarPlanner
from global_planner.planning.reconstruct import retrace_path
from global_planner.planning.smoother import PathSimplifier, path_length, to_poses
from global_planner.visualization.observers import DebugObserver, EfficientObserver
from .handoff import LocalPlannerClient, NullLocalPlannerClient
from .path_store import CsvPathRecorder, PathRecorder

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    success: bool
    waypoints: List[Vector3] = field(default_factory=list)
    poses: List[Pose] = field(default_factory=list)
    error: Optional[PlanningError] = None
    stats: Dict[str, Any] = field(default_factory=dict)


class PlanningService:
    """
    Boundary between the transport layer and the planning core.

    Pose updates may arrive at any time from any thread; only the latest one
    is kept. A plan request snapshots that position as the start and runs
    search -> retrace -> simplify synchronously, then forwards the result to
    the local planner and, optionally, writes it to disk.
    """
    def __init__(self,
                 grid_map: MapBase,
                 planner: Optional[AStarPlanner] = None,
                 simplifier: Optional[PathSimplifier] = None,
                 local_planner: Optional[LocalPlannerClient] = None,
                 path_recorder: Optional[PathRecorder] = None,
                 config: Optional[PlannerConfig] = None):

        self.grid_map = grid_map
        self.config = config if config is not None else PlannerConfig()

        if planner is None:
            planner = AStarPlanner(max_expansions=self.config.max_expansions)
        self.planner = planner

        if simplifier is None:
            checker = SegmentChecker(LineCheckConfig(
                method=self.config.line_check_method,
                probe_step=self.config.probe_step,
            ))
            simplifier = PathSimplifier(grid_map, checker, self.config.collinear_angle_tolerance)
        self.simplifier = simplifier

        self.local_planner = local_planner if local_planner is not None else NullLocalPlannerClient()

        if path_recorder is None and self.config.path_output_file:
            path_recorder = CsvPathRecorder(self.config.path_output_file)
        self.path_recorder = path_recorder

        self._pose_lock = threading.Lock()
        self._current_position: Optional[Vector3] = None

        # Statistics
        self._stats_lock = threading.Lock()
        self.request_count = 0

    # --- Pose source ---

    def update_pose(self, position: Vector3):
        """Last write wins."""
        with self._pose_lock:
            self._current_position = position

    @property
    def current_position(self) -> Optional[Vector3]:
        with self._pose_lock:
            return self._current_position

    # --- Plan requests ---

    def handle_plan_request(self, target: Vector3,
                            observer: Optional[IPlannerObserver] = None) -> PlanResult:
        """
        Plan from the latest known pose to target.
        """
        start = self.current_position
        if start is None:
            logger.warning("[PlanningService] Plan request for %s before any pose was received", target)
            return PlanResult(success=False, error=UnreachableEndpoint("No robot pose received yet"))
        return self.plan(start, target, observer)

    def plan(self, start: Vector3, target: Vector3,
             observer: Optional[IPlannerObserver] = None) -> PlanResult:
        with self._stats_lock:
            self.request_count += 1
        owned_observer = observer is None
        if owned_observer:
            observer = self._make_observer()

        try:
            return self._run_pipeline(start, target, observer)
        finally:
            if owned_observer and isinstance(observer, DebugObserver):
                observer.close()

    def _run_pipeline(self, start: Vector3, target: Vector3,
                      observer: IPlannerObserver) -> PlanResult:
        stats: Dict[str, Any] = {}
        logger.info("[PlanningService] Planning from %s to %s", start, target)
        observer.log("Plan requested", 'INFO', {'start': start, 'target': target})

        try:
            t0 = time.perf_counter()
            search = self.planner.search(start, target, self.grid_map, observer)
            t1 = time.perf_counter()
            stats['expanded'] = search.expanded
            stats['search_time_s'] = t1 - t0
            logger.info("[PlanningService] Find Path completed in %f seconds.", t1 - t0)

            raw_path = retrace_path(search.start_cell, search.goal_cell, search.records, self.grid_map)
            t2 = time.perf_counter()
            stats['retrace_time_s'] = t2 - t1
            stats['raw_points'] = len(raw_path)
            stats['raw_cost'] = path_length(raw_path)
            observer.on_path_stage('raw', raw_path)
            logger.info("[PlanningService] Preliminary Path => Nodes: %d", len(raw_path))

            collinear = self.simplifier.reduce_collinear(raw_path)
            t3 = time.perf_counter()
            stats['collinear_time_s'] = t3 - t2
            stats['collinear_points'] = len(collinear)
            observer.on_path_stage('collinear', collinear)
            logger.info("[PlanningService] Path after first reduction => Nodes: %d", len(collinear))

            final_path = self.simplifier.reduce_line_of_sight(collinear)
            t4 = time.perf_counter()
            stats['line_of_sight_time_s'] = t4 - t3
            stats['final_points'] = len(final_path)
            observer.on_path_stage('line_of_sight', final_path)
            logger.info("[PlanningService] Path after second reduction => Nodes: %d", len(final_path))

        except BrokenParentChain as e:
            # 内部不变量被破坏，不重试
            logger.error("[PlanningService] Aborting plan: %s", e)
            observer.log(str(e), 'ERROR')
            return PlanResult(success=False, error=e, stats=stats)
        except PlanningError as e:
            logger.warning("[PlanningService] Planning failed (%s): %s", e.code, e)
            observer.log(str(e), 'WARN', {'code': e.code})
            return PlanResult(success=False, error=e, stats=stats)

        poses = to_poses(final_path)
        self._hand_off(poses)
        self._persist(final_path)

        return PlanResult(success=True, waypoints=final_path, poses=poses, stats=stats)

    def _hand_off(self, poses: List[Pose]):
        logger.info("[PlanningService] Sending %d poses to local planner...", len(poses))
        try:
            self.local_planner.send_path(poses)
        except Exception as e:
            # 下游传输失败不影响规划结果
            logger.warning("[PlanningService] Local planner hand-off failed: %s", e)

    def _persist(self, path: List[Vector3]):
        if self.path_recorder is None:
            return
        try:
            self.path_recorder.save(path)
        except (OSError, ValueError) as e:
            logger.warning("[PlanningService] Could not save path: %s", e)

    def _make_observer(self) -> IPlannerObserver:
        if self.config.debug_mode:
            return DebugObserver(log_dir=self.config.log_dir)
        return EfficientObserver()
