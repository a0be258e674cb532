
import logging
import math
from typing import List, Optional

from global_planner.types import Pose, Vector3
from global_planner.errors import PathTooShortToSimplify
from global_planner.collision import SegmentChecker
from global_planner.map.base import MapBase

logger = logging.getLogger(__name__)


def normalize_angle(angle: float) -> float:
    return (angle + math.pi) % (2 * math.pi) - math.pi


class PathSimplifier:
    """
    Two-pass waypoint reduction for grid paths.

    Pass 1 (collinearity) drops a waypoint whose incoming and outgoing bearings
    are the same. Pass 2 (line of sight) drops a waypoint when the straight
    segment bypassing it is collision-free on the grid.

    Both passes keep the first and the last point of their input.
    """
    def __init__(self,
                 grid_map: MapBase,
                 segment_checker: Optional[SegmentChecker] = None,
                 angle_tolerance: float = 0.0):
        self.grid_map = grid_map
        self.segment_checker = segment_checker if segment_checker is not None else SegmentChecker()
        # 0.0 keeps exact float equality; grid steps give exactly representable bearings
        self.angle_tolerance = angle_tolerance

    def simplify(self, path: List[Vector3]) -> List[Vector3]:
        """
        Run pass 1 then pass 2.

        Args:
            path: Reconstructed waypoints, start first.

        Returns:
            Reduced waypoints.

        Raises:
            PathTooShortToSimplify: path has fewer than 2 points.
        """
        return self.reduce_line_of_sight(self.reduce_collinear(path))

    def reduce_collinear(self, path: List[Vector3]) -> List[Vector3]:
        self._require_min_length(path)
        if len(path) == 2:
            return list(path)

        reduced = [path[0], path[1]]
        for curr in path[2:]:
            prev2, prev1 = reduced[-2], reduced[-1]
            if self._same_bearing(prev2.bearing_to(prev1), prev1.bearing_to(curr)):
                reduced.pop()
            reduced.append(curr)

        logger.debug("[Simplifier] Collinear reduction: %d -> %d", len(path), len(reduced))
        return reduced

    def reduce_line_of_sight(self, path: List[Vector3]) -> List[Vector3]:
        self._require_min_length(path)
        if len(path) == 2:
            return list(path)

        reduced = [path[0], path[1]]
        for curr in path[2:]:
            prev2 = reduced[-2]
            # prev2 -> curr is safe, so prev1 is redundant
            if self.segment_checker.is_segment_free(prev2, curr, self.grid_map):
                reduced.pop()
            reduced.append(curr)

        logger.debug("[Simplifier] Line-of-sight reduction: %d -> %d", len(path), len(reduced))
        return reduced

    def _same_bearing(self, a: float, b: float) -> bool:
        if self.angle_tolerance <= 0.0:
            return a == b
        return abs(normalize_angle(a - b)) <= self.angle_tolerance

    @staticmethod
    def _require_min_length(path: List[Vector3]):
        if path is None or len(path) < 2:
            n = 0 if path is None else len(path)
            raise PathTooShortToSimplify(f"Need at least 2 waypoints to simplify, got {n}")


def to_poses(path: List[Vector3]) -> List[Pose]:
    """
    Attach headings to waypoints: each pose faces along the segment that
    reaches it; the first pose faces along the first segment.
    """
    if not path:
        return []
    if len(path) == 1:
        return [Pose(path[0], 0.0)]

    poses = [Pose(path[0], path[0].bearing_to(path[1]))]
    for prev, curr in zip(path[:-1], path[1:]):
        poses.append(Pose(curr, prev.bearing_to(curr)))
    return poses


def path_length(path: List[Vector3]) -> float:
    """Sum of consecutive 3D Euclidean distances."""
    if not path or len(path) < 2:
        return 0.0
    return sum(a.distance_to(b) for a, b in zip(path[:-1], path[1:]))
