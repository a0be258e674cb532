# global_planner/errors.py


class PlanningError(Exception):
    """Base class for every failure the planning pipeline reports."""
    code = "PLANNING_ERROR"


class UnreachableEndpoint(PlanningError):
    """Start or goal does not resolve to a grid cell (or no pose is known yet)."""
    code = "UNREACHABLE_ENDPOINT"


class NoPathFound(PlanningError):
    """The open set was exhausted before the goal cell was expanded."""
    code = "NO_PATH_FOUND"


class BrokenParentChain(PlanningError):
    """Parent pointers do not lead back to the start cell. Internal invariant violation."""
    code = "BROKEN_PARENT_CHAIN"


class PathTooShortToSimplify(PlanningError):
    """Simplification needs at least two points."""
    code = "PATH_TOO_SHORT_TO_SIMPLIFY"
