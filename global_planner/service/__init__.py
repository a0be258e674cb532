# global_planner/service/__init__.py

from .handoff import LocalPlannerClient, NullLocalPlannerClient, CallbackLocalPlannerClient
from .path_store import PathRecorder, CsvPathRecorder, load_path
from .planning_service import PlanningService, PlanResult

__all__ = [
    "LocalPlannerClient",
    "NullLocalPlannerClient",
    "CallbackLocalPlannerClient",
    "PathRecorder",
    "CsvPathRecorder",
    "load_path",
    "PlanningService",
    "PlanResult",
]
