# global_planner/planning/__init__.py
