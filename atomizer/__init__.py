"""
Atomizer - task-dependency scheduling for atomized projects.

Turns atomic tasks and their dependencies into an execution order, parallel
groups, a critical path and time/cost estimates.
"""

__version__ = "0.1.0"

from atomizer.core.orchestrator import Atomizer
from atomizer.scheduling.planner import ExecutionPlanner

__all__ = ["Atomizer", "ExecutionPlanner", "__version__"]
