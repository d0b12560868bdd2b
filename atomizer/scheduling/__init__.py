"""Task scheduling - graph validation, ordering, grouping and estimates.

This module provides the scheduling engine behind an atomization result:
- Graph building (records -> validated dependency graph)
- Sequencing (graph -> linear execution order)
- Grouping (graph -> parallel batches)
- Critical path analysis (graph -> longest chain)
- Cost estimation (graph + batches -> time/cost totals)
"""

from atomizer.scheduling.cost_estimator import CostEstimator
from atomizer.scheduling.critical_path import CriticalPathAnalyzer
from atomizer.scheduling.duration import format_minutes, parse_duration
from atomizer.scheduling.graph_builder import GraphBuilder, TaskGraph, find_cycle
from atomizer.scheduling.grouper import ParallelGrouper
from atomizer.scheduling.models import (
    CostBreakdown,
    CostEstimate,
    CriticalPath,
    ExecutionPlan,
)
from atomizer.scheduling.planner import ExecutionPlanner
from atomizer.scheduling.sequencer import TopologicalSequencer

__all__ = [
    # Graph
    "GraphBuilder",
    "TaskGraph",
    "find_cycle",
    # Components
    "TopologicalSequencer",
    "ParallelGrouper",
    "CriticalPathAnalyzer",
    "CostEstimator",
    "ExecutionPlanner",
    # Results
    "CriticalPath",
    "CostBreakdown",
    "CostEstimate",
    "ExecutionPlan",
    # Durations
    "parse_duration",
    "format_minutes",
]
