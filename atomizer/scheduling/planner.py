"""Execution planner - runs the full scheduling pipeline.

Validation always completes before any derived artifact is computed, and
any failure propagates unchanged: a partial plan is never returned.
"""

from collections.abc import Iterable

from loguru import logger

from atomizer.decomposition.models import (
    AtomizationPayload,
    DependencyEdge,
    ProjectInfo,
    Task,
)
from atomizer.scheduling.cost_estimator import CostEstimator
from atomizer.scheduling.critical_path import CriticalPathAnalyzer
from atomizer.scheduling.graph_builder import GraphBuilder
from atomizer.scheduling.grouper import ParallelGrouper
from atomizer.scheduling.models import ExecutionPlan
from atomizer.scheduling.sequencer import TopologicalSequencer


class ExecutionPlanner:
    """
    Turn validated task records into an ExecutionPlan.

    Example:
        >>> planner = ExecutionPlanner()
        >>> plan = planner.plan(tasks, edges)
        >>> plan.execution_order
        ('A', 'B', 'C')
        >>> plan.cost.parallel_time
        30
    """

    def __init__(
        self,
        builder: GraphBuilder | None = None,
        sequencer: TopologicalSequencer | None = None,
        grouper: ParallelGrouper | None = None,
        analyzer: CriticalPathAnalyzer | None = None,
        estimator: CostEstimator | None = None,
    ) -> None:
        self.builder = builder or GraphBuilder()
        self.sequencer = sequencer or TopologicalSequencer()
        self.grouper = grouper or ParallelGrouper()
        self.analyzer = analyzer or CriticalPathAnalyzer(self.sequencer)
        self.estimator = estimator or CostEstimator()

    def plan(
        self,
        tasks: Iterable[Task],
        edges: Iterable[DependencyEdge] = (),
        project: ProjectInfo | None = None,
    ) -> ExecutionPlan:
        """
        Validate the task set and compute every scheduling artifact.

        Args:
            tasks: Task records in input order.
            edges: Dependency edges in input order.
            project: Optional project header to carry into the plan.

        Returns:
            ExecutionPlan with order, groups, critical path and cost.

        Raises:
            SchedulingError: If the task set fails structural validation.
        """
        tasks = tuple(tasks)
        logger.info(f"Planning execution for {len(tasks)} tasks")

        graph = self.builder.build(tasks, edges)

        order = self.sequencer.order(graph)
        groups = self.grouper.groups(graph)
        critical_path = self.analyzer.analyze(graph, order)
        cost = self.estimator.estimate(graph, groups)

        logger.info(
            f"Planned {len(order)} tasks into {len(groups)} groups; "
            f"critical path {critical_path.length} min, "
            f"parallel {cost.parallel_time} min vs sequential {cost.sequential_time} min"
        )

        return ExecutionPlan(
            project=project,
            tasks=tasks,
            execution_order=order,
            parallel_groups=groups,
            critical_path=critical_path,
            cost=cost,
        )

    def plan_payload(self, payload: AtomizationPayload) -> ExecutionPlan:
        """Plan a parsed atomization payload."""
        return self.plan(payload.tasks, payload.dependencies, payload.project)
