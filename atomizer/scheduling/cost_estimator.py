"""Cost estimator - rolls task estimates up to project totals.

Cost is additive and ignores concurrency. Only wall-clock time benefits from
the parallel groups.
"""

from collections.abc import Sequence
from decimal import Decimal

from loguru import logger

from atomizer.scheduling.graph_builder import TaskGraph
from atomizer.scheduling.models import CostBreakdown, CostEstimate


class CostEstimator:
    """
    Aggregate durations and costs under sequential and parallel execution.

    Example:
        >>> estimate = CostEstimator().estimate(graph, groups)
        >>> estimate.sequential_time, estimate.parallel_time
        (35, 30)
    """

    def estimate(
        self,
        graph: TaskGraph,
        groups: Sequence[Sequence[str]],
    ) -> CostEstimate:
        """
        Compute project-level totals.

        Args:
            graph: Graph built by GraphBuilder.
            groups: Parallel groups from ParallelGrouper.

        Returns:
            CostEstimate with totals and per-bucket breakdowns.
        """
        sequential_time = sum(graph.duration(tid) for tid in graph.task_ids)
        parallel_time = sum(
            max((graph.duration(tid) for tid in group), default=0) for group in groups
        )
        total_cost = sum(
            (graph.task(tid).estimated_cost for tid in graph.task_ids),
            Decimal("0"),
        )

        estimate = CostEstimate(
            sequential_time=sequential_time,
            parallel_time=parallel_time,
            total_cost=total_cost,
            task_count=len(graph),
            by_category=self._breakdown(graph, lambda tid: graph.task(tid).category),
            by_complexity=self._breakdown(
                graph, lambda tid: graph.task(tid).complexity.value
            ),
        )

        logger.debug(
            f"Estimated {sequential_time} min sequential, {parallel_time} min parallel, "
            f"cost {total_cost}"
        )
        return estimate

    @staticmethod
    def _breakdown(graph: TaskGraph, key) -> dict[str, CostBreakdown]:
        """Sum count, time and cost per bucket, in first-seen order."""
        totals: dict[str, dict] = {}
        for task_id in graph.task_ids:
            bucket = totals.setdefault(
                key(task_id), {"count": 0, "time": 0, "cost": Decimal("0")}
            )
            bucket["count"] += 1
            bucket["time"] += graph.duration(task_id)
            bucket["cost"] += graph.task(task_id).estimated_cost

        return {name: CostBreakdown(**values) for name, values in totals.items()}
