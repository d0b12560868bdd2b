"""Parallel grouper - partitions tasks into concurrency-safe batches.

Group 0 holds every task without dependencies; group k holds every task
whose dependencies all sit in groups 0..k-1. Tasks inside one group never
depend on each other, so the runner may execute a whole group at once.
"""

from loguru import logger

from atomizer.core.exceptions import CyclicDependencyError
from atomizer.scheduling.graph_builder import TaskGraph, find_cycle


class ParallelGrouper:
    """
    Layered (Kahn-style) topological grouping.

    Example:
        >>> ParallelGrouper().groups(graph)
        (('A',), ('B', 'C'))
    """

    def groups(self, graph: TaskGraph) -> tuple[tuple[str, ...], ...]:
        """
        Partition the graph into ordered parallel groups.

        Args:
            graph: Graph built by GraphBuilder.

        Returns:
            Groups in execution order; members ordered by input position.

        Raises:
            CyclicDependencyError: If no remaining task can be scheduled.
        """
        remaining_deps = {
            task_id: len(graph.dependencies_of(task_id)) for task_id in graph.task_ids
        }
        ready = [task_id for task_id in graph.task_ids if remaining_deps[task_id] == 0]
        assigned = 0
        groups: list[tuple[str, ...]] = []

        while ready:
            group = tuple(graph.by_position(ready))
            groups.append(group)
            assigned += len(group)

            ready = []
            for task_id in group:
                for dependent in graph.dependents_of(task_id):
                    remaining_deps[dependent] -= 1
                    if remaining_deps[dependent] == 0:
                        ready.append(dependent)

        if assigned < len(graph):
            stuck = [tid for tid in graph.task_ids if remaining_deps[tid] > 0]
            logger.error(f"Cannot group remaining tasks: {stuck}")
            cycle = find_cycle(graph, among=stuck)
            raise CyclicDependencyError(cycle if cycle is not None else stuck)

        for i, group in enumerate(groups):
            logger.debug(f"Group {i}: {len(group)} tasks")

        return tuple(groups)
