"""Topological sequencer - one deterministic linear execution order."""

from loguru import logger

from atomizer.scheduling.graph_builder import TaskGraph
from atomizer.scheduling.traversal import TraversalState, walk_post_order


class TopologicalSequencer:
    """
    Order tasks so that every dependency precedes its dependents.

    Uses depth-first post-order over the dependency relation. Roots are
    taken in input order and each task's dependencies are visited by input
    position, so identical input always yields the same order.

    Example:
        >>> TopologicalSequencer().order(graph)
        ('A', 'B', 'C')
    """

    def order(self, graph: TaskGraph) -> tuple[str, ...]:
        """
        Compute the execution order.

        Args:
            graph: Graph built by GraphBuilder.

        Returns:
            Every task id exactly once, dependencies first.

        Raises:
            CyclicDependencyError: If the graph was not validated and has a cycle.
        """
        order = walk_post_order(
            graph.task_ids,
            lambda task_id: graph.by_position(graph.dependencies_of(task_id)),
            TraversalState(),
        )
        logger.debug(f"Sequenced {len(order)} tasks")
        return tuple(order)
