"""Graph builder - validates task records and builds the dependency graph.

Every downstream scheduling component reads the immutable TaskGraph built
here. Validation happens in one place and in a fixed order, so a task set
that gets past GraphBuilder.build() is safe to sequence, group and cost.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from loguru import logger

from atomizer.core.exceptions import (
    CyclicDependencyError,
    DuplicateTaskIdError,
    EmptyTaskSetError,
    UnknownTaskReference,
)
from atomizer.decomposition.models import DependencyEdge, Task
from atomizer.scheduling.duration import parse_duration
from atomizer.scheduling.traversal import TraversalState, walk_post_order

# =============================================================================
# GRAPH
# =============================================================================


@dataclass(frozen=True)
class TaskGraph:
    """
    Read-only dependency graph over one task set.

    Adjacency is kept in both directions. ``dependencies`` preserves the
    order of the ``dependsOn`` lists; ``dependents`` is ordered by input
    position.
    """

    task_ids: tuple[str, ...]
    tasks: Mapping[str, Task]
    dependencies: Mapping[str, tuple[str, ...]]
    dependents: Mapping[str, tuple[str, ...]]
    durations: Mapping[str, int]
    positions: Mapping[str, int]
    validated: bool = False

    def __len__(self) -> int:
        return len(self.task_ids)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.tasks

    def task(self, task_id: str) -> Task:
        return self.tasks[task_id]

    def duration(self, task_id: str) -> int:
        """Duration of a task in minutes."""
        return self.durations[task_id]

    def dependencies_of(self, task_id: str) -> tuple[str, ...]:
        return self.dependencies[task_id]

    def dependents_of(self, task_id: str) -> tuple[str, ...]:
        return self.dependents[task_id]

    def by_position(self, task_ids: Iterable[str]) -> list[str]:
        """Sort task ids by their position in the original input."""
        return sorted(task_ids, key=self.positions.__getitem__)


# =============================================================================
# CYCLE DETECTION
# =============================================================================


def find_cycle(
    graph: TaskGraph,
    among: Iterable[str] | None = None,
) -> tuple[str, ...] | None:
    """
    Find one dependency cycle using a three-state depth-first search.

    Args:
        graph: Graph to inspect.
        among: Restrict the search to these task ids (all tasks if omitted).

    Returns:
        Cycle members in traversal order, or None if the graph is acyclic.

    Example:
        >>> find_cycle(graph)  # A depends on B, B depends on A
        ('A', 'B')
    """
    if among is None:
        roots: Iterable[str] = graph.task_ids
        allowed = None
    else:
        allowed = set(among)
        roots = [tid for tid in graph.task_ids if tid in allowed]

    def neighbours(task_id: str) -> Iterable[str]:
        deps = graph.dependencies[task_id]
        if allowed is None:
            return deps
        return [d for d in deps if d in allowed]

    try:
        walk_post_order(roots, neighbours, TraversalState())
    except CyclicDependencyError as e:
        return e.cycle
    return None


# =============================================================================
# BUILDER
# =============================================================================


class GraphBuilder:
    """
    Validate raw task/dependency records and build a TaskGraph.

    Checks run in a fixed order and the first failure wins: empty task set,
    duplicate ids, unknown references, unparseable durations, cycles.

    Example:
        >>> graph = GraphBuilder().build(tasks, edges)
        >>> graph.dependencies_of("task_2")
        ('task_1',)
    """

    def build(
        self,
        tasks: Iterable[Task],
        edges: Iterable[DependencyEdge] = (),
    ) -> TaskGraph:
        """
        Build a fully validated graph.

        Args:
            tasks: Task records in input order.
            edges: Dependency edges in input order.

        Returns:
            Validated, immutable TaskGraph.

        Raises:
            EmptyTaskSetError: If no tasks are given.
            DuplicateTaskIdError: If two tasks share an id.
            UnknownTaskReference: If an edge names a missing task.
            DurationParseError: If an estimated time cannot be parsed.
            CyclicDependencyError: If the dependencies form a cycle.
        """
        graph = self.assemble(tasks, edges)

        cycle = find_cycle(graph)
        if cycle is not None:
            logger.warning(f"Circular dependency among tasks: {', '.join(cycle)}")
            raise CyclicDependencyError(cycle)

        logger.debug(f"Validated dependency graph with {len(graph)} tasks")
        return replace(graph, validated=True)

    def assemble(
        self,
        tasks: Iterable[Task],
        edges: Iterable[DependencyEdge] = (),
    ) -> TaskGraph:
        """
        Build a graph without checking for cycles.

        Structural checks other than acyclicity still apply. Downstream
        components detect cycles themselves if handed such a graph.
        """
        tasks = tuple(tasks)
        edges = tuple(edges)

        if not tasks:
            logger.warning("Rejected empty task set")
            raise EmptyTaskSetError()

        task_map: dict[str, Task] = {}
        for task in tasks:
            if task.id in task_map:
                logger.warning(f"Duplicate task id: {task.id}")
                raise DuplicateTaskIdError(task.id)
            task_map[task.id] = task

        task_ids = tuple(task_map)
        dependencies: dict[str, list[str]] = {tid: [] for tid in task_ids}

        for edge in edges:
            if edge.task_id not in task_map:
                logger.warning(f"Edge for unknown task: {edge.task_id}")
                raise UnknownTaskReference(edge.task_id)

            merged = dependencies[edge.task_id]
            for dep_id in edge.depends_on:
                if dep_id not in task_map:
                    logger.warning(f"Task {edge.task_id} depends on unknown task {dep_id}")
                    raise UnknownTaskReference(dep_id)
                if dep_id not in merged:
                    merged.append(dep_id)

        durations = {task.id: parse_duration(task.estimated_time) for task in tasks}

        dependents: dict[str, list[str]] = {tid: [] for tid in task_ids}
        for task_id in task_ids:
            for dep_id in dependencies[task_id]:
                dependents[dep_id].append(task_id)

        return TaskGraph(
            task_ids=task_ids,
            tasks=MappingProxyType(task_map),
            dependencies=MappingProxyType({k: tuple(v) for k, v in dependencies.items()}),
            dependents=MappingProxyType({k: tuple(v) for k, v in dependents.items()}),
            durations=MappingProxyType(durations),
            positions=MappingProxyType({tid: i for i, tid in enumerate(task_ids)}),
        )
