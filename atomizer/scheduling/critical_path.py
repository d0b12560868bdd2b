"""Critical path analysis over a validated task graph."""

from collections.abc import Sequence

from loguru import logger

from atomizer.scheduling.graph_builder import TaskGraph
from atomizer.scheduling.models import CriticalPath
from atomizer.scheduling.sequencer import TopologicalSequencer


class CriticalPathAnalyzer:
    """
    Find the longest duration-weighted path through the graph.

    The earliest finish of a task is its own duration plus the latest
    finish among its dependencies. The path is rebuilt backwards from the
    task that finishes last.

    Example:
        >>> result = CriticalPathAnalyzer().analyze(graph)
        >>> result.path, result.length
        (('A', 'B'), 30)
    """

    def __init__(self, sequencer: TopologicalSequencer | None = None) -> None:
        self._sequencer = sequencer or TopologicalSequencer()

    def analyze(
        self,
        graph: TaskGraph,
        order: Sequence[str] | None = None,
    ) -> CriticalPath:
        """
        Compute finish times and the critical path.

        Args:
            graph: Graph built by GraphBuilder.
            order: Any valid topological order (computed if omitted).

        Returns:
            CriticalPath with path, length and per-task finish times.
        """
        if order is None:
            order = self._sequencer.order(graph)

        finish: dict[str, int] = {}
        for task_id in order:
            deps = graph.dependencies_of(task_id)
            start = max((finish[d] for d in deps), default=0)
            finish[task_id] = start + graph.duration(task_id)

        # First task in processing order wins ties
        last = order[0]
        for task_id in order:
            if finish[task_id] > finish[last]:
                last = task_id

        path = [last]
        current = last
        while True:
            target = finish[current] - graph.duration(current)
            previous = next(
                (d for d in graph.dependencies_of(current) if finish[d] == target),
                None,
            )
            if previous is None:
                break
            path.append(previous)
            current = previous

        path.reverse()
        logger.debug(f"Critical path {' -> '.join(path)} ({finish[last]} min)")

        return CriticalPath(
            path=tuple(path),
            length=finish[last],
            finish_times={tid: finish[tid] for tid in graph.task_ids},
            durations=dict(graph.durations),
        )
