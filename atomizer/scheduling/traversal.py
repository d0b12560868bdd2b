"""Depth-first traversal over the dependency relation.

The walk is iterative so that long dependency chains never hit the
interpreter recursion limit, and all of its bookkeeping lives in an explicit
TraversalState owned by the caller.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from atomizer.core.exceptions import CyclicDependencyError

UNVISITED, IN_PROGRESS, DONE = 0, 1, 2


@dataclass
class TraversalState:
    """Per-walk node markers and the current DFS stack."""

    marks: dict[str, int] = field(default_factory=dict)
    stack: list[str] = field(default_factory=list)

    def mark(self, node: str) -> int:
        return self.marks.get(node, UNVISITED)

    def enter(self, node: str) -> None:
        self.marks[node] = IN_PROGRESS
        self.stack.append(node)

    def leave(self, node: str) -> None:
        self.stack.pop()
        self.marks[node] = DONE

    def cycle_from(self, node: str) -> tuple[str, ...]:
        """Stack members from ``node`` (inclusive) to the top."""
        return tuple(self.stack[self.stack.index(node):])


def walk_post_order(
    roots: Iterable[str],
    neighbours: Callable[[str], Iterable[str]],
    state: TraversalState | None = None,
) -> list[str]:
    """
    Visit nodes depth-first and return them in post-order.

    A node is emitted only after every node reachable through ``neighbours``
    has been emitted.

    Args:
        roots: Start nodes, tried in the given order.
        neighbours: Successors of a node, tried in the given order.
        state: Traversal state to continue from (a fresh one if omitted).

    Returns:
        Node ids in post-order.

    Raises:
        CyclicDependencyError: If a node in progress is reached again.
    """
    state = state if state is not None else TraversalState()
    order: list[str] = []

    for root in roots:
        if state.mark(root) != UNVISITED:
            continue

        state.enter(root)
        pending = [iter(neighbours(root))]

        while pending:
            node = state.stack[-1]
            for successor in pending[-1]:
                mark = state.mark(successor)
                if mark == IN_PROGRESS:
                    raise CyclicDependencyError(state.cycle_from(successor))
                if mark == UNVISITED:
                    state.enter(successor)
                    pending.append(iter(neighbours(successor)))
                    break
            else:
                pending.pop()
                state.leave(node)
                order.append(node)

    return order
