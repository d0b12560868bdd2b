"""Unit tests for graph building and validation."""

import pytest

from atomizer.core.exceptions import (
    CyclicDependencyError,
    DuplicateTaskIdError,
    DurationParseError,
    EmptyTaskSetError,
    SchedulingError,
    UnknownTaskReference,
)
from atomizer.scheduling.graph_builder import GraphBuilder, find_cycle


class TestGraphBuilder:
    """Tests for GraphBuilder.build."""

    def test_build_adjacency(self, abc_tasks: list, abc_edges: list) -> None:
        """Test adjacency is built in both directions."""
        graph = GraphBuilder().build(abc_tasks, abc_edges)

        assert graph.validated
        assert graph.task_ids == ("A", "B", "C")
        assert graph.dependencies_of("A") == ()
        assert graph.dependencies_of("B") == ("A",)
        assert graph.dependents_of("A") == ("B", "C")
        assert graph.duration("B") == 20
        assert len(graph) == 3
        assert "C" in graph

    def test_edges_for_same_task_are_merged(self, make_task, make_edge) -> None:
        tasks = [make_task("a"), make_task("b"), make_task("c")]
        edges = [make_edge("c", "b"), make_edge("c", "a", "b")]

        graph = GraphBuilder().build(tasks, edges)

        assert graph.dependencies_of("c") == ("b", "a")

    def test_tasks_without_edges(self, make_task) -> None:
        graph = GraphBuilder().build([make_task("solo")])
        assert graph.dependencies_of("solo") == ()

    def test_inputs_not_mutated(self, abc_tasks: list, abc_edges: list) -> None:
        tasks_before = list(abc_tasks)
        edges_before = list(abc_edges)

        GraphBuilder().build(abc_tasks, abc_edges)

        assert abc_tasks == tasks_before
        assert abc_edges == edges_before

    def test_graph_mappings_read_only(self, abc_tasks: list, abc_edges: list) -> None:
        graph = GraphBuilder().build(abc_tasks, abc_edges)

        with pytest.raises(TypeError):
            graph.dependencies["A"] = ("B",)

    def test_empty_task_set(self) -> None:
        with pytest.raises(EmptyTaskSetError):
            GraphBuilder().build([], [])

    def test_duplicate_ids(self, make_task) -> None:
        with pytest.raises(DuplicateTaskIdError) as exc_info:
            GraphBuilder().build([make_task("a"), make_task("a")])

        assert exc_info.value.task_id == "a"

    def test_unknown_dependency(self, make_task, make_edge) -> None:
        """Test a dangling dependsOn entry is rejected."""
        tasks = [make_task("A"), make_task("B"), make_task("C")]

        with pytest.raises(UnknownTaskReference) as exc_info:
            GraphBuilder().build(tasks, [make_edge("C", "task_99")])

        assert exc_info.value.task_id == "task_99"

    def test_unknown_edge_owner(self, make_task, make_edge) -> None:
        with pytest.raises(UnknownTaskReference) as exc_info:
            GraphBuilder().build([make_task("A")], [make_edge("ghost", "A")])

        assert exc_info.value.task_id == "ghost"

    def test_bad_duration(self, make_task) -> None:
        with pytest.raises(DurationParseError) as exc_info:
            GraphBuilder().build([make_task("a", "whenever")])

        assert exc_info.value.raw == "whenever"

    def test_two_task_cycle(self, make_task, make_edge) -> None:
        """Test A <-> B is reported with both members."""
        tasks = [make_task("A"), make_task("B")]
        edges = [make_edge("A", "B"), make_edge("B", "A")]

        with pytest.raises(CyclicDependencyError) as exc_info:
            GraphBuilder().build(tasks, edges)

        assert exc_info.value.cycle == ("A", "B")
        assert set(exc_info.value.cycle) == {"A", "B"}

    def test_self_dependency(self, make_task, make_edge) -> None:
        with pytest.raises(CyclicDependencyError) as exc_info:
            GraphBuilder().build([make_task("a")], [make_edge("a", "a")])

        assert exc_info.value.cycle == ("a",)

    def test_cycle_excludes_tail(self, make_task, make_edge) -> None:
        """Test only the looping members are reported, not the path into the loop."""
        tasks = [make_task(t) for t in ("start", "x", "y", "z")]
        edges = [
            make_edge("start", "x"),
            make_edge("x", "y"),
            make_edge("y", "z"),
            make_edge("z", "x"),
        ]

        with pytest.raises(CyclicDependencyError) as exc_info:
            GraphBuilder().build(tasks, edges)

        assert exc_info.value.cycle == ("x", "y", "z")

    def test_error_precedence(self, make_task, make_edge) -> None:
        """Test unknown references are reported before cycles and durations."""
        tasks = [make_task("a", "never"), make_task("b")]
        edges = [make_edge("a", "b"), make_edge("b", "a", "missing")]

        with pytest.raises(UnknownTaskReference):
            GraphBuilder().build(tasks, edges)

    def test_duration_before_cycle(self, make_task, make_edge) -> None:
        tasks = [make_task("a", "never"), make_task("b")]
        edges = [make_edge("a", "b"), make_edge("b", "a")]

        with pytest.raises(DurationParseError):
            GraphBuilder().build(tasks, edges)

    def test_all_errors_are_scheduling_errors(self) -> None:
        with pytest.raises(SchedulingError):
            GraphBuilder().build([])

    def test_long_chain_does_not_recurse(self, make_task, make_edge) -> None:
        """Test chains longer than the recursion limit are handled."""
        count = 5000
        tasks = [make_task(f"t{i}", 1) for i in range(count)]
        edges = [make_edge(f"t{i}", f"t{i - 1}") for i in range(1, count)]

        graph = GraphBuilder().build(tasks, edges)

        assert graph.validated


class TestAssemble:
    """Tests for building without the cycle check."""

    def test_assemble_allows_cycles(self, make_task, make_edge) -> None:
        tasks = [make_task("A"), make_task("B")]
        edges = [make_edge("A", "B"), make_edge("B", "A")]

        graph = GraphBuilder().assemble(tasks, edges)

        assert not graph.validated
        assert find_cycle(graph) == ("A", "B")

    def test_find_cycle_restricted(self, make_task, make_edge) -> None:
        tasks = [make_task(t) for t in ("a", "b", "c")]
        edges = [make_edge("a", "b"), make_edge("b", "a"), make_edge("c", "a")]
        graph = GraphBuilder().assemble(tasks, edges)

        assert find_cycle(graph, among=["c"]) is None
        assert set(find_cycle(graph, among=["a", "b", "c"])) == {"a", "b"}

    def test_find_cycle_acyclic(self, abc_tasks: list, abc_edges: list) -> None:
        graph = GraphBuilder().assemble(abc_tasks, abc_edges)
        assert find_cycle(graph) is None
