"""Unit tests for TopologicalSequencer and ParallelGrouper."""

import pytest

from atomizer.core.exceptions import CyclicDependencyError
from atomizer.scheduling.graph_builder import GraphBuilder
from atomizer.scheduling.grouper import ParallelGrouper
from atomizer.scheduling.sequencer import TopologicalSequencer


@pytest.fixture
def diamond_graph(make_task, make_edge):
    """setup -> (api, ui) -> deploy, plus an independent docs task."""
    tasks = [
        make_task("deploy"),
        make_task("ui"),
        make_task("docs"),
        make_task("api"),
        make_task("setup"),
    ]
    edges = [
        make_edge("deploy", "api", "ui"),
        make_edge("ui", "setup"),
        make_edge("api", "setup"),
    ]
    return GraphBuilder().build(tasks, edges)


@pytest.fixture
def cyclic_graph(make_task, make_edge):
    tasks = [make_task("root"), make_task("A"), make_task("B"), make_task("after")]
    edges = [make_edge("A", "B"), make_edge("B", "A"), make_edge("after", "A")]
    return GraphBuilder().assemble(tasks, edges)


def assert_dependencies_first(graph, order) -> None:
    position = {task_id: i for i, task_id in enumerate(order)}
    for task_id in graph.task_ids:
        for dep_id in graph.dependencies_of(task_id):
            assert position[dep_id] < position[task_id]


class TestTopologicalSequencer:
    """Tests for TopologicalSequencer."""

    def test_abc_scenario(self, abc_tasks: list, abc_edges: list) -> None:
        graph = GraphBuilder().build(abc_tasks, abc_edges)
        assert TopologicalSequencer().order(graph) == ("A", "B", "C")

    def test_dependencies_before_dependents(self, diamond_graph) -> None:
        order = TopologicalSequencer().order(diamond_graph)

        assert sorted(order) == sorted(diamond_graph.task_ids)
        assert_dependencies_first(diamond_graph, order)

    def test_ties_follow_input_position(self, diamond_graph) -> None:
        """Test dependencies are visited by input position, not dependsOn order."""
        order = TopologicalSequencer().order(diamond_graph)

        # deploy lists api before ui, but ui comes first in the input
        assert order == ("setup", "ui", "api", "deploy", "docs")

    def test_independent_tasks_keep_input_order(self, make_task) -> None:
        tasks = [make_task("z"), make_task("a"), make_task("m")]
        graph = GraphBuilder().build(tasks)

        assert TopologicalSequencer().order(graph) == ("z", "a", "m")

    def test_cycle_raises(self, cyclic_graph) -> None:
        with pytest.raises(CyclicDependencyError) as exc_info:
            TopologicalSequencer().order(cyclic_graph)

        assert set(exc_info.value.cycle) == {"A", "B"}

    def test_repeatable(self, diamond_graph) -> None:
        sequencer = TopologicalSequencer()
        assert sequencer.order(diamond_graph) == sequencer.order(diamond_graph)


class TestParallelGrouper:
    """Tests for ParallelGrouper."""

    def test_abc_scenario(self, abc_tasks: list, abc_edges: list) -> None:
        graph = GraphBuilder().build(abc_tasks, abc_edges)
        assert ParallelGrouper().groups(graph) == (("A",), ("B", "C"))

    def test_layers(self, diamond_graph) -> None:
        groups = ParallelGrouper().groups(diamond_graph)

        assert groups == (("docs", "setup"), ("ui", "api"), ("deploy",))

    def test_each_task_once(self, diamond_graph) -> None:
        groups = ParallelGrouper().groups(diamond_graph)
        flat = [task_id for group in groups for task_id in group]

        assert sorted(flat) == sorted(diamond_graph.task_ids)
        assert len(flat) == len(set(flat))

    def test_concatenation_is_topological(self, diamond_graph) -> None:
        groups = ParallelGrouper().groups(diamond_graph)
        assert_dependencies_first(diamond_graph, [t for g in groups for t in g])

    def test_no_dependency_inside_group(self, diamond_graph) -> None:
        for group in ParallelGrouper().groups(diamond_graph):
            members = set(group)
            for task_id in group:
                assert not members.intersection(diamond_graph.dependencies_of(task_id))

    def test_task_waits_for_deepest_dependency(self, make_task, make_edge) -> None:
        """Test a task lands one layer after its latest dependency."""
        tasks = [make_task(t) for t in ("a", "b", "c", "d")]
        edges = [make_edge("b", "a"), make_edge("c", "b"), make_edge("d", "a", "c")]
        graph = GraphBuilder().build(tasks, edges)

        assert ParallelGrouper().groups(graph) == (("a",), ("b",), ("c",), ("d",))

    def test_cycle_raises(self, cyclic_graph) -> None:
        with pytest.raises(CyclicDependencyError) as exc_info:
            ParallelGrouper().groups(cyclic_graph)

        assert set(exc_info.value.cycle) == {"A", "B"}

    def test_sequencer_and_grouper_agree(self, diamond_graph) -> None:
        order = TopologicalSequencer().order(diamond_graph)
        groups = ParallelGrouper().groups(diamond_graph)

        assert sorted(order) == sorted(t for g in groups for t in g)
