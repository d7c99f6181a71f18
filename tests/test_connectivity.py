import pytest

from primviz.connectivity import is_connected, is_runnable, reachable_from, unreachable_from
from primviz.errors import UnknownNodeError
from primviz.graph_model import GraphModel

from conftest import build_graph


class TestConnectivity:

    def test_empty_graph_is_connected(self):
        assert is_connected(GraphModel()) is True

    def test_single_node_connected_but_not_runnable(self):
        graph = build_graph([], extra_nodes=1)
        assert is_connected(graph)
        assert not is_runnable(graph)

    def test_cycle_is_traversed(self, scenario):
        assert is_connected(scenario)
        assert reachable_from(scenario, "D") == {"A", "B", "C", "D"}

    def test_two_components(self):
        """A-B-C and D-E: reachability stays inside the source's component."""
        graph = build_graph([("A", "B", 1), ("B", "C", 1), ("C", "A", 1), ("D", "E", 1)])
        assert not is_connected(graph)
        assert not is_runnable(graph)
        assert reachable_from(graph, "B") == {"A", "B", "C"}
        assert unreachable_from(graph, "B") == {"D", "E"}
        assert reachable_from(graph, "E") == {"D", "E"}

    def test_isolated_node_breaks_connectivity(self):
        graph = build_graph([("A", "B", 1)], extra_nodes=1)
        assert not is_connected(graph)
        assert unreachable_from(graph, "A") == {"C"}

    def test_idempotent_and_read_only(self, scenario):
        before = [(e.edge_id, e.weight) for e in scenario.edges]
        assert is_connected(scenario) == is_connected(scenario)
        assert [(e.edge_id, e.weight) for e in scenario.edges] == before
        assert scenario.drain_changes() == []

    def test_long_path_does_not_recurse(self):
        graph = GraphModel()
        for i in range(2000):
            graph.add_node((i, 0))
        labels = graph.labels()
        for a, b in zip(labels, labels[1:]):
            graph.add_edge(a, b, 1)
        assert is_connected(graph)

    def test_unknown_source(self, scenario):
        with pytest.raises(UnknownNodeError):
            reachable_from(scenario, "Z")

    def test_runnable(self, scenario):
        assert is_runnable(scenario)
        assert not is_runnable(build_graph([], extra_nodes=2))
