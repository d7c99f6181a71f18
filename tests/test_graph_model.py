import math

import pytest

from primviz.errors import (
    DuplicateEdgeError,
    MutationWhileRunningError,
    UnknownEdgeError,
    UnknownNodeError,
)
from primviz.graph_model import GraphModel, label_for_index

from conftest import build_graph


class TestLabels:

    def test_single_letters_then_pairs(self):
        """Labels run A..Z, then AA..AZ, then BA."""
        assert label_for_index(0) == "A"
        assert label_for_index(25) == "Z"
        assert label_for_index(26) == "AA"
        assert label_for_index(27) == "AB"
        assert label_for_index(51) == "AZ"
        assert label_for_index(52) == "BA"
        assert label_for_index(26 + 26 * 26) == "AAA"

    def test_labels_never_reused_after_delete(self):
        graph = GraphModel()
        a = graph.add_node((0, 0))
        graph.add_node((1, 1))
        graph.remove_node(a.label)
        assert graph.add_node((2, 2)).label == "C"
        assert graph.labels() == ["B", "C"]

    def test_clear_resets_counter(self):
        graph = GraphModel()
        for i in range(3):
            graph.add_node((i, i))
        graph.clear()
        assert graph.node_count() == 0
        assert graph.add_node((0, 0)).label == "A"

    def test_twenty_seventh_node_is_aa(self):
        graph = GraphModel()
        nodes = [graph.add_node((i, 0)) for i in range(27)]
        assert nodes[-1].label == "AA"
        assert len(set(graph.labels())) == 27


class TestEdges:

    def test_duplicate_rejected_either_direction(self):
        """Adding B-A after A-B fails and keeps the original weight."""
        graph = build_graph([("A", "B", 5)])
        with pytest.raises(DuplicateEdgeError):
            graph.add_edge("B", "A", 7)
        assert graph.edge_count() == 1
        assert graph.find_edge("A", "B").weight == 5

    def test_self_loop_rejected(self):
        graph = build_graph([], extra_nodes=1)
        with pytest.raises(DuplicateEdgeError):
            graph.add_edge("A", "A", 1)
        assert graph.edge_count() == 0

    def test_unknown_endpoint(self):
        graph = build_graph([], extra_nodes=1)
        with pytest.raises(UnknownNodeError):
            graph.add_edge("A", "Q", 1)

    @pytest.mark.parametrize("weight", [math.inf, -math.inf, math.nan])
    def test_non_finite_weight_rejected(self, weight):
        graph = build_graph([], extra_nodes=2)
        with pytest.raises(ValueError):
            graph.add_edge("A", "B", weight)
        assert graph.edge_count() == 0

    def test_negative_weight_allowed(self):
        graph = build_graph([("A", "B", -3)])
        assert graph.find_edge("B", "A").weight == -3.0

    def test_remove_edge_by_id(self):
        graph = build_graph([("A", "B", 1), ("B", "C", 2)])
        removed = graph.remove_edge("C-B")
        assert removed.weight == 2
        assert graph.edge_count() == 1
        assert graph.node_count() == 3
        with pytest.raises(UnknownEdgeError):
            graph.remove_edge("B-C")

    def test_neighbors(self):
        graph = build_graph([("A", "B", 1), ("A", "C", 2), ("B", "C", 3)])
        others = sorted(node.label for _, node in graph.neighbors("A"))
        assert others == ["B", "C"]
        assert graph.has_edge_between("C", "B")


class TestRemoveNode:

    def test_cascading_delete(self):
        graph = build_graph([("A", "B", 1), ("A", "C", 2), ("B", "C", 3), ("C", "D", 4)])
        removed = graph.remove_node("C")
        assert sorted(e.edge_id for e in removed) == ["A-C", "B-C", "C-D"]
        assert graph.edge_count() == 1
        for edge in graph.edges:
            assert graph.has_node(edge.a) and graph.has_node(edge.b)

    def test_changes_report_edges_then_node(self):
        graph = build_graph([("A", "B", 1)])
        graph.remove_node("A")
        kinds = [c.kind for c in graph.drain_changes()]
        assert kinds == ["edge_removed", "node_removed"]
        assert graph.drain_changes() == []

    def test_unknown_node(self):
        with pytest.raises(UnknownNodeError):
            GraphModel().remove_node("A")


class TestSourceAndMove:

    def test_only_one_source(self):
        graph = build_graph([("A", "B", 1)])
        graph.mark_source("A")
        graph.mark_source("B")
        assert [n.label for n in graph.nodes if n.is_source] == ["B"]
        graph.mark_source(None)
        assert not any(n.is_source for n in graph.nodes)

    def test_move_node_returns_touching_edges(self):
        graph = build_graph([("A", "B", 1), ("B", "C", 1)])
        touched = graph.move_node("A", (50, 60))
        assert [e.edge_id for e in touched] == ["A-B"]
        assert graph.get_node("A").position == (50.0, 60.0)


class TestLocking:

    def test_mutations_refused_while_locked(self):
        graph = build_graph([("A", "B", 1)])
        graph.lock()
        with pytest.raises(MutationWhileRunningError):
            graph.add_node((0, 0))
        with pytest.raises(MutationWhileRunningError):
            graph.add_edge("A", "B", 3)
        with pytest.raises(MutationWhileRunningError):
            graph.remove_node("A")
        with pytest.raises(MutationWhileRunningError):
            graph.remove_edge("A-B")
        with pytest.raises(MutationWhileRunningError):
            graph.clear()
        assert graph.node_count() == 2
        assert graph.edge_count() == 1
        graph.unlock()
        graph.add_node((0, 0))


class TestNetworkxExport:

    def test_weights_and_positions(self):
        graph = build_graph([("A", "B", 2.5), ("B", "C", 1)])
        G = graph.to_networkx()
        assert sorted(G.nodes()) == ["A", "B", "C"]
        assert G["B"]["A"]["weight"] == 2.5
        assert G.nodes["B"]["pos"] == (10.0, 0.0)


class TestRevision:

    def test_structural_edits_bump_revision(self):
        graph = GraphModel()
        seen = [graph.revision]
        graph.add_node((0, 0))
        seen.append(graph.revision)
        graph.add_node((1, 0))
        graph.add_edge("A", "B", 1)
        seen.append(graph.revision)
        graph.remove_edge("A-B")
        seen.append(graph.revision)
        graph.clear()
        seen.append(graph.revision)
        assert seen == sorted(set(seen))

    def test_refused_and_visual_edits_keep_revision(self):
        graph = build_graph([("A", "B", 1)])
        before = graph.revision
        with pytest.raises(DuplicateEdgeError):
            graph.add_edge("B", "A", 2)
        graph.move_node("A", (9, 9))
        graph.mark_source("B")
        graph.reset_visual_state()
        assert graph.revision == before
