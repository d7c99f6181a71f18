import pytest

from primviz.graph_model import GraphModel


class FakeScheduler:
    """Stands in for ``tk.Tk.after``: callbacks run only when the test says so."""

    def __init__(self):
        self.pending = {}
        self.delays = []
        self._next = 0

    def after(self, delay_ms, callback):
        self._next += 1
        handle = f"after#{self._next}"
        self.pending[handle] = callback
        self.delays.append(delay_ms)
        return handle

    def after_cancel(self, handle):
        self.pending.pop(handle, None)

    def tick(self):
        handle = next(iter(self.pending))
        self.pending.pop(handle)()

    def run_all(self, limit=10000):
        while self.pending and limit:
            self.tick()
            limit -= 1


def build_graph(edges, extra_nodes=0):
    """Graph with enough nodes for the labels in ``edges`` plus ``extra_nodes`` isolated ones."""
    graph = GraphModel()
    labels = {l for a, b, _ in edges for l in (a, b)}
    while graph.node_count() < len(labels) + extra_nodes:
        graph.add_node((graph.node_count() * 10, 0))
    for a, b, w in edges:
        graph.add_edge(a, b, w)
    graph.drain_changes()
    return graph


SCENARIO_EDGES = [("A", "B", 2), ("A", "C", 5), ("B", "C", 1), ("B", "D", 4), ("C", "D", 1)]


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def scenario():
    return build_graph(SCENARIO_EDGES)
