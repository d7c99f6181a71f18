import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

from primviz.plot import draw_frame, node_positions, sample_graph, snapshots, visualize_run
from primviz.prim import generate


class TestSnapshots:

    def test_states_follow_events(self, scenario):
        frames = list(snapshots(generate(scenario, "A")))
        assert frames[0]['status'] == 'visit'
        assert frames[0]['visited'] == {'A'}
        assert frames[-1]['status'] == 'done'
        assert frames[-1]['cost'] == 4.0
        assert frames[-1]['mst_edges'] == [('A', 'B'), ('B', 'C'), ('C', 'D')]
        assert frames[-1]['rejected_edges'] == [('A', 'C'), ('B', 'D')]
        assert frames[-1]['step'] == 'Final MST Found! Total Weight: 4'

    def test_sample_graph_total(self):
        graph = sample_graph()
        frames = list(snapshots(generate(graph, 'A')))
        assert frames[-1]['cost'] == 39


class TestDrawing:

    def test_positions_flip_canvas_y(self, scenario):
        pos = node_positions(scenario.to_networkx())
        assert pos['B'] == (10.0, -0.0)

    def test_draw_every_frame(self, scenario):
        G = scenario.to_networkx()
        pos = node_positions(G)
        fig, ax = plt.subplots()
        for frame in snapshots(generate(scenario, "B")):
            draw_frame(ax, G, pos, frame)
        assert ax.get_title().startswith('Final MST Found!')
        plt.close(fig)

    def test_visualize_run(self, monkeypatch):
        monkeypatch.setattr(plt, "pause", lambda interval: None)
        monkeypatch.setattr(plt, "show", lambda: None)
        assert visualize_run(sample_graph(), 'D', delay_ms=10) == 39
        plt.close("all")
