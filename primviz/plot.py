import logging
from typing import Dict, Iterator, List, Optional

import matplotlib.pyplot as plt
import networkx as nx

from .graph_model import GraphModel
from .prim import Accept, Consider, MstEvent, Reject, Visit, generate
from .playback import DEFAULT_DELAY_MS

logger = logging.getLogger(__name__)

# Define colors
DEFAULT_NODE_COLOR = '#a3a3a3'
VISITED_NODE_COLOR = '#f59e0b'  # Amber
DEFAULT_EDGE_COLOR = '#d4d4d4'
MST_EDGE_COLOR = '#10b981'  # Emerald
CONSIDERING_EDGE_COLOR = '#3b82f6'  # Blue
REJECTED_EDGE_COLOR = '#ef4444'  # Red


# --- Sample graph ---

def sample_graph() -> GraphModel:
    """The graph shown by ``primviz --demo``."""
    graph = GraphModel()
    layout = [(100, 300), (250, 120), (250, 480), (420, 300), (560, 140), (560, 460), (700, 300)]
    for pos in layout:
        graph.add_node(pos)
    edges_with_weights = [
        ('A', 'B', 7), ('A', 'D', 5),
        ('B', 'C', 8), ('B', 'D', 9), ('B', 'E', 7),
        ('C', 'E', 5),
        ('D', 'E', 15), ('D', 'F', 6),
        ('E', 'F', 8), ('E', 'G', 9),
        ('F', 'G', 11)
    ]
    for u, v, w in edges_with_weights:
        graph.add_edge(u, v, w)
    graph.drain_changes()
    return graph


# --- Frames ---

def snapshots(events: List[MstEvent]) -> Iterator[Dict]:
    """
    Yields the state of the drawing after each event of a Prim run.
    """
    visited = set()
    mst_edges = []
    rejected = []
    cost = 0.0
    for event in events:
        considered = None
        if isinstance(event, Visit):
            visited.add(event.node.label)
            status = 'visit'
            step = f'Visited {event.node.label}'
        elif isinstance(event, Consider):
            considered = event.edge.endpoints
            status = 'considering'
            step = f'Considering edge ({event.edge.a}, {event.edge.b}) with weight {event.edge.weight:g}'
        elif isinstance(event, Accept):
            considered = event.edge.endpoints
            mst_edges.append(event.edge.endpoints)
            cost = event.running_cost
            status = 'added'
            step = f'Added edge ({event.edge.a}, {event.edge.b}) | MST total = {cost:g}'
        elif isinstance(event, Reject):
            considered = event.edge.endpoints
            rejected.append(event.edge.endpoints)
            status = 'rejected'
            step = f'Rejected edge ({event.edge.a}, {event.edge.b}) - creates a cycle'
        else:
            cost = event.cost
            status = 'done'
            step = f'Final MST Found! Total Weight: {cost:g}'
        yield {
            'step': step,
            'mst_edges': list(mst_edges),
            'rejected_edges': list(rejected),
            'visited': set(visited),
            'considered_edge': considered,
            'status': status,
            'cost': cost,
        }


def node_positions(G: nx.Graph) -> Dict:
    pos = nx.get_node_attributes(G, 'pos')
    if len(pos) != G.number_of_nodes():
        pos = nx.spring_layout(G, seed=42)  # Seed for reproducible layouts
    else:
        # Canvas y grows downwards, matplotlib's grows upwards.
        pos = {n: (x, -y) for n, (x, y) in pos.items()}
    return pos


def draw_frame(ax, G: nx.Graph, pos: Dict, frame: Dict) -> None:
    ax.clear()
    edge_labels = {k: f'{w:g}' for k, w in nx.get_edge_attributes(G, 'weight').items()}

    # --- Draw Nodes ---
    node_colors = [VISITED_NODE_COLOR if n in frame['visited'] else DEFAULT_NODE_COLOR for n in G.nodes()]
    nx.draw_networkx_nodes(G, pos, ax=ax, node_color=node_colors, node_size=700)

    # --- Draw Edges ---
    # After the run only the tree stays solid
    done = frame['status'] == 'done'
    nx.draw_networkx_edges(G, pos, ax=ax, edge_color=DEFAULT_EDGE_COLOR, width=1.5,
                           alpha=0.3 if done else 1.0)
    if frame['rejected_edges'] and not done:
        nx.draw_networkx_edges(G, pos, ax=ax, edgelist=frame['rejected_edges'], edge_color=REJECTED_EDGE_COLOR, width=2.0)
    if frame['mst_edges']:
        nx.draw_networkx_edges(G, pos, ax=ax, edgelist=frame['mst_edges'], edge_color=MST_EDGE_COLOR, width=3.0)

    # Highlight the considered edge
    if frame['considered_edge']:
        color = CONSIDERING_EDGE_COLOR
        if frame['status'] == 'added':
            color = MST_EDGE_COLOR
        elif frame['status'] == 'rejected':
            color = REJECTED_EDGE_COLOR
        nx.draw_networkx_edges(G, pos, ax=ax, edgelist=[frame['considered_edge']], edge_color=color, width=3.5, style='dashed')

    # --- Draw Labels ---
    nx.draw_networkx_labels(G, pos, ax=ax, font_size=12, font_color='white', font_weight='bold')
    nx.draw_networkx_edge_labels(G, pos, edge_labels=edge_labels, ax=ax, font_color='black')

    ax.set_title(frame['step'], fontsize=14)


def visualize_run(graph: GraphModel, source: str, delay_ms: int = DEFAULT_DELAY_MS,
                  title: Optional[str] = None) -> float:
    """Play Prim's from ``source`` in a matplotlib window. Returns the MST cost."""
    events = generate(graph, source)
    G = graph.to_networkx()
    pos = node_positions(G)

    fig, ax = plt.subplots(figsize=(10, 8))
    fig.canvas.manager.set_window_title(title or f"Prim's Algorithm Visualization (Starting from Node {source})")

    for frame in snapshots(events):
        draw_frame(ax, G, pos, frame)
        plt.tight_layout()
        plt.pause(delay_ms / 1000.0)  # Pause to create animation effect

    cost = events[-1].cost
    logger.info("Prim's visualization complete, total weight %g", cost)
    plt.show()
    return cost
