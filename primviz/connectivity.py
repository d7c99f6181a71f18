"""Reachability over the graph model: gates the MST run and finds stray nodes."""

from typing import Set

from .graph_model import GraphModel

MIN_NODES = 2
MIN_EDGES = 1


def reachable_from(graph: GraphModel, source: str) -> Set[str]:
    """Labels reachable from ``source`` (itself included), edges taken as undirected."""
    graph.get_node(source)
    adj = graph.adjacency()
    visited = {source}
    stack = [source]
    # Explicit stack so large graphs don't hit the recursion limit.
    while stack:
        current = stack.pop()
        for edge in adj[current]:
            other = edge.other(current)
            if other not in visited:
                visited.add(other)
                stack.append(other)
    return visited


def unreachable_from(graph: GraphModel, source: str) -> Set[str]:
    return set(graph.labels()) - reachable_from(graph, source)


def is_connected(graph: GraphModel) -> bool:
    labels = graph.labels()
    if not labels:
        return True
    return len(reachable_from(graph, labels[0])) == len(labels)


def is_runnable(graph: GraphModel) -> bool:
    """Whether Prim's can run: enough nodes and edges, and a single component."""
    return (
        graph.node_count() >= MIN_NODES
        and graph.edge_count() >= MIN_EDGES
        and is_connected(graph)
    )
