"""
Prim's algorithm, instrumented to produce the steps the animation plays.

The generator reads the graph model and never mutates it. Given the same
graph and source it always yields the same sequence of events.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Optional, Set, Tuple, Union

from .errors import UnknownSourceError
from .graph_model import Edge, GraphModel, Node

logger = logging.getLogger(__name__)


# --- Events ---

@dataclass(frozen=True)
class Visit:
    node: Node


@dataclass(frozen=True)
class Consider:
    edge: Edge


@dataclass(frozen=True)
class Accept:
    edge: Edge
    running_cost: float


@dataclass(frozen=True)
class Reject:
    """Edge whose endpoints both ended up in the tree without it."""
    edge: Edge


@dataclass(frozen=True)
class Done:
    edges: FrozenSet[Edge]
    cost: float


MstEvent = Union[Visit, Consider, Accept, Reject, Done]


# --- Algorithm ---

def iter_events(graph: GraphModel, source: str) -> Iterator[MstEvent]:
    """
    Yields the steps of Prim's algorithm grown from ``source``.

    The frontier keeps one candidate edge per node outside the tree; a new
    edge replaces it only when strictly cheaper. Candidates are ranked by
    (weight, order they entered the frontier) so ties are broken the same way
    on every run.
    """
    if not graph.has_node(source):
        raise UnknownSourceError(f"Source node {source} is not in the graph")

    adj = graph.adjacency()
    total_nodes = graph.node_count()
    tree: Set[str] = set()
    accepted: List[Edge] = []
    running_cost = 0.0

    # outside label -> (weight, seq, edge) currently offered for it
    frontier: Dict[str, Tuple[float, int, Edge]] = {}
    heap: List[Tuple[float, int, str]] = []
    seq = itertools.count()

    def add_to_tree(label: str, via: Optional[Edge] = None) -> Iterator[MstEvent]:
        tree.add(label)
        frontier.pop(label, None)
        yield Visit(graph.get_node(label))
        for edge in adj[label]:
            if edge is via:
                continue
            other = edge.other(label)
            if other in tree:
                # Both ends are in the tree now: this edge would close a cycle.
                yield Reject(edge)
                continue
            current = frontier.get(other)
            if current is None or edge.weight < current[0]:
                entry = (edge.weight, next(seq), edge)
                frontier[other] = entry
                heapq.heappush(heap, (entry[0], entry[1], other))

    yield from add_to_tree(source)

    while heap and len(tree) < total_nodes:
        weight, order, label = heapq.heappop(heap)
        entry = frontier.get(label)
        # Stale heap item: node already joined or got a cheaper edge since.
        if entry is None or entry[1] != order:
            continue
        edge = entry[2]
        yield Consider(edge)
        running_cost += edge.weight
        accepted.append(edge)
        yield Accept(edge, running_cost)
        yield from add_to_tree(label, via=edge)

    if len(tree) < total_nodes:
        logger.warning("Prim's stopped after %d of %d nodes: graph is disconnected", len(tree), total_nodes)
    yield Done(frozenset(accepted), running_cost)


def generate(graph: GraphModel, source: str) -> List[MstEvent]:
    events = list(iter_events(graph, source))
    done = events[-1]
    logger.debug("Generated %d events from %s, MST cost %g", len(events), source, done.cost)
    return events


def accepted_edges(events: List[MstEvent]) -> List[Edge]:
    return [e.edge for e in events if isinstance(e, Accept)]


def mst_cost(events: List[MstEvent]) -> float:
    return sum(edge.weight for edge in accepted_edges(events))
