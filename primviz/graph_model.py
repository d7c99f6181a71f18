"""
In-memory undirected weighted graph edited by the user.

The model owns every Node and Edge of the session. It never draws anything:
each mutation records a ``Change`` that the UI drains and turns into canvas
calls. While a Prim run is being played back the model is locked and all
mutations are refused.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

import networkx as nx

from .errors import (
    DuplicateEdgeError,
    MutationWhileRunningError,
    UnknownEdgeError,
    UnknownNodeError,
)

logger = logging.getLogger(__name__)

Position = Tuple[float, float]


# --- Labels ---

def label_for_index(index: int) -> str:
    """Label of the ``index``-th node ever added: A..Z, then AA, AB, ..., AZ, BA, ..."""
    if index < 0:
        raise ValueError("label index must be non-negative")
    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


# --- Records ---

@dataclass(eq=False)
class Node:
    label: str
    position: Position
    is_source: bool = False

    def __repr__(self) -> str:
        return f"Node({self.label})"


@dataclass(eq=False)
class Edge:
    a: str
    b: str
    weight: float
    # Visual state, written by the playback controller only.
    in_mst: bool = False
    rejected: bool = False
    faded: bool = False
    highlighted: bool = False

    @property
    def edge_id(self) -> str:
        return f"{self.a}-{self.b}"

    @property
    def endpoints(self) -> Tuple[str, str]:
        return self.a, self.b

    def has_node(self, label: str) -> bool:
        return label == self.a or label == self.b

    def connects(self, u: str, v: str) -> bool:
        return (self.a == u and self.b == v) or (self.a == v and self.b == u)

    def other(self, label: str) -> str:
        if label == self.a:
            return self.b
        if label == self.b:
            return self.a
        raise UnknownNodeError(f"Node {label} is not an endpoint of edge {self.edge_id}")

    def reset_visual_state(self) -> None:
        self.in_mst = False
        self.rejected = False
        self.faded = False
        self.highlighted = False

    def __repr__(self) -> str:
        return f"Edge({self.a}-{self.b}, {self.weight:g})"


@dataclass(frozen=True)
class Change:
    """One thing the UI has to redraw after a mutation.

    kind is one of: node_added, node_removed, node_moved, edge_added,
    edge_removed, source_changed, cleared.
    """
    kind: str
    node: Optional[Node] = None
    edge: Optional[Edge] = None


# --- Graph ---

class GraphModel:
    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []
        self._counter = 0
        self._locked = False
        self._changes: List[Change] = []
        # Bumped on every structural edit; a finished run is only valid for one revision.
        self.revision = 0

    # -- locking --

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _ensure_unlocked(self, action: str) -> None:
        if self._locked:
            raise MutationWhileRunningError(f"Cannot {action} while the MST animation is running")

    # -- mutations --

    def add_node(self, position: Position) -> Node:
        self._ensure_unlocked("add a node")
        label = label_for_index(self._counter)
        self._counter += 1
        node = Node(label, (float(position[0]), float(position[1])))
        self._nodes[label] = node
        self.revision += 1
        self._changes.append(Change("node_added", node=node))
        logger.info("Added node %s at (%d, %d)", label, int(node.position[0]), int(node.position[1]))
        return node

    def add_edge(self, a: str, b: str, weight: float) -> Edge:
        self._ensure_unlocked("add an edge")
        self.get_node(a)
        self.get_node(b)
        if a == b:
            raise DuplicateEdgeError(f"An edge needs two different nodes, got {a} twice")
        if self.has_edge_between(a, b):
            raise DuplicateEdgeError(f"Edge already exists between {a} and {b}")
        weight = float(weight)
        if not math.isfinite(weight):
            raise ValueError(f"Edge weight must be a finite number, got {weight}")
        edge = Edge(a, b, weight)
        self._edges.append(edge)
        self.revision += 1
        self._changes.append(Change("edge_added", edge=edge))
        logger.info("Added edge: %s - %s (%g)", a, b, weight)
        return edge

    def remove_edge(self, edge: Union[Edge, str]) -> Edge:
        self._ensure_unlocked("remove an edge")
        edge = self.get_edge(edge)
        self._edges.remove(edge)
        self.revision += 1
        self._changes.append(Change("edge_removed", edge=edge))
        logger.info("Removed edge between %s and %s", edge.a, edge.b)
        return edge

    def remove_node(self, label: str) -> List[Edge]:
        """Remove a node together with every edge touching it.

        Returns the removed edges so their drawings can be dropped as well.
        """
        self._ensure_unlocked("remove a node")
        node = self.get_node(label)
        removed = [e for e in self._edges if e.has_node(label)]
        self._edges = [e for e in self._edges if not e.has_node(label)]
        del self._nodes[label]
        self.revision += 1
        for edge in removed:
            self._changes.append(Change("edge_removed", edge=edge))
        self._changes.append(Change("node_removed", node=node))
        logger.info("Removed node %s (%d edges)", label, len(removed))
        return removed

    def move_node(self, label: str, position: Position) -> List[Edge]:
        """Update a node position, returns the edges whose lines must follow."""
        self._ensure_unlocked("move a node")
        node = self.get_node(label)
        node.position = (float(position[0]), float(position[1]))
        self._changes.append(Change("node_moved", node=node))
        return [e for e in self._edges if e.has_node(label)]

    def mark_source(self, label: Optional[str]) -> Optional[Node]:
        """Flag ``label`` as the MST source, clearing the previous one. ``None`` clears."""
        new = self.get_node(label) if label is not None else None
        for node in self._nodes.values():
            if node.is_source and node is not new:
                node.is_source = False
                self._changes.append(Change("source_changed", node=node))
        if new is not None and not new.is_source:
            new.is_source = True
            self._changes.append(Change("source_changed", node=new))
        return new

    def remove_edges_outside(self, keep: Iterable[Edge]) -> List[Edge]:
        """Delete every edge not in ``keep``. Used to prune the graph down to its MST."""
        self._ensure_unlocked("prune edges")
        keep_ids = {id(e) for e in keep}
        removed = [e for e in self._edges if id(e) not in keep_ids]
        self._edges = [e for e in self._edges if id(e) in keep_ids]
        self.revision += 1
        for edge in removed:
            self._changes.append(Change("edge_removed", edge=edge))
        logger.info("Removed %d edges outside the MST", len(removed))
        return removed

    def clear(self) -> None:
        self._ensure_unlocked("clear the graph")
        self._nodes.clear()
        self._edges.clear()
        self._counter = 0
        self.revision += 1
        self._changes.append(Change("cleared"))
        logger.info("Graph cleared")

    def reset_visual_state(self) -> None:
        for edge in self._edges:
            edge.reset_visual_state()

    def drain_changes(self) -> List[Change]:
        changes, self._changes = self._changes, []
        return changes

    # -- queries --

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def labels(self) -> List[str]:
        return list(self._nodes)

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        return len(self._edges)

    def has_node(self, label: str) -> bool:
        return label in self._nodes

    def get_node(self, label: str) -> Node:
        try:
            return self._nodes[label]
        except KeyError:
            raise UnknownNodeError(f"No node labelled {label}") from None

    def find_edge(self, a: str, b: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.connects(a, b):
                return edge
        return None

    def get_edge(self, edge: Union[Edge, str]) -> Edge:
        if isinstance(edge, Edge):
            if any(e is edge for e in self._edges):
                return edge
            raise UnknownEdgeError(f"Edge {edge.edge_id} is not part of the graph")
        a, sep, b = edge.partition("-")
        found = self.find_edge(a, b) if sep else None
        if found is None:
            raise UnknownEdgeError(f"No edge with id {edge}")
        return found

    def has_edge_between(self, a: str, b: str) -> bool:
        return self.find_edge(a, b) is not None

    def neighbors(self, label: str) -> List[Tuple[Edge, Node]]:
        self.get_node(label)
        return [(e, self._nodes[e.other(label)]) for e in self._edges if e.has_node(label)]

    def adjacency(self) -> Dict[str, List[Edge]]:
        """label -> incident edges, built in one pass over the edge list."""
        adj: Dict[str, List[Edge]] = {label: [] for label in self._nodes}
        for edge in self._edges:
            adj[edge.a].append(edge)
            adj[edge.b].append(edge)
        return adj

    def to_networkx(self) -> nx.Graph:
        G = nx.Graph()
        for node in self._nodes.values():
            G.add_node(node.label, pos=node.position)
        for edge in self._edges:
            G.add_edge(edge.a, edge.b, weight=edge.weight)
        return G
