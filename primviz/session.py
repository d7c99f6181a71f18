"""
The surface a UI talks to: graph edits, run control and interaction modes.

A session bundles one GraphModel with one PlaybackController. Edits raise
``MstError`` subclasses; a refused run is reported through the listener's
``on_error``/``on_disconnected`` instead.
"""

import enum
import logging
from typing import Any, Callable, List, Optional, Set, Tuple

from . import connectivity
from .graph_model import Change, Edge, GraphModel, Node, Position
from .errors import DuplicateEdgeError, MstError, MutationWhileRunningError
from .playback import DEFAULT_DELAY_MS, PlaybackController, PlaybackListener, PlaybackState

logger = logging.getLogger(__name__)

WeightPrompt = Callable[[str, str], Optional[float]]


class InteractionMode(enum.Enum):
    IDLE = "idle"
    ADD_NODE = "add_node"
    ADD_EDGE = "add_edge"
    REMOVE_NODE = "remove_node"
    REMOVE_EDGE = "remove_edge"


MODE_HINTS = {
    InteractionMode.IDLE: "Pick a mode to edit the graph",
    InteractionMode.ADD_NODE: "Click on empty area to add nodes",
    InteractionMode.ADD_EDGE: "Select two nodes to create an edge",
    InteractionMode.REMOVE_NODE: "Click on a node to remove it",
    InteractionMode.REMOVE_EDGE: "Click on an edge to remove it",
}


class GraphSession:
    def __init__(self, scheduler: Any, listener: Optional[PlaybackListener] = None,
                 delay_ms: int = DEFAULT_DELAY_MS) -> None:
        self.graph = GraphModel()
        self.controller = PlaybackController(scheduler, listener, delay_ms)
        self.mode = InteractionMode.IDLE
        self.edge_start: Optional[str] = None
        self.source: Optional[str] = None

    # -- modes --

    def set_mode(self, mode: InteractionMode) -> None:
        self.mode = mode
        self.edge_start = None
        logger.info("Mode: %s", MODE_HINTS[mode])

    def pick_node(self, label: str) -> Optional[Tuple[str, str]]:
        """
        Route a click on a node according to the current mode.

        In ADD_EDGE mode the first click remembers the start node and the
        second returns the (start, end) pair to connect. In REMOVE_NODE mode
        the node is deleted. Other modes ignore node clicks.
        """
        if self.mode is InteractionMode.REMOVE_NODE:
            self.remove_node(label)
            return None
        if self.mode is not InteractionMode.ADD_EDGE:
            return None
        self.graph.get_node(label)
        if self.edge_start is None:
            self.edge_start = label
            logger.info("Selected start node: %s", label)
            return None
        if label == self.edge_start:
            logger.info("Please select a different node")
            return None
        pair = (self.edge_start, label)
        self.edge_start = None
        logger.info("Selected end node: %s", label)
        return pair

    # -- mutations --

    def _ensure_idle(self, action: str) -> None:
        if self.controller.state is PlaybackState.RUNNING:
            raise MutationWhileRunningError(f"Cannot {action} while the MST animation is running")

    def add_node(self, position: Position) -> Node:
        return self.graph.add_node(position)

    def add_edge(self, a: str, b: str, weight: float) -> Edge:
        return self.graph.add_edge(a, b, weight)

    def connect(self, a: str, b: str, ask_weight: WeightPrompt) -> Optional[Edge]:
        """Ask the UI for a weight and add the edge a-b. None if the prompt was cancelled."""
        self._ensure_idle("add an edge")
        self.graph.get_node(a)
        self.graph.get_node(b)
        if a == b or self.graph.has_edge_between(a, b):
            raise DuplicateEdgeError(f"Edge already exists between {a} and {b}")
        weight = ask_weight(a, b)
        if weight is None:
            logger.debug("Edge %s - %s cancelled", a, b)
            return None
        return self.graph.add_edge(a, b, weight)

    def remove_node(self, label: str) -> List[Edge]:
        removed = self.graph.remove_node(label)
        if label == self.source:
            self.source = None
        if label == self.edge_start:
            self.edge_start = None
        return removed

    def remove_edge(self, edge_id: str) -> Edge:
        return self.graph.remove_edge(edge_id)

    def move_node(self, label: str, position: Position) -> List[Edge]:
        return self.graph.move_node(label, position)

    def clear(self) -> None:
        self.graph.clear()
        self.source = None
        self.edge_start = None
        self.controller.running_cost = 0.0

    def select_source(self, label: Optional[str]) -> None:
        self._ensure_idle("change the source")
        self.graph.mark_source(label)
        self.source = label

    def source_options(self) -> List[str]:
        return self.graph.labels()

    def drain_changes(self) -> List[Change]:
        return self.graph.drain_changes()

    # -- queries --

    def is_runnable(self) -> bool:
        return connectivity.is_runnable(self.graph)

    def is_connected(self) -> bool:
        return connectivity.is_connected(self.graph)

    def reachable_from(self, label: str) -> Set[str]:
        return connectivity.reachable_from(self.graph, label)

    def total_cost_text(self) -> str:
        return "Total Cost: %.1f" % self.controller.running_cost

    # -- run control --

    def set_delay(self, delay_ms: int) -> None:
        self.controller.delay_ms = delay_ms

    def start_mst(self, source: Optional[str] = None, delay_ms: Optional[int] = None) -> bool:
        source = source if source is not None else self.source
        try:
            self.controller.check_preconditions(self.graph, source)
        except MstError:
            # Refused: leave the source marker and the last run's flags alone.
            return self.controller.start(self.graph, source, delay_ms)
        self.select_source(source)
        # Flags from a previous run would otherwise leak into this one.
        self.graph.reset_visual_state()
        return self.controller.start(self.graph, source, delay_ms)

    def cancel(self) -> bool:
        return self.controller.cancel()

    def prune(self) -> List[Edge]:
        """Drop every edge that is not part of the last finished MST.

        Does nothing when no run has finished or the graph was edited since.
        """
        self._ensure_idle("prune edges")
        if not self.controller.result_is_current():
            logger.info("Nothing to prune: run Prim's MST on the current graph first")
            return []
        return self.graph.remove_edges_outside(self.controller.mst_edges)
