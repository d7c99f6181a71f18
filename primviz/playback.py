"""
Paced playback of a precomputed Prim run.

The controller owns no widgets. Pacing goes through a scheduler with Tk's
``after``/``after_cancel`` signature (a ``tk.Tk`` root works as is), and every
delivered step is reported to a listener that does the drawing.
"""

import enum
import logging
from typing import Any, Callable, List, Optional, Set

from . import connectivity, prim
from .errors import InvalidRunPreconditionsError, MstError, UnknownSourceError
from .graph_model import Edge, GraphModel, Node
from .prim import Accept, Consider, Done, MstEvent, Reject, Visit

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 700


class PlaybackState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class PlaybackListener:
    """Callbacks fired as steps are delivered. Override the ones you need."""

    def on_visit(self, node: Node) -> None:
        pass

    def on_consider(self, edge: Edge) -> None:
        pass

    def on_accept(self, edge: Edge, running_cost: float) -> None:
        pass

    def on_reject(self, edge: Edge) -> None:
        pass

    def on_done(self, mst_edges: Set[Edge], final_cost: float) -> None:
        pass

    def on_disconnected(self, unreachable: Set[str]) -> None:
        pass

    def on_error(self, kind: str, message: str) -> None:
        pass


class PlaybackController:
    def __init__(self, scheduler: Any, listener: Optional[PlaybackListener] = None,
                 delay_ms: int = DEFAULT_DELAY_MS) -> None:
        self.scheduler = scheduler
        self.listener = listener or PlaybackListener()
        self.delay_ms = delay_ms
        self._state = PlaybackState.IDLE
        self._graph: Optional[GraphModel] = None
        self._events: List[MstEvent] = []
        self._index = 0
        self._pending: Any = None
        self._reset_run_state()

    def _reset_run_state(self) -> None:
        self.visited: List[Node] = []
        self.highlighted: Optional[Edge] = None
        self.running_cost = 0.0
        self.mst_edges: Set[Edge] = set()
        self.rejected_edges: Set[Edge] = set()
        self.non_mst_edges: Set[Edge] = set()
        self.final_cost: Optional[float] = None
        self._result_revision: Optional[int] = None

    # -- configuration --

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @delay_ms.setter
    def delay_ms(self, value: int) -> None:
        value = int(value)
        if value <= 0:
            raise ValueError(f"Animation delay must be positive, got {value}")
        self._delay_ms = value

    def result_is_current(self) -> bool:
        """Whether the last finished MST still describes the graph, i.e. nothing was edited since."""
        return (
            self._state is PlaybackState.FINISHED
            and self._graph is not None
            and self._graph.revision == self._result_revision
        )

    @property
    def remaining(self) -> int:
        return len(self._events) - self._index

    # -- run control --

    def check_preconditions(self, graph: GraphModel, source: Optional[str]) -> None:
        if self._state is PlaybackState.RUNNING:
            raise InvalidRunPreconditionsError("An MST animation is already running")
        if source is None or not graph.has_node(source):
            raise UnknownSourceError("Select a source node first")
        if graph.node_count() < connectivity.MIN_NODES or graph.edge_count() < connectivity.MIN_EDGES:
            raise InvalidRunPreconditionsError("Add at least 2 nodes and edges")
        if not connectivity.is_connected(graph):
            raise InvalidRunPreconditionsError(
                "Nodes are not fully connected. MST cannot be run.",
                unreachable=connectivity.unreachable_from(graph, source),
            )

    def start(self, graph: GraphModel, source: Optional[str], delay_ms: Optional[int] = None) -> bool:
        """Begin playing Prim's from ``source``. Returns False if the run was refused."""
        try:
            self.check_preconditions(graph, source)
        except MstError as exc:
            logger.warning("MST run refused: %s", exc.message)
            if isinstance(exc, InvalidRunPreconditionsError) and exc.unreachable:
                self.listener.on_disconnected(set(exc.unreachable))
            self.listener.on_error(exc.kind, exc.message)
            return False

        if delay_ms is not None:
            self.delay_ms = delay_ms
        self._graph = graph
        self._events = prim.generate(graph, source)
        self._index = 0
        self._reset_run_state()
        graph.lock()
        self._state = PlaybackState.RUNNING
        logger.info("Running Prim's MST from %s (%d steps, %d ms apart)", source, len(self._events), self.delay_ms)
        self._step()
        return True

    def cancel(self) -> bool:
        """
        Stop a run mid-way. Steps already delivered stay applied; the rest
        are dropped and the controller goes back to IDLE.
        """
        if self._state is not PlaybackState.RUNNING:
            return False
        if self._pending is not None:
            self.scheduler.after_cancel(self._pending)
            self._pending = None
        dropped = self.remaining
        self._events = []
        self._index = 0
        self._highlight(None)
        self._graph.unlock()
        self._state = PlaybackState.IDLE
        logger.info("MST animation cancelled, %d steps dropped", dropped)
        return True

    # -- delivery --

    def _step(self) -> None:
        self._pending = None
        if self._state is not PlaybackState.RUNNING or self._index >= len(self._events):
            return
        event = self._events[self._index]
        self._index += 1
        try:
            self._apply(event)
        except Exception:
            # A failing listener must not leave the graph locked with nothing scheduled.
            logger.exception("Listener failed on %s, stopping the MST animation", type(event).__name__)
            self.cancel()
            raise
        if self._state is PlaybackState.RUNNING:
            self._pending = self.scheduler.after(self.delay_ms, self._step)

    def _apply(self, event: MstEvent) -> None:
        if isinstance(event, Visit):
            self.visited.append(event.node)
            self.listener.on_visit(event.node)
        elif isinstance(event, Consider):
            self._highlight(event.edge)
            self.listener.on_consider(event.edge)
        elif isinstance(event, Accept):
            self._highlight(None)
            event.edge.in_mst = True
            self.mst_edges.add(event.edge)
            self.running_cost = event.running_cost
            self.listener.on_accept(event.edge, event.running_cost)
        elif isinstance(event, Reject):
            event.edge.rejected = True
            self.rejected_edges.add(event.edge)
            self.listener.on_reject(event.edge)
        elif isinstance(event, Done):
            self._finish(event)

    def _highlight(self, edge: Optional[Edge]) -> None:
        if self.highlighted is not None:
            self.highlighted.highlighted = False
        self.highlighted = edge
        if edge is not None:
            edge.highlighted = True

    def _finish(self, event: Done) -> None:
        self._highlight(None)
        self.final_cost = event.cost
        self.running_cost = event.cost
        self.non_mst_edges = {e for e in self._graph.edges if e not in event.edges}
        for edge in self.non_mst_edges:
            edge.faded = True
        self._events = []
        self._index = 0
        self._graph.unlock()
        self._state = PlaybackState.FINISHED
        self._result_revision = self._graph.revision
        logger.info("MST complete, total cost %g (%d edges)", event.cost, len(event.edges))
        self.listener.on_done(set(event.edges), event.cost)


class CallbackListener(PlaybackListener):
    """Listener built from plain callables, for callers that don't want a subclass."""

    def __init__(self, **callbacks: Callable[..., None]) -> None:
        unknown = set(callbacks) - {name for name in dir(PlaybackListener) if name.startswith("on_")}
        if unknown:
            raise TypeError(f"Unknown callbacks: {', '.join(sorted(unknown))}")
        for name, fn in callbacks.items():
            setattr(self, name, fn)
