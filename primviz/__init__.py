"""Build an undirected weighted graph and watch Prim's MST grow on it."""

from .errors import (
    DuplicateEdgeError,
    InvalidRunPreconditionsError,
    MstError,
    MutationWhileRunningError,
    UnknownEdgeError,
    UnknownNodeError,
    UnknownSourceError,
)
from .graph_model import Change, Edge, GraphModel, Node
from .connectivity import is_connected, is_runnable, reachable_from, unreachable_from
from .prim import Accept, Consider, Done, Reject, Visit, generate
from .playback import DEFAULT_DELAY_MS, PlaybackController, PlaybackListener, PlaybackState
from .session import GraphSession, InteractionMode

__version__ = "0.1.0"
