"""Error kinds raised by the graph model, the step generator and playback.

Every error is recoverable: the model is left unchanged when one is raised.
The ``kind`` attribute is the short name handed to ``on_error`` callbacks.
"""

from typing import Iterable, Optional, Set


class MstError(Exception):
    kind = "MstError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateEdgeError(MstError):
    kind = "DuplicateEdge"


class UnknownNodeError(MstError):
    kind = "UnknownNode"


class UnknownEdgeError(MstError):
    kind = "UnknownEdge"


class UnknownSourceError(MstError):
    kind = "UnknownSource"


class InvalidRunPreconditionsError(MstError):
    kind = "InvalidRunPreconditions"

    def __init__(self, message: str, unreachable: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.unreachable: Set[str] = set(unreachable or ())


class MutationWhileRunningError(MstError):
    kind = "MutationWhileRunning"
