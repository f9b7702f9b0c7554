"""
Chalkboard - authoring state for generated multi-page documents

Tracks the pages a remote generation service writes, with:
- Page registry with a monotonic id allocator
- Observable authoring/viewing pointers
- Two-stage streaming generation (layout, then chalk)
- Bulk replay of precomputed per-page operations
"""

__version__ = "0.1.0"

from chalkboard.board import (
    Board,
    BoardContext,
    BoardError,
    ChalkResult,
    ChatInfo,
    DocumentOperator,
    DuplicatePage,
    EmptyBoard,
    GenerationTransport,
    OperationResult,
    Page,
    PageNotFound,
    PageRegistry,
    PointerState,
    Step,
    StreamEvent,
    TransportError,
    TreeOperator,
)
from chalkboard.client import (
    ChalkAuthenticationError,
    ChalkClient,
    ChalkConnectionError,
    ChalkError,
    ChalkStreamError,
    ChalkTimeoutError,
)
from chalkboard.config import BoardSettings, ChalkSettings, ServerSettings

__all__ = [
    "__version__",

    # Board
    "Board",
    "BoardContext",
    "Page",
    "PageRegistry",
    "PointerState",
    "ChatInfo",
    "Step",
    "ChalkResult",
    "StreamEvent",

    # Collaborators
    "DocumentOperator",
    "TreeOperator",
    "OperationResult",
    "GenerationTransport",
    "ChalkClient",

    # Errors
    "BoardError",
    "PageNotFound",
    "EmptyBoard",
    "DuplicatePage",
    "TransportError",
    "ChalkError",
    "ChalkConnectionError",
    "ChalkAuthenticationError",
    "ChalkStreamError",
    "ChalkTimeoutError",

    # Configuration
    "BoardSettings",
    "ChalkSettings",
    "ServerSettings",
]
