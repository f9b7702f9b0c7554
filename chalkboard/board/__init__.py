"""
Board session: pages, pointers and the operations that move them.

A ``Board`` tracks which page a remote generation service is authoring,
which page a human is viewing, and routes every document mutation through
a Document Operator. ``next`` and ``apply`` are serialized on a single
lock so the pointers cannot be moved underneath a running invocation.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Union

from chalkboard.board.config import (
    BoardError,
    ChalkResult,
    ChatInfo,
    DuplicatePage,
    EmptyBoard,
    GenerationTransport,
    PageNotFound,
    Step,
    StreamEvent,
    TransportError,
)
from chalkboard.board.document import (
    Attribute,
    DocumentNode,
    ElementNode,
    NodeType,
    TextNode,
    create_empty_document,
    node_from_dict,
)
from chalkboard.board.logging import BoardLogger
from chalkboard.board.navigation import NEXT, PREVIOUS, Navigation, step as step_viewing, validate
from chalkboard.board.operator import BoundOperator, DocumentOperator, OperationResult, TreeOperator
from chalkboard.board.pipeline import GenerationPipeline
from chalkboard.board.reconciler import BulkReconciler
from chalkboard.board.registry import Page, PageRegistry
from chalkboard.board.state import BoardContext, Cell, CellView, PointerState
from chalkboard.config import BoardSettings


class Board:
    """Authoring state of one multi-page document.

    Attributes:
        info: Chat identity forwarded to the generation service.
        pages: Registry of pages and their document trees.
        state: Observable pointer cells.
        context: Read-only view handed to consumers such as renderers.

    Example:
        >>> board = Board(ChatInfo("chat-1"), transport=client)
        >>> board.initialize()
        1
        >>> await board.next(Step("intro"), "Explain vectors")
        >>> board.switch_viewing("previous")
    """

    def __init__(
        self,
        info: ChatInfo,
        transport: Optional[GenerationTransport] = None,
        operator: Optional[DocumentOperator] = None,
        settings: Optional[BoardSettings] = None,
        board_logger: Optional[BoardLogger] = None,
    ) -> None:
        self.info = info
        self.settings = settings or BoardSettings.from_env()
        self.transport = transport
        self.operator = operator or TreeOperator()
        self.logger = board_logger or BoardLogger(info.chat_id, verbose=self.settings.verbose)

        self.pages = PageRegistry()
        self.state = PointerState()
        self.context = BoardContext.create(self.pages.as_mapping(), self.state)

        self._lock = asyncio.Lock()
        self._reconciler = BulkReconciler(self, self.operator)

    @property
    def page_count(self) -> int:
        """Exact number of registered pages."""
        return len(self.pages)

    def initialize(self) -> int:
        """Create the primary page and align the viewing pointer to it."""
        if len(self.pages):
            raise BoardError("Board is already initialized")
        page_id = self.create_page(self.settings.primary_title)
        self.state.viewing_target.set(self.state.authoring_target.value)
        return page_id

    def create_page(
        self,
        title: str,
        auto_switch: bool = True,
        page_id: Optional[int] = None,
    ) -> int:
        """Register a page and make it the authoring target.

        Args:
            title: Display title of the page.
            auto_switch: Count the page towards ``page_total``.
            page_id: Explicit id instead of the allocator's next id.

        Returns:
            The id of the new page.

        Raises:
            DuplicatePage: If ``page_id`` is already registered.
        """
        page = self.pages.add(title, page_id=page_id)
        self.logger.log_page_created(page.page_id, title, auto_switch)
        self._set_authoring(page)
        if auto_switch:
            self.state.page_total.set(self.state.page_total.value + 1)
        return page.page_id

    def switch_authoring(self, page_id: int) -> None:
        """Point the pipeline at an existing page.

        Raises:
            PageNotFound: If ``page_id`` is not registered.
        """
        self._set_authoring(self.pages.get(page_id))

    def _set_authoring(self, page: Page) -> None:
        old_id = self.state.authoring_target.value
        self.state.active_document.set(page.document)
        if self.state.authoring_target.set(page.page_id):
            self.logger.log_authoring_switch(old_id, page.page_id)

    def switch_viewing(self, operation: Navigation) -> Optional[int]:
        """Move the viewing pointer.

        An integer jumps directly and returns None; the id is not checked.
        ``"next"`` and ``"previous"`` step cyclically through registered
        ids and return the new viewing target.

        Raises:
            EmptyBoard: If stepping on a board without pages.
            ValueError: If ``operation`` is not a direction or an id.
        """
        operation = validate(operation)
        viewing = self.state.viewing_target
        if isinstance(operation, int):
            viewing.set(operation)
            return None
        new_id = step_viewing(self.pages.ids(), viewing.value, operation)
        viewing.set(new_id)
        return new_id

    def viewing_page(self) -> Page:
        return self.pages.get(self.state.viewing_target.value)

    def authoring_page(self) -> Page:
        return self.pages.get(self.state.authoring_target.value)

    async def next(self, step: Union[Step, str], prompt: str) -> None:
        """Run one layout + chalk exchange with the generation service.

        Raises:
            TransportError: If a remote stage fails; earlier operations stay applied.
            PageNotFound: If the service switches to an unknown page.
        """
        if self.transport is None:
            raise BoardError("No generation transport configured")
        if isinstance(step, str):
            step = Step(step)
        pipeline = GenerationPipeline(self, self.transport, self.operator)
        async with self._lock:
            await pipeline.run(step, prompt)

    async def apply(self, results: Iterable[Union[ChalkResult, dict]]) -> List[int]:
        """Replay a batch of per-page results; returns ids of created pages."""
        async with self._lock:
            return self._reconciler.run(results)

    def __repr__(self) -> str:
        return f"Board({self.info.chat_id}, {self.pages!r}, {self.state.snapshot()})"


__all__ = [
    "Board",
    "BoardContext",
    "BoardError",
    "BoardLogger",
    "BoundOperator",
    "BulkReconciler",
    "Cell",
    "CellView",
    "ChalkResult",
    "ChatInfo",
    "DocumentNode",
    "DocumentOperator",
    "DuplicatePage",
    "ElementNode",
    "EmptyBoard",
    "GenerationPipeline",
    "GenerationTransport",
    "NEXT",
    "NodeType",
    "OperationResult",
    "PREVIOUS",
    "Page",
    "PageNotFound",
    "PageRegistry",
    "PointerState",
    "Step",
    "StreamEvent",
    "TextNode",
    "TransportError",
    "TreeOperator",
    "Attribute",
    "create_empty_document",
    "node_from_dict",
]
