"""
Two-stage generation pipeline.

The layout stage plans page structure (switching to or adding pages), the
chalk stage streams document operations onto the authoring page. Events
are applied one by one in arrival order; the chalk stage starts only
after the layout stream has completed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from chalkboard.board.config import BoardError, GenerationTransport, Step, TransportError
from chalkboard.board.operator import DocumentOperator

if TYPE_CHECKING:
    from chalkboard.board import Board

logger = logging.getLogger(__name__)

SWITCH_PAGE = "switch-page"
ADD_PAGE = "add-page"


class GenerationPipeline:
    """Drives the layout and chalk exchanges for one board.

    Failures of the remote service abort the running stage. Operations
    already applied before the failure stay in the document tree.
    """

    def __init__(
        self,
        board: "Board",
        transport: GenerationTransport,
        operator: DocumentOperator,
    ) -> None:
        self.board = board
        self.transport = transport
        self.operator = operator

    async def run(self, step: Step, prompt: str) -> None:
        layout = await self.run_layout(step, prompt)
        await self.run_chalk(step, layout)

    def _page_id_str(self) -> str:
        page_id = self.board.state.authoring_target.value
        return "" if page_id is None else str(page_id)

    async def run_layout(self, step: Step, prompt: str) -> str:
        """Run the layout stage and return the layout artifact."""
        request: Dict[str, Any] = {
            "chat_id": self.board.info.chat_id,
            "step": step.to_dict(),
            "prompt": prompt,
            "page_id": self._page_id_str(),
            "page_id_will_be_used": str(self.board.pages.peek_next_id()),
        }
        self.board.logger.log_stage_started("layout", request)

        content = ""
        count = 0
        try:
            async for event in self.transport.layout(request, self.board.info.token):
                count += 1
                if event.operation is not None:
                    self.handle_layout_operation(event.operation)
                if event.content is not None:
                    content = event.content
        except TransportError as exc:
            self.board.logger.log_error("Layout stage aborted", exc)
            raise

        self.board.logger.log_stage_finished("layout", count)
        return content

    def handle_layout_operation(self, operation: Dict[str, Any]) -> None:
        kind = operation.get("type")
        if kind == SWITCH_PAGE:
            try:
                page_id = int(operation["pageId"])
            except (KeyError, TypeError, ValueError) as exc:
                raise BoardError(f"Invalid switch-page operation: {operation!r}") from exc
            self.board.switch_authoring(page_id)
        elif kind == ADD_PAGE:
            self.board.create_page(str(operation.get("title", "")))
        else:
            logger.warning(f"Ignoring unknown layout operation: {kind}")

    async def run_chalk(self, step: Step, layout: str) -> None:
        """Run the chalk stage against the current active document."""
        request: Dict[str, Any] = {
            "chat_id": self.board.info.chat_id,
            "layout": layout,
            "step": step.step,
            "page_id": self._page_id_str() or None,
            "components": [],
            "document": "",
            "stream": True,
        }
        self.board.logger.log_stage_started("chalk", request)

        state = self.board.state
        document = state.active_document.value
        if document is None:
            raise BoardError("No active document; initialize the board first")
        bound = self.operator.bind(document, state.active_target.set)

        count = 0
        try:
            async for event in self.transport.chalk(request, self.board.info.token):
                if event.operation is None:
                    continue
                count += 1
                result = bound.handle_operation(event.operation)
                logger.debug(f"Applied {event.operation.get('type')} to {document.filename}: {result.success}")
                if not result.success:
                    self.board.logger.log_operation_failed(event.operation, result.error)
        except TransportError as exc:
            self.board.logger.log_error(f"Chalk stage aborted after {count} operation(s)", exc)
            raise

        self.board.logger.log_stage_finished("chalk", count)
