"""
Bulk reconciliation of precomputed per-page operations.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Union

from chalkboard.board.config import BoardError, ChalkResult
from chalkboard.board.operator import DocumentOperator

if TYPE_CHECKING:
    from chalkboard.board import Board

logger = logging.getLogger(__name__)


class BulkReconciler:
    """Replays a finished batch of page results against the registry.

    Missing pages are registered in the background: the authoring and
    viewing pointers and the active document are left untouched, and the
    selection callback is not used.
    """

    def __init__(self, board: "Board", operator: DocumentOperator) -> None:
        self.board = board
        self.operator = operator

    def run(self, results: Iterable[Union[ChalkResult, dict]]) -> List[int]:
        """Apply every result in order; returns the ids of pages created."""
        pages = self.board.pages
        page_total = self.board.state.page_total
        created: List[int] = []
        operation_count = 0

        for result in results:
            if isinstance(result, dict):
                result = ChalkResult.from_dict(result)
            try:
                page_id = int(result.page)
            except (TypeError, ValueError) as exc:
                raise BoardError(f"Invalid page identifier: {result.page!r}") from exc

            size_before = len(pages)
            is_new = page_id not in pages
            if is_new:
                pages.add(result.page, page_id=page_id)
                created.append(page_id)

            bound = self.operator.bind(pages.get(page_id).document)
            for operation in result.output:
                outcome = bound.handle_operation(operation)
                operation_count += 1
                if not outcome.success:
                    self.board.logger.log_operation_failed(operation, outcome.error)

            if is_new:
                page_total.set(page_total.value + page_id - size_before)
            logger.debug(f"Reconciled page {page_id}: {len(result.output)} operation(s)")

        self.board.logger.log_reconciled(created, operation_count)
        return created
