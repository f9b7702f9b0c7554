"""
Viewing-pointer navigation.

Cyclic stepping walks registered ids in ascending order, so sparse ids
created by explicit registration are never skipped onto a missing page.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import List, Optional, Union

from chalkboard.board.config import EmptyBoard

NEXT = "next"
PREVIOUS = "previous"

Navigation = Union[int, str]


def step(ids: List[int], current: Optional[int], direction: str) -> int:
    """Return the id one step away from ``current`` in ``direction``.

    Args:
        ids: Registered page ids in ascending order.
        current: Current viewing target, possibly unregistered or None.
        direction: ``"next"`` or ``"previous"``.

    Raises:
        EmptyBoard: If ``ids`` is empty.
        ValueError: If ``direction`` is not recognised.
    """
    if direction not in (NEXT, PREVIOUS):
        raise ValueError(f"Unknown navigation direction: {direction!r}")
    if not ids:
        raise EmptyBoard("Cannot navigate a board without pages")

    count = len(ids)
    if current is None:
        return ids[0] if direction == NEXT else ids[-1]

    position = bisect_left(ids, current)
    if position < count and ids[position] == current:
        offset = 1 if direction == NEXT else -1
        return ids[(position + offset) % count]

    # Current id is not registered: move to its nearest neighbour.
    if direction == NEXT:
        return ids[bisect_right(ids, current) % count]
    return ids[(position - 1) % count]


def validate(operation: Navigation) -> Navigation:
    """Reject values that are neither a direction nor an integer id."""
    if isinstance(operation, bool):
        raise ValueError("Page ids must be integers, not booleans")
    if isinstance(operation, int):
        return operation
    if operation in (NEXT, PREVIOUS):
        return operation
    raise ValueError(f"Unknown navigation operation: {operation!r}")
