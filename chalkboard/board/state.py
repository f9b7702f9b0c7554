"""
Observable pointer state for a board session.

Each board owns one ``PointerState``. Consumers such as renderers receive
a ``BoardContext`` with read-only views of the cells and the page mapping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, List, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[Any], None]


class Cell(Generic[T]):
    """A value holder that notifies subscribers when its value changes.

    With ``identity=True`` a change means a different object; otherwise
    values are compared with ``==``. The value is stored on every ``set``.
    """

    def __init__(self, value: Optional[T] = None, name: str = "", identity: bool = False) -> None:
        self.name = name
        self._value = value
        self._identity = identity
        self._listeners: List[Listener] = []

    @property
    def value(self) -> Optional[T]:
        return self._value

    @value.setter
    def value(self, new_value: Optional[T]) -> None:
        self.set(new_value)

    def set(self, new_value: Optional[T]) -> bool:
        """Store ``new_value``; returns True if subscribers were notified."""
        old_value = self._value
        self._value = new_value
        if self._identity:
            changed = new_value is not old_value
        else:
            changed = new_value != old_value
        if not changed:
            return False
        for listener in list(self._listeners):
            listener(new_value)
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def readonly(self) -> "CellView[T]":
        return CellView(self)

    def __repr__(self) -> str:
        return f"Cell({self.name}={self._value!r})"


class CellView(Generic[T]):
    """Read-only face of a ``Cell``."""

    def __init__(self, cell: Cell[T]) -> None:
        self._cell = cell

    @property
    def name(self) -> str:
        return self._cell.name

    @property
    def value(self) -> Optional[T]:
        return self._cell.value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._cell.subscribe(listener)

    def __repr__(self) -> str:
        return f"CellView({self._cell.name}={self._cell.value!r})"


class PointerState:
    """The cursors a board session keeps consistent.

    Attributes:
        authoring_target: Page id the generation pipeline writes to.
        viewing_target: Page id shown to the human observer.
        page_total: Approximate page count for navigation display.
        active_document: Document tree of the authoring target.
        active_target: Node most recently selected by the operator.
    """

    def __init__(self) -> None:
        self.authoring_target: Cell[int] = Cell(None, "authoring_target")
        self.viewing_target: Cell[int] = Cell(None, "viewing_target")
        self.page_total: Cell[int] = Cell(0, "page_total")
        self.active_document: Cell[Any] = Cell(None, "active_document", identity=True)
        self.active_target: Cell[Any] = Cell(None, "active_target", identity=True)

        # Viewing follows authoring; the reverse link does not exist.
        self.authoring_target.subscribe(self._follow_authoring)

    def _follow_authoring(self, page_id: Optional[int]) -> None:
        if page_id is None:
            return
        logger.debug(f"Viewing target follows authoring target to page {page_id}")
        self.viewing_target.set(page_id)

    def snapshot(self) -> dict:
        return {
            "authoring_target": self.authoring_target.value,
            "viewing_target": self.viewing_target.value,
            "page_total": self.page_total.value,
        }


@dataclass(frozen=True)
class BoardContext:
    """Injection point shared with descendant consumers of a board."""
    pages: Mapping[int, Any]
    authoring_target: CellView[int]
    viewing_target: CellView[int]
    page_total: CellView[int]
    active_target: CellView[Any]
    active_document: CellView[Any]

    @classmethod
    def create(cls, pages: Mapping[int, Any], state: PointerState) -> "BoardContext":
        return cls(
            pages=MappingProxyType(pages),
            authoring_target=state.authoring_target.readonly(),
            viewing_target=state.viewing_target.readonly(),
            page_total=state.page_total.readonly(),
            active_target=state.active_target.readonly(),
            active_document=state.active_document.readonly(),
        )
