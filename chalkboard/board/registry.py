"""
Page registry and id allocator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from chalkboard.board.config import DuplicatePage, PageNotFound
from chalkboard.board.document import DocumentNode, create_empty_document

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """A named unit of the authored document."""
    page_id: int
    title: str
    document: DocumentNode

    def to_dict(self) -> dict:
        return {"id": self.page_id, "title": self.title}


class PageRegistry:
    """Mapping from page id to ``Page`` with a monotonic allocator.

    The allocator counter only moves forward, also when a caller supplies
    an explicit id, and never hands out an id that is already registered.
    Pages are never removed.

    Example:
        >>> registry = PageRegistry()
        >>> registry.add("PRIMARY").page_id
        1
        >>> registry.add("Imported", page_id=7).page_id
        7
        >>> registry.peek_next_id()
        3
    """

    def __init__(self) -> None:
        self._pages: Dict[int, Page] = {}
        self._unused: int = 0

    @property
    def unused(self) -> int:
        """Last value handed out by the allocator counter."""
        return self._unused

    def peek_next_id(self) -> int:
        """Id the next automatic allocation would return."""
        candidate = self._unused + 1
        while candidate in self._pages:
            candidate += 1
        return candidate

    def _advance(self) -> int:
        self._unused = self.peek_next_id()
        return self._unused

    def add(self, title: str, page_id: Optional[int] = None) -> Page:
        """Register a new page with an empty document.

        Args:
            title: Display title of the page.
            page_id: Explicit id to use instead of the allocator's.

        Raises:
            DuplicatePage: If ``page_id`` is already registered.
        """
        if page_id is not None and page_id in self._pages:
            raise DuplicatePage(page_id)

        allocated = self._advance()
        new_id = allocated if page_id is None else page_id
        page = Page(page_id=new_id, title=title, document=create_empty_document(new_id))
        self._pages[new_id] = page
        logger.debug(f"Registered page {new_id} ({title!r}), allocator at {self._unused}")
        return page

    def get(self, page_id: Optional[int]) -> Page:
        """Look up a page, raising ``PageNotFound`` if it is absent."""
        try:
            return self._pages[page_id]
        except KeyError:
            raise PageNotFound(page_id) from None

    def ids(self) -> List[int]:
        """Registered ids in ascending order."""
        return sorted(self._pages)

    def as_mapping(self) -> Dict[int, Page]:
        """Underlying mapping; callers must treat it as read-only."""
        return self._pages

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages.values())

    def __repr__(self) -> str:
        return f"PageRegistry({self.ids()}, unused={self._unused})"
