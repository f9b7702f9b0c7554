"""
Board configuration dataclasses, errors and collaborator contracts.

Contains the type definitions shared by the page registry, the generation
pipeline and the bulk reconciler.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional


class BoardError(Exception):
    """Base exception for board state errors."""
    pass


class PageNotFound(BoardError, LookupError):
    """Raised when a page id is dereferenced but not registered."""

    def __init__(self, page_id: Any) -> None:
        super().__init__(f"Page {page_id!r} does not exist")
        self.page_id = page_id


class EmptyBoard(BoardError):
    """Raised when cyclic navigation is requested on a board with no pages."""
    pass


class DuplicatePage(BoardError):
    """Raised when an explicit page id is already registered."""

    def __init__(self, page_id: int) -> None:
        super().__init__(f"Page {page_id} already exists")
        self.page_id = page_id


class TransportError(BoardError):
    """Raised when a remote generation call fails."""
    pass


@dataclass
class ChatInfo:
    """Identity of the chat session a board is authoring for."""
    chat_id: str
    token: Optional[str] = None


@dataclass
class Step:
    """A design step the generation service is asked to realise."""
    step: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"step": self.step, "description": self.description}


@dataclass
class ChalkResult:
    """Precomputed operations for one page, as produced by a batch chalk call."""
    page: str
    output: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChalkResult":
        return cls(page=str(data["page"]), output=list(data.get("output") or []))

    def to_dict(self) -> Dict[str, Any]:
        return {"page": self.page, "output": self.output}


@dataclass
class StreamEvent:
    """Single event pushed by a streaming stage.

    Exactly one of ``operation`` or ``content`` is set: operations are
    applied as they arrive, content carries the final layout artifact.
    """
    operation: Optional[Dict[str, Any]] = None
    content: Optional[str] = None


class GenerationTransport(ABC):
    """Abstract remote generation service.

    Both stages stream events in the order the service produced them and
    finish when the remote call completes. Failures raise ``TransportError``.
    """

    @abstractmethod
    def layout(
        self,
        request: Dict[str, Any],
        token: Optional[str] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream page-structure events for a layout request."""
        pass

    @abstractmethod
    def chalk(
        self,
        request: Dict[str, Any],
        token: Optional[str] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream document operations for a chalk request."""
        pass
