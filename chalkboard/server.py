"""
HTTP surface for a board session.

This module provides the BoardServer class, which exposes one Board over
FastAPI: read access to pages and pointers for renderers, viewing
navigation, and entry points for generation and batch replay.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Dict, List, Optional, Union

import uvicorn
from fastapi import FastAPI, HTTPException, status
from pydantic import StrictInt

from chalkboard.board import (
    Board,
    BoardError,
    DuplicatePage,
    EmptyBoard,
    PageNotFound,
    Step,
    TransportError,
)
from chalkboard.config import ServerSettings


logger = logging.getLogger(__name__)


@dataclass
class ViewingRequest:
    """Request model for viewing navigation."""
    operation: Union[StrictInt, str]


@dataclass
class NextRequest:
    """Request model for a generation step."""
    step: str
    prompt: str
    description: str = ""


@dataclass
class ApplyRequest:
    """Request model for batch replay."""
    results: List[Dict[str, Any]] = field(default_factory=list)


def _http_error(exc: Exception) -> HTTPException:
    """Translate board errors to HTTP errors."""
    if isinstance(exc, PageNotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (EmptyBoard, DuplicatePage)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, TransportError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


class BoardServer:
    """FastAPI application serving one board session.

    Attributes:
        board: The board session being served.
        settings: Bind address configuration.
        app: FastAPI application instance.

    Example:
        >>> server = BoardServer(Board(ChatInfo("chat-1"), transport=client))
        >>> server.run()
    """

    def __init__(self, board: Board, settings: Optional[ServerSettings] = None) -> None:
        self.board = board
        self.settings = settings or ServerSettings.from_env()
        self.app = FastAPI(
            title="Chalkboard",
            description="Page and pointer state of a generated document",
            version="0.1.0",
            lifespan=self._lifespan,
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure FastAPI routes and endpoints."""

        @self.app.get("/api/pages")
        async def pages_endpoint() -> List[Dict[str, Any]]:
            """List registered pages."""
            return self._handle_pages()

        @self.app.get("/api/pages/{page_id}")
        async def page_detail_endpoint(page_id: int) -> Dict[str, Any]:
            """Get a page with its document tree."""
            return self._handle_page(page_id)

        @self.app.get("/api/state")
        async def state_endpoint() -> Dict[str, Any]:
            """Current pointer state."""
            return self._handle_state()

        @self.app.post("/api/viewing")
        async def viewing_endpoint(request: ViewingRequest) -> Dict[str, Any]:
            """Move the viewing pointer."""
            return self._handle_viewing(request)

        @self.app.post("/api/next")
        async def next_endpoint(request: NextRequest) -> Dict[str, Any]:
            """Run one generation step."""
            return await self._handle_next(request)

        @self.app.post("/api/apply")
        async def apply_endpoint(request: ApplyRequest) -> Dict[str, Any]:
            """Replay a batch of page results."""
            return await self._handle_apply(request)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(f"Board server starting for chat {self.board.info.chat_id}")
        if not len(self.board.pages):
            self.board.initialize()
        yield
        close = getattr(self.board.transport, "close", None)
        if close is not None:
            await close()
        logger.info("Board server shutdown complete")

    def _handle_pages(self) -> List[Dict[str, Any]]:
        return [self.board.pages.get(page_id).to_dict() for page_id in self.board.pages.ids()]

    def _handle_page(self, page_id: int) -> Dict[str, Any]:
        try:
            page = self.board.pages.get(page_id)
        except PageNotFound as exc:
            raise _http_error(exc)
        return dict(page.to_dict(), document=page.document.to_dict())

    def _handle_state(self) -> Dict[str, Any]:
        return dict(self.board.state.snapshot(), page_count=self.board.page_count)

    def _handle_viewing(self, request: ViewingRequest) -> Dict[str, Any]:
        operation = request.operation
        if isinstance(operation, str) and operation.lstrip("-").isdigit():
            operation = int(operation)
        try:
            self.board.switch_viewing(operation)
        except (BoardError, ValueError) as exc:
            raise _http_error(exc)
        return self._handle_state()

    async def _handle_next(self, request: NextRequest) -> Dict[str, Any]:
        try:
            await self.board.next(Step(request.step, request.description), request.prompt)
        except BoardError as exc:
            logger.error(f"Generation step failed: {exc}")
            raise _http_error(exc)
        return self._handle_state()

    async def _handle_apply(self, request: ApplyRequest) -> Dict[str, Any]:
        try:
            created = await self.board.apply(request.results)
        except (BoardError, KeyError, TypeError, ValueError) as exc:
            raise _http_error(exc)
        return dict(self._handle_state(), created=created)

    def run(self) -> None:
        uvicorn.run(self.app, host=self.settings.host, port=self.settings.port)

    def __repr__(self) -> str:
        return f"BoardServer({self.board.info.chat_id}, {self.settings.host}:{self.settings.port})"
