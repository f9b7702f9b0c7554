from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from chalkboard.board import Board, ChatInfo, GenerationTransport, StreamEvent
from chalkboard.config import BoardSettings


def op(operation_type: str, **fields: Any) -> StreamEvent:
    return StreamEvent(operation=dict(fields, type=operation_type))


def insert(tag: str, parent: Optional[List[int]] = None) -> Dict[str, Any]:
    return {"type": "insert", "parent": parent or [], "node": {"tag": tag}}


class FakeTransport(GenerationTransport):
    """Replays canned events per stage and records every request."""

    def __init__(
        self,
        layout_events: Optional[List[Any]] = None,
        chalk_events: Optional[List[Any]] = None,
        yield_between: bool = False,
    ) -> None:
        self.layout_events = list(layout_events or [])
        self.chalk_events = list(chalk_events or [])
        self.yield_between = yield_between
        self.requests: List[tuple] = []
        self.tokens: List[Optional[str]] = []

    async def _replay(self, stage: str, events: List[Any], request: Dict[str, Any]):
        self.requests.append((stage, request))
        for event in events:
            if self.yield_between:
                await asyncio.sleep(0)
            if isinstance(event, Exception):
                raise event
            yield event

    def layout(self, request, token=None):
        self.tokens.append(token)
        return self._replay("layout", self.layout_events, request)

    def chalk(self, request, token=None):
        self.tokens.append(token)
        return self._replay("chalk", self.chalk_events, request)


def make_board(transport: Optional[GenerationTransport] = None, token: Optional[str] = None) -> Board:
    return Board(
        ChatInfo("chat-1", token),
        transport=transport,
        settings=BoardSettings(verbose=False),
    )


@pytest.fixture
def board() -> Board:
    return make_board()
