from __future__ import annotations

import asyncio

import pytest

from chalkboard.board import BoardError, ChalkResult

from conftest import insert


def test_apply_creates_missing_page_with_id_delta(board) -> None:
    created = asyncio.run(board.apply([ChalkResult(page="5", output=[])]))
    assert created == [5]
    assert 5 in board.pages
    assert board.pages.get(5).title == "5"
    assert board.state.page_total.value == 5


def test_apply_does_not_move_pointers(board) -> None:
    board.initialize()
    primary_document = board.state.active_document.value

    asyncio.run(board.apply([
        {"page": "3", "output": [insert("section")]},
        {"page": "4", "output": [insert("aside")]},
    ]))

    state = board.state
    assert state.authoring_target.value == 1
    assert state.viewing_target.value == 1
    assert state.active_document.value is primary_document
    assert state.active_target.value is None
    # 1 + (3 - 1) + (4 - 2)
    assert state.page_total.value == 5
    assert board.page_count == 3


def test_apply_writes_to_each_pages_own_tree(board) -> None:
    board.initialize()
    asyncio.run(board.apply([
        ChalkResult(page="1", output=[insert("h1"), insert("p")]),
        ChalkResult(page="2", output=[insert("table")]),
    ]))
    assert [c.tag for c in board.pages.get(1).document.root.children] == ["h1", "p"]
    assert [c.tag for c in board.pages.get(2).document.root.children] == ["table"]


def test_applying_a_batch_twice_reapplies_operations(board) -> None:
    batch = [ChalkResult(page="2", output=[insert("p")])]
    first = asyncio.run(board.apply(batch))
    second = asyncio.run(board.apply(batch))
    assert first == [2]
    assert second == []
    assert board.page_count == 1
    assert [c.tag for c in board.pages.get(2).document.root.children] == ["p", "p"]


def test_apply_keeps_allocator_clear_of_explicit_ids(board) -> None:
    board.initialize()
    asyncio.run(board.apply([ChalkResult(page="2", output=[])]))
    assert board.create_page("Next") == 3


def test_invalid_page_identifier_raises(board) -> None:
    with pytest.raises(BoardError):
        asyncio.run(board.apply([ChalkResult(page="cover", output=[])]))


def test_failed_operations_are_skipped(board) -> None:
    asyncio.run(board.apply([
        ChalkResult(page="1", output=[{"type": "explode"}, insert("p")]),
    ]))
    assert [c.tag for c in board.pages.get(1).document.root.children] == ["p"]
