from __future__ import annotations

import pytest

from chalkboard.board import BoardError, EmptyBoard, PageNotFound

from conftest import make_board


def test_create_page_moves_both_pointers(board) -> None:
    board.initialize()
    page_id = board.create_page("Second")
    state = board.state
    assert state.authoring_target.value == page_id
    assert state.viewing_target.value == page_id
    assert state.active_document.value is board.pages.get(page_id).document
    assert state.active_document.value.root.children == []
    assert state.page_total.value == 2


def test_create_page_without_auto_switch_keeps_total(board) -> None:
    board.initialize()
    page_id = board.create_page("Background", auto_switch=False)
    assert board.state.page_total.value == 1
    assert board.state.authoring_target.value == page_id
    assert board.page_count == 2


def test_create_page_with_explicit_id(board) -> None:
    page_id = board.create_page("Imported", page_id=8)
    assert page_id == 8
    assert board.pages.peek_next_id() == 2


def test_initialize_creates_primary_page(board) -> None:
    page_id = board.initialize()
    assert page_id == 1
    assert board.pages.get(1).title == "PRIMARY"
    assert board.state.viewing_target.value == 1
    assert board.state.page_total.value == 1
    with pytest.raises(BoardError):
        board.initialize()


def test_direct_jump_leaves_authoring_unchanged(board) -> None:
    board.initialize()
    board.create_page("B")
    board.create_page("C")
    assert board.switch_viewing(1) is None
    assert board.state.viewing_target.value == 1
    assert board.state.authoring_target.value == 3
    assert board.viewing_page().title == "PRIMARY"


def test_jump_to_unknown_page_surfaces_on_dereference(board) -> None:
    board.initialize()
    board.switch_viewing(42)
    assert board.state.viewing_target.value == 42
    with pytest.raises(PageNotFound):
        board.viewing_page()


def test_next_is_periodic_over_registered_pages(board) -> None:
    board.initialize()
    board.create_page("B")
    board.create_page("C")
    board.switch_viewing(2)
    visited = [board.switch_viewing("next") for _ in range(board.page_count)]
    assert visited == [3, 1, 2]
    assert board.state.viewing_target.value == 2


def test_previous_wraps_around(board) -> None:
    board.initialize()
    board.create_page("B")
    board.switch_viewing(1)
    assert board.switch_viewing("previous") == 2
    assert board.switch_viewing("previous") == 1


def test_stepping_skips_gaps_in_sparse_ids(board) -> None:
    board.initialize()
    board.create_page("Imported", page_id=5)
    board.switch_viewing(1)
    assert board.switch_viewing("next") == 5
    assert board.switch_viewing("next") == 1
    board.switch_viewing(3)
    assert board.switch_viewing("next") == 5
    board.switch_viewing(3)
    assert board.switch_viewing("previous") == 1


def test_stepping_an_empty_board_raises(board) -> None:
    with pytest.raises(EmptyBoard):
        board.switch_viewing("next")
    with pytest.raises(EmptyBoard):
        board.switch_viewing("previous")


def test_stepping_from_no_viewing_target() -> None:
    board = make_board()
    board.pages.add("A")
    board.pages.add("B")
    assert board.switch_viewing("next") == 1
    board.state.viewing_target.set(None)
    assert board.switch_viewing("previous") == 2


@pytest.mark.parametrize("operation", ["sideways", True, 1.5, None])
def test_invalid_navigation_is_rejected(board, operation) -> None:
    board.initialize()
    with pytest.raises(ValueError):
        board.switch_viewing(operation)


def test_switch_authoring_to_missing_page(board) -> None:
    board.initialize()
    with pytest.raises(PageNotFound):
        board.switch_authoring(9)
    assert board.state.authoring_target.value == 1


def test_switch_authoring_pulls_viewing_back(board) -> None:
    board.initialize()
    board.create_page("B")
    board.switch_viewing(1)
    board.switch_authoring(1)
    board.switch_authoring(2)
    assert board.state.viewing_target.value == 2
    assert board.state.active_document.value is board.pages.get(2).document


def test_context_tracks_board_state(board) -> None:
    board.initialize()
    seen = []
    board.context.viewing_target.subscribe(seen.append)
    board.create_page("B")
    board.switch_viewing("previous")
    assert seen == [2, 1]
    assert set(board.context.pages) == {1, 2}


def test_package_imports_expose_board_and_logger() -> None:
    import chalkboard
    import chalkboard.cli
    import chalkboard.server
    from chalkboard.board import BoardLogger
    from chalkboard.board.logging import BoardLogger as SubmoduleLogger

    assert chalkboard.Board is chalkboard.server.Board
    assert BoardLogger is SubmoduleLogger
