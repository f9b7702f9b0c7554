from __future__ import annotations

import pytest

from chalkboard.board import DuplicatePage, ElementNode, NodeType, PageNotFound, PageRegistry, create_empty_document


def test_automatic_ids_start_at_one_and_increase() -> None:
    registry = PageRegistry()
    ids = [registry.add(f"page {n}").page_id for n in range(3)]
    assert ids == [1, 2, 3]
    assert registry.ids() == [1, 2, 3]


def test_explicit_id_still_advances_the_counter() -> None:
    registry = PageRegistry()
    registry.add("first")
    page = registry.add("imported", page_id=10)
    assert page.page_id == 10
    assert registry.unused == 2
    # The counter moved past 2 even though 2 was never registered.
    assert registry.add("next").page_id == 3
    assert 2 not in registry


def test_allocator_skips_explicitly_registered_ids() -> None:
    registry = PageRegistry()
    registry.add("imported", page_id=3)
    assert registry.peek_next_id() == 2
    assert registry.add("a").page_id == 2
    assert registry.peek_next_id() == 4
    assert registry.add("b").page_id == 4


def test_allocator_never_returns_a_registered_id() -> None:
    registry = PageRegistry()
    registry.add("explicit", page_id=3)
    registry.add("explicit", page_id=7)
    allocated = []
    for _ in range(10):
        before = set(registry.as_mapping())
        page = registry.add("auto")
        assert page.page_id not in before
        allocated.append(page.page_id)
    assert allocated == [4, 5, 6, 8, 9, 10, 11, 12, 13, 14]


def test_duplicate_explicit_id_is_rejected_without_advancing() -> None:
    registry = PageRegistry()
    registry.add("first")
    with pytest.raises(DuplicatePage):
        registry.add("again", page_id=1)
    assert registry.unused == 1
    assert len(registry) == 1


def test_missing_page_lookup_raises_page_not_found() -> None:
    registry = PageRegistry()
    with pytest.raises(PageNotFound) as info:
        registry.get(4)
    assert info.value.page_id == 4
    with pytest.raises(LookupError):
        registry.get(None)


def test_new_pages_start_with_an_empty_root() -> None:
    registry = PageRegistry()
    page = registry.add("PRIMARY")
    document = page.document
    assert document.type is NodeType.DOCUMENT
    assert document.filename == "page-1"
    assert len(document.children) == 1
    root = document.root
    assert isinstance(root, ElementNode)
    assert root.tag == "root"
    assert root.children == []
    assert root.attributes == []
    assert root.self_closing is False


def test_empty_documents_are_independent() -> None:
    first = create_empty_document(1)
    second = create_empty_document(2)
    first.root.children.append(ElementNode("p"))
    assert second.root.children == []
