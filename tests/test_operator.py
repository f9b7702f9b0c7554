from __future__ import annotations

from chalkboard.board import ElementNode, TextNode, TreeOperator, create_empty_document


def _bound(selected=None):
    document = create_empty_document(1)
    callback = selected.append if selected is not None else None
    return document, TreeOperator().bind(document, callback)


def test_insert_appends_and_selects() -> None:
    selected = []
    document, bound = _bound(selected)
    result = bound.handle_operation({
        "type": "insert",
        "parent": [],
        "node": {"tag": "section", "attributes": {"id": "intro"}, "children": [{"type": "text", "content": "Hi"}]},
    })
    assert result.success
    section = document.root.children[0]
    assert section.tag == "section"
    assert section.get_attribute("id").value == "intro"
    assert section.children[0].content == "Hi"
    assert selected == [section]


def test_insert_at_index() -> None:
    document, bound = _bound()
    bound.handle_operation({"type": "insert", "parent": [], "node": {"tag": "b"}})
    bound.handle_operation({"type": "insert", "parent": [], "index": 0, "node": {"tag": "a"}})
    assert [c.tag for c in document.root.children] == ["a", "b"]


def test_update_sets_attributes() -> None:
    document, bound = _bound()
    bound.handle_operation({"type": "insert", "parent": [], "node": {"tag": "p", "attributes": [{"name": "class", "value": "x"}]}})
    result = bound.handle_operation({"type": "update", "path": [0], "attributes": {"class": "y", "lang": "en"}})
    assert result.success
    paragraph = document.root.children[0]
    assert [(a.name, a.value) for a in paragraph.attributes] == [("class", "y"), ("lang", "en")]


def test_set_text_on_element_and_text_node() -> None:
    document, bound = _bound()
    bound.handle_operation({"type": "insert", "parent": [], "node": {"tag": "p"}})
    bound.handle_operation({"type": "set-text", "path": [0], "content": "first"})
    paragraph = document.root.children[0]
    assert isinstance(paragraph.children[0], TextNode)
    bound.handle_operation({"type": "set-text", "path": [0, 0], "content": "second"})
    assert paragraph.children[0].content == "second"


def test_remove_selects_parent() -> None:
    selected = []
    document, bound = _bound(selected)
    bound.handle_operation({"type": "insert", "parent": [], "node": {"tag": "p"}})
    result = bound.handle_operation({"type": "remove", "path": [0]})
    assert result.success
    assert document.root.children == []
    assert selected[-1] is document.root


def test_invalid_operations_report_failure_without_selecting() -> None:
    selected = []
    document, bound = _bound(selected)
    failures = [
        {"type": "unknown"},
        {"type": "remove", "path": []},
        {"type": "remove", "path": [3]},
        {"type": "update", "path": [0, 1]},
        {"type": "insert", "parent": [], "index": 5, "node": {"tag": "p"}},
        {"type": "insert", "parent": [], "node": {"type": "comment"}},
        {"type": "insert", "parent": [], "node": {"tag": ""}},
    ]
    for operation in failures:
        result = bound.handle_operation(operation)
        assert not result.success
        assert result.error
    assert selected == []
    assert document.root.children == []


def test_self_closing_elements_reject_children() -> None:
    document, bound = _bound()
    bound.handle_operation({"type": "insert", "parent": [], "node": {"tag": "img", "self_closing": True}})
    result = bound.handle_operation({"type": "insert", "parent": [0], "node": {"tag": "p"}})
    assert not result.success
    assert isinstance(document.root.children[0], ElementNode)
    assert document.root.children[0].children == []
