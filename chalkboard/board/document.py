"""
Document node model.

Pages hold a document tree: a document node with exactly one ``root``
element, mutated in place by a Document Operator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Union


class NodeType(Enum):
    """Kinds of nodes in a document tree."""
    DOCUMENT = auto()
    ELEMENT = auto()
    TEXT = auto()


@dataclass
class Attribute:
    name: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class TextNode:
    content: str = ""

    @property
    def type(self) -> NodeType:
        return NodeType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "content": self.content}


@dataclass
class ElementNode:
    tag: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    self_closing: bool = False

    @property
    def type(self) -> NodeType:
        return NodeType.ELEMENT

    def get_attribute(self, name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def set_attribute(self, name: str, value: Any) -> None:
        existing = self.get_attribute(name)
        if existing is not None:
            existing.value = value
        else:
            self.attributes.append(Attribute(name, value))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "element",
            "tag": self.tag,
            "attributes": [a.to_dict() for a in self.attributes],
            "children": [c.to_dict() for c in self.children],
            "self_closing": self.self_closing,
        }


@dataclass
class DocumentNode:
    children: List["Node"] = field(default_factory=list)
    filename: str = ""
    raw: str = ""

    @property
    def type(self) -> NodeType:
        return NodeType.DOCUMENT

    @property
    def root(self) -> ElementNode:
        """The single root element of the document."""
        return self.children[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "document",
            "filename": self.filename,
            "children": [c.to_dict() for c in self.children],
        }


Node = Union[ElementNode, TextNode]


def create_empty_document(page_id: int) -> DocumentNode:
    """Blank canvas every page starts from: one empty ``root`` element."""
    return DocumentNode(
        children=[
            ElementNode(tag="root", attributes=[], children=[], self_closing=False),
        ],
        filename=f"page-{page_id}",
        raw="",
    )


def node_from_dict(data: Dict[str, Any]) -> Node:
    """Build an element or text node from its wire form.

    Attributes may be given either as a list of ``{name, value}`` pairs or
    as a plain mapping.
    """
    kind = data.get("type", "element")
    if kind == "text":
        return TextNode(content=str(data.get("content", "")))
    if kind != "element":
        raise ValueError(f"Unsupported node type: {kind}")

    tag = data.get("tag")
    if not tag:
        raise ValueError("Element node requires a tag")

    raw_attributes = data.get("attributes") or []
    if isinstance(raw_attributes, dict):
        attributes = [Attribute(k, v) for k, v in raw_attributes.items()]
    else:
        attributes = [Attribute(a["name"], a.get("value")) for a in raw_attributes]

    return ElementNode(
        tag=tag,
        attributes=attributes,
        children=[node_from_dict(c) for c in data.get("children") or []],
        self_closing=bool(data.get("self_closing", False)),
    )
