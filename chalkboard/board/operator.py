"""
Document Operator contract and the reference tree operator.

An operator mutates a document tree one operation at a time and reports
which node became active. It knows nothing about pages.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from chalkboard.board.document import DocumentNode, ElementNode, Node, TextNode, node_from_dict

logger = logging.getLogger(__name__)

SelectCallback = Callable[[Any], None]


@dataclass
class OperationResult:
    """Result from applying one operation."""
    success: bool
    node: Optional[Any] = None
    error: Optional[str] = None


class DocumentOperator(ABC):
    """Abstract mutation engine for document trees.

    Subclasses implement ``apply``; ``bind`` ties an instance to one tree
    and an optional selection callback.
    """

    @abstractmethod
    def apply(self, document: DocumentNode, operation: Dict[str, Any]) -> OperationResult:
        """Apply ``operation`` to ``document`` in place."""
        pass

    def bind(
        self,
        document: DocumentNode,
        on_select: Optional[SelectCallback] = None,
    ) -> "BoundOperator":
        return BoundOperator(self, document, on_select)


class BoundOperator:
    """An operator bound to a single document tree."""

    def __init__(
        self,
        operator: DocumentOperator,
        document: DocumentNode,
        on_select: Optional[SelectCallback] = None,
    ) -> None:
        self.operator = operator
        self.document = document
        self._on_select = on_select

    def handle_operation(self, operation: Dict[str, Any]) -> OperationResult:
        result = self.operator.apply(self.document, operation)
        if result.success and self._on_select is not None and result.node is not None:
            self._on_select(result.node)
        return result

    def __repr__(self) -> str:
        return f"BoundOperator({type(self.operator).__name__}, {self.document.filename})"


class TreeOperator(DocumentOperator):
    """Reference operator addressing nodes by child-index paths.

    A path is a list of child indices starting at the root element; the
    empty path is the root element itself. Supported operations::

        {"type": "insert", "parent": [0], "index": 1, "node": {...}}
        {"type": "update", "path": [0], "attributes": {"class": "x"}}
        {"type": "set-text", "path": [0, 2], "content": "hello"}
        {"type": "remove", "path": [1]}

    ``index`` is optional on insert and defaults to appending.
    """

    def apply(self, document: DocumentNode, operation: Dict[str, Any]) -> OperationResult:
        kind = operation.get("type")
        handler = self._handlers().get(kind)
        if handler is None:
            return OperationResult(False, error=f"Unsupported operation: {kind}")
        try:
            return handler(document, operation)
        except (LookupError, ValueError, TypeError) as exc:
            logger.debug(f"Operation {kind} rejected: {exc}")
            return OperationResult(False, error=str(exc))

    def _handlers(self) -> Dict[str, Callable[[DocumentNode, Dict[str, Any]], OperationResult]]:
        return {
            "insert": self._insert,
            "update": self._update,
            "set-text": self._set_text,
            "remove": self._remove,
        }

    @staticmethod
    def _resolve(document: DocumentNode, path: List[int]) -> Node:
        node: Node = document.root
        for index in path:
            if not isinstance(node, ElementNode):
                raise LookupError(f"Path {path} descends into a text node")
            if index < 0 or index >= len(node.children):
                raise IndexError(f"Path {path} is out of range")
            node = node.children[index]
        return node

    def _element(self, document: DocumentNode, path: List[int]) -> ElementNode:
        node = self._resolve(document, path)
        if not isinstance(node, ElementNode):
            raise ValueError(f"Node at {path} is not an element")
        return node

    def _insert(self, document: DocumentNode, operation: Dict[str, Any]) -> OperationResult:
        parent = self._element(document, list(operation.get("parent") or []))
        if parent.self_closing:
            raise ValueError(f"<{parent.tag}> is self-closing")
        node = node_from_dict(operation["node"])
        index = operation.get("index")
        if index is None:
            parent.children.append(node)
        else:
            if index < 0 or index > len(parent.children):
                raise IndexError(f"Insert index {index} is out of range")
            parent.children.insert(index, node)
        return OperationResult(True, node=node)

    def _update(self, document: DocumentNode, operation: Dict[str, Any]) -> OperationResult:
        element = self._element(document, list(operation.get("path") or []))
        for name, value in (operation.get("attributes") or {}).items():
            element.set_attribute(name, value)
        return OperationResult(True, node=element)

    def _set_text(self, document: DocumentNode, operation: Dict[str, Any]) -> OperationResult:
        node = self._resolve(document, list(operation.get("path") or []))
        content = str(operation.get("content", ""))
        if isinstance(node, TextNode):
            node.content = content
        else:
            node.children = [TextNode(content)]
        return OperationResult(True, node=node)

    def _remove(self, document: DocumentNode, operation: Dict[str, Any]) -> OperationResult:
        path = list(operation.get("path") or [])
        if not path:
            raise ValueError("The root element cannot be removed")
        parent = self._element(document, path[:-1])
        index = path[-1]
        if index < 0 or index >= len(parent.children):
            raise IndexError(f"Path {path} is out of range")
        parent.children.pop(index)
        return OperationResult(True, node=parent)
