#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/ast/visitors.py
"""Visitor base class for traversing the output AST.

Serializers subclass ``NodeVisitor`` and implement one ``visit_*`` method per
node type.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from docbridge.ast.nodes import (
    Document,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    Text,
)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Examples
    --------
    Visitor that collects every text run:

        >>> class TextCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.texts = []
        ...     def visit_text(self, node):
        ...         self.texts.append(node.content)
        ...     # remaining visit_* methods recurse into children

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    def generic_visit(self, node: Node) -> Any:
        """Fallback visitor for unhandled node types.

        Returns
        -------
        Any
            Result of processing (default: None)

        """
        return None
