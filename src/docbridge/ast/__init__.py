#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/ast/__init__.py
"""Output AST that documents are lowered into before serialization.

Examples
--------
    >>> from docbridge.ast import Document, Heading, Text
    >>> from docbridge.renderers.markdown import MarkdownRenderer
    >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
    >>> MarkdownRenderer().render_to_string(doc)
    '# Title'

"""

from __future__ import annotations

from docbridge.ast.nodes import (
    Alignment,
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
    get_node_children,
)
from docbridge.ast.visitors import NodeVisitor

__all__ = [
    "Alignment",
    "Document",
    "Heading",
    "Image",
    "Link",
    "List",
    "ListItem",
    "Node",
    "NodeVisitor",
    "Paragraph",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "get_node_children",
]
