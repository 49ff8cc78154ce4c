#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/core/__init__.py
"""Format-agnostic document model and its JSON serialization."""

from docbridge.core.elements import (
    Document,
    Element,
    ElementVisitor,
    Header,
    Hyperlink,
    Image,
    ImageDimension,
    ImageType,
    List,
    ListItem,
    PageGeometry,
    Paragraph,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    Text,
)
from docbridge.core.serialization import (
    dict_to_document,
    document_to_dict,
    document_to_json,
    json_to_document,
)

__all__ = [
    "Document",
    "Element",
    "ElementVisitor",
    "Header",
    "Hyperlink",
    "Image",
    "ImageDimension",
    "ImageType",
    "List",
    "ListItem",
    "PageGeometry",
    "Paragraph",
    "Table",
    "TableCell",
    "TableHeader",
    "TableRow",
    "Text",
    "dict_to_document",
    "document_to_dict",
    "document_to_json",
    "json_to_document",
]
