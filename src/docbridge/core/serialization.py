#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/core/serialization.py
"""JSON serialization and deserialization for document trees.

The JSON form preserves every element, its attributes and its nesting, so a
document survives ``document -> JSON -> document`` unchanged. Image bytes are
stored base64-encoded.

Examples
--------
    >>> from docbridge.core.elements import Document, Header
    >>> from docbridge.core.serialization import document_to_json, json_to_document
    >>> doc = Document(elements=[Header(level=1, text="Title")])
    >>> json_to_document(document_to_json(doc)) == doc
    True

"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import asdict
from typing import Any, Callable

from docbridge.core.elements import (
    Document,
    Element,
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
from docbridge.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _serialize_text(element: Text) -> dict[str, Any]:
    return {"element_type": "Text", "text": element.text, "size": element.size}


def _serialize_header(element: Header) -> dict[str, Any]:
    return {"element_type": "Header", "level": element.level, "text": element.text}


def _serialize_paragraph(element: Paragraph) -> dict[str, Any]:
    return {"element_type": "Paragraph", "elements": [element_to_dict(child) for child in element.elements]}


def _serialize_hyperlink(element: Hyperlink) -> dict[str, Any]:
    return {
        "element_type": "Hyperlink",
        "title": element.title,
        "url": element.url,
        "alt": element.alt,
        "size": element.size,
    }


def _serialize_image(element: Image) -> dict[str, Any]:
    return {
        "element_type": "Image",
        "data": base64.b64encode(element.data).decode("ascii"),
        "title": element.title,
        "alt": element.alt,
        "image_type": element.image_type.value,
        "dimensions": {"width": element.dimensions.width, "height": element.dimensions.height},
    }


def _serialize_list(element: List) -> dict[str, Any]:
    return {
        "element_type": "List",
        "numbered": element.numbered,
        "items": [element_to_dict(item.element) for item in element.elements],
    }


def _serialize_table(element: Table) -> dict[str, Any]:
    return {
        "element_type": "Table",
        "headers": [{"element": element_to_dict(h.element), "width": h.width} for h in element.headers],
        "rows": [[element_to_dict(cell.element) for cell in row.cells] for row in element.rows],
    }


_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Text: _serialize_text,
    Header: _serialize_header,
    Paragraph: _serialize_paragraph,
    Hyperlink: _serialize_hyperlink,
    Image: _serialize_image,
    List: _serialize_list,
    Table: _serialize_table,
}


def element_to_dict(element: Element) -> dict[str, Any]:
    """Convert a single element (and its children) to a dictionary.

    Raises
    ------
    ValidationError
        If the element is not part of the closed element set

    """
    serializer = _SERIALIZATION_DISPATCH.get(type(element))
    if serializer is None:
        raise ValidationError(
            f"Unknown element type for serialization: {type(element).__name__}",
            parameter_name="element",
            parameter_value=element,
        )
    return serializer(element)


def document_to_dict(document: Document) -> dict[str, Any]:
    """Convert a document to a JSON-compatible dictionary.

    Parameters
    ----------
    document : Document
        The document to convert

    Returns
    -------
    dict
        Dictionary with ``elements``, ``page_header``, ``page_footer`` and ``geometry`` keys

    """
    return {
        "element_type": "Document",
        "elements": [element_to_dict(e) for e in document.elements],
        "page_header": [element_to_dict(e) for e in document.page_header],
        "page_footer": [element_to_dict(e) for e in document.page_footer],
        "geometry": asdict(document.geometry),
    }


def _deserialize_text(data: dict[str, Any]) -> Text:
    return Text(text=data.get("text", ""), size=data.get("size", Text.size))


def _deserialize_header(data: dict[str, Any]) -> Header:
    return Header(level=data["level"], text=data.get("text", ""))


def _deserialize_paragraph(data: dict[str, Any]) -> Paragraph:
    return Paragraph(elements=[dict_to_element(child) for child in data.get("elements", [])])


def _deserialize_hyperlink(data: dict[str, Any]) -> Hyperlink:
    return Hyperlink(
        title=data.get("title", ""),
        url=data.get("url", ""),
        alt=data.get("alt", ""),
        size=data.get("size", Hyperlink.size),
    )


def _deserialize_image(data: dict[str, Any]) -> Image:
    try:
        raw = base64.b64decode(data.get("data", ""), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Image data is not valid base64", parameter_name="data", original_error=e) from e
    try:
        image_type = ImageType(data.get("image_type", ImageType.UNKNOWN.value))
    except ValueError as e:
        raise ValidationError(
            f"Unknown image type: {data.get('image_type')!r}", parameter_name="image_type", original_error=e
        ) from e
    dims = data.get("dimensions") or {}
    return Image(
        data=raw,
        title=data.get("title", ""),
        alt=data.get("alt", ""),
        image_type=image_type,
        dimensions=ImageDimension(width=dims.get("width"), height=dims.get("height")),
    )


def _deserialize_list(data: dict[str, Any]) -> List:
    return List(
        elements=[ListItem(element=dict_to_element(item)) for item in data.get("items", [])],
        numbered=data.get("numbered", False),
    )


def _deserialize_table(data: dict[str, Any]) -> Table:
    headers = [
        TableHeader(element=dict_to_element(h["element"]), width=h.get("width", TableHeader.width))
        for h in data.get("headers", [])
    ]
    rows = [TableRow(cells=[TableCell(element=dict_to_element(c)) for c in row]) for row in data.get("rows", [])]
    return Table(headers=headers, rows=rows)


_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any]], Element]] = {
    "Text": _deserialize_text,
    "Header": _deserialize_header,
    "Paragraph": _deserialize_paragraph,
    "Hyperlink": _deserialize_hyperlink,
    "Image": _deserialize_image,
    "List": _deserialize_list,
    "Table": _deserialize_table,
}


def dict_to_element(data: dict[str, Any]) -> Element:
    """Reconstruct a single element from its dictionary form.

    Raises
    ------
    ValidationError
        If ``element_type`` is missing or unknown, or a field is invalid

    """
    element_type = data.get("element_type")
    deserializer = _DESERIALIZATION_DISPATCH.get(element_type)  # type: ignore[arg-type]
    if deserializer is None:
        raise ValidationError(
            f"Unknown element type: {element_type!r}", parameter_name="element_type", parameter_value=element_type
        )
    try:
        return deserializer(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Malformed {element_type} element: {e}", original_error=e) from e


def dict_to_document(data: dict[str, Any]) -> Document:
    """Reconstruct a document from its dictionary form.

    Raises
    ------
    ValidationError
        If the dictionary does not describe a document

    """
    if data.get("element_type") != "Document":
        raise ValidationError(
            f"Expected a Document, got {data.get('element_type')!r}",
            parameter_name="element_type",
            parameter_value=data.get("element_type"),
        )
    geometry_data = dict(data.get("geometry") or {})
    try:
        geometry = PageGeometry(**geometry_data)
    except TypeError as e:
        raise ValidationError(f"Malformed page geometry: {e}", parameter_name="geometry", original_error=e) from e
    return Document(
        elements=[dict_to_element(e) for e in data.get("elements", [])],
        page_header=[dict_to_element(e) for e in data.get("page_header", [])],
        page_footer=[dict_to_element(e) for e in data.get("page_footer", [])],
        geometry=geometry,
    )


def document_to_json(document: Document, indent: int | None = None) -> str:
    """Serialize a document to a JSON string with a schema version.

    Unicode characters are written as-is.
    """
    versioned = {"schema_version": SCHEMA_VERSION, **document_to_dict(document)}
    return json.dumps(versioned, indent=indent, ensure_ascii=False)


def json_to_document(json_str: str) -> Document:
    """Deserialize a JSON string produced by ``document_to_json``.

    JSON without a ``schema_version`` field is read as version 1.

    Raises
    ------
    ValidationError
        If the JSON is malformed, of an unsupported schema version, or not a document

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}", original_error=e) from e
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object, got {type(data).__name__}")

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported schema version: {schema_version}. Only version {SCHEMA_VERSION} is supported.",
            parameter_name="schema_version",
            parameter_value=schema_version,
        )
    logger.debug("Deserializing document with %d body elements", len(data.get("elements", [])))
    return dict_to_document(data)


__all__ = [
    "element_to_dict",
    "dict_to_element",
    "document_to_dict",
    "dict_to_document",
    "document_to_json",
    "json_to_document",
]
