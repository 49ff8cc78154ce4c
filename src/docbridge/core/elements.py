#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/core/elements.py
"""Format-agnostic document tree.

This module defines the canonical document model shared by the tree builder
(structural events to document) and tree lowering (document to output AST).
The element set is closed: every element is one of ``Header``, ``Paragraph``,
``Text``, ``List``, ``Hyperlink``, ``Image`` or ``Table``, plus the auxiliary
containers ``ListItem``, ``TableHeader``, ``TableRow`` and ``TableCell``.

Every element owns its children exclusively. A ``List`` found inside a
``ListItem`` is a sub-list; nesting is expressed purely by containment, so
there are no parent references anywhere in the tree.

Elements are mutable: the builder creates them empty when a scope opens,
fills them while the scope is open and appends them to their parent when the
scope closes.

"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

from docbridge.constants import (
    DEFAULT_IMAGE_EXTENSION,
    DEFAULT_PAGE_HEIGHT,
    DEFAULT_PAGE_INDENT,
    DEFAULT_PAGE_WIDTH,
    DEFAULT_TABLE_HEADER_WIDTH,
    DEFAULT_TEXT_SIZE,
    MAX_HEADING_LEVEL,
    MIN_HEADING_LEVEL,
)


class ImageType(str, Enum):
    """Image encodings recognized by the document model."""

    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    BMP = "bmp"
    SVG = "svg"
    WEBP = "webp"
    TIFF = "tiff"
    ICO = "ico"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        """File extension (with leading dot) used when saving this image type.

        Unknown types are saved with a ``.png`` extension.
        """
        return _EXTENSIONS.get(self, DEFAULT_IMAGE_EXTENSION)

    @classmethod
    def from_reference(cls, reference: str) -> ImageType:
        """Derive the image type from the suffix of an image reference.

        Query strings and fragments are ignored, so ``"photo.JPG?v=2"`` is a JPEG.

        Parameters
        ----------
        reference : str
            Path or URL of the image as written in the source document

        Returns
        -------
        ImageType
            The matching type, or ``ImageType.UNKNOWN``

        """
        path = re.split(r"[?#]", reference, maxsplit=1)[0]
        suffix = PurePosixPath(path).suffix.lower().lstrip(".")
        return _SUFFIXES.get(suffix, cls.UNKNOWN)

    @classmethod
    def from_bytes(cls, data: bytes) -> ImageType:
        r"""Detect the image type from magic bytes.

        Supported signatures:

        - **PNG**: ``\x89PNG\r\n\x1a\n``
        - **JPEG**: ``\xff\xd8\xff``
        - **GIF**: ``GIF87a`` or ``GIF89a``
        - **WebP**: ``RIFF`` followed by ``WEBP`` at offset 8
        - **BMP**: ``BM``
        - **TIFF**: ``II*\x00`` or ``MM\x00*``
        - **ICO**: ``\x00\x00\x01\x00``
        - **SVG**: ``<svg`` or ``<?xml`` after leading whitespace

        """
        if not data or len(data) < 4:
            return cls.UNKNOWN
        if data.startswith(b"\x89PNG\r\n\x1a\n"):
            return cls.PNG
        if data.startswith(b"\xff\xd8\xff"):
            return cls.JPEG
        if data.startswith((b"GIF87a", b"GIF89a")):
            return cls.GIF
        if len(data) >= 12 and data.startswith(b"RIFF") and data[8:12] == b"WEBP":
            return cls.WEBP
        if data.startswith(b"BM"):
            return cls.BMP
        if data.startswith((b"II*\x00", b"MM\x00*")):
            return cls.TIFF
        if data.startswith(b"\x00\x00\x01\x00"):
            return cls.ICO
        head = data[:256].lstrip()
        if head.startswith((b"<svg", b"<?xml")):
            return cls.SVG
        return cls.UNKNOWN


_SUFFIXES = {
    "png": ImageType.PNG,
    "jpg": ImageType.JPEG,
    "jpeg": ImageType.JPEG,
    "gif": ImageType.GIF,
    "bmp": ImageType.BMP,
    "svg": ImageType.SVG,
    "webp": ImageType.WEBP,
    "tif": ImageType.TIFF,
    "tiff": ImageType.TIFF,
    "ico": ImageType.ICO,
}

_EXTENSIONS = {
    ImageType.PNG: ".png",
    ImageType.JPEG: ".jpg",
    ImageType.GIF: ".gif",
    ImageType.BMP: ".bmp",
    ImageType.SVG: ".svg",
    ImageType.WEBP: ".webp",
    ImageType.TIFF: ".tiff",
    ImageType.ICO: ".ico",
}


@dataclass(frozen=True)
class ImageDimension:
    """Optional display size of an image."""

    width: float | None = None
    height: float | None = None


@dataclass(frozen=True)
class PageGeometry:
    """Page size, margins and opaque layout values of a document.

    Parameters
    ----------
    page_width, page_height : float
        Page size (A4 portrait by default)
    left_page_indent, right_page_indent, top_page_indent, bottom_page_indent : float
        Page margins
    extra : dict
        Values carried through unchanged for fixed-layout consumers

    """

    page_width: float = DEFAULT_PAGE_WIDTH
    page_height: float = DEFAULT_PAGE_HEIGHT
    left_page_indent: float = DEFAULT_PAGE_INDENT
    right_page_indent: float = DEFAULT_PAGE_INDENT
    top_page_indent: float = DEFAULT_PAGE_INDENT
    bottom_page_indent: float = DEFAULT_PAGE_INDENT
    extra: dict[str, Any] = field(default_factory=dict, compare=True, hash=False)


class Element:
    """Base class for every document element.

    Concrete elements dispatch to the matching ``visit_*`` method of an
    ``ElementVisitor``. A class outside the closed element set falls back to
    the visitor's ``generic_visit``.

    """

    def accept(self, visitor: ElementVisitor) -> Any:
        """Dispatch to ``visitor.generic_visit``."""
        return visitor.generic_visit(self)


@dataclass
class Text(Element):
    """A run of plain text.

    Parameters
    ----------
    text : str
        Text content
    size : int
        Font size

    """

    text: str = ""
    size: int = DEFAULT_TEXT_SIZE

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_text(self)


@dataclass
class Header(Element):
    """A heading with level 1-6 and accumulated text."""

    level: int = 1
    text: str = ""

    def __post_init__(self) -> None:
        if not MIN_HEADING_LEVEL <= self.level <= MAX_HEADING_LEVEL:
            raise ValueError(
                f"Header level must be between {MIN_HEADING_LEVEL} and {MAX_HEADING_LEVEL}, got {self.level}"
            )

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_header(self)


@dataclass
class Paragraph(Element):
    """A paragraph holding an ordered sequence of inline runs.

    Runs are normally ``Text`` and ``Hyperlink`` elements.
    """

    elements: list[Element] = field(default_factory=list)

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_paragraph(self)


@dataclass
class Hyperlink(Element):
    """A link.

    Parameters
    ----------
    title : str
        Visible link text
    url : str
        Link target
    alt : str
        Link title attribute, shown as a tooltip by most viewers
    size : int
        Font size of the link text

    """

    title: str = ""
    url: str = ""
    alt: str = ""
    size: int = DEFAULT_TEXT_SIZE

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_hyperlink(self)


@dataclass
class Image(Element):
    """An embedded image with its raw bytes.

    Parameters
    ----------
    data : bytes
        Raw image bytes as returned by the image loader
    title : str
        Image title
    alt : str
        Alternative text
    image_type : ImageType
        Encoding of ``data``
    dimensions : ImageDimension
        Optional display size

    """

    data: bytes = b""
    title: str = ""
    alt: str = ""
    image_type: ImageType = ImageType.UNKNOWN
    dimensions: ImageDimension = field(default_factory=ImageDimension)

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_image(self)


@dataclass
class ListItem:
    """One entry of a ``List``, wrapping exactly one element.

    The element may itself be a ``List``, in which case it is a sub-list.
    """

    element: Element


@dataclass
class List(Element):
    """An ordered or unordered list."""

    elements: list[ListItem] = field(default_factory=list)
    numbered: bool = False

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_list(self)


@dataclass
class TableHeader:
    """A header cell of a table with its column width."""

    element: Element
    width: float = DEFAULT_TABLE_HEADER_WIDTH


@dataclass
class TableCell:
    """A body cell of a table."""

    element: Element


@dataclass
class TableRow:
    """A body row of a table."""

    cells: list[TableCell] = field(default_factory=list)


@dataclass
class Table(Element):
    """A table with one header row and any number of body rows.

    Every row holds exactly ``len(headers)`` cells once the table is sealed.
    """

    headers: list[TableHeader] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_table(self)


@dataclass
class Document:
    """A fully built document.

    Parameters
    ----------
    elements : list of Element
        Body elements in reading order
    page_header : list of Element
        Elements repeated at the top of each page
    page_footer : list of Element
        Elements repeated at the bottom of each page
    geometry : PageGeometry
        Page size and margins

    """

    elements: list[Element] = field(default_factory=list)
    page_header: list[Element] = field(default_factory=list)
    page_footer: list[Element] = field(default_factory=list)
    geometry: PageGeometry = field(default_factory=PageGeometry)


class ElementVisitor(ABC):
    """Abstract base class for visitors over the document tree."""

    @abstractmethod
    def visit_text(self, element: Text) -> Any:
        """Visit a Text element."""

    @abstractmethod
    def visit_header(self, element: Header) -> Any:
        """Visit a Header element."""

    @abstractmethod
    def visit_paragraph(self, element: Paragraph) -> Any:
        """Visit a Paragraph element."""

    @abstractmethod
    def visit_hyperlink(self, element: Hyperlink) -> Any:
        """Visit a Hyperlink element."""

    @abstractmethod
    def visit_image(self, element: Image) -> Any:
        """Visit an Image element."""

    @abstractmethod
    def visit_list(self, element: List) -> Any:
        """Visit a List element."""

    @abstractmethod
    def visit_table(self, element: Table) -> Any:
        """Visit a Table element."""

    def generic_visit(self, element: Element) -> Any:
        """Visit an element that is not part of the closed element set.

        Raises
        ------
        NotImplementedError
            Always, unless overridden by a subclass

        """
        raise NotImplementedError(f"No visit method for {type(element).__name__}")
