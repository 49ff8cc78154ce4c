#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and rendering.

Parser options control the tokenizer and the document tree builder; renderer
options control tree lowering and the Markdown serializer.
"""
# src/docbridge/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from docbridge.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_COLLAPSE_BLANK_LINES,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_IMAGE_FILENAME_PREFIX,
    DEFAULT_LIST_INDENT_WIDTH,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_TABLE_HEADER_WIDTH,
    DEFAULT_TABLE_PIPE_ESCAPE,
    DEFAULT_TEXT_SIZE,
)
from docbridge.core.elements import PageGeometry
from docbridge.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-document parsing.

    Parameters
    ----------
    parse_tables : bool, default True
        Whether to parse table syntax (GFM pipe tables).
    parse_strikethrough : bool, default True
        Whether to parse strikethrough syntax (~~text~~).
    text_size : int, default 14
        Font size assigned to every text run and hyperlink.
    table_header_width : float, default 30.0
        Column width assigned to every table header.
    page_geometry : PageGeometry
        Page size and margins attached to built documents.

    """

    parse_tables: bool = field(
        default=DEFAULT_PARSE_TABLES,
        metadata={"help": "Parse table syntax (GFM pipe tables)", "cli_name": "no-parse-tables", "importance": "core"},
    )
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={
            "help": "Parse strikethrough syntax (~~text~~)",
            "cli_name": "no-parse-strikethrough",
            "importance": "advanced",
        },
    )
    text_size: int = field(
        default=DEFAULT_TEXT_SIZE,
        metadata={"help": "Font size for text runs and hyperlinks", "type": int, "importance": "advanced"},
    )
    table_header_width: float = field(
        default=DEFAULT_TABLE_HEADER_WIDTH,
        metadata={"help": "Column width for table headers", "type": float, "importance": "advanced"},
    )
    page_geometry: PageGeometry = field(
        default_factory=PageGeometry,
        metadata={"help": "Page size and margins attached to built documents", "exclude_from_cli": True},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges for parser options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()

        if self.text_size <= 0:
            raise ValueError(f"text_size must be positive, got {self.text_size}")
        if self.table_header_width <= 0:
            raise ValueError(f"table_header_width must be positive, got {self.table_header_width}")


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for lowering documents and rendering Markdown.

    Parameters
    ----------
    bullet_symbols : str, default "*-+"
        Characters to cycle through for nested bullet lists.
    list_indent_width : int, default 4
        Indentation of content nested under a list item, clamped between the
        marker width and three columns past it.
    escape_special : bool, default True
        Escape special Markdown characters in text.
    table_pipe_escape : bool, default True
        Escape pipe characters inside table cells.
    collapse_blank_lines : bool, default True
        Collapse runs of blank lines to a single blank line.
    image_filename_prefix : str, default "image"
        Prefix of the filenames handed to the image saver.

    """

    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Bullet characters for unordered lists, cycled by depth", "importance": "advanced"},
    )
    list_indent_width: int = field(
        default=DEFAULT_LIST_INDENT_WIDTH,
        metadata={"help": "Indentation of content nested under a list item", "type": int, "importance": "advanced"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={
            "help": "Escape special Markdown characters in text",
            "cli_name": "no-escape-special",
            "importance": "advanced",
        },
    )
    table_pipe_escape: bool = field(
        default=DEFAULT_TABLE_PIPE_ESCAPE,
        metadata={
            "help": "Escape pipe characters inside table cells",
            "cli_name": "no-table-pipe-escape",
            "importance": "advanced",
        },
    )
    collapse_blank_lines: bool = field(
        default=DEFAULT_COLLAPSE_BLANK_LINES,
        metadata={
            "help": "Collapse multiple blank lines into one",
            "cli_name": "no-collapse-blank-lines",
            "importance": "advanced",
        },
    )
    image_filename_prefix: str = field(
        default=DEFAULT_IMAGE_FILENAME_PREFIX,
        metadata={"help": "Prefix for saved image filenames", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()

        if not self.bullet_symbols:
            raise ValueError("bullet_symbols must contain at least one character")
        invalid = set(self.bullet_symbols) - set("*-+")
        if invalid:
            raise ValueError(f"bullet_symbols may only contain '*', '-' or '+', got {''.join(sorted(invalid))!r}")
        if self.list_indent_width < 1:
            raise ValueError(f"list_indent_width must be at least 1, got {self.list_indent_width}")
        if not self.image_filename_prefix or any(sep in self.image_filename_prefix for sep in ("/", "\\")):
            raise ValueError(f"image_filename_prefix must be a plain filename, got {self.image_filename_prefix!r}")
