#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/tokenizer.py
"""Markdown to structural event stream.

This module uses mistune to parse Markdown into its token tree and flattens
that tree into the ``StartEvent`` / ``TextEvent`` / ``EndEvent`` stream the
tree builder consumes. The stream follows the shape of a pull parser:

- tight list items carry their text directly (no paragraph scope), loose
  list items wrap their text in paragraph scopes;
- table header cells sit directly inside the table head, body cells inside
  table rows;
- soft line breaks become a single space and hard line breaks a newline;
- adjacent text events are merged.

"""

from __future__ import annotations

import logging
from typing import Any, Callable

from docbridge.constants import DEPS_MARKDOWN
from docbridge.events import EndEvent, StartEvent, StructuralEvent, Tag, TextEvent, merge_text_events
from docbridge.exceptions import InvalidOptionsError
from docbridge.options.markdown import MarkdownParserOptions
from docbridge.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_INLINE_CONTAINERS = {
    "emphasis": Tag.EMPHASIS,
    "strong": Tag.STRONG,
    "strikethrough": Tag.STRIKETHROUGH,
}


class MarkdownTokenizer:
    """Flatten mistune tokens into structural events.

    Parameters
    ----------
    options : MarkdownParserOptions or None
        Parser configuration; controls which mistune plugins are enabled

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        options = options or MarkdownParserOptions()
        if not isinstance(options, MarkdownParserOptions):
            raise InvalidOptionsError(
                converter_name="MarkdownTokenizer",
                expected_type=MarkdownParserOptions,
                received_type=type(options),
            )
        self.options: MarkdownParserOptions = options
        self._events: list[StructuralEvent] = []

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def tokenize(self, markdown_text: str) -> list[StructuralEvent]:
        """Tokenize Markdown text into a flat list of structural events.

        Parameters
        ----------
        markdown_text : str
            Markdown source

        Returns
        -------
        list of StructuralEvent
            Balanced start/end events with text events between them

        """
        import mistune

        plugins = []
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")
        if self.options.parse_tables:
            plugins.append("table")

        markdown = mistune.create_markdown(plugins=plugins, renderer=None)
        tokens, _state = markdown.parse(markdown_text)

        self._events = []
        if isinstance(tokens, list):
            self._emit_blocks(tokens)

        events = merge_text_events(self._events)
        self._events = []
        logger.debug("Tokenized %d characters into %d events", len(markdown_text), len(events))
        return events

    def _start(self, tag: Tag, **attrs: Any) -> None:
        self._events.append(StartEvent(tag, attrs))

    def _end(self, tag: Tag) -> None:
        self._events.append(EndEvent(tag))

    def _text(self, text: str) -> None:
        self._events.append(TextEvent(text))

    def _emit_blocks(self, tokens: list[dict[str, Any]]) -> None:
        for token in tokens:
            self._emit_block(token)

    def _emit_block(self, token: dict[str, Any]) -> None:
        token_type = token.get("type", "")
        handler = self._block_handlers().get(token_type)
        if handler is not None:
            handler(token)
        elif token_type != "blank_line":
            logger.debug(f"Skipping unsupported block token: {token_type}")

    def _block_handlers(self) -> dict[str, Callable[[dict[str, Any]], None]]:
        return {
            "heading": self._emit_heading,
            "paragraph": self._emit_paragraph,
            "block_text": self._emit_block_text,
            "list": self._emit_list,
            "table": self._emit_table,
            "block_code": self._emit_code_block,
            "block_quote": self._emit_block_quote,
            "thematic_break": self._emit_thematic_break,
            "block_html": self._emit_block_html,
        }

    def _emit_heading(self, token: dict[str, Any]) -> None:
        attrs = token.get("attrs") or {}
        level = attrs.get("level", 1)
        self._start(Tag.HEADING, level=level)
        self._emit_inlines(token.get("children") or [])
        self._end(Tag.HEADING)

    def _emit_paragraph(self, token: dict[str, Any]) -> None:
        self._start(Tag.PARAGRAPH)
        self._emit_inlines(token.get("children") or [])
        self._end(Tag.PARAGRAPH)

    def _emit_block_text(self, token: dict[str, Any]) -> None:
        # Tight list item content: inline runs without a paragraph scope
        self._emit_inlines(token.get("children") or [])

    def _emit_list(self, token: dict[str, Any]) -> None:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        if ordered:
            self._start(Tag.LIST, ordered=True, start=attrs.get("start", 1))
        else:
            self._start(Tag.LIST, ordered=False)
        for item in token.get("children") or []:
            self._start(Tag.ITEM)
            self._emit_blocks(item.get("children") or [])
            self._end(Tag.ITEM)
        self._end(Tag.LIST)

    def _emit_table(self, token: dict[str, Any]) -> None:
        self._start(Tag.TABLE)
        for section in token.get("children") or []:
            section_type = section.get("type")
            if section_type == "table_head":
                self._start(Tag.TABLE_HEAD)
                for cell in section.get("children") or []:
                    self._emit_table_cell(cell)
                self._end(Tag.TABLE_HEAD)
            elif section_type == "table_body":
                for row in section.get("children") or []:
                    self._start(Tag.TABLE_ROW)
                    for cell in row.get("children") or []:
                        self._emit_table_cell(cell)
                    self._end(Tag.TABLE_ROW)
        self._end(Tag.TABLE)

    def _emit_table_cell(self, token: dict[str, Any]) -> None:
        attrs = token.get("attrs") or {}
        self._start(Tag.TABLE_CELL, align=attrs.get("align"))
        self._emit_inlines(token.get("children") or [])
        self._end(Tag.TABLE_CELL)

    def _emit_code_block(self, token: dict[str, Any]) -> None:
        attrs = token.get("attrs") or {}
        self._start(Tag.CODE_BLOCK, info=attrs.get("info"))
        self._text(token.get("raw", ""))
        self._end(Tag.CODE_BLOCK)

    def _emit_block_quote(self, token: dict[str, Any]) -> None:
        self._start(Tag.BLOCK_QUOTE)
        self._emit_blocks(token.get("children") or [])
        self._end(Tag.BLOCK_QUOTE)

    def _emit_thematic_break(self, token: dict[str, Any]) -> None:
        self._start(Tag.THEMATIC_BREAK)
        self._end(Tag.THEMATIC_BREAK)

    def _emit_block_html(self, token: dict[str, Any]) -> None:
        self._start(Tag.HTML, raw=token.get("raw", ""))
        self._end(Tag.HTML)

    def _emit_inlines(self, tokens: list[dict[str, Any]]) -> None:
        for token in tokens:
            self._emit_inline(token)

    def _emit_inline(self, token: dict[str, Any]) -> None:
        token_type = token.get("type", "")

        if token_type == "text":
            self._text(token.get("raw", ""))
        elif token_type in _INLINE_CONTAINERS:
            tag = _INLINE_CONTAINERS[token_type]
            self._start(tag)
            self._emit_inlines(token.get("children") or [])
            self._end(tag)
        elif token_type == "codespan":
            self._start(Tag.CODE)
            self._text(token.get("raw", ""))
            self._end(Tag.CODE)
        elif token_type in ("link", "image"):
            attrs = token.get("attrs") or {}
            tag = Tag.LINK if token_type == "link" else Tag.IMAGE
            self._start(tag, url=attrs.get("url", ""), title=attrs.get("title"))
            self._emit_inlines(token.get("children") or [])
            self._end(tag)
        elif token_type == "softbreak":
            self._text(" ")
        elif token_type == "linebreak":
            self._text("\n")
        elif token_type == "inline_html":
            self._start(Tag.HTML, raw=token.get("raw", ""))
            self._end(Tag.HTML)
        else:
            logger.debug(f"Skipping unsupported inline token: {token_type}")


def tokenize(markdown_text: str, options: MarkdownParserOptions | None = None) -> list[StructuralEvent]:
    """Tokenize Markdown text into structural events.

    Parameters
    ----------
    markdown_text : str
        Markdown source
    options : MarkdownParserOptions or None
        Parser configuration

    Returns
    -------
    list of StructuralEvent
        The flat event stream

    Examples
    --------
        >>> tokenize("# Title")
        [StartEvent(tag=<Tag.HEADING: 'heading'>, attrs={'level': 1}), TextEvent(text='Title'), EndEvent(...)]

    """
    return MarkdownTokenizer(options).tokenize(markdown_text)


__all__ = ["MarkdownTokenizer", "tokenize"]
