#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/renderers/markdown.py
"""Markdown rendering from the output AST.

This module provides the MarkdownRenderer class which serializes the AST
produced by tree lowering to GitHub-flavoured Markdown. The renderer keeps
indentation and list nesting context while it walks the tree.

A list item whose only child is a nested list continues the preceding item:
it is rendered indented beneath that item, which is exactly where the tree
builder expects a sub-list to appear when the Markdown is parsed again.

"""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO, Union

from docbridge.ast.nodes import (
    Document,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    Text,
)
from docbridge.ast.visitors import NodeVisitor
from docbridge.options.markdown import MarkdownRendererOptions
from docbridge.renderers.base import BaseRenderer, InlineContentMixin

# Separates adjacent lists so they are not merged into one when re-parsed
LIST_SEPARATOR = "<!-- -->"

_URL_NEEDS_BRACKETS = re.compile(r"[\s()<>]")

HARD_BREAK = "\\\n"

# Characters that open a block when they start a line
_LINE_START_ESCAPES = "-+=>#<~"
_ORDERED_MARKER = re.compile(r"\d+(?=[.)])")
_CLOSING_HASHES = re.compile(r"(^|\s)(#+\s*)$")


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render AST nodes to Markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
        >>> from docbridge.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
        >>> print(MarkdownRenderer().render_to_string(doc))
        # Title

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._list_depth: int = 0
        self._list_marker_stack: list[str] = []
        self._marker_width_stack: list[int] = []

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to a Markdown string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text

        """
        self._output = []
        self._list_depth = 0
        self._list_marker_stack = []
        self._marker_width_stack = []

        document.accept(self)

        result = "".join(self._output)
        self._output.clear()
        return self._cleanup_output(result)

    def render(self, doc: Document, output: Union[str, Path, IO[bytes]]) -> None:
        """Render AST to Markdown and write to output."""
        self.write_text_output(self.render_to_string(doc), output)

    def _cleanup_output(self, text: str) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if self.options.collapse_blank_lines:
            text = re.sub(r"\n{3,}", "\n\n", text)
        return text.rstrip()

    def _escape_markdown(self, text: str) -> str:
        """Escape special Markdown characters with context awareness.

        Backslashes, backticks, asterisks, braces and brackets are always
        escaped. ``#`` is escaped only at the start of the text, and ``_``
        only at word boundaries, so ``snake_case`` stays readable.

        """
        if not self.options.escape_special:
            return text

        always_escape = r"\`*{}[]"

        escaped_chars = []
        for i, char in enumerate(text):
            if char in always_escape:
                escaped_chars.append("\\")
            elif char == "#" and i == 0:
                escaped_chars.append("\\")
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                if not (prev_alnum and next_alnum):
                    escaped_chars.append("\\")
            escaped_chars.append(char)

        return "".join(escaped_chars)

    def _escape_line_start(self, line: str) -> str:
        """Keep a paragraph line from opening a list, quote, heading or fence.

        Leading whitespace is dropped, since indentation would turn the line
        into a code block or a list continuation.
        """
        line = line.lstrip(" \t")
        if not self.options.escape_special:
            return line
        marker = _ORDERED_MARKER.match(line)
        if marker:
            return f"{line[: marker.end()]}\\{line[marker.end():]}"
        if line[:1] in _LINE_START_ESCAPES:
            return f"\\{line}"
        return line

    @staticmethod
    def _flatten_breaks(content: str) -> str:
        return content.replace(HARD_BREAK, " ").replace("\n", " ")

    @staticmethod
    def _format_destination(url: str, title: str | None) -> str:
        destination = f"<{url}>" if _URL_NEEDS_BRACKETS.search(url) else url
        if title:
            escaped_title = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'{destination} "{escaped_title}"'
        return destination

    def _current_indent(self) -> str:
        return " " * sum(self._marker_width_stack)

    def _get_bullet_symbol(self, depth: int) -> str:
        """Get the bullet symbol for a given nesting depth (0-based)."""
        symbols = self.options.bullet_symbols
        return symbols[depth % len(symbols)]

    def _content_indent(self, marker: str) -> int:
        """Indentation of content nested under an item with ``marker``.

        At least the marker width and less than four columns past it, so
        nested content is never read as an indented code block.

        """
        width = len(marker)
        return max(width, min(self.options.list_indent_width, width + 3))

    @staticmethod
    def _is_nested_list_item(item: ListItem) -> bool:
        return len(item.children) == 1 and isinstance(item.children[0], List)

    def visit_document(self, node: Document) -> None:
        for i, child in enumerate(node.children):
            if i > 0:
                self._output.append("\n\n")
                if isinstance(child, List) and isinstance(node.children[i - 1], List):
                    self._output.append(f"{LIST_SEPARATOR}\n\n")
            child.accept(self)

    def visit_heading(self, node: Heading) -> None:
        content = self._flatten_breaks(self._render_inline_content(node.content)).strip()
        if self.options.escape_special:
            # A trailing run of '#' would be read as the closing sequence
            content = _CLOSING_HASHES.sub(r"\1\\\2", content)
        self._output.append(f"{'#' * node.level} {content}")

    def visit_paragraph(self, node: Paragraph) -> None:
        content = self._render_inline_content(node.content)
        while content.endswith(HARD_BREAK):
            content = content[: -len(HARD_BREAK)]
        content = "\n".join(self._escape_line_start(line) for line in content.split("\n"))
        self._output.append(f"{self._current_indent()}{content}")

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Items holding only a nested list are rendered beneath the preceding
        item and do not consume a number in ordered lists.

        """
        depth = self._list_depth
        self._list_depth += 1

        number = node.start
        previous_marker: str | None = None

        for i, item in enumerate(node.items):
            if i > 0:
                self._output.append("\n")

            if previous_marker is not None and self._is_nested_list_item(item):
                self._marker_width_stack.append(self._content_indent(previous_marker))
                item.children[0].accept(self)
                self._marker_width_stack.pop()
                continue

            if node.ordered:
                marker = f"{number}. "
                number += 1
            else:
                marker = f"{self._get_bullet_symbol(depth)} "

            self._list_marker_stack.append(marker)
            item.accept(self)
            self._list_marker_stack.pop()
            previous_marker = marker

        self._list_depth -= 1

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node.

        The first child goes on the marker line; later children, and a nested
        list that opens the item, are indented by the marker width.

        """
        indent = self._current_indent()
        marker = self._list_marker_stack[-1] if self._list_marker_stack else "* "
        children = list(node.children)

        if children and isinstance(children[0], List):
            self._output.append(f"{indent}{marker.rstrip()}")
            first_inline = None
        else:
            self._output.append(f"{indent}{marker}")
            first_inline = children.pop(0) if children else None

        if first_inline is not None:
            saved_output = self._output
            saved_stack = self._marker_width_stack
            self._output = []
            self._marker_width_stack = []

            first_inline.accept(self)

            child_content = "".join(self._output)
            self._output = saved_output
            self._marker_width_stack = saved_stack
            self._output.append(child_content)

        if children:
            self._marker_width_stack.append(self._content_indent(marker))
            for child in children:
                self._output.append("\n")
                child.accept(self)
            self._marker_width_stack.pop()

    def _render_cell(self, cell: TableCell) -> str:
        content = self._flatten_breaks(self._render_inline_content(cell.content))
        if self.options.table_pipe_escape:
            content = content.replace("|", "\\|")
        return content

    @staticmethod
    def _alignment_marker(alignment: str | None) -> str:
        if alignment == "center":
            return ":---:"
        if alignment == "right":
            return "---:"
        if alignment == "left":
            return ":---"
        return "---"

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a minimal pipe table."""
        num_cols = node.num_columns
        if num_cols == 0:
            return

        indent = self._current_indent()
        header_cells = [self._render_cell(c) for c in node.header.cells] if node.header else [""] * num_cols
        lines = [f"{indent}| " + " | ".join(header_cells) + " |"]

        alignments = list(node.alignments[:num_cols])
        alignments.extend([None] * (num_cols - len(alignments)))
        lines.append(f"{indent}|" + "|".join(self._alignment_marker(a) for a in alignments) + "|")

        for row in node.rows:
            cells = [self._render_cell(c) for c in row.cells[:num_cols]]
            cells.extend([""] * (num_cols - len(cells)))
            lines.append(f"{indent}| " + " | ".join(cells) + " |")

        self._output.append("\n".join(lines))

    def visit_table_row(self, node: TableRow) -> None:
        """Rows are rendered by ``visit_table``."""

    def visit_table_cell(self, node: TableCell) -> None:
        """Cells are rendered by ``visit_table``."""

    def visit_text(self, node: Text) -> None:
        self._output.append(self._escape_markdown(node.content).replace("\n", HARD_BREAK))

    def visit_link(self, node: Link) -> None:
        content = self._render_inline_content(node.content)
        self._output.append(f"[{content}]({self._format_destination(node.url, node.title)})")

    def visit_image(self, node: Image) -> None:
        alt = node.alt_text.replace("[", "\\[").replace("]", "\\]")
        if not node.url:
            self._output.append(f"![{alt}]()")
        else:
            self._output.append(f"![{alt}]({self._format_destination(node.url, node.title)})")
