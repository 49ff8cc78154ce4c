#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/lowering.py
"""Lower a document tree into the output AST.

Every element is lowered recursively by a visitor:

- ``Text`` becomes a text node, ``Header`` a heading with one text child;
- ``Paragraph`` becomes a paragraph wrapping its lowered runs;
- ``List`` becomes a list node; each item holds a nested list or paragraph
  directly and wraps anything else in a paragraph;
- ``Image`` is handed to the image saver under ``image<N><ext>`` and becomes
  an image node inside a paragraph;
- ``Hyperlink`` becomes a link whose title is the hyperlink's ``alt``;
- ``Table`` becomes a table with one header row and one row per table row.

The image counter starts at 1 for every ``lower`` call, so lowering the same
document twice yields identical trees and filenames.

"""

from __future__ import annotations

import logging
from dataclasses import asdict
from itertools import chain
from typing import Callable

from docbridge import ast
from docbridge.core.elements import (
    Document,
    Element,
    ElementVisitor,
    Header,
    Hyperlink,
    Image,
    List,
    Paragraph,
    Table,
    Text,
)
from docbridge.exceptions import ImageSaveError, InvalidOptionsError
from docbridge.options.markdown import MarkdownRendererOptions
from docbridge.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

ImageSaver = Callable[[bytes, str], None]


class TreeLowering(ElementVisitor):
    """Visitor lowering document elements into output AST nodes.

    Parameters
    ----------
    save_image : callable
        ``save_image(data, filename)``; any exception it raises aborts
        lowering with ``ImageSaveError``
    options : MarkdownRendererOptions or None
        Image filename prefix and asset size limit

    """

    def __init__(self, save_image: ImageSaver, options: MarkdownRendererOptions | None = None):
        options = options or MarkdownRendererOptions()
        if not isinstance(options, MarkdownRendererOptions):
            raise InvalidOptionsError(
                converter_name="TreeLowering",
                expected_type=MarkdownRendererOptions,
                received_type=type(options),
            )
        self.save_image = save_image
        self.options: MarkdownRendererOptions = options
        self._image_counter = 0

    def lower(self, document: Document) -> ast.Document:
        """Lower a whole document.

        Page header elements come first, then the body, then the page footer.

        Parameters
        ----------
        document : Document
            The document tree

        Returns
        -------
        ast.Document
            The output AST; page geometry is kept in its metadata

        Raises
        ------
        ImageSaveError
            If the image saver fails

        """
        self._image_counter = 0
        with debug_timer(logger, "Tree lowering"):
            children = [
                element.accept(self)
                for element in chain(document.page_header, document.elements, document.page_footer)
            ]
        if self._image_counter:
            logger.debug(f"Saved {self._image_counter} image(s)")
        return ast.Document(children=children, metadata={"page_geometry": asdict(document.geometry)})

    def visit_text(self, element: Text) -> ast.Node:
        return ast.Text(content=element.text)

    def visit_header(self, element: Header) -> ast.Node:
        return ast.Heading(level=element.level, content=[ast.Text(content=element.text)])

    def visit_paragraph(self, element: Paragraph) -> ast.Node:
        content: list[ast.Node] = []
        for child in element.elements:
            node = child.accept(self)
            # Images lower to their own paragraph; keep a single paragraph level
            if isinstance(node, ast.Paragraph):
                content.extend(node.content)
            else:
                content.append(node)
        return ast.Paragraph(content=content)

    def visit_list(self, element: List) -> ast.Node:
        items = []
        for item in element.elements:
            node = item.element.accept(self)
            if isinstance(node, (ast.List, ast.Paragraph)):
                items.append(ast.ListItem(children=[node]))
            else:
                items.append(ast.ListItem(children=[ast.Paragraph(content=[node])]))
        return ast.List(ordered=element.numbered, items=items)

    def visit_image(self, element: Image) -> ast.Node:
        self._image_counter += 1
        filename = f"{self.options.image_filename_prefix}{self._image_counter}{element.image_type.extension}"

        if len(element.data) > self.options.max_asset_size_bytes:
            raise ImageSaveError(
                filename,
                message=(
                    f"Image '{filename}' is {len(element.data)} bytes, "
                    f"exceeding the limit of {self.options.max_asset_size_bytes} bytes"
                ),
            )
        try:
            self.save_image(element.data, filename)
        except Exception as e:
            raise ImageSaveError(filename, original_error=e) from e

        image_node = ast.Image(
            url=filename,
            alt_text=element.alt,
            title=element.title or None,
            width=element.dimensions.width,
            height=element.dimensions.height,
        )
        return ast.Paragraph(content=[image_node])

    def visit_hyperlink(self, element: Hyperlink) -> ast.Node:
        return ast.Link(url=element.url, content=[ast.Text(content=element.title)], title=element.alt or None)

    def visit_table(self, element: Table) -> ast.Node:
        header = ast.TableRow(
            cells=[ast.TableCell(content=self._cell_content(h.element)) for h in element.headers],
            is_header=True,
        )
        rows = [
            ast.TableRow(cells=[ast.TableCell(content=self._cell_content(c.element)) for c in row.cells])
            for row in element.rows
        ]
        return ast.Table(header=header, rows=rows, alignments=[None] * len(element.headers))

    def _cell_content(self, element: Element) -> list[ast.Node]:
        node = element.accept(self)
        if isinstance(node, ast.Paragraph):
            return node.content
        return [node]

    def generic_visit(self, element: Element) -> ast.Node:
        logger.debug(f"Lowering unsupported element {type(element).__name__} to empty text")
        return ast.Text(content="")


def lower(
    document: Document,
    save_image: ImageSaver,
    options: MarkdownRendererOptions | None = None,
) -> ast.Document:
    """Lower a document tree into the output AST.

    Parameters
    ----------
    document : Document
        The document tree
    save_image : callable
        ``save_image(data, filename)`` persisting image bytes
    options : MarkdownRendererOptions or None
        Lowering configuration

    Returns
    -------
    ast.Document
        The output AST

    """
    return TreeLowering(save_image, options).lower(document)


__all__ = ["ImageSaver", "TreeLowering", "lower"]
