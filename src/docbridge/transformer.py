#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/transformer.py
"""Markdown transformer: bytes to document tree and back.

``MarkdownTransformer`` ties the pipeline together::

    bytes -> tokenize -> build -> Document -> lower -> render -> bytes

``parse`` and ``generate`` read and write images relative to the current
working directory; ``parse_with_loader`` and ``generate_with_saver`` take the
image callbacks explicitly.

Examples
--------
    >>> from docbridge.resources import MemoryImageStore
    >>> store = MemoryImageStore()
    >>> transformer = MarkdownTransformer()
    >>> doc = transformer.parse_with_loader(b"# Title", store.load)
    >>> transformer.generate_with_saver(doc, store.save)
    b'# Title'

"""

from __future__ import annotations

import logging

from docbridge import ast
from docbridge.builder import ImageLoader, TreeBuilder
from docbridge.core.elements import Document
from docbridge.exceptions import DocBridgeError, InvalidEncodingError, ParsingError, RenderingError
from docbridge.lowering import ImageSaver, TreeLowering
from docbridge.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from docbridge.renderers.markdown import MarkdownRenderer
from docbridge.resources import disk_image_loader, disk_image_saver
from docbridge.tokenizer import MarkdownTokenizer

logger = logging.getLogger(__name__)


def decode_input(data: bytes | str) -> str:
    """Decode input bytes as strict UTF-8, dropping a leading byte order mark.

    Raises
    ------
    InvalidEncodingError
        If the bytes are not valid UTF-8

    """
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(original_error=e) from e


class MarkdownTransformer:
    """Convert Markdown bytes to a ``Document`` and a ``Document`` to Markdown bytes.

    Parameters
    ----------
    parser_options : MarkdownParserOptions or None
        Tokenizer and builder configuration
    renderer_options : MarkdownRendererOptions or None
        Lowering and rendering configuration

    """

    def __init__(
        self,
        parser_options: MarkdownParserOptions | None = None,
        renderer_options: MarkdownRendererOptions | None = None,
    ):
        self.parser_options = parser_options or MarkdownParserOptions()
        self.renderer_options = renderer_options or MarkdownRendererOptions()
        self._tokenizer = MarkdownTokenizer(self.parser_options)
        self._renderer = MarkdownRenderer(self.renderer_options)

    def parse(self, data: bytes | str) -> Document:
        """Parse Markdown, loading images relative to the working directory."""
        return self.parse_with_loader(
            data, disk_image_loader(".", max_size_bytes=self.parser_options.max_asset_size_bytes)
        )

    def parse_with_loader(self, data: bytes | str, load_image: ImageLoader) -> Document:
        """Parse Markdown with an explicit image loader.

        Parameters
        ----------
        data : bytes or str
            UTF-8 encoded Markdown
        load_image : callable
            ``load_image(reference) -> bytes``

        Returns
        -------
        Document
            The built document tree

        Raises
        ------
        InvalidEncodingError
            If ``data`` is not valid UTF-8
        ImageLoadError
            If the loader fails for a referenced image
        StructuralInvariantError
            If the event stream nests inconsistently

        """
        text = decode_input(data)
        try:
            events = self._tokenizer.tokenize(text)
            builder = TreeBuilder(load_image, self.parser_options)
            document = builder.build(events)
        except DocBridgeError:
            raise
        except Exception as e:
            raise ParsingError(f"Markdown parsing failed: {e!r}", parsing_stage="tokenizing", original_error=e) from e

        if builder.skipped_tags:
            logger.debug(f"Unrepresented scopes dropped: {dict(builder.skipped_tags)}")
        return document

    def to_ast(self, document: Document, save_image: ImageSaver) -> ast.Document:
        """Lower a document to the output AST without rendering it."""
        return TreeLowering(save_image, self.renderer_options).lower(document)

    def generate(self, document: Document) -> bytes:
        """Render Markdown, saving images into the working directory."""
        return self.generate_with_saver(document, disk_image_saver("."))

    def generate_with_saver(self, document: Document, save_image: ImageSaver) -> bytes:
        """Render a document to UTF-8 Markdown with an explicit image saver.

        Parameters
        ----------
        document : Document
            The document tree
        save_image : callable
            ``save_image(data, filename)``

        Returns
        -------
        bytes
            UTF-8 encoded Markdown

        Raises
        ------
        ImageSaveError
            If the saver fails

        """
        output_ast = self.to_ast(document, save_image)
        try:
            return self._renderer.render_to_bytes(output_ast)
        except DocBridgeError:
            raise
        except Exception as e:
            raise RenderingError(
                f"Markdown rendering failed: {e!r}", rendering_stage="rendering", original_error=e
            ) from e


__all__ = ["MarkdownTransformer", "decode_input"]
