"""docbridge - convert documents between structural event streams and a document tree.

docbridge maps a flat stream of structural events (start tag, text, end tag)
onto a strictly nested, format-agnostic document tree of headers, paragraphs,
arbitrarily nested lists, tables, hyperlinks and images, and lowers that tree
into an output AST that serializes back to Markdown.

Pipeline
--------
- ``tokenize``: Markdown text to structural events (mistune)
- ``build``: structural events to a ``Document``
- ``lower``: ``Document`` to the output AST
- ``MarkdownRenderer``: output AST to Markdown

Images are read and written through injected callbacks, so the tree builder
and lowering never touch the filesystem themselves.

Examples
--------
    >>> from docbridge import MarkdownTransformer
    >>> from docbridge.resources import MemoryImageStore
    >>> store = MemoryImageStore()
    >>> doc = MarkdownTransformer().parse_with_loader(b"# Title\\n\\n- a\\n- b", store.load)
    >>> [type(e).__name__ for e in doc.elements]
    ['Header', 'List']

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "docbridge requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from docbridge.builder import TreeBuilder, build
from docbridge.core.elements import Document
from docbridge.exceptions import (
    DependencyError,
    DocBridgeError,
    ImageLoadError,
    ImageSaveError,
    InvalidEncodingError,
    ParsingError,
    RenderingError,
    StructuralInvariantError,
)
from docbridge.lowering import TreeLowering, lower
from docbridge.options import MarkdownParserOptions, MarkdownRendererOptions
from docbridge.tokenizer import tokenize
from docbridge.transformer import MarkdownTransformer

__all__ = [
    "__version__",
    "DependencyError",
    "DocBridgeError",
    "Document",
    "ImageLoadError",
    "ImageSaveError",
    "InvalidEncodingError",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "MarkdownTransformer",
    "ParsingError",
    "RenderingError",
    "StructuralInvariantError",
    "TreeBuilder",
    "TreeLowering",
    "build",
    "lower",
    "tokenize",
]
