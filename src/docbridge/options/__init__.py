#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/options/__init__.py
"""Frozen dataclass options for parsing and rendering."""

from docbridge.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from docbridge.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
]
