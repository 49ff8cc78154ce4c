#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/renderers/__init__.py
"""Renderers serializing the output AST."""

from docbridge.renderers.base import BaseRenderer, InlineContentMixin
from docbridge.renderers.markdown import MarkdownRenderer

__all__ = ["BaseRenderer", "InlineContentMixin", "MarkdownRenderer"]
