#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/utils/__init__.py
"""Shared helpers: dependency checks, timing, and package introspection."""

from docbridge.utils.decorators import debug_timer, requires_dependencies

__all__ = ["debug_timer", "requires_dependencies"]
