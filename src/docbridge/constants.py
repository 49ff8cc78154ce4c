#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the docbridge library.

This module centralizes the hardcoded values and default configuration
constants used across docbridge.

Constants are organized by category:
1. Type Definitions
2. Dependency Specifications
3. Document Model Defaults
4. Markdown Formatting Defaults
5. Resource Handling
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

OutputFormatType = Literal["markdown", "json"]

# =============================================================================
# Dependency Specifications for @requires_dependencies decorator
# =============================================================================
# Each spec is a list of tuples: (pip_package, import_name, version_constraint)

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]

# =============================================================================
# Document Model Defaults
# =============================================================================

# Font size assigned to text runs and hyperlinks when the source carries none
DEFAULT_TEXT_SIZE = 14

# Column width assigned to every table header cell
DEFAULT_TABLE_HEADER_WIDTH = 30.0

# Page geometry (A4 portrait, millimetres)
DEFAULT_PAGE_WIDTH = 210.0
DEFAULT_PAGE_HEIGHT = 297.0
DEFAULT_PAGE_INDENT = 10.0

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6

# =============================================================================
# Markdown Formatting Defaults
# =============================================================================

DEFAULT_LIST_INDENT_WIDTH = 4
DEFAULT_BULLET_SYMBOLS = "*-+"

DEFAULT_TABLE_PIPE_ESCAPE = True
DEFAULT_COLLAPSE_BLANK_LINES = True
DEFAULT_ESCAPE_SPECIAL = True

DEFAULT_PARSE_TABLES = True
DEFAULT_PARSE_STRIKETHROUGH = True

# =============================================================================
# Resource Handling
# =============================================================================

# Asset size limits (applies to images loaded from disk)
DEFAULT_MAX_ASSET_SIZE_BYTES = 50 * 1024 * 1024  # 50MB maximum per asset

# Saved image filenames are "<prefix><counter><extension>"; the counter starts at 1
DEFAULT_IMAGE_FILENAME_PREFIX = "image"
DEFAULT_IMAGE_EXTENSION = ".png"

# Schemes the disk loader refuses to treat as local paths
REMOTE_URL_SCHEMES = ("http://", "https://", "ftp://", "data:")

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INPUT_ERROR = 2
