#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options.py
"""Unit tests for parser and renderer options."""

from dataclasses import FrozenInstanceError

import pytest

from docbridge.core.elements import PageGeometry
from docbridge.options import MarkdownParserOptions, MarkdownRendererOptions


@pytest.mark.unit
class TestMarkdownParserOptions:
    """Tests for MarkdownParserOptions."""

    def test_defaults(self):
        options = MarkdownParserOptions()
        assert options.parse_tables is True
        assert options.parse_strikethrough is True
        assert options.text_size == 14
        assert options.table_header_width == 30.0
        assert options.page_geometry == PageGeometry()

    def test_create_updated(self):
        options = MarkdownParserOptions()
        updated = options.create_updated(text_size=10, parse_tables=False)
        assert updated.text_size == 10
        assert updated.parse_tables is False
        assert options.text_size == 14

    def test_create_updated_validates(self):
        with pytest.raises(ValueError):
            MarkdownParserOptions().create_updated(text_size=0)

    @pytest.mark.parametrize(
        "kwargs",
        [{"text_size": -1}, {"table_header_width": 0}, {"max_asset_size_bytes": 0}],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            MarkdownParserOptions(**kwargs)

    def test_frozen(self):
        options = MarkdownParserOptions()
        with pytest.raises(FrozenInstanceError):
            options.text_size = 12  # type: ignore[misc]


@pytest.mark.unit
class TestMarkdownRendererOptions:
    """Tests for MarkdownRendererOptions."""

    def test_defaults(self):
        options = MarkdownRendererOptions()
        assert options.bullet_symbols == "*-+"
        assert options.list_indent_width == 4
        assert options.escape_special is True
        assert options.image_filename_prefix == "image"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"bullet_symbols": ""},
            {"bullet_symbols": "*x"},
            {"list_indent_width": 0},
            {"image_filename_prefix": ""},
            {"image_filename_prefix": "a/b"},
            {"max_asset_size_bytes": -5},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            MarkdownRendererOptions(**kwargs)

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            MarkdownRendererOptions().bullet_symbols = "-"  # type: ignore[misc]

    def test_field_metadata(self):
        from dataclasses import fields

        help_texts = {f.name: f.metadata.get("help") for f in fields(MarkdownRendererOptions)}
        assert all(help_texts.values())
