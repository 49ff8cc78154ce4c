#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_renderer.py
"""Unit tests for MarkdownRenderer.

Tests cover:
- Rendering every node type lowering produces
- Nested list layout, including items that only hold a sub-list
- Render options (bullet symbols, escaping, indentation)
- Writing to paths and streams

"""

from io import BytesIO, StringIO

import pytest

from docbridge.ast import (
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
from docbridge.exceptions import InvalidOptionsError
from docbridge.options import MarkdownParserOptions, MarkdownRendererOptions
from docbridge.renderers.markdown import MarkdownRenderer


def para(text: str) -> Paragraph:
    return Paragraph(content=[Text(content=text)])


def items(*texts: str) -> list[ListItem]:
    return [ListItem(children=[para(t)]) for t in texts]


def render(*children, **options) -> str:
    renderer = MarkdownRenderer(MarkdownRendererOptions(**options)) if options else MarkdownRenderer()
    return renderer.render_to_string(Document(children=list(children)))


@pytest.mark.unit
class TestBasicRendering:
    """Tests for basic node rendering."""

    def test_render_empty_document(self):
        assert render() == ""

    def test_heading_levels(self):
        assert render(Heading(level=1, content=[Text(content="Title")])) == "# Title"
        assert render(Heading(level=6, content=[Text(content="Deep")])) == "###### Deep"

    def test_multiple_blocks_separated_by_blank_line(self):
        result = render(Heading(level=2, content=[Text(content="H")]), para("First"), para("Second"))
        assert result == "## H\n\nFirst\n\nSecond"

    def test_special_characters_escaped(self):
        assert render(para("a*b [c] `d`")) == "a\\*b \\[c\\] \\`d\\`"

    def test_leading_hash_escaped(self):
        assert render(para("#hashtag")) == "\\#hashtag"

    def test_snake_case_underscores_kept(self):
        assert render(para("snake_case and _start")) == "snake_case and \\_start"

    def test_escaping_can_be_disabled(self):
        assert render(para("a*b"), escape_special=False) == "a*b"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("+ plus", "\\+ plus"),
            ("- dash", "\\- dash"),
            ("> quote", "\\> quote"),
            ("= under", "\\= under"),
            ("1. one", "1\\. one"),
            ("12) paren", "12\\) paren"),
            ("2024 was a year", "2024 was a year"),
        ],
    )
    def test_block_markers_at_line_start_escaped(self, text, expected):
        assert render(para(text)) == expected

    def test_heading_closing_hashes_escaped(self):
        assert render(Heading(level=1, content=[Text(content="H #")])) == "# H \\#"
        assert render(Heading(level=2, content=[Text(content="C#")])) == "## C#"

    def test_hard_break(self):
        assert render(para("text\nhard")) == "text\\\nhard"

    def test_line_after_hard_break_escaped(self):
        assert render(para("intro\n- not a list")) == "intro\\\n\\- not a list"

    def test_trailing_hard_break_dropped(self):
        assert render(para("end\n")) == "end"

    def test_hard_break_in_heading_flattened(self):
        assert render(Heading(level=3, content=[Text(content="one\ntwo")])) == "### one two"

    def test_line_start_escaping_can_be_disabled(self):
        assert render(para("+ plus"), escape_special=False) == "+ plus"
        assert render(Heading(level=1, content=[Text(content="H #")]), escape_special=False) == "# H #"

    def test_link_with_title(self):
        link = Link(url="https://example.com", content=[Text(content="docs")], title='Say "hi"')
        assert render(Paragraph(content=[link])) == '[docs](https://example.com "Say \\"hi\\"")'

    def test_link_url_with_spaces_is_bracketed(self):
        link = Link(url="my file.md", content=[Text(content="file")])
        assert render(Paragraph(content=[link])) == "[file](<my file.md>)"

    def test_image(self):
        image = Image(url="image1.png", alt_text="A [logo]", title="Logo")
        assert render(Paragraph(content=[image])) == '![A \\[logo\\]](image1.png "Logo")'

    def test_image_without_url(self):
        assert render(Paragraph(content=[Image(url="", alt_text="gone")])) == "![gone]()"


@pytest.mark.unit
class TestListRendering:
    """Tests for list layout."""

    def test_unordered_list(self):
        assert render(List(ordered=False, items=items("a", "b"))) == "* a\n* b"

    def test_ordered_list_with_start(self):
        assert render(List(ordered=True, start=3, items=items("a", "b"))) == "3. a\n4. b"

    def test_bullet_symbols_option(self):
        assert render(List(ordered=False, items=items("a")), bullet_symbols="-") == "- a"

    def test_sub_list_item_rendered_under_previous_item(self):
        sub = List(ordered=False, items=items("zzz"))
        lst = List(ordered=False, items=items("four", "five") + [ListItem(children=[sub])])
        assert render(lst) == "* four\n* five\n    - zzz"

    def test_sub_list_items_do_not_consume_numbers(self):
        sub = List(ordered=False, items=items("x"))
        lst = List(ordered=True, items=items("a") + [ListItem(children=[sub])] + items("b"))
        assert render(lst) == "1. a\n    - x\n2. b"

    def test_third_level_bullet(self):
        level3 = List(ordered=False, items=items("c"))
        level2 = List(ordered=False, items=items("b") + [ListItem(children=[level3])])
        level1 = List(ordered=False, items=items("a") + [ListItem(children=[level2])])
        assert render(level1) == "* a\n    - b\n        + c"

    def test_list_indent_width_option(self):
        sub = List(ordered=False, items=items("x"))
        lst = List(ordered=False, items=items("a") + [ListItem(children=[sub])])
        assert render(lst, list_indent_width=2) == "* a\n  - x"

    def test_indent_width_is_clamped_below_code_block_threshold(self):
        sub = List(ordered=False, items=items("x"))
        lst = List(ordered=False, items=items("a") + [ListItem(children=[sub])])
        assert render(lst, list_indent_width=12) == "* a\n     - x"

    def test_leading_sub_list_item(self):
        sub = List(ordered=False, items=items("x"))
        assert render(List(ordered=False, items=[ListItem(children=[sub])])) == "*\n    - x"

    def test_multiple_children_in_item(self):
        item = ListItem(children=[para("first"), para("second")])
        assert render(List(ordered=False, items=[item])) == "* first\n    second"

    def test_adjacent_lists_are_separated(self):
        result = render(List(ordered=False, items=items("a")), List(ordered=False, items=items("b")))
        assert result == "* a\n\n<!-- -->\n\n* b"


@pytest.mark.unit
class TestTableRendering:
    """Tests for pipe table output."""

    def _table(self, header, rows):
        return Table(
            header=TableRow(cells=[TableCell(content=[Text(content=h)]) for h in header], is_header=True),
            rows=[TableRow(cells=[TableCell(content=[Text(content=c)]) for c in row]) for row in rows],
            alignments=[None] * len(header),
        )

    def test_simple_table(self):
        table = self._table(["Syntax", "Description"], [["Header", "Title"], ["Paragraph", "Text"]])
        assert render(table) == (
            "| Syntax | Description |\n|---|---|\n| Header | Title |\n| Paragraph | Text |"
        )

    def test_pipes_escaped_in_cells(self):
        table = self._table(["a|b"], [["c"]])
        assert render(table).splitlines()[0] == "| a\\|b |"

    def test_empty_cells(self):
        table = self._table(["a", ""], [["", "d"]])
        assert render(table) == "| a |  |\n|---|---|\n|  | d |"

    def test_hard_break_in_cell_flattened(self):
        table = self._table(["a\nb"], [["c"]])
        assert render(table).splitlines()[0] == "| a b |"

    def test_short_rows_are_padded(self):
        table = self._table(["a", "b"], [["1"]])
        assert render(table).splitlines()[-1] == "| 1 |  |"

    def test_alignment_markers(self):
        table = self._table(["l", "c", "r"], [])
        table.alignments = ["left", "center", "right"]
        assert render(table).splitlines()[1] == "|:---|:---:|---:|"

    def test_table_without_columns_renders_nothing(self):
        assert render(Table()) == ""


@pytest.mark.unit
class TestRendererOutput:
    """Tests for output destinations and configuration."""

    def test_render_to_bytes(self):
        doc = Document(children=[para("héllo")])
        assert MarkdownRenderer().render_to_bytes(doc) == "héllo".encode("utf-8")

    def test_render_to_binary_stream(self):
        buffer = BytesIO()
        MarkdownRenderer().render(Document(children=[para("text")]), buffer)
        assert buffer.getvalue() == b"text"

    def test_render_to_text_stream(self):
        buffer = StringIO()
        MarkdownRenderer().render(Document(children=[para("text")]), buffer)
        assert buffer.getvalue() == "text"

    def test_render_to_path(self, tmp_path):
        target = tmp_path / "out.md"
        MarkdownRenderer().render(Document(children=[para("text")]), target)
        assert target.read_text(encoding="utf-8") == "text"

    def test_renderer_is_reusable(self):
        renderer = MarkdownRenderer()
        doc = Document(children=[para("same")])
        assert renderer.render_to_string(doc) == renderer.render_to_string(doc)

    def test_wrong_options_type(self):
        with pytest.raises(InvalidOptionsError):
            MarkdownRenderer(MarkdownParserOptions())
