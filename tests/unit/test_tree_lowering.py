#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_tree_lowering.py
"""Unit tests for lowering document trees into the output AST."""

import pytest

from docbridge import ast
from docbridge.core.elements import (
    Document,
    Element,
    Header,
    Hyperlink,
    Image,
    ImageDimension,
    ImageType,
    List,
    ListItem,
    PageGeometry,
    Paragraph,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    Text,
)
from docbridge.exceptions import ImageSaveError, InvalidOptionsError
from docbridge.lowering import TreeLowering, lower
from docbridge.options import MarkdownParserOptions, MarkdownRendererOptions
from docbridge.resources import MemoryImageStore


def discard(data, filename):
    pass


def two_by_two_table() -> Table:
    return Table(
        headers=[TableHeader(element=Text(text="Syntax")), TableHeader(element=Text(text="Description"))],
        rows=[
            TableRow(cells=[TableCell(element=Text(text="Header")), TableCell(element=Text(text="Title"))]),
            TableRow(cells=[TableCell(element=Text(text="Paragraph")), TableCell(element=Text(text="Text"))]),
        ],
    )


@pytest.mark.unit
class TestBlockLowering:
    """Tests for lowering individual elements."""

    def test_text(self):
        result = lower(Document(elements=[Text(text="plain")]), discard)
        assert result.children == [ast.Text(content="plain")]

    def test_header(self):
        result = lower(Document(elements=[Header(level=3, text="Section")]), discard)
        assert result.children == [ast.Heading(level=3, content=[ast.Text(content="Section")])]

    def test_paragraph_with_link(self):
        doc = Document(
            elements=[
                Paragraph(
                    elements=[
                        Text(text="See "),
                        Hyperlink(title="docs", url="https://example.com", alt="Tip"),
                    ]
                )
            ]
        )
        result = lower(doc, discard)
        assert result.children == [
            ast.Paragraph(
                content=[
                    ast.Text(content="See "),
                    ast.Link(url="https://example.com", content=[ast.Text(content="docs")], title="Tip"),
                ]
            )
        ]

    def test_hyperlink_without_alt_has_no_title(self):
        result = lower(Document(elements=[Hyperlink(title="x", url="https://x.y")]), discard)
        assert result.children[0].title is None

    def test_list_items(self):
        sub = List(elements=[ListItem(element=Text(text="zzz"))])
        doc = Document(
            elements=[
                List(
                    numbered=True,
                    elements=[
                        ListItem(element=Text(text="five")),
                        ListItem(element=sub),
                        ListItem(element=Paragraph(elements=[Text(text="para")])),
                    ],
                )
            ]
        )
        result = lower(doc, discard)
        lst = result.children[0]

        assert isinstance(lst, ast.List)
        assert lst.ordered is True
        assert lst.items[0].children == [ast.Paragraph(content=[ast.Text(content="five")])]
        assert isinstance(lst.items[1].children[0], ast.List)
        assert lst.items[1].children[0].ordered is False
        assert lst.items[2].children == [ast.Paragraph(content=[ast.Text(content="para")])]

    def test_table_shape(self):
        result = lower(Document(elements=[two_by_two_table()]), discard)
        table = result.children[0]

        assert isinstance(table, ast.Table)
        assert table.num_columns == 2
        assert table.num_rows == 3
        assert table.alignments == [None, None]
        assert table.header.is_header is True
        assert table.header.cells[0].content == [ast.Text(content="Syntax")]
        assert table.rows[1].cells[1].content == [ast.Text(content="Text")]

    def test_unknown_element_lowers_to_empty_text(self):
        class Footnote(Element):
            pass

        result = lower(Document(elements=[Footnote()]), discard)
        assert result.children == [ast.Text(content="")]

    def test_header_body_footer_order(self):
        doc = Document(
            elements=[Text(text="body")],
            page_header=[Text(text="header")],
            page_footer=[Text(text="footer")],
        )
        result = lower(doc, discard)
        assert [c.content for c in result.children] == ["header", "body", "footer"]

    def test_page_geometry_in_metadata(self):
        doc = Document(geometry=PageGeometry(page_width=100.0))
        result = lower(doc, discard)
        assert result.metadata["page_geometry"]["page_width"] == 100.0
        assert result.metadata["page_geometry"]["left_page_indent"] == 10.0


@pytest.mark.unit
class TestImageLowering:
    """Tests for image saving and filename allocation."""

    def test_image_is_saved_and_wrapped(self, png_bytes):
        store = MemoryImageStore()
        image = Image(
            data=png_bytes,
            title="Logo",
            alt="Company logo",
            image_type=ImageType.PNG,
            dimensions=ImageDimension(width=10.0, height=5.0),
        )
        result = lower(Document(elements=[image]), store.save)

        assert store.images == {"image1.png": png_bytes}
        assert result.children == [
            ast.Paragraph(
                content=[ast.Image(url="image1.png", alt_text="Company logo", title="Logo", width=10.0, height=5.0)]
            )
        ]

    def test_counter_and_extensions(self):
        store = MemoryImageStore()
        doc = Document(
            elements=[
                Image(data=b"a", image_type=ImageType.PNG),
                Paragraph(elements=[Image(data=b"b", image_type=ImageType.JPEG)]),
                Image(data=b"c", image_type=ImageType.UNKNOWN),
            ]
        )
        lower(doc, store.save)
        assert store.images == {"image1.png": b"a", "image2.jpg": b"b", "image3.png": b"c"}

    def test_image_inside_paragraph_is_inline(self):
        doc = Document(elements=[Paragraph(elements=[Text(text="x"), Image(data=b"a", image_type=ImageType.GIF)])])
        result = lower(doc, discard)
        assert result.children[0].content[1] == ast.Image(url="image1.gif", alt_text="")

    def test_counter_restarts_per_call(self):
        images = [Image(data=b"a", image_type=ImageType.PNG), Image(data=b"b", image_type=ImageType.PNG)]
        doc = Document(elements=images)
        lowering = TreeLowering(discard)

        first = lowering.lower(doc)
        second = lowering.lower(doc)

        assert first == second
        assert [p.content[0].url for p in second.children] == ["image1.png", "image2.png"]

    def test_lowering_twice_with_pure_saver_is_identical(self, png_bytes):
        doc = Document(
            elements=[
                Header(level=1, text="Title"),
                Image(data=png_bytes, alt="pic", image_type=ImageType.PNG),
                two_by_two_table(),
            ]
        )
        first_store, second_store = MemoryImageStore(), MemoryImageStore()
        assert lower(doc, first_store.save) == lower(doc, second_store.save)
        assert first_store.images == second_store.images

    def test_filename_prefix_option(self):
        store = MemoryImageStore()
        options = MarkdownRendererOptions(image_filename_prefix="fig-")
        lower(Document(elements=[Image(data=b"a", image_type=ImageType.SVG)]), store.save, options)
        assert list(store.images) == ["fig-1.svg"]

    def test_saver_failure_raises_image_save_error(self):
        def broken(data, filename):
            raise OSError("disk full")

        with pytest.raises(ImageSaveError) as exc_info:
            lower(Document(elements=[Image(data=b"a", image_type=ImageType.PNG)]), broken)

        assert exc_info.value.filename == "image1.png"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "disk full" in str(exc_info.value)

    def test_oversized_image_is_rejected(self):
        store = MemoryImageStore()
        options = MarkdownRendererOptions(max_asset_size_bytes=2)
        with pytest.raises(ImageSaveError, match="exceeding the limit"):
            lower(Document(elements=[Image(data=b"abc", image_type=ImageType.PNG)]), store.save, options)
        assert len(store) == 0

    def test_wrong_options_type(self):
        with pytest.raises(InvalidOptionsError):
            TreeLowering(discard, MarkdownParserOptions())


@pytest.mark.unit
class TestLoweredTreeShape:
    """Tests walking the lowered tree."""

    def test_every_image_has_saved_file(self):
        store = MemoryImageStore()
        doc = Document(
            elements=[
                List(elements=[ListItem(element=Image(data=b"a", image_type=ImageType.PNG))]),
                Paragraph(elements=[Text(text="x"), Image(data=b"b", image_type=ImageType.GIF)]),
                Image(data=b"c", image_type=ImageType.JPEG),
            ]
        )
        result = lower(doc, store.save)

        found = []
        pending = [result]
        while pending:
            node = pending.pop()
            if isinstance(node, ast.Image):
                found.append(node.url)
            pending.extend(ast.get_node_children(node))

        assert sorted(found) == sorted(store.images)
        assert len(found) == 3
