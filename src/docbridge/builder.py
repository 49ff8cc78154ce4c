#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/builder.py
"""Build a document tree from a flat structural event stream.

The builder consumes ``StartEvent`` / ``TextEvent`` / ``EndEvent`` items in a
single pass and maintains:

- the sealed top-level body elements;
- the one open top-level scope (a paragraph, header, list, image or link);
- a stack of open lists, innermost last, which is the insertion point for
  list items and whose length is the current list depth;
- a stack of open inline scopes (links and images inside a paragraph or a
  list item) that receive text;
- a table side channel with its own per-cell routing.

Elements are created empty when their scope opens, filled while it is open
and sealed into their parent when it closes. A list is sealed into the body
only when its outermost level closes.

Examples
--------
    >>> from docbridge.events import StartEvent, TextEvent, EndEvent, Tag
    >>> events = [StartEvent(Tag.HEADING, {"level": 1}), TextEvent("Title"), EndEvent(Tag.HEADING)]
    >>> build(events, load_image=lambda ref: b"").elements
    [Header(level=1, text='Title')]

"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable

from docbridge.constants import MAX_HEADING_LEVEL, MIN_HEADING_LEVEL
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
    Paragraph,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    Text,
)
from docbridge.events import EndEvent, StartEvent, StructuralEvent, Tag, TextEvent
from docbridge.exceptions import (
    ImageLoadError,
    InvalidOptionsError,
    StructuralInvariantError,
    ValidationError,
)
from docbridge.options.markdown import MarkdownParserOptions
from docbridge.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

ImageLoader = Callable[[str], bytes]


@dataclass
class _TableState:
    """Side-channel state of the open table."""

    table: Table = field(default_factory=Table)
    in_header: bool = False
    in_cell: bool = False
    cell_filled: bool = False
    image: Image | None = None


def _is_placeholder(element: Element) -> bool:
    """Return True for the empty text a list item starts with."""
    return type(element) is Text and element.text == ""


class TreeBuilder:
    """Single-pass builder turning structural events into a ``Document``.

    Parameters
    ----------
    load_image : callable
        ``load_image(reference) -> bytes``; any exception it raises aborts the
        build with ``ImageLoadError``
    options : MarkdownParserOptions or None
        Text size, table header width and page geometry of built documents

    Attributes
    ----------
    skipped_tags : collections.Counter
        Number of start events per tag that the document model does not represent

    """

    def __init__(self, load_image: ImageLoader, options: MarkdownParserOptions | None = None):
        options = options or MarkdownParserOptions()
        if not isinstance(options, MarkdownParserOptions):
            raise InvalidOptionsError(
                converter_name="TreeBuilder",
                expected_type=MarkdownParserOptions,
                received_type=type(options),
            )
        self.load_image = load_image
        self.options: MarkdownParserOptions = options
        self._reset()

    def _reset(self) -> None:
        self._elements: list[Element] = []
        self._current: Element | None = None
        self._lists: list[List] = []
        self._inline: list[Hyperlink | Image] = []
        self._paragraph_depth = 0
        self._table: _TableState | None = None
        self.skipped_tags: Counter[Tag] = Counter()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, events: Iterable[StructuralEvent]) -> Document:
        """Consume an event stream and return the finished document.

        Parameters
        ----------
        events : iterable of StructuralEvent
            The flat event stream

        Returns
        -------
        Document
            The built document

        Raises
        ------
        ImageLoadError
            If the image loader fails for any referenced image
        StructuralInvariantError
            If list events are unbalanced or arrive outside a list

        """
        self._reset()

        with debug_timer(logger, "Tree building"):
            for event in events:
                if isinstance(event, StartEvent):
                    self._handle_start(event)
                elif isinstance(event, TextEvent):
                    self._handle_text(event.text)
                elif isinstance(event, EndEvent):
                    self._handle_end(event.tag)
                else:
                    raise ValidationError(
                        f"Unsupported event type: {type(event).__name__}",
                        parameter_name="events",
                        parameter_value=event,
                    )
            self._finish()

        if self.skipped_tags:
            logger.debug(
                "Skipped unsupported scopes: %s",
                ", ".join(f"{tag.value}={count}" for tag, count in sorted(self.skipped_tags.items())),
            )

        document = Document(elements=self._elements, geometry=self.options.page_geometry)
        self._elements = []
        return document

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _handle_start(self, event: StartEvent) -> None:
        if self._table is not None:
            self._table_start(event)
            return

        handler = {
            Tag.PARAGRAPH: self._start_paragraph,
            Tag.HEADING: self._start_heading,
            Tag.LIST: self._start_list,
            Tag.ITEM: self._start_item,
            Tag.TABLE: self._start_table,
            Tag.LINK: self._start_link,
            Tag.IMAGE: self._start_image,
        }.get(event.tag)

        if handler is None:
            self.skipped_tags[event.tag] += 1
            return
        handler(event.attrs)

    def _handle_end(self, tag: Tag) -> None:
        if self._table is not None:
            self._table_end(tag)
            return

        if tag is Tag.PARAGRAPH:
            self._end_paragraph()
        elif tag is Tag.HEADING:
            self._seal_top_level()
        elif tag is Tag.LINK:
            self._end_link()
        elif tag is Tag.IMAGE:
            self._end_image()
        elif tag is Tag.LIST:
            self._end_list()

    # ------------------------------------------------------------------
    # Insertion helpers
    # ------------------------------------------------------------------

    def _innermost_list(self) -> List:
        """Return the open list currently accepting items.

        Raises
        ------
        StructuralInvariantError
            If the open top-level scope is not the outermost open list

        """
        if not self._lists or self._current is not self._lists[0]:
            raise StructuralInvariantError(
                "Expected an open list at the insertion point, found "
                f"{type(self._current).__name__ if self._current is not None else 'no open scope'}",
                depth=len(self._lists),
            )
        return self._lists[-1]

    def _insert_list_item(self, element: Element) -> None:
        """Append ``element`` as a new item of the innermost list.

        An empty placeholder item left by the item start is replaced instead.
        """
        items = self._innermost_list().elements
        if items and _is_placeholder(items[-1].element):
            items[-1].element = element
        else:
            items.append(ListItem(element=element))

    def _last_item(self) -> ListItem | None:
        items = self._innermost_list().elements
        return items[-1] if items else None

    def _open_top_level(self, element: Element) -> None:
        """Make ``element`` the open top-level scope, sealing any previous one."""
        if self._current is not None:
            logger.debug(f"Sealing open {type(self._current).__name__} before {type(element).__name__}")
            self._elements.append(self._current)
        self._current = element

    def _seal_top_level(self) -> None:
        """Seal the open top-level scope unless it is a list."""
        if self._lists or self._current is None or isinstance(self._current, List):
            return
        self._elements.append(self._current)
        self._current = None

    def _make_text(self, text: str) -> Text:
        return Text(text=text, size=self.options.text_size)

    def _append_run(self, paragraph: Paragraph, text: str) -> None:
        """Append text to a paragraph, extending its last run when that run is plain text.

        Runs split only by dropped inline markup (emphasis, code spans) end up
        as one ``Text``, which is also what re-parsing the rendered Markdown yields.
        """
        if paragraph.elements and type(paragraph.elements[-1]) is Text:
            paragraph.elements[-1].text += text
        else:
            paragraph.elements.append(self._make_text(text))

    # ------------------------------------------------------------------
    # Scope starts
    # ------------------------------------------------------------------

    def _start_paragraph(self, attrs: dict) -> None:
        if not self._lists:
            self._paragraph_depth += 1
            self._open_top_level(Paragraph())
            return

        item = self._last_item()
        if item is None:
            self._insert_list_item(Paragraph())
        elif _is_placeholder(item.element):
            item.element = Paragraph()
        elif type(item.element) is Text:
            item.element = Paragraph(elements=[item.element])
        else:
            self._insert_list_item(Paragraph())

    def _start_heading(self, attrs: dict) -> None:
        level = attrs.get("level", MIN_HEADING_LEVEL)
        if not isinstance(level, int) or not MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL:
            logger.warning(f"Invalid heading level {level!r}, using {MIN_HEADING_LEVEL}")
            level = MIN_HEADING_LEVEL
        header = Header(level=level)

        if self._lists:
            self._insert_list_item(header)
        else:
            self._open_top_level(header)

    def _start_list(self, attrs: dict) -> None:
        new_list = List(numbered=bool(attrs.get("ordered", False)))
        if self._lists:
            self._insert_list_item(new_list)
        else:
            self._open_top_level(new_list)
        self._lists.append(new_list)

    def _start_item(self, attrs: dict) -> None:
        if not self._lists:
            raise StructuralInvariantError("List item started outside of any list", depth=0)
        self._innermost_list().elements.append(ListItem(element=self._make_text("")))

    def _start_table(self, attrs: dict) -> None:
        if not self._lists:
            self._seal_top_level()
        self._table = _TableState()

    def _start_link(self, attrs: dict) -> None:
        link = Hyperlink(
            url=attrs.get("url") or "",
            alt=attrs.get("title") or "",
            size=self.options.text_size,
        )

        if self._lists:
            item = self._last_item()
            if item is not None and isinstance(item.element, Header):
                self.skipped_tags[Tag.LINK] += 1
                return
            if item is None or _is_placeholder(item.element):
                self._insert_list_item(link)
            elif type(item.element) is Text:
                item.element = Paragraph(elements=[item.element, link])
            elif isinstance(item.element, Paragraph):
                item.element.elements.append(link)
            else:
                self._insert_list_item(link)
            self._inline.append(link)
        elif isinstance(self._current, Paragraph):
            self._current.elements.append(link)
            self._inline.append(link)
        elif isinstance(self._current, Header):
            # Link text is absorbed into the heading text
            self.skipped_tags[Tag.LINK] += 1
        else:
            self._open_top_level(link)

    def _load_image(self, attrs: dict) -> Image:
        """Resolve an image reference through the loader.

        Raises
        ------
        ImageLoadError
            If the loader raises for the reference

        """
        reference = attrs.get("url") or ""
        try:
            data = self.load_image(reference)
        except Exception as e:
            raise ImageLoadError(reference, original_error=e) from e

        image_type = ImageType.from_reference(reference)
        if image_type is ImageType.UNKNOWN:
            image_type = ImageType.from_bytes(data)
        logger.debug(f"Loaded image '{reference}' ({len(data)} bytes, {image_type.value})")
        return Image(
            data=data,
            title=attrs.get("title") or "",
            image_type=image_type,
            dimensions=ImageDimension(),
        )

    def _start_image(self, attrs: dict) -> None:
        image = self._load_image(attrs)

        if self._lists:
            item = self._last_item()
            if item is not None and isinstance(item.element, Paragraph) and not item.element.elements:
                item.element = image
            else:
                self._insert_list_item(image)
            self._inline.append(image)
            return

        if isinstance(self._current, Header):
            # Alt text is absorbed into the heading text
            self.skipped_tags[Tag.IMAGE] += 1
            return

        # The paragraph wrapping the image is replaced by the image itself
        if isinstance(self._current, Paragraph) and not self._current.elements:
            self._current = None
        self._inline.clear()
        self._open_top_level(image)

    # ------------------------------------------------------------------
    # Scope ends
    # ------------------------------------------------------------------

    def _end_paragraph(self) -> None:
        if self._lists:
            return
        self._paragraph_depth = max(0, self._paragraph_depth - 1)
        self._seal_top_level()

    def _end_link(self) -> None:
        if self._inline and isinstance(self._inline[-1], Hyperlink):
            self._inline.pop()
        elif isinstance(self._current, Hyperlink):
            self._seal_top_level()

    def _end_image(self) -> None:
        if self._inline and isinstance(self._inline[-1], Image):
            self._finish_image(self._inline.pop())
        elif isinstance(self._current, Image):
            self._finish_image(self._current)
            self._seal_top_level()

    def _finish_image(self, image: Image) -> None:
        if not image.alt:
            image.alt = image.title

    def _end_list(self) -> None:
        if not self._lists:
            raise StructuralInvariantError("List ended without a matching list start", depth=0)
        self._lists.pop()
        if not self._lists:
            if self._current is not None:
                self._elements.append(self._current)
            self._current = None
            self._inline.clear()

    # ------------------------------------------------------------------
    # Text routing
    # ------------------------------------------------------------------

    def _handle_text(self, text: str) -> None:
        if self._table is not None:
            self._table_text(text)
            return

        if self._inline:
            target = self._inline[-1]
            if isinstance(target, Hyperlink):
                target.title += text
            else:
                target.alt += text
            return

        if self._lists:
            self._item_text(text)
            return

        current = self._current
        if isinstance(current, Paragraph):
            self._append_run(current, text)
        elif isinstance(current, Header):
            current.text += text
        elif isinstance(current, Image):
            current.alt += text
        elif isinstance(current, Hyperlink):
            current.title += text
        elif current is None and self._paragraph_depth > 0:
            # Text following an image inside the same paragraph
            self._current = Paragraph(elements=[self._make_text(text)])
        else:
            logger.debug(f"Dropping text outside of any supported scope: {text[:40]!r}")

    def _item_text(self, text: str) -> None:
        item = self._last_item()
        if item is None:
            self._innermost_list().elements.append(ListItem(element=self._make_text(text)))
            return

        element = item.element
        if type(element) is Text:
            element.text += text
        elif isinstance(element, Header):
            element.text += text
        elif isinstance(element, Paragraph):
            self._append_run(element, text)
        elif isinstance(element, Hyperlink):
            item.element = Paragraph(elements=[element, self._make_text(text)])
        else:
            self._innermost_list().elements.append(ListItem(element=self._make_text(text)))

    # ------------------------------------------------------------------
    # Table side channel
    # ------------------------------------------------------------------

    def _table_start(self, event: StartEvent) -> None:
        state = self._table
        assert state is not None
        tag = event.tag
        if tag is Tag.TABLE_HEAD:
            state.in_header = True
        elif tag is Tag.TABLE_CELL:
            state.in_cell = True
            state.cell_filled = False
        elif tag is Tag.IMAGE:
            self._table_image(self._load_image(event.attrs))
        elif tag not in (Tag.TABLE_ROW, Tag.TABLE):
            # Inline markup inside cells; its text still reaches the cell
            self.skipped_tags[tag] += 1

    def _table_image(self, image: Image) -> None:
        """Make a loaded image the element of the open cell.

        A cell holds a single element, so an image arriving after the cell
        already received text is dropped once loaded.
        """
        state = self._table
        assert state is not None
        state.image = image
        if state.in_cell and state.cell_filled:
            logger.debug("Dropping image in a table cell that already holds text")
            self.skipped_tags[Tag.IMAGE] += 1
            return
        self._place_cell_element(image)
        if state.in_cell:
            state.cell_filled = True

    def _table_end(self, tag: Tag) -> None:
        state = self._table
        assert state is not None
        if tag is Tag.TABLE_CELL:
            if not state.cell_filled:
                self._place_cell_element(self._make_text(""))
            state.in_cell = False
            state.cell_filled = False
        elif tag is Tag.IMAGE:
            if state.image is not None:
                self._finish_image(state.image)
                state.image = None
        elif tag is Tag.TABLE_HEAD:
            state.in_header = False
        elif tag is Tag.TABLE_ROW:
            self._pad_last_row(state.table)
        elif tag is Tag.TABLE:
            self._seal_table()

    def _table_text(self, text: str) -> None:
        state = self._table
        assert state is not None
        if state.image is not None:
            state.image.alt += text
            return
        if state.in_cell and state.cell_filled:
            last = self._last_cell_element(state)
            if last is None:
                logger.debug(f"Dropping text after an image in a table cell: {text[:40]!r}")
            else:
                last.text += text
            return
        self._place_cell_element(self._make_text(text))
        if state.in_cell:
            state.cell_filled = True

    def _place_cell_element(self, element: Element) -> None:
        """Place a new cell according to the header count rule."""
        state = self._table
        assert state is not None
        table = state.table

        if state.in_header:
            table.headers.append(TableHeader(element=element, width=self.options.table_header_width))
        elif table.rows and len(table.rows[-1].cells) < len(table.headers):
            table.rows[-1].cells.append(TableCell(element=element))
        else:
            table.rows.append(TableRow(cells=[TableCell(element=element)]))

    @staticmethod
    def _last_cell_element(state: _TableState) -> Text | None:
        table = state.table
        if state.in_header:
            element = table.headers[-1].element if table.headers else None
        else:
            element = table.rows[-1].cells[-1].element if table.rows and table.rows[-1].cells else None
        return element if isinstance(element, Text) else None

    def _pad_last_row(self, table: Table) -> None:
        if not table.rows:
            return
        row = table.rows[-1]
        while len(row.cells) < len(table.headers):
            row.cells.append(TableCell(element=self._make_text("")))

    def _seal_table(self) -> None:
        state = self._table
        assert state is not None
        self._table = None
        table = state.table
        self._pad_last_row(table)
        if self._lists:
            self._insert_list_item(table)
        else:
            self._elements.append(table)

    # ------------------------------------------------------------------
    # End of stream
    # ------------------------------------------------------------------

    def _finish(self) -> None:
        if self._table is not None:
            logger.warning("Table still open at end of input; sealing it")
            self._seal_table()
        if self._lists:
            logger.warning(f"{len(self._lists)} list(s) still open at end of input; sealing them")
            self._lists.clear()
        if self._current is not None:
            if not isinstance(self._current, List):
                logger.warning(f"{type(self._current).__name__} still open at end of input; sealing it")
            if isinstance(self._current, Image):
                self._finish_image(self._current)
            self._elements.append(self._current)
            self._current = None
        self._inline.clear()
        self._paragraph_depth = 0


def build(
    events: Iterable[StructuralEvent],
    load_image: ImageLoader,
    options: MarkdownParserOptions | None = None,
) -> Document:
    """Build a ``Document`` from a structural event stream.

    Parameters
    ----------
    events : iterable of StructuralEvent
        The flat event stream
    load_image : callable
        ``load_image(reference) -> bytes`` resolving image references
    options : MarkdownParserOptions or None
        Builder configuration

    Returns
    -------
    Document
        The fully built document; nothing is returned on failure

    """
    return TreeBuilder(load_image, options).build(events)


__all__ = ["ImageLoader", "TreeBuilder", "build"]
