#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/events.py
"""Flat structural event stream consumed by the tree builder.

A document is described as a sequence of ``StartEvent``, ``TextEvent`` and
``EndEvent`` items. Start and end events are balanced per ``Tag``; text
events appear between them.

Examples
--------
The Markdown ``# Title`` corresponds to::

    [StartEvent(Tag.HEADING, {"level": 1}), TextEvent("Title"), EndEvent(Tag.HEADING)]

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Tag(str, Enum):
    """Kinds of scopes that can appear in the event stream.

    Only the first group is modelled by the document tree. The remaining kinds
    are produced by tokenizers for completeness and are skipped by the builder.
    """

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST = "list"
    ITEM = "item"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    LINK = "link"
    IMAGE = "image"

    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    CODE_BLOCK = "code_block"
    BLOCK_QUOTE = "block_quote"
    THEMATIC_BREAK = "thematic_break"
    HTML = "html"


@dataclass(frozen=True)
class StartEvent:
    """Opens a scope.

    Parameters
    ----------
    tag : Tag
        Kind of scope
    attrs : dict
        Scope attributes: ``level`` for headings, ``ordered`` for lists,
        ``url`` and ``title`` for links and images

    """

    tag: Tag
    attrs: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class TextEvent:
    """A run of text inside the innermost open scope."""

    text: str


@dataclass(frozen=True)
class EndEvent:
    """Closes the innermost scope of the same tag."""

    tag: Tag


StructuralEvent = Union[StartEvent, TextEvent, EndEvent]


def merge_text_events(events: list[StructuralEvent]) -> list[StructuralEvent]:
    """Coalesce adjacent ``TextEvent`` items into one.

    Empty text events are dropped.
    """
    merged: list[StructuralEvent] = []
    for event in events:
        if isinstance(event, TextEvent):
            if not event.text:
                continue
            if merged and isinstance(merged[-1], TextEvent):
                merged[-1] = TextEvent(merged[-1].text + event.text)
                continue
        merged.append(event)
    return merged


__all__ = ["Tag", "StartEvent", "TextEvent", "EndEvent", "StructuralEvent", "merge_text_events"]
