#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdfmt/events.py
"""Structural event classes for the rendering pipeline.

The renderer consumes a flat, ordered sequence of events rather than a tree.
Containers and inline spans are bracketed by a ``Start``/``End`` pair that
carries a *tag* describing the construct; leaves are standalone events.

Tag Types
---------
Block tags:
    - Heading, Paragraph, List, ListItem, BlockQuote, CodeBlock

Inline tags:
    - Strong, Emphasis, Strikethrough, Link, Image

Event Types
-----------
    - Start, End (bracket a tag)
    - Text, InlineCode, RawMarkup, InlineMarkup (content leaves)
    - SoftBreak, HardBreak, Rule, TaskMarker (markers)

A well-formed stream is stack-balanced: every ``Start`` is closed by an
``End`` whose tag has the same type, innermost first. The ``End`` of a link
or image may carry a tag with empty payload; the renderer recovers the URL
and title from the matching ``Start``.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

# =============================================================================
# Block tags
# =============================================================================


@dataclass(frozen=True)
class Heading:
    """ATX heading.

    Parameters
    ----------
    level : int
        Heading level, 1 through 6

    """

    level: int = 1


@dataclass(frozen=True)
class Paragraph:
    """Paragraph of inline content."""


@dataclass(frozen=True)
class List:
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool, default = False
        Whether items are numbered
    start : int or None, default = None
        Declared number of the first item; ``None`` means 1

    """

    ordered: bool = False
    start: Optional[int] = None


@dataclass(frozen=True)
class ListItem:
    """Single item of the enclosing list."""


@dataclass(frozen=True)
class BlockQuote:
    """Block quotation."""


@dataclass(frozen=True)
class CodeBlock:
    """Fenced or indented code block.

    Parameters
    ----------
    language : str or None, default = None
        Info string of the opening fence, kept verbatim

    """

    language: Optional[str] = None


# =============================================================================
# Inline tags
# =============================================================================


@dataclass(frozen=True)
class Strong:
    """Strong emphasis span."""


@dataclass(frozen=True)
class Emphasis:
    """Emphasis span."""


@dataclass(frozen=True)
class Strikethrough:
    """Strikethrough span."""


@dataclass(frozen=True)
class Link:
    """Hyperlink span.

    Parameters
    ----------
    url : str, default = ""
        Link destination
    title : str, default = ""
        Optional link title

    """

    url: str = ""
    title: str = ""


@dataclass(frozen=True)
class Image:
    """Image span; its inline children form the alt text.

    Parameters
    ----------
    url : str, default = ""
        Image source
    title : str, default = ""
        Optional image title

    """

    url: str = ""
    title: str = ""


BlockTag = Union[Heading, Paragraph, List, ListItem, BlockQuote, CodeBlock]
InlineTag = Union[Strong, Emphasis, Strikethrough, Link, Image]
Tag = Union[BlockTag, InlineTag]

INLINE_TAG_TYPES: tuple[type, ...] = (Strong, Emphasis, Strikethrough, Link, Image)


def is_inline_tag(tag: Tag) -> bool:
    """Return True when ``tag`` brackets an inline span."""
    return isinstance(tag, INLINE_TAG_TYPES)


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class Start:
    """Opening bracket of a block or inline construct."""

    tag: Tag


@dataclass(frozen=True)
class End:
    """Closing bracket of a block or inline construct."""

    tag: Tag


@dataclass(frozen=True)
class Text:
    """Literal text.

    Inside a code block the content is copied byte for byte; elsewhere its
    whitespace is normalized by the reflow engine. Text is in source form:
    backslash escapes are kept and written back unchanged.
    """

    content: str


@dataclass(frozen=True)
class InlineCode:
    """Inline code span content, without its backtick delimiters."""

    content: str


@dataclass(frozen=True)
class RawMarkup:
    """Block of raw markup (e.g. HTML) emitted verbatim."""

    content: str


@dataclass(frozen=True)
class InlineMarkup:
    """Raw inline markup that stays inside its paragraph as one unbreakable run."""

    content: str


@dataclass(frozen=True)
class SoftBreak:
    """Incidental source line break."""


@dataclass(frozen=True)
class HardBreak:
    """Explicit author-requested line break."""


@dataclass(frozen=True)
class Rule:
    """Thematic break."""


@dataclass(frozen=True)
class TaskMarker:
    """Task list checkbox.

    Parameters
    ----------
    checked : bool
        Whether the box is ticked

    """

    checked: bool = False


Event = Union[Start, End, Text, InlineCode, RawMarkup, InlineMarkup, SoftBreak, HardBreak, Rule, TaskMarker]


__all__ = [
    # Tags
    "Heading",
    "Paragraph",
    "List",
    "ListItem",
    "BlockQuote",
    "CodeBlock",
    "Strong",
    "Emphasis",
    "Strikethrough",
    "Link",
    "Image",
    "BlockTag",
    "InlineTag",
    "Tag",
    "is_inline_tag",
    # Events
    "Start",
    "End",
    "Text",
    "InlineCode",
    "RawMarkup",
    "InlineMarkup",
    "SoftBreak",
    "HardBreak",
    "Rule",
    "TaskMarker",
    "Event",
]
