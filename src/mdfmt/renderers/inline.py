#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdfmt/renderers/inline.py
"""Inline accumulation and linearization.

Inline events arriving between two block boundaries are buffered as
``InlineElement`` records. When the enclosing block is flushed, the buffer is
linearized into a list of ``Segment`` objects: each segment is a run of text
ending at a hard break, a soft break, or the end of the block. Markup
delimiters (``*``, ``**``, ``~~``, link and image brackets) are rendered as
ordinary text inside the segments, so the reflow engine only ever sees words.

Runs flagged ``verbatim`` (code spans, raw inline markup, link destinations,
task markers) are never split on whitespace; they glue to whatever text
touches them and travel through the reflow engine as part of a single word.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mdfmt.constants import TASK_CHECKED, TASK_UNCHECKED
from mdfmt.options import WrapPolicy

# Only ASCII whitespace separates words; NBSP and friends are content
_WORD_SPLIT = re.compile(r"[ \t\n\r\f\v]+")
_BACKTICK_RUN = re.compile(r"`+")
_AUTOLINK_TEXT = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]{1,31}:[^\s<>]*$")
_EMAIL_TEXT = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~\-]+@[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9\-]+)*$")
_ASCII_PUNCTUATION = set("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


class InlineKind(Enum):
    """Kinds of buffered inline element."""

    TEXT = "text"
    CODE = "code"
    RAW = "raw"
    TASK = "task"
    EMPHASIS_START = "emphasis_start"
    EMPHASIS_END = "emphasis_end"
    STRONG_START = "strong_start"
    STRONG_END = "strong_end"
    STRIKETHROUGH_START = "strikethrough_start"
    STRIKETHROUGH_END = "strikethrough_end"
    LINK_START = "link_start"
    LINK_END = "link_end"
    IMAGE_START = "image_start"
    IMAGE_END = "image_end"
    HARD_BREAK = "hard_break"
    SOFT_BREAK = "soft_break"


# Delimiters emitted verbatim for span boundaries
_SPAN_MARKERS: dict[InlineKind, str] = {
    InlineKind.EMPHASIS_START: "*",
    InlineKind.EMPHASIS_END: "*",
    InlineKind.STRONG_START: "**",
    InlineKind.STRONG_END: "**",
    InlineKind.STRIKETHROUGH_START: "~~",
    InlineKind.STRIKETHROUGH_END: "~~",
    InlineKind.LINK_START: "[",
    InlineKind.IMAGE_START: "![",
}


@dataclass(frozen=True)
class InlineElement:
    """One buffered inline element.

    Parameters
    ----------
    kind : InlineKind
        Element kind
    text : str, default = ""
        Text or code content for ``TEXT``, ``CODE`` and ``RAW``
    url : str, default = ""
        Destination carried by ``LINK_END`` and ``IMAGE_END``
    title : str, default = ""
        Title carried by ``LINK_END`` and ``IMAGE_END``
    checked : bool, default = False
        Checkbox state carried by ``TASK``

    """

    kind: InlineKind
    text: str = ""
    url: str = ""
    title: str = ""
    checked: bool = False


class BreakKind(Enum):
    """Line break that terminates a segment."""

    SOFT = "soft"
    HARD = "hard"


@dataclass(frozen=True)
class Run:
    """A piece of segment text; verbatim runs are never split on whitespace."""

    text: str
    verbatim: bool = False


@dataclass
class Segment:
    """Linearized inline text up to a line break.

    Parameters
    ----------
    runs : list of Run
        Text pieces in order
    end : BreakKind or None
        Break that terminates the segment; ``None`` for the last segment

    """

    runs: list[Run] = field(default_factory=list)
    end: Optional[BreakKind] = None

    def words(self) -> list[str]:
        """Split the segment into words on ASCII whitespace.

        Whitespace inside verbatim runs does not separate words, and text
        touching a verbatim run on either side belongs to the same word.

        Returns
        -------
        list of str
            Non-empty words in order

        """
        words: list[str] = []
        current: list[str] = []
        for run in self.runs:
            if run.verbatim:
                current.append(run.text)
                continue
            for index, part in enumerate(_WORD_SPLIT.split(run.text)):
                if index > 0 and current:
                    words.append("".join(current))
                    current = []
                if part:
                    current.append(part)
        if current:
            words.append("".join(current))
        return words

    def is_blank(self) -> bool:
        """Return True when the segment holds no words."""
        return not self.words()


def code_span(content: str) -> str:
    """Render ``content`` as an inline code span.

    The fence is one backtick longer than the longest backtick run in the
    content. Content that begins or ends with a backtick, or that begins and
    ends with a space, is padded with one space on each side.

    Examples
    --------
        >>> code_span("let x = 5;")
        '`let x = 5;`'
        >>> code_span("a `b` c")
        '``a `b` c``'

    """
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(content)), default=0)
    fence = "`" * (longest + 1)
    needs_padding = content.startswith("`") or content.endswith("`")
    if content.startswith(" ") and content.endswith(" ") and content.strip(" "):
        needs_padding = True
    if needs_padding:
        return f"{fence} {content} {fence}"
    return f"{fence}{content}{fence}"


def link_destination(url: str) -> str:
    """Format a link destination, using angle brackets when required."""
    depth = 0
    balanced = True
    for char in url:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                balanced = False
                break
    if depth != 0:
        balanced = False

    if not url or any(char in " \t\n\r\f\v" for char in url) or not balanced:
        escaped = url.replace("<", "\\<").replace(">", "\\>")
        return f"<{escaped}>" if url else ""
    return url


def link_title(title: str) -> str:
    """Format a link title as a double-quoted string."""
    escaped = []
    for index, char in enumerate(title):
        if char == '"':
            escaped.append('\\"')
        elif char == "\\" and index + 1 < len(title) and title[index + 1] in _ASCII_PUNCTUATION:
            escaped.append("\\\\")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


def link_suffix(url: str, title: str) -> str:
    """Return the ``](url "title")`` tail that closes a link or image."""
    destination = link_destination(url)
    if title:
        return f"]({destination} {link_title(title)})"
    return f"]({destination})"


class InlineAccumulator:
    """Buffer of inline elements for a single block.

    The accumulator does not compute output while elements arrive; it only
    records them. ``linearize`` turns the buffer into segments according to
    the wrap policy, and ``clear`` discards it once the block is flushed.

    Examples
    --------
        >>> acc = InlineAccumulator()
        >>> acc.push_text("Hello")
        >>> acc.push(InlineElement(InlineKind.SOFT_BREAK))
        >>> acc.push_text("world")
        >>> [seg.words() for seg in acc.linearize(WrapPolicy.PRESERVE)]
        [['Hello'], ['world']]

    """

    def __init__(self) -> None:
        """Initialize an empty buffer."""
        self._elements: list[InlineElement] = []

    def __len__(self) -> int:
        return len(self._elements)

    def __bool__(self) -> bool:
        return bool(self._elements)

    @property
    def elements(self) -> list[InlineElement]:
        """Buffered elements, in arrival order."""
        return list(self._elements)

    def push(self, element: InlineElement) -> None:
        """Append one element to the buffer."""
        self._elements.append(element)

    def push_text(self, text: str) -> None:
        """Append literal text."""
        self._elements.append(InlineElement(InlineKind.TEXT, text=text))

    def push_code(self, code: str) -> None:
        """Append an inline code span."""
        self._elements.append(InlineElement(InlineKind.CODE, text=code))

    def push_raw(self, markup: str) -> None:
        """Append raw inline markup."""
        self._elements.append(InlineElement(InlineKind.RAW, text=markup))

    def push_task(self, checked: bool) -> None:
        """Append a task list checkbox."""
        self._elements.append(InlineElement(InlineKind.TASK, checked=checked))

    def clear(self) -> None:
        """Discard the buffered elements."""
        self._elements.clear()

    def linearize(self, policy: WrapPolicy) -> list[Segment]:
        """Render the buffer into break-delimited segments.

        Parameters
        ----------
        policy : WrapPolicy
            Wrap policy in effect. Soft breaks become a space under
            ``ALWAYS`` and ``NEVER`` and end a segment under ``PRESERVE``.
            Hard breaks end a segment under every policy.

        Returns
        -------
        list of Segment
            At least one segment; the last one has ``end`` set to None

        """
        segments: list[Segment] = [Segment()]
        elements = self._elements
        index = 0
        while index < len(elements):
            element = elements[index]
            current = segments[-1]
            kind = element.kind

            if kind is InlineKind.TEXT:
                current.runs.append(Run(element.text))
            elif kind is InlineKind.CODE:
                current.runs.append(Run(code_span(element.text), verbatim=True))
            elif kind is InlineKind.RAW:
                current.runs.append(Run(element.text, verbatim=True))
            elif kind is InlineKind.TASK:
                marker = TASK_CHECKED if element.checked else TASK_UNCHECKED
                current.runs.append(Run(marker, verbatim=True))
                current.runs.append(Run(" "))
            elif kind is InlineKind.SOFT_BREAK:
                if policy is WrapPolicy.PRESERVE:
                    current.end = BreakKind.SOFT
                    segments.append(Segment())
                else:
                    current.runs.append(Run(" "))
            elif kind is InlineKind.HARD_BREAK:
                current.end = BreakKind.HARD
                segments.append(Segment())
            elif kind is InlineKind.LINK_START:
                autolink = self._autolink_at(index)
                if autolink is not None:
                    text, end_index = autolink
                    current.runs.append(Run(f"<{text}>", verbatim=True))
                    index = end_index
                else:
                    current.runs.append(Run("["))
            elif kind in (InlineKind.LINK_END, InlineKind.IMAGE_END):
                current.runs.append(Run(link_suffix(element.url, element.title), verbatim=True))
            else:
                current.runs.append(Run(_SPAN_MARKERS[kind]))
            index += 1

        return segments

    def _autolink_at(self, start: int) -> Optional[tuple[str, int]]:
        """Detect a link whose only content is its own address.

        Returns the address text and the index of the matching ``LINK_END``
        when the link at ``start`` can be written as ``<address>``.
        """
        elements = self._elements
        if start + 2 >= len(elements):
            return None
        text_element = elements[start + 1]
        end_element = elements[start + 2]
        if text_element.kind is not InlineKind.TEXT or end_element.kind is not InlineKind.LINK_END:
            return None
        if end_element.title:
            return None
        text = text_element.text
        url = end_element.url
        if text == url and _AUTOLINK_TEXT.match(text):
            return text, start + 2
        if url == f"mailto:{text}" and _EMAIL_TEXT.match(text):
            return text, start + 2
        return None
