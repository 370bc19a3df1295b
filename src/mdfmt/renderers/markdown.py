#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdfmt/renderers/markdown.py
"""Canonical Markdown rendering from structural events.

This module provides the MarkdownRenderer class, which walks a flat stream
of structural events once, in order, and emits normalized Markdown. The
renderer keeps an explicit context stack instead of recursing: each open
block or inline span pushes a context and its end event pops it. The stack
answers every layout question the walk needs:

- the prefix of each physical line (``> `` per open blockquote, the item
  marker or its width in spaces per open list item)
- whether a block is the first one inside its container, which suppresses
  the separating blank line
- the running counter of each open ordered list
- the URL and title of a link or image when its end event arrives

Inline events are buffered in an InlineAccumulator and flushed through the
reflow engine when the enclosing block ends. Code block text bypasses the
accumulator and is copied byte for byte.

A malformed stream (an end event that does not match the innermost open
context, a list item outside a list, contexts left open at the end) raises
StructuralError and produces no output.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Union

from mdfmt.constants import (
    BULLET_MARKERS,
    CODE_FENCE_ALT_CHAR,
    CODE_FENCE_CHAR,
    CODE_FENCE_MIN,
    HEADING_CHAR,
    ORDERED_DELIMITERS,
    QUOTE_PREFIX,
    RULE_MARKER,
)
from mdfmt.events import (
    BlockQuote,
    CodeBlock,
    Emphasis,
    End,
    Event,
    HardBreak,
    Heading,
    Image,
    InlineCode,
    InlineMarkup,
    Link,
    List,
    ListItem,
    Paragraph,
    RawMarkup,
    Rule,
    SoftBreak,
    Start,
    Strikethrough,
    Strong,
    Tag,
    TaskMarker,
    Text,
    is_inline_tag,
)
from mdfmt.exceptions import StructuralError
from mdfmt.options import FormatOptions, OrderedListPolicy, WrapPolicy
from mdfmt.renderers.inline import InlineAccumulator, InlineElement, InlineKind
from mdfmt.renderers.output import OutputBuffer
from mdfmt.renderers.reflow import single_line, wrap_lines

logger = logging.getLogger(__name__)

_ALTERNATE_RULE_MARKER = "***"

_START_KINDS: dict[type, InlineKind] = {
    Emphasis: InlineKind.EMPHASIS_START,
    Strong: InlineKind.STRONG_START,
    Strikethrough: InlineKind.STRIKETHROUGH_START,
    Link: InlineKind.LINK_START,
    Image: InlineKind.IMAGE_START,
}

_END_KINDS: dict[type, InlineKind] = {
    Emphasis: InlineKind.EMPHASIS_END,
    Strong: InlineKind.STRONG_END,
    Strikethrough: InlineKind.STRIKETHROUGH_END,
    Link: InlineKind.LINK_END,
    Image: InlineKind.IMAGE_END,
}


# =============================================================================
# Context stack entries
# =============================================================================


@dataclass
class _ListContext:
    tag: List
    counter: int
    marker_char: str


@dataclass
class _ItemContext:
    tag: ListItem
    marker: str
    marker_pending: bool = True
    started: bool = False


@dataclass
class _QuoteContext:
    tag: BlockQuote
    started: bool = False


@dataclass
class _CodeContext:
    tag: CodeBlock
    chunks: list[str] = field(default_factory=list)


@dataclass
class _LeafContext:
    """Open heading or paragraph; its inline content is being buffered."""

    tag: Union[Heading, Paragraph]


@dataclass
class _InlineContext:
    tag: Union[Strong, Emphasis, Strikethrough, Link, Image]


_Context = Union[_ListContext, _ItemContext, _QuoteContext, _CodeContext, _LeafContext, _InlineContext]


@dataclass(frozen=True)
class _ClosedList:
    depth: int
    ordered: bool
    marker_char: str


def _describe(tag: Tag) -> str:
    return type(tag).__name__


def _longest_run(text: str, char: str) -> int:
    runs = re.findall(re.escape(char) + "+", text)
    return max((len(run) for run in runs), default=0)


class MarkdownRenderer:
    """Render a structural event stream to canonical Markdown.

    Parameters
    ----------
    options : FormatOptions or None, default = None
        Width, wrap policy and ordered list policy. Defaults are used when
        omitted.

    Examples
    --------
    Render a heading and a paragraph:
        >>> from mdfmt.events import End, Heading, Paragraph, Start, Text
        >>> renderer = MarkdownRenderer()
        >>> renderer.render([
        ...     Start(Heading(1)), Text("Title"), End(Heading(1)),
        ...     Start(Paragraph()), Text("Body"), End(Paragraph()),
        ... ])
        '# Title\\n\\nBody\\n'

    """

    def __init__(self, options: FormatOptions | None = None):
        """Initialize the renderer with options."""
        self.options: FormatOptions = options or FormatOptions()
        self._out = OutputBuffer()
        self._inline = InlineAccumulator()
        self._stack: list[_Context] = []
        self._last_list: Optional[_ClosedList] = None
        self._adjacent_list: Optional[_ClosedList] = None
        self._handlers: dict[type, Callable[[Event], None]] = {
            Start: self._on_start,
            End: self._on_end,
            Text: self._on_text,
            InlineCode: self._on_inline_code,
            InlineMarkup: self._on_inline_markup,
            RawMarkup: self._on_raw_markup,
            SoftBreak: self._on_break,
            HardBreak: self._on_break,
            Rule: self._on_rule,
            TaskMarker: self._on_task_marker,
        }

    def render(self, events: Iterable[Event]) -> str:
        """Render an event stream to Markdown text.

        Parameters
        ----------
        events : iterable of Event
            Properly nested structural events, consumed once in order

        Returns
        -------
        str
            Markdown text ending with exactly one newline, or an empty
            string for an empty document

        Raises
        ------
        StructuralError
            If the stream is not properly nested

        """
        self._reset()
        try:
            count = 0
            for event in events:
                self._dispatch(event)
                count += 1
            if self._stack:
                open_names = ", ".join(_describe(ctx.tag) for ctx in self._stack)
                raise StructuralError(f"Event stream ended with unclosed context(s): {open_names}")
            self._flush_loose_inline()
            result = self._out.getvalue()
            logger.debug("Rendered %d events into %d lines", count, len(self._out))
            return result
        finally:
            self._reset()

    def _reset(self) -> None:
        self._out = OutputBuffer()
        self._inline.clear()
        self._stack = []
        self._last_list = None
        self._adjacent_list = None

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _dispatch(self, event: Event) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise StructuralError(f"Unsupported event: {event!r}", event=event)
        # only a List start directly after a List end can see the closed list
        self._adjacent_list, self._last_list = self._last_list, None
        handler(event)

    def _top(self) -> Optional[_Context]:
        return self._stack[-1] if self._stack else None

    def _in_inline_scope(self) -> bool:
        return isinstance(self._top(), (_LeafContext, _InlineContext))

    def _check_inline_allowed(self, event: Event) -> None:
        top = self._top()
        if isinstance(top, _CodeContext):
            raise StructuralError(f"Unexpected {event!r} inside a code block", event=event)
        if isinstance(top, _ListContext):
            raise StructuralError(f"Unexpected {event!r} directly inside a list", event=event)

    def _on_start(self, event: Event) -> None:
        assert isinstance(event, Start)
        tag = event.tag
        top = self._top()

        if isinstance(top, _CodeContext):
            raise StructuralError(f"Unexpected start of {_describe(tag)} inside a code block", event=event)

        if is_inline_tag(tag):
            self._check_inline_allowed(event)
            self._inline.push(InlineElement(_START_KINDS[type(tag)]))
            self._stack.append(_InlineContext(tag))  # type: ignore[arg-type]
            return

        if isinstance(top, (_LeafContext, _InlineContext)):
            raise StructuralError(
                f"Unexpected start of {_describe(tag)} inside {_describe(top.tag)}", event=event
            )

        if isinstance(tag, ListItem):
            if not isinstance(top, _ListContext):
                raise StructuralError("List item outside of a list", event=event)
            self._stack.append(_ItemContext(tag, self._next_marker(top)))
            return

        if isinstance(top, _ListContext):
            raise StructuralError(f"Unexpected start of {_describe(tag)} directly inside a list", event=event)

        self._flush_loose_inline(tag)

        if isinstance(tag, (Heading, Paragraph)):
            self._stack.append(_LeafContext(tag))
        elif isinstance(tag, CodeBlock):
            self._stack.append(_CodeContext(tag))
        elif isinstance(tag, BlockQuote):
            self._separate(tag)
            self._stack.append(_QuoteContext(tag))
        elif isinstance(tag, List):
            self._separate(tag)
            self._stack.append(self._open_list(tag))
        else:
            raise StructuralError(f"Unsupported tag: {tag!r}", event=event)

    def _on_end(self, event: Event) -> None:
        assert isinstance(event, End)
        tag = event.tag
        if not self._stack:
            raise StructuralError(f"Unexpected end of {_describe(tag)} with no open context", event=event)
        top = self._stack[-1]
        if type(top.tag) is not type(tag):
            raise StructuralError(
                f"Unexpected end of {_describe(tag)}; innermost open context is {_describe(top.tag)}",
                event=event,
            )

        if isinstance(top, _InlineContext):
            self._close_inline(top, tag)
        elif isinstance(top, _LeafContext):
            if isinstance(top.tag, Heading):
                self._write_heading(top.tag.level)
            else:
                self._write_paragraph()
        elif isinstance(top, _CodeContext):
            self._write_code_block(top)
        elif isinstance(top, _ItemContext):
            self._flush_loose_inline()
            if not top.started:
                self._emit([self._prefix().rstrip()])
        elif isinstance(top, _QuoteContext):
            self._flush_loose_inline()
            if not top.started:
                self._emit([self._prefix().rstrip()])
        self._stack.pop()

        if isinstance(top, _ListContext):
            self._last_list = _ClosedList(len(self._stack), top.tag.ordered, top.marker_char)

    def _on_text(self, event: Event) -> None:
        assert isinstance(event, Text)
        top = self._top()
        if isinstance(top, _CodeContext):
            top.chunks.append(event.content)
            return
        self._check_inline_allowed(event)
        self._inline.push_text(event.content)

    def _on_inline_code(self, event: Event) -> None:
        assert isinstance(event, InlineCode)
        self._check_inline_allowed(event)
        self._inline.push_code(event.content)

    def _on_inline_markup(self, event: Event) -> None:
        assert isinstance(event, InlineMarkup)
        self._check_inline_allowed(event)
        self._inline.push_raw(event.content)

    def _on_raw_markup(self, event: Event) -> None:
        assert isinstance(event, RawMarkup)
        self._check_inline_allowed(event)
        if self._in_inline_scope():
            self._inline.push_raw(event.content)
            return
        self._flush_loose_inline()
        body = event.content.rstrip("\n")
        if not body:
            return
        self._separate(None)
        self._emit(self._prefixed_lines(body.split("\n")))

    def _on_break(self, event: Event) -> None:
        self._check_inline_allowed(event)
        kind = InlineKind.HARD_BREAK if isinstance(event, HardBreak) else InlineKind.SOFT_BREAK
        self._inline.push(InlineElement(kind))

    def _on_rule(self, event: Event) -> None:
        self._check_inline_allowed(event)
        if self._in_inline_scope():
            raise StructuralError("Unexpected rule inside inline content", event=event)
        self._flush_loose_inline()
        self._separate(None)
        marker = RULE_MARKER
        innermost = self._stack[-1] if self._stack else None
        if isinstance(innermost, _ItemContext) and innermost.marker_pending and innermost.marker[0] == RULE_MARKER[0]:
            # "- ---" would read as a thematic break
            marker = _ALTERNATE_RULE_MARKER
        self._emit([self._prefix() + marker])

    def _on_task_marker(self, event: Event) -> None:
        assert isinstance(event, TaskMarker)
        self._check_inline_allowed(event)
        self._inline.push_task(event.checked)

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    def _open_list(self, tag: List) -> _ListContext:
        choices = ORDERED_DELIMITERS if tag.ordered else BULLET_MARKERS
        marker_char = choices[0]
        adjacent = self._adjacent_list
        if (
            adjacent is not None
            and adjacent.depth == len(self._stack)
            and adjacent.ordered == tag.ordered
            and adjacent.marker_char == choices[0]
        ):
            # a second list right after a sibling of the same kind would merge
            marker_char = choices[1]
        start = tag.start if tag.start is not None else 1
        return _ListContext(tag, counter=start, marker_char=marker_char)

    def _next_marker(self, ctx: _ListContext) -> str:
        if not ctx.tag.ordered:
            return f"{ctx.marker_char} "
        number = 1 if self.options.ordered_list is OrderedListPolicy.ONE else ctx.counter
        ctx.counter += 1
        return f"{number}{ctx.marker_char} "

    def _first_number(self, tag: List) -> int:
        if self.options.ordered_list is OrderedListPolicy.ONE:
            return 1
        return tag.start if tag.start is not None else 1

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def _prefix(self, pending: bool = True) -> str:
        """Build the line prefix from the open containers.

        With ``pending`` set, an item whose first line has not been written
        yet contributes its marker; otherwise every item contributes the
        marker's width in spaces.
        """
        parts: list[str] = []
        for ctx in self._stack:
            if isinstance(ctx, _QuoteContext):
                parts.append(QUOTE_PREFIX)
            elif isinstance(ctx, _ItemContext):
                if pending and ctx.marker_pending:
                    parts.append(ctx.marker)
                else:
                    parts.append(" " * len(ctx.marker))
        return "".join(parts)

    def _innermost_container(self) -> Optional[Union[_ItemContext, _QuoteContext]]:
        for ctx in reversed(self._stack):
            if isinstance(ctx, (_ItemContext, _QuoteContext)):
                return ctx
        return None

    def _separate(self, tag: Optional[Tag]) -> None:
        """Insert the blank line that separates a block from its predecessor."""
        container = self._innermost_container()
        if container is not None and not container.started:
            return
        if (
            isinstance(tag, List)
            and isinstance(container, _ItemContext)
            and (not tag.ordered or self._first_number(tag) == 1)
        ):
            # a nested list follows its parent line directly
            return
        self._out.ensure_blank_line(self._prefix(pending=False))

    def _emit(self, lines: list[str]) -> None:
        self._out.write_lines(lines)
        for ctx in self._stack:
            if isinstance(ctx, _ItemContext):
                ctx.marker_pending = False
                ctx.started = True
            elif isinstance(ctx, _QuoteContext):
                ctx.started = True

    def _prefixed_lines(self, lines: list[str]) -> list[str]:
        """Prefix verbatim lines; empty lines get the trimmed prefix."""
        first = self._prefix()
        rest = self._prefix(pending=False)
        result: list[str] = []
        for index, line in enumerate(lines):
            prefix = first if index == 0 else rest
            result.append(prefix + line if line else prefix.rstrip())
        return result

    # -------------------------------------------------------------------------
    # Block writers
    # -------------------------------------------------------------------------

    def _flush_loose_inline(self, next_tag: Optional[Tag] = None) -> None:
        """Write inline content that arrived outside any paragraph."""
        if not self._inline or self._in_inline_scope():
            return
        if isinstance(next_tag, Paragraph) and all(e.kind is InlineKind.TASK for e in self._inline.elements):
            # a task marker before the item's first paragraph belongs to it
            return
        self._write_paragraph()

    def _write_paragraph(self) -> None:
        policy = self.options.wrap
        segments = self._inline.linearize(policy)
        self._inline.clear()
        lines = wrap_lines(
            segments,
            self._prefix(),
            self._prefix(pending=False),
            self.options.width,
            policy,
        )
        if not lines:
            return
        self._separate(None)
        self._emit(lines)

    def _write_heading(self, level: int) -> None:
        level = max(1, min(6, level))
        text = single_line(self._inline.linearize(WrapPolicy.NEVER))
        self._inline.clear()
        marker = HEADING_CHAR * level
        line = f"{self._prefix()}{marker} {text}" if text else f"{self._prefix()}{marker}"
        self._separate(None)
        self._emit([line])

    def _write_code_block(self, ctx: _CodeContext) -> None:
        content = "".join(ctx.chunks)
        info = ctx.tag.language or ""
        fence_char = CODE_FENCE_ALT_CHAR if CODE_FENCE_CHAR in info else CODE_FENCE_CHAR
        fence = fence_char * max(CODE_FENCE_MIN, _longest_run(content, fence_char) + 1)

        body = content[:-1] if content.endswith("\n") else content
        lines = [fence + info]
        if content:
            lines.extend(body.split("\n"))
        lines.append(fence)

        self._separate(None)
        self._emit(self._prefixed_lines(lines))

    def _close_inline(self, ctx: _InlineContext, end_tag: Tag) -> None:
        kind = _END_KINDS[type(ctx.tag)]
        if isinstance(ctx.tag, (Link, Image)):
            url = ctx.tag.url or getattr(end_tag, "url", "")
            title = ctx.tag.title or getattr(end_tag, "title", "")
            self._inline.push(InlineElement(kind, url=url, title=title))
        else:
            self._inline.push(InlineElement(kind))


def render(events: Iterable[Event], options: FormatOptions | None = None) -> str:
    """Render an event stream to canonical Markdown.

    Convenience wrapper around ``MarkdownRenderer(options).render(events)``.
    """
    return MarkdownRenderer(options).render(events)
