#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdfmt/parser.py
"""Markdown to structural event conversion.

This module drives the mistune parser and flattens its token tree into the
ordered, properly nested event stream consumed by the renderer. The
``strikethrough`` and ``task_lists`` plugins are enabled; tables and other
extensions are not, so their syntax passes through as ordinary text.

Text events carry source-form text: a character the author escaped with a
backslash keeps its backslash, so formatting never turns escaped punctuation
into markup.
"""

from __future__ import annotations

import logging
from typing import Any, Match

import mistune

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
    TaskMarker,
    Text,
)

logger = logging.getLogger(__name__)

_PLUGINS = ["strikethrough", "task_lists"]

_SPAN_TAGS = {
    "emphasis": Emphasis,
    "strong": Strong,
    "strikethrough": Strikethrough,
}


def _parse_escape(inline: Any, m: Match[str], state: Any) -> int:
    state.append_token({"type": "escape", "raw": m.group(0)})
    return m.end()


def preserve_escapes(md: Any) -> None:
    """Mistune plugin keeping backslash escapes in source form.

    The stock escape rule unescapes the character; this one emits an
    ``escape`` token holding the original backslash sequence.
    """
    md.inline.register("escape", None, _parse_escape)


class MarkdownEventSource:
    """Produce structural events from Markdown text.

    A single instance may be reused; every call to ``parse`` builds its
    event list from scratch.

    Examples
    --------
        >>> source = MarkdownEventSource()
        >>> source.parse("# Title")
        [Start(tag=Heading(level=1)), Text(content='Title'), End(tag=Heading(level=1))]

    """

    def __init__(self) -> None:
        """Create the underlying mistune parser."""
        self._markdown = mistune.create_markdown(plugins=[*_PLUGINS, preserve_escapes], renderer=None)

    def parse(self, text: str) -> list[Event]:
        """Parse Markdown text into a list of events.

        Parameters
        ----------
        text : str
            Markdown document body (front matter already removed)

        Returns
        -------
        list of Event
            Properly nested event stream

        """
        tokens, _state = self._markdown.parse(text)
        events: list[Event] = []
        if isinstance(tokens, list):
            self._process_blocks(tokens, events)
        logger.debug("Parsed %d characters into %d events", len(text), len(events))
        return events

    # -------------------------------------------------------------------------
    # Block tokens
    # -------------------------------------------------------------------------

    def _process_blocks(self, tokens: list[dict[str, Any]], events: list[Event]) -> None:
        for token in tokens:
            self._process_block(token, events)

    def _process_block(self, token: dict[str, Any], events: list[Event], task: bool | None = None) -> None:
        token_type = token.get("type", "")
        attrs = token.get("attrs") or {}

        if token_type in ("paragraph", "block_text"):
            tag = Paragraph()
            events.append(Start(tag))
            if task is not None:
                events.append(TaskMarker(checked=task))
            self._process_inlines(token.get("children", []), events)
            events.append(End(tag))
        elif token_type == "heading":
            heading = Heading(level=int(attrs.get("level", 1)))
            events.append(Start(heading))
            self._process_inlines(token.get("children", []), events)
            events.append(End(heading))
        elif token_type == "block_code":
            self._process_code_block(token, events)
        elif token_type == "block_quote":
            quote = BlockQuote()
            events.append(Start(quote))
            self._process_blocks(token.get("children", []), events)
            events.append(End(quote))
        elif token_type == "list":
            self._process_list(token, events)
        elif token_type == "thematic_break":
            events.append(Rule())
        elif token_type == "block_html":
            events.append(RawMarkup(token.get("raw", "")))
        elif token_type == "blank_line":
            pass
        elif "raw" in token:
            logger.debug("Passing through unknown block token %r as raw markup", token_type)
            events.append(RawMarkup(token["raw"]))
        else:
            logger.debug("Skipping unknown block token %r", token_type)

    def _process_code_block(self, token: dict[str, Any], events: list[Event]) -> None:
        attrs = token.get("attrs") or {}
        info = attrs.get("info") or None
        content = token.get("raw", "")
        # indented blocks arrive without their final newline
        if content and not content.endswith("\n"):
            content += "\n"
        tag = CodeBlock(language=info)
        events.append(Start(tag))
        if content:
            events.append(Text(content))
        events.append(End(tag))

    def _process_list(self, token: dict[str, Any], events: list[Event]) -> None:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        start = attrs.get("start") if ordered else None
        tag = List(ordered=ordered, start=start)
        events.append(Start(tag))
        for item in token.get("children", []):
            item_type = item.get("type")
            if item_type not in ("list_item", "task_list_item"):
                logger.debug("Skipping unexpected %r token inside list", item_type)
                continue
            task = None
            if item_type == "task_list_item":
                task = bool((item.get("attrs") or {}).get("checked", False))
            events.append(Start(ListItem()))
            for index, child in enumerate(item.get("children", [])):
                self._process_block(child, events, task=task if index == 0 else None)
            events.append(End(ListItem()))
        events.append(End(tag))

    # -------------------------------------------------------------------------
    # Inline tokens
    # -------------------------------------------------------------------------

    def _process_inlines(self, tokens: list[dict[str, Any]], events: list[Event]) -> None:
        for token in tokens:
            self._process_inline(token, events)

    def _process_inline(self, token: dict[str, Any], events: list[Event]) -> None:
        token_type = token.get("type", "")

        if token_type in ("text", "escape"):
            events.append(Text(token.get("raw", "")))
        elif token_type == "codespan":
            events.append(InlineCode(token.get("raw", "")))
        elif token_type in _SPAN_TAGS:
            tag = _SPAN_TAGS[token_type]()
            events.append(Start(tag))
            self._process_inlines(token.get("children", []), events)
            events.append(End(tag))
        elif token_type in ("link", "image"):
            attrs = token.get("attrs") or {}
            url = attrs.get("url", "")
            title = attrs.get("title") or ""
            link_tag = Link(url=url, title=title) if token_type == "link" else Image(url=url, title=title)
            events.append(Start(link_tag))
            self._process_inlines(token.get("children", []), events)
            events.append(End(link_tag))
        elif token_type == "linebreak":
            events.append(HardBreak())
        elif token_type == "softbreak":
            events.append(SoftBreak())
        elif token_type == "inline_html":
            events.append(InlineMarkup(token.get("raw", "")))
        elif "raw" in token:
            logger.debug("Passing through unknown inline token %r as text", token_type)
            events.append(Text(token["raw"]))
        elif "children" in token:
            self._process_inlines(token["children"], events)
        else:
            logger.debug("Skipping unknown inline token %r", token_type)


def parse_markdown(text: str) -> list[Event]:
    """Parse Markdown text into a structural event list.

    Parameters
    ----------
    text : str
        Markdown document body

    Returns
    -------
    list of Event
        Properly nested event stream

    """
    return MarkdownEventSource().parse(text)
