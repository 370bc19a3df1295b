#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdfmt/renderers/reflow.py
"""Reflow engine: turn linearized segments into prefixed physical lines.

The three wrap policies share the same input, a list of ``Segment`` objects
produced by the inline accumulator, and the same output convention: the
first line carries ``first_prefix`` and every later line carries
``continuation_prefix``. A line that ends at a hard break gets the two-space
hard-break suffix; lines ended by width wrapping or by a soft break never
do.

A word that a Markdown parser would read as block syntax when it starts a
line (a list marker, an ATX heading run, a quote marker, a fence opener, a
setext underline or thematic break, an HTML block opener) is never placed at
the start of a continuation line. It stays on the previous line instead,
even when that overflows the width. A line that follows a hard break cannot
be joined to its predecessor, so such a word is backslash-escaped there. A
width break never follows a word ending in an escaping backslash, since
``\\`` before a newline is itself a hard break.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from mdfmt.constants import HARD_BREAK_SUFFIX
from mdfmt.options import WrapPolicy
from mdfmt.renderers.inline import BreakKind, Segment

logger = logging.getLogger(__name__)

_UNSAFE_WORD = re.compile(r"^(?:[-+*]|\d{1,9}[.)]|#{1,6}|=+|-+|_{3,}|\*{3,})$")
_UNSAFE_PREFIX = re.compile(r"^(?:>|```|~~~|<[A-Za-z/!?])")


def is_unsafe_line_start(word: str) -> bool:
    """Return True when ``word`` would be parsed as block syntax at line start.

    Examples
    --------
        >>> is_unsafe_line_start("-")
        True
        >>> is_unsafe_line_start("2.")
        True
        >>> is_unsafe_line_start("well-known")
        False

    """
    return bool(_UNSAFE_WORD.match(word) or _UNSAFE_PREFIX.match(word))


def escape_line_start(word: str) -> str:
    """Backslash-escape the block syntax at the start of ``word``.

    A list number keeps its digits and has its delimiter escaped; any other
    word gets a leading backslash, which is valid because every unsafe word
    starts with ASCII punctuation.

    Examples
    --------
        >>> escape_line_start("1.")
        '1\\\\.'
        >>> escape_line_start("=")
        '\\\\='

    """
    digits = len(word) - len(word.lstrip("0123456789"))
    return word[:digits] + "\\" + word[digits:]


def _needs_escape(word: str) -> bool:
    # raw HTML that did not open an HTML block in the source cannot open one here
    return is_unsafe_line_start(word) and not word.startswith("<")


def _ends_with_escape(word: str) -> bool:
    # an odd run of trailing backslashes escapes the following newline
    return (len(word) - len(word.rstrip("\\"))) % 2 == 1


def _collect_lines(segments: Sequence[Segment]) -> list[tuple[list[str], BreakKind | None]]:
    """Reduce segments to (words, break) pairs, dropping empty segments.

    A hard break that ends an empty segment is carried back onto the
    previous non-empty one, so ``a<hard><hard>b`` keeps its break. Breaks
    before the first word and after the last word are discarded.
    """
    lines: list[tuple[list[str], BreakKind | None]] = []
    for segment in segments:
        words = segment.words()
        if not words:
            if lines and segment.end is BreakKind.HARD:
                lines[-1] = (lines[-1][0], BreakKind.HARD)
            continue
        lines.append((words, segment.end))
    if lines:
        lines[-1] = (lines[-1][0], None)
    return lines


def _fill(words: list[str], first_width: int, rest_width: int) -> list[list[str]]:
    """Greedily pack words into lines of at most the given widths.

    The first word of a line is always placed. A word that is unsafe at the
    start of a line, or any word following one that ends in an escaping
    backslash, is appended to the current line regardless of width.
    """
    lines: list[list[str]] = []
    current: list[str] = []
    current_len = 0
    limit = first_width
    for word in words:
        if not current:
            current = [word]
            current_len = len(word)
            continue
        if current_len + 1 + len(word) <= limit or is_unsafe_line_start(word) or _ends_with_escape(current[-1]):
            current.append(word)
            current_len += 1 + len(word)
            continue
        lines.append(current)
        limit = rest_width
        current = [word]
        current_len = len(word)
    if current:
        lines.append(current)
    return lines


def wrap_lines(
    segments: Sequence[Segment],
    first_prefix: str,
    continuation_prefix: str,
    width: int,
    policy: WrapPolicy,
) -> list[str]:
    """Wrap linearized inline content into physical lines.

    Parameters
    ----------
    segments : sequence of Segment
        Output of ``InlineAccumulator.linearize`` for the same policy
    first_prefix : str
        Prefix for the first physical line (may include a list marker)
    continuation_prefix : str
        Prefix for every later physical line
    width : int
        Target column for ``ALWAYS``; prefixes count toward it
    policy : WrapPolicy
        Wrap policy in effect

    Returns
    -------
    list of str
        Physical lines without terminators; empty when the content is blank

    """
    logical = _collect_lines(segments)
    if not logical:
        return []

    if policy is WrapPolicy.ALWAYS:
        rows = _wrap_always(logical, len(first_prefix), len(continuation_prefix), width)
    elif policy is WrapPolicy.NEVER:
        rows = _wrap_never(logical)
    else:
        rows = _wrap_preserve(logical)

    output: list[str] = []
    for index, (words, hard) in enumerate(rows):
        prefix = first_prefix if index == 0 else continuation_prefix
        if index > 0 and rows[index - 1][1] and _needs_escape(words[0]):
            words = [escape_line_start(words[0]), *words[1:]]
        line = prefix + " ".join(words)
        if hard:
            line += HARD_BREAK_SUFFIX
        output.append(line)
    return output


def wrap(
    segments: Sequence[Segment],
    first_prefix: str,
    continuation_prefix: str,
    width: int,
    policy: WrapPolicy,
) -> str:
    """Wrap linearized inline content and join the lines with newlines.

    See ``wrap_lines`` for the parameters. The result has no trailing
    newline and is empty when the content is blank.
    """
    return "\n".join(wrap_lines(segments, first_prefix, continuation_prefix, width, policy))


def single_line(segments: Sequence[Segment]) -> str:
    """Join every word of every segment onto one line, ignoring breaks."""
    words: list[str] = []
    for segment in segments:
        words.extend(segment.words())
    return " ".join(words)


def _merge_soft(logical: list[tuple[list[str], BreakKind | None]]) -> list[tuple[list[str], bool]]:
    """Join lines separated by soft breaks; the flag marks a hard break."""
    rows: list[tuple[list[str], bool]] = []
    for words, end in logical:
        if rows and not rows[-1][1]:
            rows[-1] = (rows[-1][0] + words, end is BreakKind.HARD)
            continue
        rows.append((list(words), end is BreakKind.HARD))
    return rows


def _wrap_always(
    logical: list[tuple[list[str], BreakKind | None]],
    first_prefix_len: int,
    continuation_len: int,
    width: int,
) -> list[tuple[list[str], bool]]:
    rows: list[tuple[list[str], bool]] = []
    for words, hard in _merge_soft(logical):
        first_limit = width - (first_prefix_len if not rows else continuation_len)
        filled = _fill(words, first_limit, width - continuation_len)
        for line in filled[:-1]:
            rows.append((line, False))
        rows.append((filled[-1], hard))
    logger.debug("Reflowed %d logical lines into %d rows at width %d", len(logical), len(rows), width)
    return rows


def _wrap_never(logical: list[tuple[list[str], BreakKind | None]]) -> list[tuple[list[str], bool]]:
    return _merge_soft(logical)


def _wrap_preserve(logical: list[tuple[list[str], BreakKind | None]]) -> list[tuple[list[str], bool]]:
    rows: list[tuple[list[str], bool]] = []
    for words, end in logical:
        # a soft break may not leave block syntax at the start of a line
        if rows and not rows[-1][1] and is_unsafe_line_start(words[0]):
            rows[-1] = (rows[-1][0] + words, end is BreakKind.HARD)
            continue
        rows.append((list(words), end is BreakKind.HARD))
    return rows
