#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Rendering pipeline: inline accumulation, reflow and the block state machine."""

from mdfmt.renderers.inline import BreakKind, InlineAccumulator, InlineElement, InlineKind, Run, Segment
from mdfmt.renderers.markdown import MarkdownRenderer, render
from mdfmt.renderers.output import OutputBuffer
from mdfmt.renderers.reflow import is_unsafe_line_start, single_line, wrap, wrap_lines

__all__ = [
    "BreakKind",
    "InlineAccumulator",
    "InlineElement",
    "InlineKind",
    "MarkdownRenderer",
    "OutputBuffer",
    "Run",
    "Segment",
    "is_unsafe_line_start",
    "render",
    "single_line",
    "wrap",
    "wrap_lines",
]
