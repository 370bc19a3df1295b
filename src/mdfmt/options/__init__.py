#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the mdfmt renderer.

Options are frozen dataclasses; use ``create_updated`` to derive a copy with
some fields changed.
"""

from __future__ import annotations

from mdfmt.options.base import CloneFrozenMixin
from mdfmt.options.format import FormatOptions, OrderedListPolicy, WrapPolicy

__all__ = [
    "CloneFrozenMixin",
    "FormatOptions",
    "OrderedListPolicy",
    "WrapPolicy",
]
