"""mdfmt - A canonicalizing Markdown formatter.

mdfmt parses a Markdown document into a stream of structural events and
renders it back as normalized Markdown: one blank line between blocks,
``-`` bullets, renumbered ordered lists, ``*``/``**`` emphasis, fenced code
blocks and consistent indentation of nested lists and quotes. Formatting is
idempotent; formatting already formatted output changes nothing.

Key Features
------------
- Three prose wrapping policies: reflow to a width, one line per paragraph,
  or keep the author's line breaks
- Ascending or constant ``1.`` ordered list numbering
- Byte-exact preservation of code blocks and raw HTML
- Hard line breaks preserved under every wrap policy
- Front matter preserved verbatim
- Check mode for CI and in-place batch formatting of files and directories

Examples
--------
Format a string:

    >>> from mdfmt import format_markdown
    >>> format_markdown("This is *italic* and **bold** text.")
    'This is *italic* and **bold** text.\\n'

Reflow to 60 columns with constant numbering:

    >>> from mdfmt import FormatOptions
    >>> options = FormatOptions(width=60, wrap="always", ordered_list="one")
    >>> formatted = format_markdown(text, options)  # doctest: +SKIP

Render an event stream directly:

    >>> from mdfmt import render
    >>> from mdfmt.events import End, Paragraph, Start, Text
    >>> render([Start(Paragraph()), Text("Hello"), End(Paragraph())])
    'Hello\\n'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from mdfmt.api import (
    FileResult,
    FormatResult,
    check_files,
    check_markdown,
    format_files,
    format_markdown,
    format_markdown_with_result,
)
from mdfmt.exceptions import ConfigError, FileError, MdfmtError, StructuralError
from mdfmt.frontmatter import extract_frontmatter
from mdfmt.options import FormatOptions, OrderedListPolicy, WrapPolicy
from mdfmt.parser import MarkdownEventSource, parse_markdown
from mdfmt.renderers.markdown import MarkdownRenderer, render

__version__ = "0.3.0"

__all__ = [
    # Formatting
    "format_markdown",
    "format_markdown_with_result",
    "check_markdown",
    "format_files",
    "check_files",
    "FormatResult",
    "FileResult",
    # Pipeline
    "parse_markdown",
    "MarkdownEventSource",
    "render",
    "MarkdownRenderer",
    "extract_frontmatter",
    # Options
    "FormatOptions",
    "WrapPolicy",
    "OrderedListPolicy",
    # Exceptions
    "MdfmtError",
    "ConfigError",
    "StructuralError",
    "FileError",
    "__version__",
]
