"""The major exported API functions for Markdown formatting."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/mdfmt/api.py
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable, Optional

from mdfmt.exceptions import ConfigError, MdfmtError
from mdfmt.files import build_excludes, read_document, resolve_patterns, write_document
from mdfmt.frontmatter import extract_frontmatter
from mdfmt.options import FormatOptions
from mdfmt.parser import parse_markdown
from mdfmt.renderers.markdown import render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatResult:
    """Result of formatting one document.

    Parameters
    ----------
    content : str
        Formatted text
    changed : bool
        Whether ``content`` differs from the input

    """

    content: str
    changed: bool


@dataclass(frozen=True)
class FileResult:
    """Outcome of formatting or checking one file.

    Parameters
    ----------
    path : Path
        The file
    changed : bool
        Whether formatting changes (or changed) the file
    error : str or None
        Error message when the file could not be processed

    """

    path: Path
    changed: bool
    error: Optional[str] = None


def _create_options_from_kwargs(options: FormatOptions | None, **kwargs: Any) -> FormatOptions:
    """Overlay keyword arguments on an options object.

    Raises
    ------
    ConfigError
        If a keyword does not name an option field, or a value is invalid

    """
    base = options if options is not None else FormatOptions()
    if not kwargs:
        return base

    valid_fields = {f.name for f in fields(FormatOptions)}
    unknown = sorted(set(kwargs) - valid_fields)
    if unknown:
        raise ConfigError(
            f"Unknown option(s): {', '.join(unknown)}. Expected: {', '.join(sorted(valid_fields))}",
            parameter_name=unknown[0],
            parameter_value=kwargs[unknown[0]],
        )
    return base.create_updated(**kwargs)


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def format_markdown(text: str, options: FormatOptions | None = None, **kwargs: Any) -> str:
    """Format a Markdown document.

    Front matter is split off first and reattached unchanged; the body is
    parsed into structural events and rendered.

    Parameters
    ----------
    text : str
        Markdown document
    options : FormatOptions, optional
        Formatting options; defaults apply when omitted
    **kwargs
        Individual option overrides (``width``, ``wrap``, ``ordered_list``)

    Returns
    -------
    str
        Formatted document with exactly one trailing newline, or an empty
        string for an empty document

    Raises
    ------
    ConfigError
        If an option value is invalid

    Examples
    --------
        >>> format_markdown("# Heading 1\\n## Heading 2")
        '# Heading 1\\n\\n## Heading 2\\n'
        >>> format_markdown("1. a\\n2. b", ordered_list="one")
        '1. a\\n1. b\\n'

    """
    resolved = _create_options_from_kwargs(options, **kwargs)
    logger.debug(
        "Formatting %d characters (width=%d, wrap=%s, ordered_list=%s)",
        len(text),
        resolved.width,
        resolved.wrap.value,
        resolved.ordered_list.value,
    )

    frontmatter, body = extract_frontmatter(_normalize_newlines(text))
    rendered = render(parse_markdown(body), resolved)

    if frontmatter is None:
        return rendered
    if not rendered:
        return frontmatter.rstrip("\n") + "\n"
    return frontmatter + rendered


def format_markdown_with_result(text: str, options: FormatOptions | None = None, **kwargs: Any) -> FormatResult:
    """Format a document and report whether anything changed."""
    content = format_markdown(text, options, **kwargs)
    return FormatResult(content=content, changed=content != text)


def check_markdown(text: str, options: FormatOptions | None = None, **kwargs: Any) -> bool:
    """Return True when ``text`` is already formatted."""
    return not format_markdown_with_result(text, options, **kwargs).changed


def _process_file(path: Path, options: FormatOptions, write: bool) -> FileResult:
    try:
        original = read_document(path)
        result = format_markdown_with_result(original, options)
        if result.changed and write:
            write_document(path, result.content)
            logger.info("Formatted: %s", path)
    except MdfmtError as e:
        logger.error("%s", e.message)
        return FileResult(path=path, changed=False, error=e.message)
    return FileResult(path=path, changed=result.changed)


def _process_files(
    patterns: Iterable[str],
    options: FormatOptions | None,
    excludes: Optional[Iterable[str]],
    use_default_excludes: bool,
    write: bool,
) -> list[FileResult]:
    resolved = options if options is not None else FormatOptions()
    paths = resolve_patterns(patterns, build_excludes(excludes, use_default_excludes))
    logger.debug("Resolved %d Markdown file(s)", len(paths))
    return [_process_file(path, resolved, write) for path in paths]


def format_files(
    patterns: Iterable[str],
    options: FormatOptions | None = None,
    *,
    excludes: Optional[Iterable[str]] = None,
    use_default_excludes: bool = True,
) -> list[FileResult]:
    """Format Markdown files in place.

    Parameters
    ----------
    patterns : iterable of str
        Files, directories or glob patterns
    options : FormatOptions, optional
        Formatting options
    excludes : iterable of str, optional
        Extra directory names or patterns to skip
    use_default_excludes : bool, default True
        Whether to skip the default excluded directories as well

    Returns
    -------
    list of FileResult
        One result per file, sorted by path. A file that cannot be read or
        written is reported through ``FileResult.error``; the others are
        still processed.

    """
    return _process_files(patterns, options, excludes, use_default_excludes, write=True)


def check_files(
    patterns: Iterable[str],
    options: FormatOptions | None = None,
    *,
    excludes: Optional[Iterable[str]] = None,
    use_default_excludes: bool = True,
) -> list[FileResult]:
    """Report which Markdown files would be reformatted, without writing.

    Takes the same parameters as ``format_files``.
    """
    return _process_files(patterns, options, excludes, use_default_excludes, write=False)
