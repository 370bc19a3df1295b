#  Copyright (c) 2025 Tom Villani, Ph.D.
"""File discovery and document I/O for batch formatting.

Inputs may be Markdown files, directories (searched recursively for
Markdown files) or glob patterns. Any path with a component matching an
exclude entry is skipped; by default the usual dependency and build output
directories are excluded.
"""

from __future__ import annotations

import fnmatch
import glob
import logging
from pathlib import Path
from typing import Iterable, Optional

from mdfmt.constants import DEFAULT_EXCLUDES, MARKDOWN_EXTENSIONS
from mdfmt.exceptions import FileError

logger = logging.getLogger(__name__)


def build_excludes(extra: Optional[Iterable[str]] = None, use_defaults: bool = True) -> list[str]:
    """Combine the default exclude list with user-supplied entries.

    Parameters
    ----------
    extra : iterable of str, optional
        Additional directory names or glob patterns to exclude
    use_defaults : bool, default True
        Whether to start from ``DEFAULT_EXCLUDES``

    Returns
    -------
    list of str
        Exclude entries without duplicates, defaults first

    """
    excludes: list[str] = list(DEFAULT_EXCLUDES) if use_defaults else []
    for entry in extra or ():
        entry = entry.strip().rstrip("/\\")
        if entry and entry not in excludes:
            excludes.append(entry)
    return excludes


def is_markdown_file(path: Path) -> bool:
    """Return True when ``path`` has a Markdown extension."""
    return path.suffix.lower() in MARKDOWN_EXTENSIONS


def is_excluded(path: Path, excludes: Iterable[str]) -> bool:
    """Return True when any component of ``path`` matches an exclude entry."""
    patterns = list(excludes)
    if not patterns:
        return False
    return any(fnmatch.fnmatch(part, pattern) for part in path.parts for pattern in patterns)


def _has_glob_chars(argument: str) -> bool:
    return any(char in argument for char in "*?[")


def _expand_argument(argument: str, excludes: list[str]) -> list[Path]:
    """Expand one command line argument into candidate Markdown files."""
    if _has_glob_chars(argument):
        matches = [Path(match) for match in glob.glob(argument, recursive=True)]
        if not matches:
            logger.warning("No files match pattern: %s", argument)
        files: list[Path] = []
        for match in matches:
            if is_excluded(match, excludes):
                logger.debug("Excluded: %s", match)
                continue
            if match.is_dir():
                files.extend(_walk_directory(match, excludes))
            elif match.is_file() and is_markdown_file(match):
                files.append(match)
        return files

    path = Path(argument)
    if path.is_file():
        if not is_markdown_file(path):
            logger.debug("Skipping non-Markdown file: %s", path)
            return []
        return [path]
    if path.is_dir():
        return _walk_directory(path, excludes)

    logger.warning("Path does not exist: %s", path)
    return []


def _walk_directory(directory: Path, excludes: list[str]) -> list[Path]:
    files: list[Path] = []
    for child in directory.rglob("*"):
        try:
            relative = child.relative_to(directory)
        except ValueError:
            relative = child
        if is_excluded(relative, excludes):
            continue
        if child.is_file() and is_markdown_file(child):
            files.append(child)
    return files


def resolve_patterns(patterns: Iterable[str], excludes: Optional[Iterable[str]] = None) -> list[Path]:
    """Resolve files, directories and glob patterns to Markdown files.

    Parameters
    ----------
    patterns : iterable of str
        File paths, directory paths or glob patterns
    excludes : iterable of str, optional
        Directory names or glob patterns; any path with a matching
        component is skipped. ``None`` means ``DEFAULT_EXCLUDES``.

    Returns
    -------
    list of Path
        Unique matching files, sorted

    """
    exclude_list = build_excludes() if excludes is None else list(excludes)

    candidates: list[Path] = []
    for argument in patterns:
        candidates.extend(_expand_argument(argument, exclude_list))

    # Deduplicate by resolved path
    unique: dict[str, Path] = {}
    for candidate in candidates:
        try:
            key = str(candidate.resolve())
        except OSError:
            key = str(candidate)
        unique.setdefault(key, candidate)

    return sorted(unique.values())


def read_document(path: Path) -> str:
    """Read a Markdown document, keeping its original line endings.

    Raises
    ------
    FileError
        If the file cannot be read or is not valid UTF-8

    """
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"Failed to read {path}: {e}", file_path=str(path), original_error=e) from e


def write_document(path: Path, content: str) -> None:
    """Write a Markdown document with ``\\n`` line endings.

    Raises
    ------
    FileError
        If the file cannot be written

    """
    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as e:
        raise FileError(f"Failed to write {path}: {e}", file_path=str(path), original_error=e) from e
