"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mdfmt/cli/output.py
from __future__ import annotations

import argparse
import sys
from typing import Sequence, TextIO

from mdfmt.api import FileResult


def check_rich_available() -> bool:
    """Check if Rich library is available.

    Returns
    -------
    bool
        True if Rich is available, False otherwise

    """
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def should_use_rich_output(args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when the ``--rich`` flag is set, the target stream
    (stderr unless otherwise specified) is a TTY and the Rich library is
    available.
    """
    if not getattr(args, "rich", False):
        return False

    if not check_rich_available():
        return False

    target = stream or sys.stderr
    isatty = getattr(target, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except ValueError:
            # closed stream
            return False
    return False


def summarize(results: Sequence[FileResult]) -> tuple[int, int, int]:
    """Count changed, unchanged and failed files."""
    failed = sum(1 for r in results if r.error is not None)
    changed = sum(1 for r in results if r.error is None and r.changed)
    unchanged = len(results) - failed - changed
    return changed, unchanged, failed


def format_summary(results: Sequence[FileResult], check: bool) -> str:
    """Build the one-line plain text summary.

    Examples
    --------
        >>> format_summary([], check=True)
        '0 files would be reformatted, 0 files already formatted'

    """
    changed, unchanged, failed = summarize(results)

    def plural(count: int) -> str:
        return f"{count} file" if count == 1 else f"{count} files"

    verb = "would be reformatted" if check else "reformatted"
    parts = [f"{plural(changed)} {verb}", f"{plural(unchanged)} already formatted"]
    if failed:
        parts.append(f"{plural(failed)} failed")
    return ", ".join(parts)


def print_file_results(results: Sequence[FileResult], check: bool, stream: TextIO | None = None) -> None:
    """Print one line per changed or failed file."""
    target = stream or sys.stderr
    for result in results:
        if result.error is not None:
            print(f"Error: {result.error}", file=target)
        elif result.changed:
            label = "Would reformat" if check else "Formatted"
            print(f"{label}: {result.path}", file=target)


def print_summary(
    results: Sequence[FileResult], check: bool, use_rich: bool = False, stream: TextIO | None = None
) -> None:
    """Print the per-file lines and the summary, through Rich when requested."""
    target = stream or sys.stderr
    if not use_rich:
        print_file_results(results, check, target)
        print(format_summary(results, check), file=target)
        return

    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    console = Console(file=target)
    interesting = [r for r in results if r.error is not None or r.changed]
    if interesting:
        table = Table(title="Would reformat" if check else "Formatted")
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Status")
        for result in interesting:
            if result.error is not None:
                table.add_row(str(result.path), f"[red]{escape(result.error)}[/red]")
            else:
                status = "[yellow]would change[/yellow]" if check else "[green]formatted[/green]"
                table.add_row(str(result.path), status)
        console.print(table)

    changed, _unchanged, failed = summarize(results)
    style = "red" if failed or (check and changed) else "green"
    console.print(f"[{style}]{format_summary(results, check)}[/{style}]")
