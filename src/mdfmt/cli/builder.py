#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Argument parser construction for the mdfmt command line tool."""

from __future__ import annotations

import argparse

from mdfmt.options import OrderedListPolicy, WrapPolicy

# Exit codes
EXIT_SUCCESS = 0
EXIT_CHECK_FAILED = 1
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid width: {value!r}. Expected a positive integer") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"Invalid width: {value!r}. Expected a positive integer")
    return number


def create_parser(version: str = "") -> argparse.ArgumentParser:
    """Create the mdfmt argument parser.

    Formatting options default to None so that explicitly given flags can be
    told apart from values inherited from the environment or a config file.
    """
    parser = argparse.ArgumentParser(
        prog="mdfmt",
        description="Format Markdown documents into a canonical form",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the formatted document
  mdfmt README.md

  # Rewrite every Markdown file under docs/ in place
  mdfmt --write docs/

  # Fail in CI when anything would change
  mdfmt --check "**/*.md"

  # Filter mode
  cat notes.md | mdfmt --stdin --wrap always --width 72

Configuration:
  Options are read from .mdfmt.toml, .mdfmt.yaml, .mdfmt.yml, .mdfmt.json or
  the [tool.mdfmt] table of pyproject.toml, searched upward from the current
  directory. MDFMT_WIDTH, MDFMT_WRAP, MDFMT_ORDERED_LIST and MDFMT_EXCLUDE
  override the file; command line flags override both.
        """,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Markdown files, directories or glob patterns ('-' reads standard input)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--write", "-w", action="store_true", help="Rewrite files in place when formatting changes them")
    mode.add_argument(
        "--check", "-c", action="store_true", help="Report files that would be reformatted and exit 1 if any"
    )
    parser.add_argument("--stdin", action="store_true", help="Read a document from stdin and write it to stdout")

    formatting = parser.add_argument_group("formatting options")
    formatting.add_argument(
        "--width", type=_positive_int, metavar="N", help="Target line width for --wrap always (default: 80)"
    )
    formatting.add_argument(
        "--wrap",
        choices=[policy.value for policy in WrapPolicy],
        type=str.lower,
        help="Prose wrapping: reflow to the width, one line per paragraph, or keep line breaks (default: preserve)",
    )
    formatting.add_argument(
        "--ordered-list",
        choices=[policy.value for policy in OrderedListPolicy],
        type=str.lower,
        help="Ordered list numbering (default: ascending)",
    )

    discovery = parser.add_argument_group("file discovery")
    discovery.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Skip paths with a component matching this name or glob (can be specified multiple times)",
    )
    discovery.add_argument(
        "--no-default-excludes",
        action="store_true",
        help="Do not skip node_modules, target, .git, vendor, dist and build",
    )

    config = parser.add_argument_group("configuration")
    config.add_argument("--config", metavar="PATH", help="Load options from this config file")
    config.add_argument("--no-config", action="store_true", help="Disable config file discovery")

    output = parser.add_argument_group("output and logging")
    output.add_argument("--rich", action="store_true", help="Render the summary with rich when on a terminal")
    output.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output with detailed logging (equivalent to --log-level DEBUG)",
    )
    output.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default="WARNING",
        help="Set logging level (default: WARNING). Overrides --verbose if both are specified.",
    )
    output.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write log messages to specified file in addition to console output",
    )
    output.add_argument("--trace", action="store_true", help="Enable trace mode with timestamped debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {version}".rstrip())

    return parser
