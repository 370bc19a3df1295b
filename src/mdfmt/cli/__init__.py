#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for mdfmt.

This module provides the ``mdfmt`` command. It formats Markdown read from
standard input, prints formatted files, rewrites them in place with
``--write`` or reports the ones that would change with ``--check``.

Options are layered, lowest priority first: built-in defaults, a config
file, ``MDFMT_*`` environment variables and explicit command line flags.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional

from mdfmt import __version__
from mdfmt.api import check_files, format_files, format_markdown_with_result
from mdfmt.cli.builder import EXIT_CHECK_FAILED, EXIT_ERROR, EXIT_SUCCESS, EXIT_USAGE_ERROR, create_parser
from mdfmt.cli.config import CONFIG_ENV_VAR, load_config_with_priority, load_env_config, merge_configs
from mdfmt.cli.output import print_summary, should_use_rich_output
from mdfmt.exceptions import ConfigError, MdfmtError
from mdfmt.files import build_excludes, read_document, resolve_patterns
from mdfmt.logging_utils import configure_logging
from mdfmt.options import FormatOptions

logger = logging.getLogger(__name__)

STDIN_PATH = "-"

__all__ = ["main", "create_parser"]


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    ``--trace`` takes precedence, then ``--verbose``, then ``--log-level``.
    """
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _cli_overrides(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key in ("width", "wrap", "ordered_list"):
        value = getattr(parsed_args, key)
        if value is not None:
            overrides[key] = value
    return overrides


def resolve_settings(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    """Merge config file, environment and command line settings.

    Raises
    ------
    ConfigError
        If the config file cannot be loaded or contains unknown keys

    """
    env_config_path = None if parsed_args.no_config else os.environ.get(CONFIG_ENV_VAR)
    file_config = load_config_with_priority(
        explicit_path=parsed_args.config,
        env_var_path=env_config_path,
        discover=not parsed_args.no_config,
    )
    settings = merge_configs(file_config, load_env_config())
    settings = merge_configs(settings, _cli_overrides(parsed_args))
    logger.debug("Resolved settings: %s", settings)
    return settings


def build_options(settings: Dict[str, Any]) -> FormatOptions:
    """Create ``FormatOptions`` from merged settings."""
    values = {key: settings[key] for key in ("width", "wrap", "ordered_list") if key in settings}
    return FormatOptions(**values)


def _build_exclude_list(parsed_args: argparse.Namespace, settings: Dict[str, Any]) -> list[str]:
    use_defaults = bool(settings.get("default_excludes", True)) and not parsed_args.no_default_excludes
    extra = list(settings.get("exclude", [])) + list(parsed_args.exclude or [])
    return build_excludes(extra, use_defaults)


def _run_stdin(parsed_args: argparse.Namespace, options: FormatOptions) -> int:
    text = sys.stdin.read()
    result = format_markdown_with_result(text, options)
    if parsed_args.check:
        if result.changed:
            print("Would reformat: <stdin>", file=sys.stderr)
            return EXIT_CHECK_FAILED
        return EXIT_SUCCESS
    sys.stdout.write(result.content)
    return EXIT_SUCCESS


def _run_print(paths: list[str], excludes: list[str], options: FormatOptions) -> int:
    exit_code = EXIT_SUCCESS
    for path in resolve_patterns(paths, excludes):
        try:
            content = format_markdown_with_result(read_document(path), options).content
        except MdfmtError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            exit_code = EXIT_ERROR
            continue
        sys.stdout.write(content)
    return exit_code


def _run_batch(parsed_args: argparse.Namespace, excludes: list[str], options: FormatOptions) -> int:
    runner = check_files if parsed_args.check else format_files
    results = runner(parsed_args.paths, options, excludes=excludes, use_default_excludes=False)
    if not results:
        print("No Markdown files found", file=sys.stderr)
        return EXIT_SUCCESS

    print_summary(results, parsed_args.check, use_rich=should_use_rich_output(parsed_args, sys.stderr))

    if any(result.error is not None for result in results):
        return EXIT_ERROR
    if parsed_args.check and any(result.changed for result in results):
        return EXIT_CHECK_FAILED
    return EXIT_SUCCESS


def main(args: Optional[list[str]] = None) -> int:
    """Run the mdfmt command line tool.

    Parameters
    ----------
    args : list of str, optional
        Command line arguments; ``sys.argv[1:]`` when omitted

    Returns
    -------
    int
        Exit code: 0 on success, 1 when ``--check`` finds files to reformat
        or a file fails, 2 on usage or configuration errors

    """
    parser = create_parser(__version__)
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    read_stdin = parsed_args.stdin or parsed_args.paths == [STDIN_PATH]
    if read_stdin and any(path != STDIN_PATH for path in parsed_args.paths):
        print("Error: --stdin cannot be combined with file paths", file=sys.stderr)
        return EXIT_USAGE_ERROR
    if read_stdin and parsed_args.write:
        print("Error: --write cannot be used when reading from stdin", file=sys.stderr)
        return EXIT_USAGE_ERROR
    if not read_stdin and not parsed_args.paths:
        parser.print_usage(sys.stderr)
        print("Error: no input paths given (use --stdin or '-' to read standard input)", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        settings = resolve_settings(parsed_args)
        options = build_options(settings)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    if read_stdin:
        return _run_stdin(parsed_args, options)

    excludes = _build_exclude_list(parsed_args, settings)
    if parsed_args.write or parsed_args.check:
        return _run_batch(parsed_args, excludes, options)
    return _run_print(parsed_args.paths, excludes, options)
