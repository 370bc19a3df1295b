#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the mdfmt command line tool.

Library modules only create module-level loggers under the ``mdfmt``
namespace. Handlers are attached here, to the ``mdfmt`` package logger, so
embedding applications that call the API keep full control of the root
logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOGGER_NAME = "mdfmt"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).strip().upper())
    # getLevelName returns a "Level X" string for unknown names
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the mdfmt logger.

    Calling this again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "DEBUG"); unknown names
        fall back to WARNING.
    log_file : str, optional
        Path of a log file that receives a copy of every record.
    trace_mode : bool, default False
        Prefix records with a timestamp and the logger name.

    Returns
    -------
    logging.Logger
        The ``mdfmt`` package logger.

    """
    level = _resolve_level(log_level)
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
            package_logger.debug("Logging to file: %s", log_file)

    return package_logger
