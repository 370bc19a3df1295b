#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mdfmt library.

This module defines the exception classes raised by the formatter. The
rendering core is a pure transformation, so its failure surface is narrow:
a malformed event stream or an invalid configuration value. File I/O
failures only arise in the batch helpers and the CLI.

Exception Hierarchy
-------------------
- MdfmtError (base exception)

  - ConfigError (invalid option values, unreadable configuration files)

  - StructuralError (unbalanced or misplaced structural events)

  - FileError (file access and I/O)

"""

from typing import Any


class MdfmtError(Exception):
    """Base exception class for all mdfmt-specific errors.

    Catching this will catch every error raised by the library.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigError(MdfmtError):
    """Exception raised for invalid configuration values.

    Raised at the configuration boundary, before any rendering begins, when
    an explicitly supplied value cannot be interpreted: an unknown wrap
    mode, an unknown numbering mode, a non-positive width, an unknown key
    in a configuration file, or a configuration file that fails to load.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the parameter that failed validation
    parameter_value : Any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception, if any

    Attributes
    ----------
    parameter_name : str or None
        The name of the invalid parameter
    parameter_value : Any
        The invalid value

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the configuration error with parameter details."""
        super().__init__(message, original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class StructuralError(MdfmtError):
    """Exception raised for a malformed structural event stream.

    The renderer fails fast on an end event that does not match the
    innermost open context, an end event with nothing open, a list item
    outside a list, or contexts left open when the stream is exhausted.
    No partial output is produced.

    Parameters
    ----------
    message : str
        Description of the structural problem
    event : Any, optional
        The offending event, or None when the stream ended early

    Attributes
    ----------
    event : Any
        The unexpected event

    """

    def __init__(self, message: str, event: Any = None):
        """Initialize the structural error with the offending event."""
        super().__init__(message)
        self.event = event


class FileError(MdfmtError):
    """Exception raised when a document cannot be read or written.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the file that caused the error
    original_error : Exception, optional
        The original exception, if any

    Attributes
    ----------
    file_path : str or None
        The problematic file path

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path details."""
        super().__init__(message, original_error)
        self.file_path = file_path


__all__ = [
    "MdfmtError",
    "ConfigError",
    "StructuralError",
    "FileError",
]
