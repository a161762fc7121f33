"""Unified error model and error code constants for SithCodec."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

PathLike = Union[str, Path]


# Error codes (string constants)
class ErrorCode:
    """Error code constants for structured error reporting."""

    # Input errors
    OPEN_FAILED = "open_failed"
    END_OF_STREAM = "end_of_stream"

    # Output errors
    WRITE_FAILED = "write_failed"
    DELETE_FAILED = "delete_failed"

    # Parameter errors
    INVALID_FORMAT = "invalid_format"
    INVALID_CONFIG = "invalid_config"

    # Internal errors
    INTERNAL_ERROR = "internal_error"


KNOWN_ERROR_CODES = {
    ErrorCode.OPEN_FAILED,
    ErrorCode.END_OF_STREAM,
    ErrorCode.WRITE_FAILED,
    ErrorCode.DELETE_FAILED,
    ErrorCode.INVALID_FORMAT,
    ErrorCode.INVALID_CONFIG,
    ErrorCode.INTERNAL_ERROR,
}


# Exit codes (int constants)
class ExitCode:
    """Exit code constants for CLI and batch processing."""

    SUCCESS = 0
    PARTIAL_FAILED = 1  # Batch: some files failed
    OPEN_FAILED = 10
    WRITE_FAILED = 11
    DELETE_FAILED = 12
    INVALID_FORMAT = 13
    END_OF_STREAM = 14
    INVALID_CONFIG = 15
    INTERNAL_ERROR = 99


ERROR_TO_EXIT_CODE: Dict[str, int] = {
    ErrorCode.OPEN_FAILED: ExitCode.OPEN_FAILED,
    ErrorCode.END_OF_STREAM: ExitCode.END_OF_STREAM,
    ErrorCode.WRITE_FAILED: ExitCode.WRITE_FAILED,
    ErrorCode.DELETE_FAILED: ExitCode.DELETE_FAILED,
    ErrorCode.INVALID_FORMAT: ExitCode.INVALID_FORMAT,
    ErrorCode.INVALID_CONFIG: ExitCode.INVALID_CONFIG,
    ErrorCode.INTERNAL_ERROR: ExitCode.INTERNAL_ERROR,
}

INVALID_FORMAT_MESSAGE = "invalid audio format"


class CodecError(Exception):
    """Base class for all errors raised by the codec."""

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    @property
    def exit_code(self) -> int:
        return ERROR_TO_EXIT_CODE.get(self.code, ExitCode.INTERNAL_ERROR)


class OpenError(CodecError):
    """Input path does not exist or cannot be opened for reading."""

    code = ErrorCode.OPEN_FAILED

    def __init__(self, path: PathLike) -> None:
        super().__init__(f'Failed to open "{path}".', path)


class WriteError(CodecError):
    """Temporary or destination output cannot be created or written."""

    code = ErrorCode.WRITE_FAILED

    def __init__(self, path: PathLike) -> None:
        super().__init__(f'Failed to write "{path}".', path)


class DeleteError(CodecError):
    """An existing destination file could not be removed before the rename."""

    code = ErrorCode.DELETE_FAILED

    def __init__(self, path: PathLike) -> None:
        super().__init__(f'Failed to delete "{path}".', path)


class InvalidFormatError(CodecError):
    """Encode was requested without a target format."""

    code = ErrorCode.INVALID_FORMAT

    def __init__(self) -> None:
        super().__init__(INVALID_FORMAT_MESSAGE)


class EndOfStreamError(CodecError):
    """Input ended before a full header could be read (strict detection only)."""

    code = ErrorCode.END_OF_STREAM

    def __init__(self, path: PathLike) -> None:
        super().__init__(f'Reached end of "{path}" before data could be read.', path)


class ConfigError(CodecError):
    """Raised when configuration loading fails."""

    code = ErrorCode.INVALID_CONFIG

    def __init__(self, message: str) -> None:
        super().__init__(message)


def determine_exit_code_from_errors(codes: List[str]) -> int:
    """Determine exit code from a list of error codes.

    Parameters
    ----------
    codes: List[str]
        Error codes collected from file operations.

    Returns
    -------
    int
        ``ExitCode.SUCCESS`` when empty, ``ExitCode.PARTIAL_FAILED`` otherwise.
    """
    if not codes:
        return ExitCode.SUCCESS
    return ExitCode.PARTIAL_FAILED
