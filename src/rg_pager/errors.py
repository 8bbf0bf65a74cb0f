"""Error taxonomy for rg-pager."""

from enum import Enum

# Message fragment the subprocess collaborator uses when it kills ripgrep
# for exceeding its output ceiling.
OUTPUT_LIMIT_SIGNAL = "Output size limit exceeded"


class ErrorCode(str, Enum):
    PATH_VALIDATION_FAILED = "PATH_VALIDATION_FAILED"
    OUTPUT_TOO_LARGE = "OUTPUT_TOO_LARGE"
    MALFORMED_EVENT = "MALFORMED_EVENT"
    STAT_FAILURE = "STAT_FAILURE"


class SearchError(Exception):
    """Base class for errors that end a query with ``status: error``."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PathValidationError(SearchError):
    """The path validator rejected the search root."""

    code = ErrorCode.PATH_VALIDATION_FAILED


class OutputTooLargeError(SearchError):
    """Engine output exceeded the hard ceiling before parsing could begin."""

    code = ErrorCode.OUTPUT_TOO_LARGE

    def __init__(self, limit_bytes: int, message: str | None = None) -> None:
        super().__init__(message or f"{OUTPUT_LIMIT_SIGNAL} ({limit_bytes} bytes)")
        self.limit_bytes = limit_bytes


def classify_upstream_error(exc: BaseException) -> SearchError | None:
    """Map an exception raised by an output source onto the taxonomy.

    Returns None when the exception is not one the engine reports with an
    error code.
    """
    if isinstance(exc, SearchError):
        return exc
    if OUTPUT_LIMIT_SIGNAL in str(exc):
        return OutputTooLargeError(0, str(exc))
    return None
