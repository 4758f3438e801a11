"""
Error taxonomy for content materialization.

Every failure is raised synchronously to the caller as a subclass of
``MaterializeError`` carrying a human-readable message, the reference
that was being materialized and, when available, the underlying error.
"""

from typing import Optional


class MaterializeError(Exception):
    """
    Base class for materialization failures.

    Attributes:
        message: Human-readable description of the failure
        reference: Content reference being materialized, if known
        cause: Underlying exception, if any
    """

    code = "MATERIALIZE_ERROR"

    def __init__(
        self,
        message: str,
        reference: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.reference = reference
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class InvalidArgument(MaterializeError):
    """Reference is null or empty, or the cache directory is unusable."""

    code = "INVALID_ARGUMENT"


class SourceUnavailable(MaterializeError):
    """The content reference cannot be opened for reading."""

    code = "SOURCE_UNAVAILABLE"


class IOFailure(MaterializeError):
    """A read or write error interrupted the copy."""

    code = "IO_FAILURE"
