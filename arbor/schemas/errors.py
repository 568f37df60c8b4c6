"""
Errors
File: errors.py

Purpose: Standard error taxonomy for Arbor.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Misuse of the tree API (building from nothing, addressing a leaf that
does not exist, an unusable hash configuration) is raised. A proof that
fails to verify is NOT an error: verification reports it as ``False``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the package."""

    # Tree construction & addressing
    EMPTY_INPUT = "EMPTY_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Configuration
    INVALID_HASH_CONFIG = "INVALID_HASH_CONFIG"
    INVALID_CONFIG = "INVALID_CONFIG"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class ArborError(BaseModel):
    """
    Base error model for structured error reporting.

    Lets callers that wrap the tree (services, CLIs) pass errors around
    and serialize them without holding on to exception objects.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_RANGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried unchanged",
    )

    def to_exception(self) -> "ArborException":
        """Convert this error model to the matching exception."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_type is None:
            return ArborException(
                message=self.message,
                code=self.code,
                details=self.details,
                retryable=self.retryable,
            )
        exc = exc_type.__new__(exc_type)
        ArborException.__init__(
            exc,
            message=self.message,
            code=self.code,
            details=self.details,
            retryable=self.retryable,
        )
        return exc


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ArborException(Exception):
    """
    Base exception for all Arbor errors.

    Carries structured error information and can be converted to an
    ArborError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "ARBOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ArborError:
        """Convert this exception to an ArborError model."""
        return ArborError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(ArborException, ValueError):
    """Raised when a tree is built from an empty leaf sequence."""

    def __init__(
        self,
        message: str = "Cannot build a Merkle tree from an empty leaf sequence",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class IndexOutOfRangeError(ArborException, IndexError):
    """Raised when a proof or update addresses a leaf that does not exist."""

    def __init__(
        self,
        message: str,
        index: Any = None,
        leaf_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        if leaf_count is not None:
            full_details["leaf_count"] = leaf_count
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class HashConfigurationError(ArborException, ValueError):
    """Raised when a hasher is configured with an unusable algorithm or tags."""

    def __init__(
        self,
        message: str,
        algorithm: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if algorithm:
            full_details["algorithm"] = algorithm
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_HASH_CONFIG,
            details=full_details,
            retryable=False,
        )


class ConfigurationError(ArborException, ValueError):
    """Raised when runtime configuration cannot be loaded."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if source:
            full_details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_CONFIG,
            details=full_details,
            retryable=False,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[ArborException]] = {
    ErrorCodes.EMPTY_INPUT: EmptyInputError,
    ErrorCodes.INDEX_OUT_OF_RANGE: IndexOutOfRangeError,
    ErrorCodes.INVALID_HASH_CONFIG: HashConfigurationError,
    ErrorCodes.INVALID_CONFIG: ConfigurationError,
}


__all__ = [
    "ErrorCodes",
    "ArborError",
    "ArborException",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "HashConfigurationError",
    "ConfigurationError",
]
