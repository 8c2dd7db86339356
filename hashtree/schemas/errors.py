"""
Module 01 - Schemas & Codecs
File: errors.py

Purpose: Standard error taxonomy for the hash tree library.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the library."""

    # Document & Codec Errors
    DOCUMENT_DECODE_ERROR = "DOCUMENT_DECODE_ERROR"
    VALUE_DECODE_ERROR = "VALUE_DECODE_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Tree Errors
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Digest & Configuration Errors
    UNKNOWN_DIGEST = "UNKNOWN_DIGEST"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class TreeError(BaseModel):
    """
    Error model for structured error communication.

    Lets callers carry a decode failure around as a value instead of
    an exception (e.g. when loading many documents in a batch).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.DOCUMENT_DECODE_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "HashTreeException":
        """Convert this error model to a raisable exception."""
        return HashTreeException(
            message=self.message,
            code=self.code,
            details=dict(self.details),
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hash tree errors.

    Carries structured error information and can be converted
    to/from TreeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASHTREE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> TreeError:
        """Convert this exception to a TreeError model."""
        return TreeError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(HashTreeException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class DocumentDecodeException(HashTreeException):
    """Exception raised when a serialized tree document cannot be parsed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
        code: str = ErrorCodes.DOCUMENT_DECODE_ERROR,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=code,
            details=full_details,
        )


class ValueDecodeException(DocumentDecodeException):
    """Exception raised when a value codec rejects a leaf's data."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            path=path,
            details=details,
            code=ErrorCodes.VALUE_DECODE_ERROR,
        )


class InvariantViolationException(HashTreeException):
    """
    Raised when tree construction reaches a structurally impossible state.

    Engine-built trees never trigger this; seeing it means the tree was
    corrupted or hand-assembled. It is not meant to be caught and recovered
    from.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
        )


class UnknownDigestException(HashTreeException):
    """Exception raised when a digest name is not registered."""

    def __init__(
        self,
        name: str,
        available: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {"name": name}
        if available is not None:
            details["available"] = available
        super().__init__(
            message=f"Unknown digest function: '{name}'",
            code=ErrorCodes.UNKNOWN_DIGEST,
            details=details,
        )


class ConfigurationException(HashTreeException):
    """Exception raised when configuration values are malformed."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
        )
