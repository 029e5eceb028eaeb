"""
Custom exception classes for the emberwrap formatter.

Provides structured error handling with domain-specific exceptions
for the classification and envelope layers. Failures raised by the
underlying JSON serializer (pydantic) are never wrapped by these.
"""

from typing import Any, Dict, Optional


class EmberwrapException(Exception):
    """Base exception class for all emberwrap exceptions."""

    pass


class InvalidTypeError(EmberwrapException, ValueError):
    """
    Raised when a type descriptor passed to classification is absent.

    A missing descriptor is a programming error in the calling pipeline; it is
    never defaulted to a guessed verdict.

    Example:
        >>> should_envelope(None)
        Traceback (most recent call last):
        ...
        InvalidTypeError: Cannot classify an absent type descriptor
    """

    def __init__(self, reason: str = "Cannot classify an absent type descriptor"):
        self.reason = reason
        super().__init__(reason)


class UnsupportedShapeError(EmberwrapException, TypeError):
    """
    Raised when no read-envelope type can be built for a target type.

    Typical causes are string forward references, unbound type variables or
    values that ``typing`` refuses as generic parameters. This is a
    configuration error of the integration and must reach the caller.
    """

    def __init__(self, target_type: Any, reason: str):
        self.target_type = target_type
        self.reason = reason
        super().__init__(f"Cannot build a read envelope for {target_type!r}: {reason}")


class EnvelopeFormatError(EmberwrapException):
    """Raised when a parsed document does not carry the expected envelope root."""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        self.details = details or {}
        message = f"{reason}"
        if self.details:
            message += f" - {self.details}"
        super().__init__(message)


class ConfigurationError(EmberwrapException):
    """Raised when formatter or client configuration cannot be loaded."""

    pass
