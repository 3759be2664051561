"""
Error taxonomy for the send_message pipeline.

Every failure raised while serving one invocation is a `BridgeError`; the
tool boundary turns any of them into an error `ToolResult`. Provider SDK
exceptions are translated by `classify_error` before they get that far.
"""

from __future__ import annotations

import logging
from typing import Sequence

from openai import APIError as OpenAIAPIError

__all__ = [
    "BridgeError",
    "DisallowedModelError",
    "FileContextError",
    "TooManyFilesError",
    "FileTooLargeError",
    "BinaryFileError",
    "FileReadError",
    "DispatchTimeoutError",
    "RemoteCallError",
    "InvalidArgumentsError",
    "classify_error",
]


class BridgeError(RuntimeError):
    """Base class for failures of a single tool invocation."""


class DisallowedModelError(BridgeError):
    """Raised when the requested model is not on the allow-list."""

    def __init__(self, model: str, allowed: Sequence[str]) -> None:
        self.model = model
        self.allowed = tuple(allowed)
        super().__init__(
            f"Model '{model}' is not allowed. Allowed models: {', '.join(self.allowed)}"
        )


class FileContextError(BridgeError):
    """Base class for failures while loading context files."""

    path: str | None = None


class TooManyFilesError(FileContextError):
    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(f"Too many files: {count} exceeds maximum of {limit}")


class FileTooLargeError(FileContextError):
    def __init__(self, path: str, size: int, limit: int) -> None:
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large: {path} "
            f"({size / 1024:.1f}KB exceeds maximum of {limit / 1024:.1f}KB; "
            f"{size} > {limit} bytes)"
        )


class BinaryFileError(FileContextError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Binary file not supported: {path}")


class FileReadError(FileContextError):
    """Wraps an I/O or decoding failure with the path that caused it."""

    def __init__(self, path: str, original_exc: Exception) -> None:
        self.path = path
        self.original_exc = original_exc
        self.__cause__ = original_exc
        super().__init__(f"Failed to read file {path}: {original_exc}")


class DispatchTimeoutError(BridgeError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout:g} seconds")


class RemoteCallError(BridgeError):
    """The completion service (or its transport) reported a failure."""

    def __init__(self, message: str, original_exc: Exception | None = None) -> None:
        super().__init__(message)
        self.original_exc = original_exc
        if original_exc is not None:
            self.__cause__ = original_exc


class InvalidArgumentsError(ValueError):
    """Raised by the boundary layer when tool arguments fail validation."""


# Simple mapping of error patterns to error types
ERROR_TYPE_PATTERNS = {
    # Connection-related errors
    "APITimeoutError": "Timeout error",
    "ConnectionError": "Connection error",
    "APIConnectionError": "Connection error",
    "RemoteProtocolError": "Connection error",
    "HTTPError": "HTTP error",
    # API-related errors
    "APIError": "API error",
    "APIStatusError": "API error",
    "RateLimitError": "Rate limit error",
}


def classify_error(exception: Exception, logger: logging.Logger) -> str:
    """
    Classifies an exception and returns an appropriate error message.

    Args:
        exception: The caught exception
        logger: Logger for recording the error

    Returns:
        Formatted error message string
    """
    error_type = type(exception).__name__
    error_message = str(exception)

    # Status errors carry the HTTP code from the completion service
    status_code = getattr(exception, "status_code", None)
    if isinstance(exception, OpenAIAPIError) and status_code is not None:
        msg = f"API error ({status_code}): {error_message}"
        logger.error(msg)
        return msg

    for pattern, prefix in ERROR_TYPE_PATTERNS.items():
        if pattern in error_type:
            msg = f"{prefix}: {error_message}"
            logger.error(msg)
            return msg

    # Fallback for everything else
    msg = f"{error_type}: {error_message}"
    logger.exception(msg)  # Use exception for stack trace on unknown errors
    return msg
