"""
Error management module.
"""
import json
import logging
import traceback
from enum import Enum
from typing import Any, Dict, Optional

from .config import EMPTY_QUERY_MESSAGE, FETCH_ERROR_MESSAGE


class ErrorType(Enum):
    """Error classification types."""
    INVALID_PARAMS = "invalid_params"
    NETWORK_ERROR = "network_error"
    PARSE_ERROR = "parse_error"
    UNKNOWN = "unknown"


class ProfFinderError(Exception):
    """Base exception for ProfFinder errors."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.UNKNOWN, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error_type": self.error_type.value,
            "message": str(self),
            "details": self.details,
        }


class InvalidInputError(ProfFinderError):
    """The query carries no usable search criteria."""

    def __init__(self, message: str = EMPTY_QUERY_MESSAGE):
        super().__init__(message, ErrorType.INVALID_PARAMS)


class StreamError(ProfFinderError):
    """
    User-facing report of a failed stream.

    Always carries the fixed FETCH_ERROR_MESSAGE; diagnostic detail stays in the logs.
    """

    def __init__(self, message: str = FETCH_ERROR_MESSAGE):
        super().__init__(message, ErrorType.NETWORK_ERROR)


def classify_error(error: Exception) -> ErrorType:
    """
    Classify error type from exception.

    Args:
        error: Exception instance

    Returns:
        ErrorType enum value
    """
    if isinstance(error, ProfFinderError):
        return error.error_type
    if isinstance(error, json.JSONDecodeError):
        return ErrorType.PARSE_ERROR

    error_str = str(error).lower()
    error_type = type(error).__name__.lower()

    if any(keyword in error_str or keyword in error_type for keyword in ["network", "connection", "timeout", "http", "request", "stream", "llm"]):
        return ErrorType.NETWORK_ERROR

    if any(keyword in error_str for keyword in ["invalid", "validation", "parameter"]):
        return ErrorType.INVALID_PARAMS

    if any(keyword in error_str or keyword in error_type for keyword in ["json", "decode", "parse"]):
        return ErrorType.PARSE_ERROR

    return ErrorType.UNKNOWN


def log_error(
    error: Exception,
    logger: Optional[logging.Logger] = None,
    context: Optional[Dict[str, Any]] = None,
    level: str = "ERROR",
) -> Dict[str, Any]:
    """
    Log error with context and return error info.

    Args:
        error: Exception instance
        logger: Logger instance (if None, uses default)
        context: Additional context information
        level: Logging level

    Returns:
        Dictionary with error information
    """
    if logger is None:
        logger = logging.getLogger("proffinder")

    error_type = classify_error(error)
    error_info = {
        "error_type": error_type.value,
        "error_class": type(error).__name__,
        "message": str(error),
        "context": context or {},
    }

    log_method = getattr(logger, level.lower(), logger.error)
    log_method(
        f"[{error_type.value}] {type(error).__name__}: {error}",
        extra={"error_info": error_info, "context": context},
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Traceback:\n%s",
            "".join(traceback.format_exception(type(error), error, error.__traceback__)),
        )

    return error_info
