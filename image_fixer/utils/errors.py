# Centralized error handling utilities
"""
Provides consistent error handling patterns across the application.

This module defines:
- Custom exception classes for different error categories
- Contract errors raised by the processing core (buffer size, parameter range)
- Error handling decorators for common patterns
- Utility functions for error logging and user messaging
"""

import functools
import traceback
from typing import Any, Callable, Optional, TypeVar, Union
from enum import Enum

from .logger import get_logger

logger = get_logger(__name__)

# Type variable for generic function signatures
F = TypeVar('F', bound=Callable[..., Any])


class ErrorCategory(Enum):
    """Categories of errors for consistent handling."""
    RECOVERABLE = "recoverable"      # Can continue with fallback
    FILE_IO = "file_io"              # File system errors
    PROCESSING = "processing"        # Image processing errors
    CONFIGURATION = "configuration"  # Settings/parameter errors


class AppError(Exception):
    """Base exception for application-specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.RECOVERABLE,
        original_error: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.original_error = original_error
        self.user_message = user_message or message

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.args[0]} (caused by: {type(self.original_error).__name__})"
        return self.args[0]


class FileIOError(AppError):
    """File I/O related errors."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.FILE_IO, **kwargs)
        self.file_path = file_path


class ProcessingError(AppError):
    """Image processing errors."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.PROCESSING, **kwargs)
        self.step = step


class ConfigurationError(AppError):
    """Configuration/settings errors."""

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)
        self.setting_name = setting_name


class BufferSizeError(ProcessingError, ValueError):
    """
    Raw pixel data does not match its declared dimensions.

    This is a programming contract violation: the byte length of an RGBA8
    buffer must equal width * height * 4.
    """

    def __init__(self, message: str, expected: Optional[int] = None, actual: Optional[int] = None, **kwargs):
        super().__init__(message, step="buffer", **kwargs)
        self.expected = expected
        self.actual = actual


class ParameterRangeError(ConfigurationError, ValueError):
    """An adjustment parameter is missing, unknown, or outside its range."""

    def __init__(self, message: str, setting_name: Optional[str] = None, value: Any = None, **kwargs):
        kwargs.setdefault("user_message", f"Invalid value for {setting_name}: {value!r}" if setting_name else None)
        super().__init__(message, setting_name=setting_name, **kwargs)
        self.value = value


def handle_errors(
    fallback_value: Any = None,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    log_level: str = "warning",
    reraise: bool = False,
    user_message: Optional[str] = None,
) -> Callable[[F], F]:
    """
    Decorator for consistent error handling.

    Args:
        fallback_value: Value to return on error (can be callable for dynamic fallback).
        category: Error category for logging context.
        log_level: Logging level ('debug', 'info', 'warning', 'error', 'exception').
        reraise: If True, re-raise the exception after logging.
        user_message: Optional user-friendly message for display.

    Example:
        @handle_errors(fallback_value=False, category=ErrorCategory.FILE_IO)
        def save_image(buffer, path):
            # ... encoding code ...
            return True
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AppError:
                # Re-raise our custom errors
                raise
            except Exception as e:
                log_func = getattr(logger, log_level, logger.warning)
                log_func(
                    "%s failed in %s.%s: %s",
                    category.value,
                    func.__module__,
                    func.__name__,
                    str(e),
                )

                if log_level == "exception":
                    logger.debug("Full traceback:\n%s", traceback.format_exc())

                if reraise:
                    raise AppError(
                        str(e),
                        category=category,
                        original_error=e,
                        user_message=user_message,
                    ) from e

                if callable(fallback_value):
                    return fallback_value()
                return fallback_value

        return wrapper  # type: ignore
    return decorator


def log_and_continue(
    message: str,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    level: str = "warning",
) -> None:
    """
    Log an error and continue execution.

    Use this for non-critical errors that shouldn't stop processing.

    Args:
        message: Error message to log.
        category: Error category for context.
        level: Log level.
    """
    log_func = getattr(logger, level, logger.warning)
    log_func("[%s] %s", category.value, message)


def format_user_error(error: Union[Exception, str], context: Optional[str] = None) -> str:
    """
    Format an error message for user display.

    Args:
        error: The error or error message.
        context: Optional context about what operation failed.

    Returns:
        User-friendly error message.
    """
    if isinstance(error, AppError):
        return error.user_message

    error_str = str(error)
    if context:
        return f"Error {context}: {error_str}"
    return f"An error occurred: {error_str}"
